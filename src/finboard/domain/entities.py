"""Domain model entities for finboard.

These are pure data classes representing business concepts, independent of
database schema. Amounts are kept in the currency they were recorded in;
conversion to a display currency happens at read time.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BillFrequency(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


class LoanStatus(str, Enum):
    ACTIVE = "active"
    CLOSED = "closed"
    DEFAULTED = "defaulted"


class EntryType(str, Enum):
    ASSET = "asset"
    LIABILITY = "liability"


class SpendingSource(str, Enum):
    """Where a spending row came from."""

    TRANSACTION = "transaction"
    BILL = "bill"
    LOAN = "loan"


class Granularity(str, Enum):
    HOUR = "hour"
    WEEK = "week"
    MONTH = "month"


@dataclass(frozen=True)
class Account:
    """Bank or credit account domain entity."""

    id: int
    owner: str
    name: str
    type: str
    balance: Decimal
    currency: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    owner: str
    type: TransactionType
    category: str
    amount: Decimal
    currency: str
    date: date
    description: Optional[str] = None
    account_id: Optional[int] = None
    bill_id: Optional[int] = None
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Budget:
    """Spending ceiling for a category over a recurring period."""

    id: int
    owner: str
    category: str
    limit_amount: Decimal
    currency: str
    period: BudgetPeriod
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Bill:
    """Recurring bill domain entity."""

    id: int
    owner: str
    name: str
    amount: Decimal
    currency: str
    category: str
    due_date: date
    frequency: BillFrequency
    reminder_days: int
    is_active: bool = True
    is_paid: bool = False
    paid_at: Optional[datetime] = None


@dataclass(frozen=True)
class Loan:
    """Loan domain entity."""

    id: int
    owner: str
    name: str
    type: str
    principal_amount: Decimal
    interest_rate: Decimal
    tenure_months: int
    start_date: date
    due_day: int
    emi_amount: Decimal
    outstanding_balance: Decimal
    status: LoanStatus
    currency: str
    notes: Optional[str] = None


@dataclass(frozen=True)
class LoanPayment:
    """Recorded loan payment. Never mutated once written."""

    id: int
    owner: str
    loan_id: int
    payment_date: date
    amount: Decimal
    principal_paid: Decimal
    interest_paid: Decimal
    notes: Optional[str] = None


@dataclass(frozen=True)
class AssetLiability:
    """Asset or liability entry used for net worth."""

    id: int
    owner: str
    type: EntryType
    name: str
    value: Decimal
    currency: str
    category: str
    date: date


@dataclass(frozen=True)
class EMIResult:
    """Rounded installment figures for display."""

    emi: Decimal
    total_interest: Decimal
    total_payment: Decimal


@dataclass(frozen=True)
class PaymentSplit:
    principal_paid: Decimal
    interest_paid: Decimal


@dataclass(frozen=True)
class PaymentOutcome:
    """Effect of a payment on a loan balance."""

    principal_paid: Decimal
    interest_paid: Decimal
    new_balance: Decimal
    closes_loan: bool


@dataclass(frozen=True)
class SpendingBreakdown:
    transactions: Decimal = Decimal("0")
    bills: Decimal = Decimal("0")
    loans: Decimal = Decimal("0")

    @property
    def total(self) -> Decimal:
        return self.transactions + self.bills + self.loans


@dataclass(frozen=True)
class BudgetSpending:
    """A budget together with what was spent against it in a window."""

    budget_id: int
    category: str
    period: BudgetPeriod
    limit_amount: Decimal
    spent: Decimal
    breakdown: SpendingBreakdown

    @property
    def percentage(self) -> Decimal:
        if self.limit_amount <= 0:
            return Decimal("0")
        return self.spent / self.limit_amount * 100

    @property
    def remaining(self) -> Decimal:
        return self.limit_amount - self.spent

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.limit_amount


@dataclass(frozen=True)
class CategoryItem:
    """One row contributing to a category, tagged with its source."""

    id: int
    source: SpendingSource
    category: str
    description: Optional[str]
    amount: Decimal
    date: date
    type: TransactionType = TransactionType.EXPENSE


@dataclass(frozen=True)
class CategoryBreakdown:
    category: str
    amount: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    """Income and expense totals for a window."""

    period_start: Optional[date]
    period_end: Optional[date]
    total_income: Decimal
    total_expenses: Decimal
    net_savings: Decimal
    savings_rate: Decimal
    category_breakdown: tuple[CategoryBreakdown, ...] = ()


@dataclass(frozen=True)
class TimeBucket:
    label: str
    income: Decimal
    expenses: Decimal


@dataclass(frozen=True)
class BudgetAlert:
    """Data needed to decide on and render a budget notification."""

    category: str
    spent: Decimal
    limit_amount: Decimal
    percentage: Decimal
    severity: str


@dataclass(frozen=True)
class Suggestion:
    title: str
    description: str
    priority: str


@dataclass(frozen=True)
class NetWorthSummary:
    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class NetWorthPoint:
    date: date
    assets: Decimal
    liabilities: Decimal
    net_worth: Decimal


@dataclass(frozen=True)
class BillsSummary:
    upcoming_bills: int
    total_bills_amount: Decimal
    unpaid_count: int


@dataclass(frozen=True)
class LoansSummary:
    active_loans: int
    total_outstanding: Decimal
    monthly_emi: Decimal


@dataclass(frozen=True)
class FinancialReport:
    """Everything the report view renders for one window."""

    summary: PeriodSummary
    bills: BillsSummary
    loans: LoansSummary
    budgets: tuple[BudgetSpending, ...] = ()
    alerts: tuple[BudgetAlert, ...] = ()
    suggestions: tuple[Suggestion, ...] = ()
    trend: tuple[TimeBucket, ...] = ()
