"""Period summaries, time buckets and the report service."""

import math
from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog

from finboard.database.base import Database
from finboard.domain.bill import is_due_soon
from finboard.domain.budget import (
    LOANS_CATEGORY,
    BudgetService,
    bill_category,
    budget_alerts,
    recorded_bill_payments,
)
from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import (
    Bill,
    BillsSummary,
    CategoryBreakdown,
    CategoryItem,
    FinancialReport,
    Granularity,
    Loan,
    LoanPayment,
    LoanStatus,
    LoansSummary,
    PeriodSummary,
    SpendingSource,
    TimeBucket,
    Transaction,
    TransactionType,
)
from finboard.domain.suggestions import generate_suggestions
from finboard.utils.date_parser import as_date

logger = structlog.get_logger(__name__)

ZERO = Decimal("0")
DASHBOARD_TOP_N = 5

HOUR_LABELS = tuple(f"{hour:02d}:00" for hour in range(24))
WEEK_LABELS = tuple(f"Week {week}" for week in range(1, 6))
MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def _amount(txn: Transaction, converter: Optional[CurrencyConverter]) -> Decimal:
    if converter is None:
        return txn.amount
    return converter.convert(txn.amount, txn.currency)


def _in_window(day: date, start: Optional[date], end: Optional[date]) -> bool:
    return (start is None or day >= start) and (end is None or day <= end)


def summarize(
    transactions: Iterable[Transaction],
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    converter: Optional[CurrencyConverter] = None,
    top_n: Optional[int] = None,
) -> PeriodSummary:
    """Income, expenses, savings rate and expense categories for a window.

    Args:
        transactions: Transactions to summarize
        period_start: Inclusive window start, or None for unbounded
        period_end: Inclusive window end, or None for unbounded
        converter: Convert amounts to its display currency when given
        top_n: Keep only the largest N expense categories

    Returns:
        PeriodSummary; savings rate is 0 when there is no income
    """
    total_income = ZERO
    total_expenses = ZERO
    by_category: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for txn in transactions:
        if not _in_window(as_date(txn.date), period_start, period_end):
            continue
        amount = _amount(txn, converter)
        if txn.type == TransactionType.INCOME:
            total_income += amount
        elif txn.type == TransactionType.EXPENSE:
            total_expenses += amount
            by_category[txn.category] += amount

    net_savings = total_income - total_expenses
    savings_rate = net_savings / total_income * 100 if total_income > 0 else ZERO

    breakdown = [
        CategoryBreakdown(
            category=category,
            amount=amount,
            percentage=amount / total_expenses * 100 if total_expenses > 0 else ZERO,
        )
        for category, amount in by_category.items()
    ]
    breakdown.sort(key=lambda item: (-item.amount, item.category))
    if top_n is not None:
        breakdown = breakdown[:top_n]

    return PeriodSummary(
        period_start=period_start,
        period_end=period_end,
        total_income=total_income,
        total_expenses=total_expenses,
        net_savings=net_savings,
        savings_rate=savings_rate,
        category_breakdown=tuple(breakdown),
    )


def granularity_for_window(start: date, end: date) -> Granularity:
    """Hours for a single day, weeks up to a month, months beyond."""
    days = (end - start).days + 1
    if days <= 1:
        return Granularity.HOUR
    if days <= 31:
        return Granularity.WEEK
    return Granularity.MONTH


def bucket_label(moment: date | datetime, granularity: Granularity) -> str:
    """Label of the bucket a date falls into.

    Plain dates have no time of day and fall in the midnight hour.
    """
    if granularity == Granularity.HOUR:
        hour = moment.hour if isinstance(moment, datetime) else 0
        return HOUR_LABELS[hour]
    if granularity == Granularity.WEEK:
        return WEEK_LABELS[math.ceil(moment.day / 7) - 1]
    return MONTH_LABELS[moment.month - 1]


def bucket_labels(granularity: Granularity) -> tuple[str, ...]:
    if granularity == Granularity.HOUR:
        return HOUR_LABELS
    if granularity == Granularity.WEEK:
        return WEEK_LABELS
    return MONTH_LABELS


def bucket_by_time(
    transactions: Iterable[Transaction],
    granularity: Granularity,
    cumulative: bool = False,
    converter: Optional[CurrencyConverter] = None,
) -> list[TimeBucket]:
    """Income and expenses per time bucket.

    Every label of the granularity is present, in order, even when empty.
    With ``cumulative`` each bucket carries the running total up to and
    including itself instead of its own total.
    """
    granularity = Granularity(granularity)
    income: dict[str, Decimal] = defaultdict(lambda: ZERO)
    expenses: dict[str, Decimal] = defaultdict(lambda: ZERO)

    for txn in transactions:
        label = bucket_label(txn.date, granularity)
        if txn.type == TransactionType.INCOME:
            income[label] += _amount(txn, converter)
        elif txn.type == TransactionType.EXPENSE:
            expenses[label] += _amount(txn, converter)

    buckets = []
    running_income = ZERO
    running_expenses = ZERO
    for label in bucket_labels(granularity):
        if cumulative:
            running_income += income[label]
            running_expenses += expenses[label]
            buckets.append(TimeBucket(label=label, income=running_income, expenses=running_expenses))
        else:
            buckets.append(TimeBucket(label=label, income=income[label], expenses=expenses[label]))
    return buckets


def combined_ledger(
    transactions: Iterable[Transaction],
    paid_bills: Iterable[Bill],
    loan_payments: Iterable[LoanPayment],
    converter: Optional[CurrencyConverter] = None,
    loan_currencies: Optional[dict[int, str]] = None,
) -> list[CategoryItem]:
    """All money movements as source-tagged rows, newest first.

    Every bill payment shows as a bill row, taken from the expense
    transaction the payment created; a paid bill gets a row of its own only
    when its latest payment left no transaction. Amounts are in the
    converter's display currency when one is given.
    """
    loan_currencies = loan_currencies or {}
    transactions = list(transactions)
    paid_bills = list(paid_bills)
    bill_names = {bill.id: bill.name for bill in paid_bills}
    recorded = recorded_bill_payments(transactions)

    def money(amount: Decimal, currency: str) -> Decimal:
        return amount if converter is None else converter.convert(amount, currency)

    rows = []
    for txn in transactions:
        if txn.bill_id is None:
            rows.append(
                CategoryItem(
                    id=txn.id,
                    source=SpendingSource.TRANSACTION,
                    category=txn.category,
                    description=txn.description,
                    amount=money(txn.amount, txn.currency),
                    date=txn.date,
                    type=txn.type,
                )
            )
        else:
            rows.append(
                CategoryItem(
                    id=txn.bill_id,
                    source=SpendingSource.BILL,
                    category=txn.category,
                    description=f"Bill: {bill_names.get(txn.bill_id, txn.description)}",
                    amount=money(txn.amount, txn.currency),
                    date=as_date(txn.date),
                )
            )
    for bill in paid_bills:
        if bill.paid_at is None or (bill.id, as_date(bill.paid_at)) in recorded:
            continue
        rows.append(
            CategoryItem(
                id=bill.id,
                source=SpendingSource.BILL,
                category=bill_category(bill),
                description=f"Bill: {bill.name}",
                amount=money(bill.amount, bill.currency),
                date=as_date(bill.paid_at),
            )
        )
    for payment in loan_payments:
        rows.append(
            CategoryItem(
                id=payment.id,
                source=SpendingSource.LOAN,
                category=LOANS_CATEGORY,
                description="Loan Payment",
                amount=money(payment.amount, loan_currencies.get(payment.loan_id, "USD")),
                date=payment.payment_date,
            )
        )
    rows.sort(key=lambda row: row.date, reverse=True)
    return rows


def bills_summary(
    bills: Sequence[Bill], today: date, converter: Optional[CurrencyConverter] = None
) -> BillsSummary:
    """Counts and totals over active bills."""
    active = [bill for bill in bills if bill.is_active]
    total = ZERO
    for bill in active:
        total += bill.amount if converter is None else converter.convert(bill.amount, bill.currency)
    return BillsSummary(
        upcoming_bills=sum(1 for bill in active if is_due_soon(bill, today)),
        total_bills_amount=total,
        unpaid_count=sum(1 for bill in active if not bill.is_paid),
    )


def loans_summary(loans: Sequence[Loan], converter: Optional[CurrencyConverter] = None) -> LoansSummary:
    """Outstanding totals and monthly EMI over active loans."""
    active = [loan for loan in loans if loan.status == LoanStatus.ACTIVE]
    outstanding = ZERO
    emi = ZERO
    for loan in active:
        if converter is None:
            outstanding += loan.outstanding_balance
            emi += loan.emi_amount
        else:
            outstanding += converter.convert(loan.outstanding_balance, loan.currency)
            emi += converter.convert(loan.emi_amount, loan.currency)
    return LoansSummary(active_loans=len(active), total_outstanding=outstanding, monthly_emi=emi)


class ReportService:
    """Service for building financial reports."""

    def __init__(self, db: Database, owner: str):
        """Initialize report service.

        Args:
            db: Database instance
            owner: User whose data is reported
        """
        self.db = db
        self.owner = owner

    def get_transactions(self, start_date: Optional[date], end_date: Optional[date]) -> list[Transaction]:
        return self.db.list_transactions(self.owner, start_date=start_date, end_date=end_date)

    def get_summary(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        converter: Optional[CurrencyConverter] = None,
        top_n: Optional[int] = None,
    ) -> PeriodSummary:
        transactions = self.get_transactions(start_date, end_date)
        return summarize(transactions, start_date, end_date, converter=converter, top_n=top_n)

    def get_trend(
        self,
        start_date: date,
        end_date: date,
        granularity: Optional[Granularity] = None,
        cumulative: bool = False,
        converter: Optional[CurrencyConverter] = None,
    ) -> list[TimeBucket]:
        """Bucketed income and expenses; granularity follows the window by default."""
        granularity = granularity or granularity_for_window(start_date, end_date)
        transactions = self.get_transactions(start_date, end_date)
        return bucket_by_time(transactions, granularity, cumulative=cumulative, converter=converter)

    def get_ledger(
        self,
        start_date: Optional[date],
        end_date: Optional[date],
        converter: Optional[CurrencyConverter] = None,
    ) -> list[CategoryItem]:
        """Transactions, paid bills and loan payments in one list, newest first."""
        return combined_ledger(
            self.get_transactions(start_date, end_date),
            self.db.list_paid_bills(self.owner, start_date=start_date, end_date=end_date),
            self.db.list_loan_payments(self.owner, start_date=start_date, end_date=end_date),
            converter=converter,
            loan_currencies={loan.id: loan.currency for loan in self.db.list_loans(self.owner)},
        )

    def build_report(
        self,
        start_date: date,
        end_date: date,
        today: Optional[date] = None,
        converter: Optional[CurrencyConverter] = None,
        top_n: Optional[int] = DASHBOARD_TOP_N,
    ) -> FinancialReport:
        """Build the full report for a window.

        ``today`` only matters for which bills are due soon.
        """
        today = today or date.today()
        transactions = self.get_transactions(start_date, end_date)
        summary = summarize(transactions, start_date, end_date, converter=converter, top_n=top_n)
        full_summary = summary
        if top_n is not None:
            full_summary = summarize(transactions, start_date, end_date, converter=converter)

        spending = BudgetService(self.db, self.owner).get_spending(start_date, end_date, converter=converter)
        bills = self.db.list_bills(self.owner, active_only=True)
        loans = self.db.list_loans(self.owner, status=LoanStatus.ACTIVE)
        granularity = granularity_for_window(start_date, end_date)

        report = FinancialReport(
            summary=summary,
            bills=bills_summary(bills, today, converter=converter),
            loans=loans_summary(loans, converter=converter),
            budgets=tuple(spending),
            alerts=tuple(budget_alerts(spending)),
            suggestions=tuple(generate_suggestions(spending, full_summary, converter=converter)),
            trend=tuple(
                bucket_by_time(
                    transactions,
                    granularity,
                    cumulative=granularity == Granularity.HOUR,
                    converter=converter,
                )
            ),
        )
        logger.debug(
            "report_built",
            owner=self.owner,
            start_date=str(start_date),
            end_date=str(end_date),
            transactions=len(transactions),
        )
        return report
