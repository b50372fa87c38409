"""Budget aggregation and budget domain service.

Spending against a budget comes from three places: expense transactions,
paid bills and loan payments. Bills count under their own category and
loan payments always count under "Loans".
"""

from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional, Sequence

import structlog
from dateutil.relativedelta import relativedelta

from finboard.database.base import Database
from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import (
    Bill,
    Budget,
    BudgetAlert,
    BudgetPeriod,
    BudgetSpending,
    CategoryItem,
    LoanPayment,
    SpendingBreakdown,
    SpendingSource,
    Transaction,
    TransactionType,
)
from finboard.domain.errors import NotFoundError, entity_not_found
from finboard.domain.validation import BudgetInput, validate
from finboard.utils.date_parser import as_date

logger = structlog.get_logger(__name__)

LOANS_CATEGORY = "Loans"
BILLS_CATEGORY = "Bills"
ALERT_THRESHOLD = Decimal("80")
CRITICAL_THRESHOLD = Decimal("90")
WARNING_THRESHOLD = Decimal("50")

ZERO = Decimal("0")


def _in_window(day: date, start: Optional[date], end: Optional[date]) -> bool:
    if start is not None and day < start:
        return False
    if end is not None and day > end:
        return False
    return True


def _amount(amount: Decimal, currency: str, converter: Optional[CurrencyConverter]) -> Decimal:
    if converter is None:
        return amount
    return converter.convert(amount, currency)


def bill_category(bill: Bill) -> str:
    return bill.category or BILLS_CATEGORY


def recorded_bill_payments(transactions: Iterable[Transaction]) -> set[tuple[int, date]]:
    """(bill ID, day) of every payment that left a linked transaction."""
    return {(txn.bill_id, as_date(txn.date)) for txn in transactions if txn.bill_id is not None}


def category_items(
    transactions: Iterable[Transaction],
    paid_bills: Iterable[Bill],
    loan_payments: Iterable[LoanPayment],
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    converter: Optional[CurrencyConverter] = None,
    loan_currencies: Optional[dict[int, str]] = None,
) -> dict[str, list[CategoryItem]]:
    """Collect the spending rows behind each category for a window.

    Only expense transactions count. A bill only remembers its latest
    ``paid_at``, so every payment of a bill is counted from the expense
    transaction it created, as a bill row. A paid bill contributes a row of
    its own only when its latest payment has no such transaction. Each
    category's rows are sorted newest first; rows on the same day keep
    their input order.

    Args:
        transactions: Transactions to consider
        paid_bills: Bills; those with ``paid_at`` inside the window count
        loan_payments: Loan payments, filtered by ``payment_date``
        period_start: Inclusive window start, or None for unbounded
        period_end: Inclusive window end, or None for unbounded
        converter: Convert amounts to its display currency when given
        loan_currencies: Loan ID to currency, for converting loan payments

    Returns:
        Map of category name to its items
    """
    loan_currencies = loan_currencies or {}
    transactions = list(transactions)
    paid_bills = list(paid_bills)
    bill_names = {bill.id: bill.name for bill in paid_bills}
    recorded = recorded_bill_payments(transactions)
    by_category: dict[str, list[CategoryItem]] = defaultdict(list)

    for txn in transactions:
        if txn.type != TransactionType.EXPENSE:
            continue
        day = as_date(txn.date)
        if not _in_window(day, period_start, period_end):
            continue
        if txn.bill_id is None:
            item = CategoryItem(
                id=txn.id,
                source=SpendingSource.TRANSACTION,
                category=txn.category,
                description=txn.description,
                amount=_amount(txn.amount, txn.currency, converter),
                date=day,
            )
        else:
            item = CategoryItem(
                id=txn.bill_id,
                source=SpendingSource.BILL,
                category=txn.category,
                description=bill_names.get(txn.bill_id, txn.description),
                amount=_amount(txn.amount, txn.currency, converter),
                date=day,
            )
        by_category[txn.category].append(item)

    for bill in paid_bills:
        if bill.paid_at is None:
            continue
        paid_on = as_date(bill.paid_at)
        if not _in_window(paid_on, period_start, period_end) or (bill.id, paid_on) in recorded:
            continue
        category = bill_category(bill)
        by_category[category].append(
            CategoryItem(
                id=bill.id,
                source=SpendingSource.BILL,
                category=category,
                description=bill.name,
                amount=_amount(bill.amount, bill.currency, converter),
                date=paid_on,
            )
        )

    for payment in loan_payments:
        if not _in_window(payment.payment_date, period_start, period_end):
            continue
        by_category[LOANS_CATEGORY].append(
            CategoryItem(
                id=payment.id,
                source=SpendingSource.LOAN,
                category=LOANS_CATEGORY,
                description=payment.notes or "Loan Payment",
                amount=_amount(payment.amount, loan_currencies.get(payment.loan_id, "USD"), converter),
                date=payment.payment_date,
            )
        )

    for items in by_category.values():
        items.sort(key=lambda item: item.date, reverse=True)

    return dict(by_category)


def breakdown_by_category(items: dict[str, list[CategoryItem]]) -> dict[str, SpendingBreakdown]:
    """Sum category items per source."""
    result: dict[str, SpendingBreakdown] = {}
    for category, rows in items.items():
        totals = {source: ZERO for source in SpendingSource}
        for item in rows:
            totals[item.source] += item.amount
        result[category] = SpendingBreakdown(
            transactions=totals[SpendingSource.TRANSACTION],
            bills=totals[SpendingSource.BILL],
            loans=totals[SpendingSource.LOAN],
        )
    return result


def aggregate_budgets(
    budgets: Sequence[Budget],
    transactions: Iterable[Transaction],
    paid_bills: Iterable[Bill],
    loan_payments: Iterable[LoanPayment],
    period_start: Optional[date] = None,
    period_end: Optional[date] = None,
    converter: Optional[CurrencyConverter] = None,
    loan_currencies: Optional[dict[int, str]] = None,
) -> list[BudgetSpending]:
    """Work out spent amounts for each budget in a window.

    Categories without a budget are left out. The result keeps the input
    order of ``budgets``.
    """
    items = category_items(
        transactions,
        paid_bills,
        loan_payments,
        period_start=period_start,
        period_end=period_end,
        converter=converter,
        loan_currencies=loan_currencies,
    )
    breakdowns = breakdown_by_category(items)

    results = []
    for budget in budgets:
        breakdown = breakdowns.get(budget.category, SpendingBreakdown())
        results.append(
            BudgetSpending(
                budget_id=budget.id,
                category=budget.category,
                period=budget.period,
                limit_amount=_amount(budget.limit_amount, budget.currency, converter),
                spent=breakdown.total,
                breakdown=breakdown,
            )
        )

    logger.debug(
        "budgets_aggregated",
        budgets=len(results),
        categories=len(items),
        period_start=str(period_start),
        period_end=str(period_end),
    )
    return results


def severity_for(percentage: Decimal) -> Optional[str]:
    """Dashboard severity: critical from 90%, warning from 50%."""
    if percentage >= CRITICAL_THRESHOLD:
        return "critical"
    if percentage >= WARNING_THRESHOLD:
        return "warning"
    return None


def budget_alerts(
    spending: Iterable[BudgetSpending], threshold: Decimal = ALERT_THRESHOLD
) -> list[BudgetAlert]:
    """Budgets whose usage is at or above ``threshold`` percent."""
    alerts = []
    for item in spending:
        percentage = item.percentage
        if percentage < threshold:
            continue
        alerts.append(
            BudgetAlert(
                category=item.category,
                spent=item.spent,
                limit_amount=item.limit_amount,
                percentage=percentage,
                severity=severity_for(percentage) or "warning",
            )
        )
    return alerts


def over_budget(spending: Iterable[BudgetSpending]) -> list[str]:
    return [item.category for item in spending if item.is_over_budget]


def period_window(period: BudgetPeriod, today: date) -> tuple[date, date]:
    """Calendar window of a budget period containing ``today``.

    Weeks start on Monday.
    """
    if period == BudgetPeriod.WEEKLY:
        start = today - timedelta(days=today.weekday())
        return start, start + timedelta(days=6)
    if period == BudgetPeriod.YEARLY:
        return today.replace(month=1, day=1), today.replace(month=12, day=31)
    start = today.replace(day=1)
    return start, start + relativedelta(months=1) - timedelta(days=1)


class BudgetService:
    """Service for managing budgets and their spending."""

    def __init__(self, db: Database, owner: str):
        """Initialize budget service.

        Args:
            db: Database instance
            owner: User whose budgets this service reads and writes
        """
        self.db = db
        self.owner = owner

    def create_budget(self, category: str, limit_amount: Decimal, period: str, currency: str = "USD") -> int:
        """Create a budget.

        Returns:
            Budget ID

        Raises:
            ValidationError: If any field is out of bounds
        """
        data = validate(
            BudgetInput,
            category=category,
            limit_amount=limit_amount,
            period=period,
            currency=currency,
        )
        budget_id = self.db.create_budget(
            owner=self.owner,
            category=data.category,
            limit_amount=data.limit_amount,
            period=data.period,
            currency=data.currency,
        )
        logger.info("budget_created", owner=self.owner, budget_id=budget_id, category=data.category)
        return budget_id

    def get_budget(self, budget_id: int) -> Optional[Budget]:
        return self.db.get_budget(self.owner, budget_id)

    def require_budget(self, budget_id: int) -> Budget:
        budget = self.get_budget(budget_id)
        if budget is None:
            raise NotFoundError(entity_not_found("budget", budget_id))
        return budget

    def list_budgets(self, period: Optional[BudgetPeriod] = None) -> list[Budget]:
        return self.db.list_budgets(self.owner, period=period)

    def update_budget(
        self,
        budget_id: int,
        limit_amount: Optional[Decimal] = None,
        period: Optional[str] = None,
    ) -> None:
        """Change a budget's limit or period.

        Raises:
            NotFoundError: If the budget doesn't exist
            ValidationError: If the new values are out of bounds
        """
        budget = self.require_budget(budget_id)
        data = validate(
            BudgetInput,
            category=budget.category,
            limit_amount=limit_amount if limit_amount is not None else budget.limit_amount,
            period=period or budget.period,
            currency=budget.currency,
        )
        self.db.update_budget(self.owner, budget_id, limit_amount=data.limit_amount, period=data.period)

    def delete_budget(self, budget_id: int) -> None:
        self.require_budget(budget_id)
        self.db.delete_budget(self.owner, budget_id)

    def get_spending(
        self,
        period_start: Optional[date],
        period_end: Optional[date],
        converter: Optional[CurrencyConverter] = None,
        period: Optional[BudgetPeriod] = None,
    ) -> list[BudgetSpending]:
        """Aggregate spending for all budgets over a window.

        Every source is fetched before anything is computed; a failed fetch
        raises and no aggregate is returned.
        """
        budgets = self.list_budgets(period=period)
        transactions = self.db.list_transactions(
            self.owner,
            start_date=period_start,
            end_date=period_end,
            type=TransactionType.EXPENSE,
        )
        paid_bills = self.db.list_paid_bills(self.owner, start_date=period_start, end_date=period_end)
        payments = self.db.list_loan_payments(self.owner, start_date=period_start, end_date=period_end)
        loan_currencies = {loan.id: loan.currency for loan in self.db.list_loans(self.owner)}

        return aggregate_budgets(
            budgets,
            transactions,
            paid_bills,
            payments,
            period_start=period_start,
            period_end=period_end,
            converter=converter,
            loan_currencies=loan_currencies,
        )

    def get_category_items(
        self,
        category: str,
        period_start: Optional[date],
        period_end: Optional[date],
        converter: Optional[CurrencyConverter] = None,
    ) -> list[CategoryItem]:
        """Rows behind one category, newest first."""
        # All categories, so a bill paid under an older category is still matched
        transactions = self.db.list_transactions(
            self.owner,
            start_date=period_start,
            end_date=period_end,
            type=TransactionType.EXPENSE,
        )
        paid_bills = self.db.list_paid_bills(self.owner, start_date=period_start, end_date=period_end)
        payments = []
        if category == LOANS_CATEGORY:
            payments = self.db.list_loan_payments(self.owner, start_date=period_start, end_date=period_end)
        loan_currencies = {loan.id: loan.currency for loan in self.db.list_loans(self.owner)}

        items = category_items(
            transactions,
            paid_bills,
            payments,
            period_start=period_start,
            period_end=period_end,
            converter=converter,
            loan_currencies=loan_currencies,
        )
        return items.get(category, [])

    def get_alerts(
        self,
        today: Optional[date] = None,
        converter: Optional[CurrencyConverter] = None,
        threshold: Decimal = ALERT_THRESHOLD,
    ) -> list[BudgetAlert]:
        """Alerts for monthly budgets in the current month."""
        start, end = period_window(BudgetPeriod.MONTHLY, today or date.today())
        spending = self.get_spending(start, end, converter=converter, period=BudgetPeriod.MONTHLY)
        alerts = budget_alerts(spending, threshold=threshold)
        for alert in alerts:
            logger.info(
                "budget_threshold_reached",
                owner=self.owner,
                category=alert.category,
                percentage=str(round(alert.percentage, 1)),
                severity=alert.severity,
            )
        return alerts
