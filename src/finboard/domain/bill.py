"""Bill scheduling helpers and bill domain service."""

from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional

import structlog
from dateutil.relativedelta import relativedelta

from finboard.database.base import Database
from finboard.domain.entities import Bill, BillFrequency
from finboard.domain.errors import NotFoundError, entity_not_found
from finboard.domain.validation import BillInput, validate

logger = structlog.get_logger(__name__)

FREQUENCY_STEPS = {
    BillFrequency.WEEKLY: relativedelta(weeks=1),
    BillFrequency.MONTHLY: relativedelta(months=1),
    BillFrequency.QUARTERLY: relativedelta(months=3),
    BillFrequency.YEARLY: relativedelta(years=1),
}


def next_due_date(due_date: date, frequency: BillFrequency) -> date:
    """Due date one frequency period later.

    Month arithmetic clamps to the last day of shorter months, so a bill
    due Jan 31 is next due Feb 28 (or 29).
    """
    return due_date + FREQUENCY_STEPS[BillFrequency(frequency)]


def days_until_due(bill: Bill, today: date) -> int:
    return (bill.due_date - today).days


def is_due_soon(bill: Bill, today: date) -> bool:
    """Unpaid and due within the bill's reminder window."""
    if bill.is_paid:
        return False
    days = days_until_due(bill, today)
    return 0 <= days <= bill.reminder_days


def is_overdue(bill: Bill, today: date) -> bool:
    return not bill.is_paid and days_until_due(bill, today) < 0


class BillService:
    """Service for managing bills."""

    def __init__(self, db: Database, owner: str):
        """Initialize bill service.

        Args:
            db: Database instance
            owner: User whose bills this service reads and writes
        """
        self.db = db
        self.owner = owner

    def create_bill(
        self,
        name: str,
        amount: Decimal,
        category: str,
        due_date: date,
        frequency: str = "monthly",
        reminder_days: int = 3,
        currency: str = "USD",
    ) -> int:
        """Create an active, unpaid bill.

        Returns:
            Bill ID

        Raises:
            ValidationError: If any field is out of bounds
        """
        data = validate(
            BillInput,
            name=name,
            amount=amount,
            category=category,
            due_date=due_date,
            frequency=frequency,
            reminder_days=reminder_days,
            currency=currency,
        )
        bill_id = self.db.create_bill(
            owner=self.owner,
            name=data.name,
            amount=data.amount,
            currency=data.currency,
            category=data.category,
            due_date=data.due_date,
            frequency=data.frequency,
            reminder_days=data.reminder_days,
        )
        logger.info("bill_created", owner=self.owner, bill_id=bill_id, due_date=str(data.due_date))
        return bill_id

    def get_bill(self, bill_id: int) -> Optional[Bill]:
        return self.db.get_bill(self.owner, bill_id)

    def require_bill(self, bill_id: int) -> Bill:
        bill = self.get_bill(bill_id)
        if bill is None:
            raise NotFoundError(entity_not_found("bill", bill_id))
        return bill

    def list_bills(self, active_only: bool = True) -> list[Bill]:
        """Bills ordered by due date."""
        return self.db.list_bills(self.owner, active_only=active_only)

    def update_bill(
        self,
        bill_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
        due_date: Optional[date] = None,
        frequency: Optional[str] = None,
        reminder_days: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update bill fields; unset arguments keep their current value."""
        bill = self.require_bill(bill_id)
        data = validate(
            BillInput,
            name=name if name is not None else bill.name,
            amount=amount if amount is not None else bill.amount,
            category=category if category is not None else bill.category,
            due_date=due_date if due_date is not None else bill.due_date,
            frequency=frequency if frequency is not None else bill.frequency,
            reminder_days=reminder_days if reminder_days is not None else bill.reminder_days,
            currency=bill.currency,
        )
        self.db.update_bill(
            self.owner,
            bill_id,
            name=data.name,
            amount=data.amount,
            category=data.category,
            due_date=data.due_date,
            frequency=data.frequency,
            reminder_days=data.reminder_days,
            is_active=is_active,
        )

    def delete_bill(self, bill_id: int) -> None:
        self.require_bill(bill_id)
        self.db.delete_bill(self.owner, bill_id)

    def mark_paid(self, bill_id: int, paid_at: Optional[datetime] = None) -> Bill:
        """Record a bill payment and schedule the next one.

        In one write the bill moves to its next due date, records
        ``paid_at`` and stays unpaid for the new period, and an expense
        transaction linked to the bill is created in the bill's category.

        Returns:
            The rescheduled bill

        Raises:
            NotFoundError: If the bill doesn't exist
        """
        bill = self.require_bill(bill_id)
        paid_at = paid_at or datetime.now(UTC)
        due = next_due_date(bill.due_date, bill.frequency)

        transaction_id = self.db.mark_bill_paid(
            owner=self.owner,
            bill_id=bill_id,
            next_due_date=due,
            paid_at=paid_at,
            transaction_date=paid_at.date(),
        )
        logger.info(
            "bill_paid",
            owner=self.owner,
            bill_id=bill_id,
            transaction_id=transaction_id,
            next_due_date=str(due),
        )
        return self.require_bill(bill_id)

    def upcoming_bills(self, today: Optional[date] = None) -> list[Bill]:
        """Active unpaid bills due within their reminder window."""
        today = today or date.today()
        return [bill for bill in self.list_bills() if is_due_soon(bill, today)]

    def overdue_bills(self, today: Optional[date] = None) -> list[Bill]:
        today = today or date.today()
        return [bill for bill in self.list_bills() if is_overdue(bill, today)]
