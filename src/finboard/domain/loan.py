"""Loan domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

import structlog

from finboard.database.base import Database
from finboard.domain.amortization import apply_payment, monthly_installment, round_money
from finboard.domain.entities import Loan, LoanPayment, LoanStatus, PaymentOutcome
from finboard.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    entity_not_found,
    loan_delete_blocked,
    loan_not_payable,
)
from finboard.domain.validation import LoanInput, PaymentInput, validate

logger = structlog.get_logger(__name__)


class LoanService:
    """Service for managing loans and their payments."""

    def __init__(self, db: Database, owner: str):
        """Initialize loan service.

        Args:
            db: Database instance
            owner: User whose loans this service reads and writes
        """
        self.db = db
        self.owner = owner

    def create_loan(
        self,
        name: str,
        type: str,
        principal_amount: Decimal,
        interest_rate: Decimal,
        tenure_months: int,
        start_date: date,
        due_day: int = 1,
        currency: str = "USD",
        notes: Optional[str] = None,
    ) -> int:
        """Create an active loan.

        The EMI is worked out here, once; later edits never recompute it.
        The outstanding balance starts at the principal.

        Returns:
            Loan ID

        Raises:
            ValidationError: If any field is out of bounds
        """
        data = validate(
            LoanInput,
            name=name,
            type=type,
            principal_amount=principal_amount,
            interest_rate=interest_rate,
            tenure_months=tenure_months,
            start_date=start_date,
            due_day=due_day,
            currency=currency,
            notes=notes,
        )
        emi = round_money(monthly_installment(data.principal_amount, data.interest_rate, data.tenure_months))

        loan_id = self.db.create_loan(
            owner=self.owner,
            name=data.name,
            type=data.type,
            principal_amount=data.principal_amount,
            interest_rate=data.interest_rate,
            tenure_months=data.tenure_months,
            start_date=data.start_date,
            due_day=data.due_day,
            emi_amount=emi,
            outstanding_balance=data.principal_amount,
            currency=data.currency,
            notes=data.notes,
        )
        logger.info("loan_created", owner=self.owner, loan_id=loan_id, emi=str(emi))
        return loan_id

    def get_loan(self, loan_id: int) -> Optional[Loan]:
        return self.db.get_loan(self.owner, loan_id)

    def require_loan(self, loan_id: int) -> Loan:
        loan = self.get_loan(loan_id)
        if loan is None:
            raise NotFoundError(entity_not_found("loan", loan_id))
        return loan

    def list_loans(self, status: Optional[LoanStatus] = None) -> list[Loan]:
        return self.db.list_loans(self.owner, status=status)

    def list_payments(self, loan_id: int) -> list[LoanPayment]:
        """Payments for a loan, newest first."""
        self.require_loan(loan_id)
        return self.db.list_loan_payments(self.owner, loan_id=loan_id)

    def update_loan(
        self,
        loan_id: int,
        name: Optional[str] = None,
        interest_rate: Optional[Decimal] = None,
        due_day: Optional[int] = None,
        notes: Optional[str] = None,
        status: Optional[LoanStatus] = None,
    ) -> None:
        """Edit descriptive loan fields.

        ``emi_amount`` stays as computed at creation even when the rate
        changes.
        """
        loan = self.require_loan(loan_id)
        data = validate(
            LoanInput,
            name=name if name is not None else loan.name,
            type=loan.type,
            principal_amount=loan.principal_amount,
            interest_rate=interest_rate if interest_rate is not None else loan.interest_rate,
            tenure_months=loan.tenure_months,
            start_date=loan.start_date,
            due_day=due_day if due_day is not None else loan.due_day,
            currency=loan.currency,
            notes=notes if notes is not None else loan.notes,
        )
        self.db.update_loan(
            self.owner,
            loan_id,
            name=data.name,
            interest_rate=data.interest_rate,
            due_day=data.due_day,
            notes=data.notes,
            status=LoanStatus(status) if status is not None else None,
        )

    def preview_payment(self, loan_id: int, amount: Decimal) -> PaymentOutcome:
        """Split a prospective payment without recording it."""
        loan = self.require_loan(loan_id)
        return apply_payment(loan.outstanding_balance, loan.interest_rate, amount)

    def record_payment(
        self,
        loan_id: int,
        amount: Decimal,
        payment_date: date,
        notes: Optional[str] = None,
    ) -> LoanPayment:
        """Record a payment against an active loan.

        Interest accrues on the current balance for one month; the rest
        of the payment reduces the balance. Inserting the payment and
        updating the loan happen in one transaction, and a loan whose
        balance reaches zero is closed.

        Returns:
            The recorded payment

        Raises:
            NotFoundError: If the loan doesn't exist
            ConflictError: If the loan is closed or defaulted
            ValidationError: If the amount or date is invalid
        """
        loan = self.require_loan(loan_id)
        if loan.status != LoanStatus.ACTIVE:
            raise ConflictError(loan_not_payable(loan_id, LoanStatus(loan.status).value))

        data = validate(PaymentInput, amount=amount, payment_date=payment_date, notes=notes)
        outcome = apply_payment(loan.outstanding_balance, loan.interest_rate, data.amount)
        new_status = LoanStatus.CLOSED if outcome.closes_loan else LoanStatus.ACTIVE

        payment = self.db.record_loan_payment(
            owner=self.owner,
            loan_id=loan_id,
            payment_date=data.payment_date,
            amount=data.amount,
            principal_paid=outcome.principal_paid,
            interest_paid=outcome.interest_paid,
            notes=data.notes,
            new_balance=outcome.new_balance,
            new_status=new_status,
        )
        logger.info(
            "loan_payment_recorded",
            owner=self.owner,
            loan_id=loan_id,
            payment_id=payment.id,
            new_balance=str(outcome.new_balance),
        )
        if outcome.closes_loan:
            logger.info("loan_closed", owner=self.owner, loan_id=loan_id)
        return payment

    def delete_loan(self, loan_id: int) -> None:
        """Delete a loan with no recorded payments.

        Raises:
            NotFoundError: If the loan doesn't exist
            DependencyError: If payments were recorded against it
        """
        self.require_loan(loan_id)
        payment_count = len(self.db.list_loan_payments(self.owner, loan_id=loan_id))
        if payment_count > 0:
            raise DependencyError(loan_delete_blocked(loan_id, payment_count))
        self.db.delete_loan(self.owner, loan_id)
