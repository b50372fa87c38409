"""Tests for LoanService."""

from datetime import date
from decimal import Decimal

import pytest

from finboard.domain.entities import LoanStatus
from finboard.domain.errors import ConflictError, DependencyError, NotFoundError, ValidationError
from finboard.domain.loan import LoanService


@pytest.fixture
def car_loan(loan_service):
    return loan_service.create_loan(
        name="Car",
        type="auto_loan",
        principal_amount=Decimal("50000"),
        interest_rate=Decimal("12"),
        tenure_months=12,
        start_date=date(2024, 1, 1),
        due_day=5,
    )


class TestCreateLoan:
    def test_starts_active_with_balance_at_principal(self, loan_service, car_loan):
        loan = loan_service.require_loan(car_loan)

        assert loan.status == LoanStatus.ACTIVE
        assert loan.outstanding_balance == Decimal("50000")
        assert loan.due_day == 5
        assert loan.currency == "USD"

    def test_emi_is_stored_rounded(self, loan_service, car_loan):
        loan = loan_service.require_loan(car_loan)

        assert loan.emi_amount == loan.emi_amount.quantize(Decimal("0.01"))
        assert Decimal("4442") < loan.emi_amount < Decimal("4443")

    def test_tiny_rate_is_accepted(self, loan_service):
        loan_id = loan_service.create_loan(
            name="Family",
            type="personal_loan",
            principal_amount=Decimal("1000"),
            interest_rate=Decimal("1e-25"),
            tenure_months=12,
            start_date=date(2024, 1, 1),
        )

        assert loan_service.require_loan(loan_id).emi_amount == Decimal("83.33")

    def test_zero_rate_emi(self, loan_service):
        loan_id = loan_service.create_loan("Phone", "personal_loan", Decimal("1200"), Decimal("0"), 12, date(2024, 1, 1))

        assert loan_service.require_loan(loan_id).emi_amount == Decimal("100")

    @pytest.mark.parametrize(
        "field,overrides",
        [
            ("principal_amount", {"principal_amount": Decimal("0")}),
            ("interest_rate", {"interest_rate": Decimal("101")}),
            ("tenure_months", {"tenure_months": 0}),
            ("due_day", {"due_day": 32}),
            ("type", {"type": "yacht_loan"}),
        ],
    )
    def test_rejects_out_of_bounds_fields(self, loan_service, field, overrides):
        kwargs = dict(
            name="Bad",
            type="personal_loan",
            principal_amount=Decimal("1000"),
            interest_rate=Decimal("5"),
            tenure_months=12,
            start_date=date(2024, 1, 1),
        )
        kwargs.update(overrides)

        with pytest.raises(ValidationError, match=field):
            loan_service.create_loan(**kwargs)


class TestRecordPayment:
    def test_splits_interest_and_principal(self, loan_service, car_loan):
        payment = loan_service.record_payment(car_loan, Decimal("5000"), date(2024, 2, 5), notes="February")

        assert payment.interest_paid == Decimal("500")
        assert payment.principal_paid == Decimal("4500")
        assert payment.notes == "February"
        assert loan_service.require_loan(car_loan).outstanding_balance == Decimal("45500")

    def test_payoff_closes_loan(self, loan_service):
        loan_id = loan_service.create_loan("Short", "personal_loan", Decimal("10000"), Decimal("12"), 1, date(2024, 1, 1))

        loan_service.record_payment(loan_id, Decimal("10100"), date(2024, 2, 1))

        loan = loan_service.require_loan(loan_id)
        assert loan.outstanding_balance == 0
        assert loan.status == LoanStatus.CLOSED

    def test_closed_loan_rejects_payments(self, loan_service):
        loan_id = loan_service.create_loan("Short", "personal_loan", Decimal("100"), Decimal("0"), 1, date(2024, 1, 1))
        loan_service.record_payment(loan_id, Decimal("100"), date(2024, 2, 1))

        with pytest.raises(ConflictError, match="closed"):
            loan_service.record_payment(loan_id, Decimal("10"), date(2024, 3, 1))
        assert len(loan_service.list_payments(loan_id)) == 1

    def test_defaulted_loan_rejects_payments(self, loan_service, car_loan):
        loan_service.update_loan(car_loan, status=LoanStatus.DEFAULTED)

        with pytest.raises(ConflictError, match="defaulted"):
            loan_service.record_payment(car_loan, Decimal("10"), date(2024, 3, 1))

    def test_rejects_non_positive_amount(self, loan_service, car_loan):
        with pytest.raises(ValidationError, match="amount"):
            loan_service.record_payment(car_loan, Decimal("0"), date(2024, 3, 1))

    def test_unknown_loan(self, loan_service):
        with pytest.raises(NotFoundError):
            loan_service.record_payment(999, Decimal("10"), date(2024, 3, 1))

    def test_payments_listed_newest_first(self, loan_service, car_loan):
        loan_service.record_payment(car_loan, Decimal("5000"), date(2024, 2, 5))
        loan_service.record_payment(car_loan, Decimal("5000"), date(2024, 3, 5))

        payments = loan_service.list_payments(car_loan)

        assert [p.payment_date for p in payments] == [date(2024, 3, 5), date(2024, 2, 5)]

    def test_preview_does_not_record(self, loan_service, car_loan):
        outcome = loan_service.preview_payment(car_loan, Decimal("5000"))

        assert outcome.new_balance == Decimal("45500")
        assert loan_service.list_payments(car_loan) == []


class TestUpdateAndDelete:
    def test_rate_change_keeps_emi(self, loan_service, car_loan):
        before = loan_service.require_loan(car_loan).emi_amount

        loan_service.update_loan(car_loan, name="Family car", interest_rate=Decimal("3"))

        loan = loan_service.require_loan(car_loan)
        assert loan.name == "Family car"
        assert loan.interest_rate == Decimal("3")
        assert loan.emi_amount == before

    def test_delete_without_payments(self, loan_service, car_loan):
        loan_service.delete_loan(car_loan)

        assert loan_service.get_loan(car_loan) is None

    def test_delete_blocked_by_payments(self, loan_service, car_loan):
        loan_service.record_payment(car_loan, Decimal("5000"), date(2024, 2, 5))

        with pytest.raises(DependencyError, match="1 recorded payment"):
            loan_service.delete_loan(car_loan)


def test_loans_are_scoped_to_owner(temp_db, loan_service, car_loan):
    other = LoanService(temp_db, "bob")

    assert other.list_loans() == []
    with pytest.raises(NotFoundError):
        other.record_payment(car_loan, Decimal("10"), date(2024, 2, 1))
    assert [loan.id for loan in loan_service.list_loans(status=LoanStatus.ACTIVE)] == [car_loan]
