"""Tests for input schemas."""

from datetime import date
from decimal import Decimal

import pytest

from finboard.domain.entities import BudgetPeriod, TransactionType
from finboard.domain.errors import ValidationError
from finboard.domain.validation import (
    AccountInput,
    BillInput,
    BudgetInput,
    LoanInput,
    TransactionInput,
    validate,
)


def test_valid_transaction_is_normalized():
    data = validate(
        TransactionInput,
        type="income",
        category=" Salary ",
        amount="5000",
        date=date(2024, 1, 1),
        description="Payroll",
        currency="eur",
    )

    assert data.type is TransactionType.INCOME
    assert data.category == "Salary"
    assert data.amount == Decimal("5000")
    assert data.currency == "EUR"


def test_error_lists_every_failing_field():
    with pytest.raises(ValidationError) as excinfo:
        validate(
            TransactionInput,
            type="expense",
            category="Groceries",
            amount=Decimal("0"),
            date=date(2024, 1, 1),
            description="",
        )

    message = str(excinfo.value)
    assert message.startswith("description: ") or message.startswith("amount: ")
    assert "amount: Input should be greater than 0" in message
    assert "description:" in message


def test_value_error_prefix_is_dropped():
    with pytest.raises(ValidationError) as excinfo:
        validate(AccountInput, name="Stash", type="mattress")

    assert "Value error" not in str(excinfo.value)
    assert "Please select a valid account type" in str(excinfo.value)


def test_unsupported_currency_message():
    with pytest.raises(ValidationError, match="currency: Unsupported currency 'XYZ'"):
        validate(BudgetInput, category="Groceries", limit_amount=Decimal("10"), currency="XYZ")


def test_budget_defaults_to_monthly():
    data = validate(BudgetInput, category="Loans", limit_amount=Decimal("2000"))

    assert data.period is BudgetPeriod.MONTHLY


@pytest.mark.parametrize("reminder_days", [0, 30])
def test_bill_reminder_window_bounds(reminder_days):
    data = validate(
        BillInput,
        name="Rent",
        amount=Decimal("1000"),
        category="Rent",
        due_date=date(2024, 1, 1),
        reminder_days=reminder_days,
    )

    assert data.reminder_days == reminder_days


@pytest.mark.parametrize(
    "overrides",
    [
        {"tenure_months": 601},
        {"interest_rate": Decimal("-0.5")},
        {"due_day": 0},
        {"principal_amount": Decimal("1000000000000")},
        {"notes": "x" * 501},
    ],
)
def test_loan_bounds(overrides):
    fields = dict(
        name="Car",
        type="auto_loan",
        principal_amount=Decimal("10000"),
        interest_rate=Decimal("8"),
        tenure_months=60,
        start_date=date(2024, 1, 1),
    )
    fields.update(overrides)

    with pytest.raises(ValidationError, match=next(iter(overrides))):
        validate(LoanInput, **fields)
