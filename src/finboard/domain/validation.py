"""Input schemas for user-entered records.

Records are validated before they reach the store or the financial core;
the core assumes these bounds hold.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, field_validator

from finboard.domain.currency import DEFAULT_CURRENCY, require_currency
from finboard.domain.entities import (
    BillFrequency,
    BudgetPeriod,
    EntryType,
    TransactionType,
)
from finboard.domain.errors import ValidationError

MAX_AMOUNT = Decimal("999999999")
MAX_PRINCIPAL = Decimal("999999999999")
MIN_DATE = date(1900, 1, 1)

TRANSACTION_CATEGORIES = {
    TransactionType.INCOME: ("Salary", "Freelance", "Investment", "Education", "Other Income"),
    TransactionType.EXPENSE: (
        "Groceries",
        "Dining Out",
        "Transportation",
        "Utilities",
        "Entertainment",
        "Healthcare",
        "Shopping",
        "Education",
        "Other",
    ),
}

BUDGET_CATEGORIES = (
    "Groceries",
    "Entertainment",
    "Transportation",
    "Dining Out",
    "Shopping",
    "Utilities",
    "Healthcare",
    "Education",
    "Bills",
    "Loans",
    "Other",
)

BILL_CATEGORIES = ("Rent", "Utilities", "Internet", "Phone", "Subscriptions", "Insurance", "Loan", "Other")

ACCOUNT_TYPES = ("checking", "savings", "credit", "investment")

LOAN_TYPES = ("personal_loan", "home_loan", "auto_loan", "education_loan", "credit_card", "other")

ModelT = TypeVar("ModelT", bound=BaseModel)


def _one_of(value: str, allowed: tuple[str, ...], label: str) -> str:
    if value not in allowed:
        raise ValueError(f"Please select a valid {label} ({', '.join(allowed)})")
    return value


class _Input(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)


class _MoneyInput(_Input):
    currency: str = DEFAULT_CURRENCY

    @field_validator("currency")
    @classmethod
    def check_currency(cls, v: str) -> str:
        return require_currency(v)


class TransactionInput(_MoneyInput):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    type: TransactionType
    date: date
    category: str = Field(..., min_length=1)
    account_id: Optional[int] = None

    @field_validator("date")
    @classmethod
    def check_date(cls, v: date) -> date:
        if v < MIN_DATE or v > date.today():
            raise ValueError("Date must be between 1900 and today")
        return v


class AccountInput(_MoneyInput):
    name: str = Field(..., min_length=1, max_length=100)
    type: str
    balance: Decimal = Field(default=Decimal("0"), ge=-MAX_AMOUNT, le=MAX_AMOUNT)

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        return _one_of(v, ACCOUNT_TYPES, "account type")


class BudgetInput(_MoneyInput):
    category: str
    limit_amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    period: BudgetPeriod = BudgetPeriod.MONTHLY

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str) -> str:
        return _one_of(v, BUDGET_CATEGORIES, "category")


class BillInput(_MoneyInput):
    name: str = Field(..., min_length=1, max_length=100)
    amount: Decimal = Field(..., gt=0, le=MAX_AMOUNT)
    category: str
    due_date: date
    frequency: BillFrequency = BillFrequency.MONTHLY
    reminder_days: int = Field(default=3, ge=0, le=30)

    @field_validator("category")
    @classmethod
    def check_category(cls, v: str) -> str:
        return _one_of(v, BILL_CATEGORIES, "category")


class LoanInput(_MoneyInput):
    name: str = Field(..., min_length=1, max_length=100)
    type: str
    principal_amount: Decimal = Field(..., gt=0, le=MAX_PRINCIPAL)
    interest_rate: Decimal = Field(..., ge=0, le=100)
    tenure_months: int = Field(..., ge=1, le=600)
    start_date: date
    due_day: int = Field(default=1, ge=1, le=31)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("type")
    @classmethod
    def check_type(cls, v: str) -> str:
        return _one_of(v, LOAN_TYPES, "loan type")


class PaymentInput(_Input):
    amount: Decimal = Field(..., gt=0, le=MAX_PRINCIPAL)
    payment_date: date
    notes: Optional[str] = Field(default=None, max_length=500)


class AssetLiabilityInput(_MoneyInput):
    type: EntryType
    name: str = Field(..., min_length=1, max_length=100)
    value: Decimal = Field(..., ge=0, le=MAX_PRINCIPAL)
    category: str = Field(..., min_length=1, max_length=50)
    date: date


def validate(model: type[ModelT], **data) -> ModelT:
    """Build a schema object, raising the domain ValidationError on failure.

    The message lists each failing field, e.g.
    ``amount: Input should be greater than 0``.
    """
    try:
        return model(**data)
    except pydantic.ValidationError as e:
        messages = []
        for error in e.errors():
            location = ".".join(str(part) for part in error["loc"]) or model.__name__
            messages.append(f"{location}: {error['msg'].removeprefix('Value error, ')}")
        raise ValidationError("; ".join(messages)) from e
