"""Loan amortization math.

Reducing-balance installments: for principal P, monthly rate r and n months,
EMI = P * r * (1 + r)^n / ((1 + r)^n - 1).
"""

from decimal import Decimal, ROUND_HALF_UP, localcontext

from finboard.domain.entities import EMIResult, PaymentOutcome, PaymentSplit
from finboard.domain.errors import ValidationError
from finboard.utils.amount_parser import to_decimal

ZERO = Decimal("0")
CENT = Decimal("0.01")
# Digits carried while compounding, so tiny positive rates still register
WORKING_PRECISION = 60

ZERO_EMI = EMIResult(emi=ZERO, total_interest=ZERO, total_payment=ZERO)


def round_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def _number(value, name: str) -> Decimal:
    try:
        return to_decimal(value, name)
    except ValueError as e:
        raise ValidationError(str(e))


def _months(value) -> int:
    months = _number(value, "tenure")
    if months != months.to_integral_value():
        raise ValidationError(f"Invalid tenure: {value!r} is not a whole number of months")
    return int(months)


def _rate(value) -> Decimal:
    rate = _number(value, "interest rate")
    if rate < 0:
        raise ValidationError("Interest rate cannot be negative")
    return rate


def monthly_rate(annual_rate_percent) -> Decimal:
    """Convert an annual percentage rate to a monthly fraction."""
    return _rate(annual_rate_percent) / 12 / 100


def monthly_installment(principal, annual_rate_percent, months) -> Decimal:
    """Unrounded monthly installment.

    Returns zero when principal or months is not positive.

    Raises:
        ValidationError: If any input is non-numeric, NaN or infinite
    """
    principal = _number(principal, "principal")
    rate = _rate(annual_rate_percent)
    months = _months(months)

    if principal <= 0 or months <= 0:
        return ZERO

    if rate == 0:
        return principal / months

    with localcontext() as ctx:
        ctx.prec = WORKING_PRECISION
        r = rate / 12 / 100
        factor = (1 + r) ** months
        emi = None if factor == 1 else principal * r * factor / (factor - 1)

    if emi is None:
        # Rate too small to compound at this precision
        return principal / months
    return +emi


def compute_emi(principal, annual_rate_percent, months) -> EMIResult:
    """EMI with totals, rounded to cents for display.

    ``total_payment`` is the rounded EMI times the tenure and
    ``total_interest`` is what that pays beyond the principal.
    """
    emi = monthly_installment(principal, annual_rate_percent, months)
    if emi == 0:
        return ZERO_EMI

    emi = round_money(emi)
    months = _months(months)
    total_payment = round_money(emi * months)
    if _rate(annual_rate_percent) == 0:
        return EMIResult(emi=emi, total_interest=ZERO, total_payment=total_payment)

    total_interest = max(ZERO, round_money(total_payment - _number(principal, "principal")))
    return EMIResult(emi=emi, total_interest=total_interest, total_payment=total_payment)


def split_payment(outstanding_balance, annual_rate_percent, payment_amount) -> PaymentSplit:
    """Split a payment into interest accrued on the balance and principal."""
    balance = _number(outstanding_balance, "outstanding balance")
    amount = _number(payment_amount, "payment amount")
    interest_paid = balance * monthly_rate(annual_rate_percent)
    return PaymentSplit(principal_paid=amount - interest_paid, interest_paid=interest_paid)


def apply_payment(outstanding_balance, annual_rate_percent, payment_amount) -> PaymentOutcome:
    """Work out the balance after a payment.

    The balance never goes below zero; a payment that covers the balance
    plus accrued interest closes the loan.
    """
    balance = _number(outstanding_balance, "outstanding balance")
    split = split_payment(balance, annual_rate_percent, payment_amount)
    new_balance = max(ZERO, balance - split.principal_paid)
    return PaymentOutcome(
        principal_paid=split.principal_paid,
        interest_paid=split.interest_paid,
        new_balance=new_balance,
        closes_loan=new_balance == 0,
    )
