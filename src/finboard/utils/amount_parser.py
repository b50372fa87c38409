"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)
    - "₹1,200" / "A$50" / "CHF 10"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and codes
    amount_str = re.sub(r"(CHF|A\$|C\$|[$€£¥₹])", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    amount = to_decimal(amount_str, "amount")
    return -amount if is_negative else amount


def to_decimal(value, name: str = "value") -> Decimal:
    """Coerce a numeric input to a finite Decimal.

    Floats go through ``str`` so 0.1 stays 0.1. Booleans, NaN, infinities and
    anything non-numeric are rejected rather than silently turned into zero.

    Raises:
        ValueError: If the value is not a finite number
    """
    if isinstance(value, bool) or value is None:
        raise ValueError(f"Invalid {name}: {value!r} is not a number")
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip())
        except InvalidOperation:
            raise ValueError(f"Invalid {name}: {value!r} is not a number")
    else:
        raise ValueError(f"Invalid {name}: {value!r} is not a number")

    if not result.is_finite():
        raise ValueError(f"Invalid {name}: {value!r} is not a finite number")
    return result
