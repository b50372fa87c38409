"""Display currency conversion and formatting.

Rates are static units-per-USD multipliers, not live quotes. Amounts are
stored in the currency they were recorded in and converted on read.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from finboard.domain.errors import ValidationError, unsupported_currency
from finboard.utils.amount_parser import to_decimal

DEFAULT_CURRENCY = "USD"

# 1 USD = X units of the currency
EXCHANGE_RATES: dict[str, Decimal] = {
    "USD": Decimal("1"),
    "EUR": Decimal("0.92"),
    "GBP": Decimal("0.79"),
    "INR": Decimal("83.12"),
    "JPY": Decimal("149.50"),
    "AUD": Decimal("1.52"),
    "CAD": Decimal("1.36"),
    "CHF": Decimal("0.88"),
    "CNY": Decimal("7.24"),
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$",
    "EUR": "€",
    "GBP": "£",
    "INR": "₹",
    "JPY": "¥",
    "AUD": "A$",
    "CAD": "C$",
    "CHF": "CHF",
    "CNY": "¥",
}

SUPPORTED_CURRENCIES: tuple[str, ...] = tuple(EXCHANGE_RATES)

ZERO_DECIMAL_CURRENCIES = frozenset({"JPY"})


def normalize_currency(code: Optional[str]) -> str:
    """Upper-case a source currency code, falling back to USD.

    Unset or unsupported source currencies are treated as USD.
    """
    if not code:
        return DEFAULT_CURRENCY
    normalized = code.strip().upper()
    if normalized not in EXCHANGE_RATES:
        return DEFAULT_CURRENCY
    return normalized


def require_currency(code: Optional[str]) -> str:
    """Return the normalized code of a supported currency.

    Raises:
        ValidationError: If the code is missing or unsupported
    """
    normalized = (code or "").strip().upper()
    if normalized not in EXCHANGE_RATES:
        raise ValidationError(unsupported_currency(code or ""))
    return normalized


def convert(amount, from_currency: Optional[str], to_currency: str) -> Decimal:
    """Convert an amount between currencies through USD.

    Args:
        amount: Any real number, negative included
        from_currency: Source code; unset or unknown means USD
        to_currency: Target code, must be supported

    Returns:
        Converted amount, unrounded

    Raises:
        ValidationError: If the amount is not numeric or the target unsupported
    """
    try:
        value = to_decimal(amount, "amount")
    except ValueError as e:
        raise ValidationError(str(e))
    source = normalize_currency(from_currency)
    target = require_currency(to_currency)
    if source == target:
        return value

    amount_in_usd = value / EXCHANGE_RATES[source]
    return amount_in_usd * EXCHANGE_RATES[target]


def decimal_places(currency: str) -> int:
    return 0 if currency in ZERO_DECIMAL_CURRENCIES else 2


def format_amount(amount, from_currency: Optional[str], to_currency: str) -> str:
    """Convert and render an amount as ``<symbol><magnitude>``.

    The magnitude is always shown without a sign; callers that need to mark
    negative values prepend the sign themselves.
    """
    target = require_currency(to_currency)
    converted = abs(convert(amount, from_currency, target))
    places = decimal_places(target)
    quantum = Decimal(1).scaleb(-places)
    rounded = converted.quantize(quantum, rounding=ROUND_HALF_UP)
    return f"{CURRENCY_SYMBOLS[target]}{rounded:,.{places}f}"


@dataclass(frozen=True)
class CurrencyConverter:
    """Session-scoped display currency.

    One instance is created per session and handed to everything that
    renders money, so concurrent sessions never share a selection.
    """

    display_currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        object.__setattr__(self, "display_currency", require_currency(self.display_currency))

    @property
    def symbol(self) -> str:
        return CURRENCY_SYMBOLS[self.display_currency]

    def with_currency(self, currency: str) -> "CurrencyConverter":
        """Return a converter for another display currency."""
        return CurrencyConverter(display_currency=currency)

    def convert(self, amount, from_currency: Optional[str] = DEFAULT_CURRENCY) -> Decimal:
        return convert(amount, from_currency, self.display_currency)

    def format(self, amount, from_currency: Optional[str] = DEFAULT_CURRENCY) -> str:
        return format_amount(amount, from_currency, self.display_currency)

    def format_signed(self, amount, from_currency: Optional[str] = DEFAULT_CURRENCY) -> str:
        """Format with a leading minus for negative amounts."""
        formatted = self.format(amount, from_currency)
        sign = "-" if to_decimal(amount, "amount") < 0 else ""
        return f"{sign}{formatted}"
