"""Tests for display currency conversion and formatting."""

from decimal import Decimal

import pytest

from finboard.domain.currency import (
    SUPPORTED_CURRENCIES,
    CurrencyConverter,
    convert,
    format_amount,
    normalize_currency,
)
from finboard.domain.errors import ValidationError


@pytest.mark.parametrize("code", SUPPORTED_CURRENCIES)
def test_same_currency_is_identity(code):
    assert convert(Decimal("123.45"), code, code) == Decimal("123.45")


@pytest.mark.parametrize("source,target", [("EUR", "JPY"), ("INR", "GBP"), ("USD", "CHF"), ("CAD", "AUD")])
def test_round_trip_through_two_currencies(source, target):
    amount = Decimal("987.65")
    back = convert(convert(amount, source, target), target, source)

    assert abs(back - amount) < Decimal("0.0000001")


def test_eur_to_jpy_goes_through_usd():
    converted = convert(100, "EUR", "JPY")

    assert abs(converted - Decimal("16250")) < Decimal("0.0001")
    assert format_amount(100, "EUR", "JPY") == "¥16,250"


def test_negative_amounts_convert():
    assert convert(-10, "USD", "EUR") == Decimal("-9.20")


def test_unknown_source_currency_is_treated_as_usd():
    assert normalize_currency(None) == "USD"
    assert normalize_currency(" eur ") == "EUR"
    assert convert(10, "XYZ", "EUR") == convert(10, "USD", "EUR")


def test_unsupported_target_is_rejected():
    with pytest.raises(ValidationError, match="Unsupported currency"):
        convert(10, "USD", "XYZ")


def test_nan_amount_is_rejected():
    with pytest.raises(ValidationError):
        convert(float("nan"), "USD", "EUR")


def test_chf_is_both_displayable_and_accepted():
    assert "CHF" in SUPPORTED_CURRENCIES
    assert CurrencyConverter("chf").display_currency == "CHF"


class TestCurrencyConverter:
    def test_format_uses_symbol_and_two_decimals(self):
        assert CurrencyConverter("USD").format(Decimal("1234.5")) == "$1,234.50"

    def test_format_rounds_half_up(self):
        assert CurrencyConverter("USD").format(Decimal("0.125")) == "$0.13"

    def test_format_hides_sign_and_format_signed_shows_it(self):
        usd = CurrencyConverter("USD")

        assert usd.format(-5) == "$5.00"
        assert usd.format_signed(-5) == "-$5.00"
        assert usd.format_signed(5) == "$5.00"

    def test_format_converts_from_source_currency(self):
        eur = CurrencyConverter("EUR")

        assert eur.format(100, "USD") == "€92.00"
        assert eur.format(100, "EUR") == "€100.00"

    def test_converters_are_independent(self):
        usd = CurrencyConverter("USD")
        inr = usd.with_currency("INR")

        assert usd.display_currency == "USD"
        assert inr.display_currency == "INR"
        assert inr.symbol == "₹"
        assert usd.convert(1, "USD") == Decimal("1")

    def test_rejects_unsupported_display_currency(self):
        with pytest.raises(ValidationError):
            CurrencyConverter("DOGE")
