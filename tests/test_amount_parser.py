"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from finboard.utils.amount_parser import parse_amount, to_decimal


@pytest.mark.parametrize(
    "text,expected",
    [
        ("123.45", Decimal("123.45")),
        ("$123.45", Decimal("123.45")),
        ("-123.45", Decimal("-123.45")),
        ("1,234.56", Decimal("1234.56")),
        ("(123.45)", Decimal("-123.45")),
        ("₹1,200", Decimal("1200")),
        ("A$50", Decimal("50")),
        ("CHF 10", Decimal("10")),
        ("  7  ", Decimal("7")),
    ],
)
def test_parse_amount(text, expected):
    assert parse_amount(text) == expected


@pytest.mark.parametrize("text", ["", "   ", "abc", "1.2.3", "NaN", "Infinity"])
def test_parse_amount_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_amount(text)


def test_to_decimal_keeps_float_text():
    assert to_decimal(0.1) == Decimal("0.1")
    assert to_decimal(3) == Decimal("3")


@pytest.mark.parametrize("value", [None, True, False, float("nan"), float("-inf"), [1]])
def test_to_decimal_rejects_non_numbers(value):
    with pytest.raises(ValueError, match="amount"):
        to_decimal(value, "amount")
