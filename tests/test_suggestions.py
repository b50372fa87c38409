"""Tests for rule-based suggestions."""

from decimal import Decimal

from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import (
    BudgetPeriod,
    BudgetSpending,
    CategoryBreakdown,
    PeriodSummary,
    SpendingBreakdown,
)
from finboard.domain.suggestions import HEALTHY, generate_suggestions


def _spending(category, limit, spent):
    return BudgetSpending(
        budget_id=1,
        category=category,
        period=BudgetPeriod.MONTHLY,
        limit_amount=Decimal(limit),
        spent=Decimal(spent),
        breakdown=SpendingBreakdown(transactions=Decimal(spent)),
    )


def _summary(income="0", expenses="0", categories=()):
    income = Decimal(income)
    expenses = Decimal(expenses)
    return PeriodSummary(
        period_start=None,
        period_end=None,
        total_income=income,
        total_expenses=expenses,
        net_savings=income - expenses,
        savings_rate=Decimal("0"),
        category_breakdown=tuple(
            CategoryBreakdown(category=name, amount=Decimal(amount), percentage=Decimal("0"))
            for name, amount in categories
        ),
    )


def test_healthy_when_no_rule_fires():
    assert generate_suggestions([], _summary()) == [HEALTHY]


def test_watch_budget_between_75_and_90_percent():
    spending = [
        _spending("Groceries", "100", "74.99"),
        _spending("Shopping", "100", "75"),
        _spending("Healthcare", "100", "90"),
    ]

    [suggestion] = generate_suggestions(spending, _summary())

    assert suggestion.title == "Watch Shopping Spending"
    assert suggestion.priority == "medium"
    assert "$75.00 of $100.00" in suggestion.description


def test_investment_needs_savings_above_threshold():
    assert generate_suggestions([], _summary(income="1000")) == [HEALTHY]

    [suggestion] = generate_suggestions([], _summary(income="3000", expenses="1500"))

    assert suggestion.title == "Investment Opportunity"
    assert suggestion.priority == "high"
    assert "$1,500.00" in suggestion.description


def test_top_category_above_threshold():
    summary = _summary(expenses="450", categories=[("Dining Out", "250"), ("Groceries", "200")])

    [suggestion] = generate_suggestions([], summary)

    assert suggestion.title == "Optimize Dining Out Spending"
    assert suggestion.priority == "low"


def test_top_category_at_threshold_is_quiet():
    summary = _summary(expenses="200", categories=[("Groceries", "200")])

    assert generate_suggestions([], summary) == [HEALTHY]


def test_rules_run_in_order():
    spending = [_spending("Groceries", "400", "320")]
    summary = _summary(income="5000", expenses="320", categories=[("Groceries", "320")])

    titles = [s.title for s in generate_suggestions(spending, summary)]

    assert titles == [
        "Watch Groceries Spending",
        "Investment Opportunity",
        "Optimize Groceries Spending",
    ]


def test_amounts_use_display_currency_symbol():
    summary = _summary(income="3000", expenses="0")

    [suggestion] = generate_suggestions([], summary, converter=CurrencyConverter("EUR"))

    assert "€3,000.00" in suggestion.description
