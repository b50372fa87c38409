"""Rule-based spending suggestions.

Each rule looks at aggregated totals and yields zero or more suggestions.
Rules run in table order; when none fires a single encouragement is
returned instead.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Optional, Sequence

from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import BudgetSpending, PeriodSummary, Suggestion

WATCH_FROM = Decimal("75")
WATCH_UNTIL = Decimal("90")
SAVINGS_THRESHOLD = Decimal("1000")
TOP_CATEGORY_THRESHOLD = Decimal("200")

HEALTHY = Suggestion(
    title="Great Financial Health!",
    description="Keep up the good work managing your finances.",
    priority="low",
)


@dataclass(frozen=True)
class RuleContext:
    spending: Sequence[BudgetSpending]
    summary: PeriodSummary
    converter: CurrencyConverter

    def money(self, amount: Decimal) -> str:
        # Amounts are already in the display currency
        return self.converter.format(amount, self.converter.display_currency)


Rule = Callable[[RuleContext], Iterable[Suggestion]]


def watch_budgets(ctx: RuleContext) -> Iterable[Suggestion]:
    for item in ctx.spending:
        percentage = item.percentage
        if WATCH_FROM <= percentage < WATCH_UNTIL:
            yield Suggestion(
                title=f"Watch {item.category} Spending",
                description=(
                    f"You've spent {percentage:.0f}% of your {item.category} budget "
                    f"({ctx.money(item.spent)} of {ctx.money(item.limit_amount)})."
                ),
                priority="medium",
            )


def invest_savings(ctx: RuleContext) -> Iterable[Suggestion]:
    savings = ctx.summary.net_savings
    if savings > SAVINGS_THRESHOLD:
        yield Suggestion(
            title="Investment Opportunity",
            description=(
                f"You have {ctx.money(savings)} in savings this period. "
                "Consider investing for better returns."
            ),
            priority="high",
        )


def optimize_top_category(ctx: RuleContext) -> Iterable[Suggestion]:
    if not ctx.summary.category_breakdown:
        return
    top = ctx.summary.category_breakdown[0]
    if top.amount > TOP_CATEGORY_THRESHOLD:
        yield Suggestion(
            title=f"Optimize {top.category} Spending",
            description=(
                f"{top.category} is your highest expense category at {ctx.money(top.amount)}. "
                "Look for ways to reduce costs."
            ),
            priority="low",
        )


RULES: tuple[Rule, ...] = (watch_budgets, invest_savings, optimize_top_category)


def generate_suggestions(
    spending: Sequence[BudgetSpending],
    summary: PeriodSummary,
    converter: Optional[CurrencyConverter] = None,
    rules: Sequence[Rule] = RULES,
) -> list[Suggestion]:
    """Run the rule table over a window's budgets and summary.

    ``summary`` should carry the full, untruncated category breakdown so
    the top category is the real one.
    """
    ctx = RuleContext(spending=spending, summary=summary, converter=converter or CurrencyConverter())
    suggestions = [suggestion for rule in rules for suggestion in rule(ctx)]
    return suggestions or [HEALTHY]
