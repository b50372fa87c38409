"""Budget commands."""

from datetime import date
from decimal import Decimal

import click
from finboard.domain.budget import ALERT_THRESHOLD, BudgetService, period_window
from finboard.domain.entities import BudgetPeriod
from finboard.domain.errors import DomainError
from finboard.domain.validation import BUDGET_CATEGORIES
from finboard.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit

PERIOD_CHOICES = [p.value for p in BudgetPeriod]


def _bar(percentage: Decimal, width: int = 20) -> str:
    filled = min(width, int(percentage / 100 * width))
    return "#" * filled + "." * (width - filled)


@click.group()
def budget_group():
    """Manage budgets and track spending against them."""
    pass


@budget_group.command("create")
@click.argument("category", type=click.Choice(BUDGET_CATEGORIES))
@click.option("--limit", "limit_amount", required=True, help="Spending limit (e.g., 500)")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), default="monthly", show_default=True)
@click.option("--currency", default="USD", show_default=True, help="Currency of the limit")
@click.pass_context
def create_budget(ctx, category: str, limit_amount: str, period: str, currency: str):
    """Create a budget for a category.

    Examples:
        finboard budget create Groceries --limit 500
        finboard budget create Loans --limit 2500 --period monthly
    """
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    limit = parse_amount_or_exit(ctx, limit_amount)

    try:
        budget_id = service.create_budget(category=category, limit_amount=limit, period=period, currency=currency)
        click.echo(f"Created {period} budget for '{category}' (ID: {budget_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@budget_group.command("list")
@click.pass_context
def list_budgets(ctx):
    """List all budgets."""
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    budgets = service.list_budgets()
    if not budgets:
        click.echo("No budgets found.")
        return

    click.echo("\nBudgets:")
    click.echo("-" * 60)
    for budget in budgets:
        limit = converter.format(budget.limit_amount, budget.currency)
        click.echo(f"ID: {budget.id:3d} | {budget.category:15s} | {budget.period.value:8s} | {limit:>15s}")


@budget_group.command("update")
@click.argument("budget_id", type=int)
@click.option("--limit", "limit_amount", help="New spending limit")
@click.option("--period", type=click.Choice(PERIOD_CHOICES), help="New period")
@click.pass_context
def update_budget(ctx, budget_id: int, limit_amount: str | None, period: str | None):
    """Change a budget's limit or period."""
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    limit = parse_amount_or_exit(ctx, limit_amount) if limit_amount is not None else None

    try:
        service.update_budget(budget_id, limit_amount=limit, period=period)
        click.echo(f"Updated budget {budget_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@budget_group.command("delete")
@click.argument("budget_id", type=int)
@click.pass_context
def delete_budget(ctx, budget_id: int):
    """Delete a budget."""
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.delete_budget(budget_id)
        click.echo(f"Deleted budget {budget_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@budget_group.command("status")
@period_options
@click.pass_context
def budget_status(ctx, start_date: str | None, end_date: str | None, **flags):
    """Show spending against each budget.

    Spending counts expense transactions, paid bills and loan payments in
    the window. Defaults to the current calendar month.

    Examples:
        finboard budget status
        finboard budget status --last-month
    """
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(flags),
        default_range=period_window(BudgetPeriod.MONTHLY, date.today()),
    )

    try:
        spending = service.get_spending(start, end, converter=converter)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not spending:
        click.echo("No budgets found.")
        return

    def money(amount: Decimal) -> str:
        return converter.format(amount, converter.display_currency)

    click.echo(f"\nBudget status ({start or '...'} to {end or '...'}):")
    click.echo("-" * 80)
    for item in spending:
        marker = " OVER" if item.is_over_budget else ""
        click.echo(
            f"{item.category:15s} [{_bar(item.percentage)}] {item.percentage:6.1f}%  "
            f"{money(item.spent):>14s} / {money(item.limit_amount):<14s}{marker}"
        )
        parts = []
        if item.breakdown.transactions:
            parts.append(f"transactions {money(item.breakdown.transactions)}")
        if item.breakdown.bills:
            parts.append(f"bills {money(item.breakdown.bills)}")
        if item.breakdown.loans:
            parts.append(f"loans {money(item.breakdown.loans)}")
        if parts:
            click.echo(f"{'':15s}   {', '.join(parts)}")


@budget_group.command("alerts")
@click.option(
    "--threshold",
    type=click.FloatRange(0, 1000),
    default=float(ALERT_THRESHOLD),
    show_default=True,
    help="Alert at this percentage of the limit",
)
@click.pass_context
def budget_alerts(ctx, threshold: float):
    """Show monthly budgets that reached the alert threshold this month."""
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    try:
        alerts = service.get_alerts(converter=converter, threshold=Decimal(str(threshold)))
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not alerts:
        click.echo("No budget alerts.")
        return

    for alert in alerts:
        spent = converter.format(alert.spent, converter.display_currency)
        limit = converter.format(alert.limit_amount, converter.display_currency)
        click.echo(
            f"[{alert.severity.upper()}] {alert.category}: {alert.percentage:.1f}% used ({spent} of {limit})"
        )


@budget_group.command("details")
@click.argument("category")
@period_options
@click.pass_context
def budget_details(ctx, category: str, start_date: str | None, end_date: str | None, **flags):
    """List the transactions, bills and loan payments behind a category.

    Defaults to the current calendar month.
    """
    service = BudgetService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(flags),
        default_range=period_window(BudgetPeriod.MONTHLY, date.today()),
    )

    try:
        items = service.get_category_items(category, start, end, converter=converter)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not items:
        click.echo(f"No spending in '{category}'.")
        return

    click.echo(f"\n{category} ({start or '...'} to {end or '...'}):")
    click.echo("-" * 70)
    total = Decimal("0")
    for item in items:
        total += item.amount
        amount = converter.format(item.amount, converter.display_currency)
        click.echo(f"{item.date} | {item.source.value:11s} | {(item.description or '')[:30]:30s} | {amount:>14s}")
    click.echo("-" * 70)
    click.echo(f"Total: {converter.format(total, converter.display_currency)}")


def register_commands(cli):
    """Register budget commands with main CLI."""
    cli.add_command(budget_group, name="budget")
