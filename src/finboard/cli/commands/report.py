"""Reporting commands."""

from datetime import date

import click
from finboard.domain.entities import Granularity, TransactionType
from finboard.domain.errors import DomainError
from finboard.domain.report import DASHBOARD_TOP_N, ReportService
from finboard.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from finboard.cli.error_handling import handle_domain_error
from finboard.utils.date_parser import get_date_range


def _window(ctx, start_date, end_date, flags) -> tuple[date, date]:
    """Resolve the report window; an open end is today, an open start is Jan 1 of the end's year."""
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=period_flags_from(flags),
        default_range=get_date_range("this-month"),
    )
    end = end or (max(date.today(), start) if start else date.today())
    start = start or end.replace(month=1, day=1)
    return start, end


def _echo_summary(summary, converter):
    display = converter.display_currency
    click.echo(f"Income:       {converter.format(summary.total_income, display):>16s}")
    click.echo(f"Expenses:     {converter.format(summary.total_expenses, display):>16s}")
    click.echo(f"Net savings:  {converter.format_signed(summary.net_savings, display):>16s}")
    click.echo(f"Savings rate: {summary.savings_rate:15.1f}%")

    if summary.category_breakdown:
        click.echo("\nTop expense categories:")
        for item in summary.category_breakdown:
            click.echo(
                f"  {item.category:20s} {converter.format(item.amount, display):>14s} {item.percentage:6.1f}%"
            )


@click.group()
def report_group():
    """Financial reports."""
    pass


@report_group.command("summary")
@period_options
@click.option("--top", type=int, default=DASHBOARD_TOP_N, show_default=True, help="Expense categories to show")
@click.pass_context
def report_summary(ctx, start_date: str | None, end_date: str | None, top: int, **flags):
    """Income, expenses and savings for a window (default: this month)."""
    service = ReportService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    start, end = _window(ctx, start_date, end_date, flags)

    try:
        summary = service.get_summary(start, end, converter=converter, top_n=top)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nSummary ({start} to {end}):")
    click.echo("-" * 50)
    _echo_summary(summary, converter)


@report_group.command("trend")
@period_options
@click.option(
    "--granularity",
    type=click.Choice([g.value for g in Granularity]),
    help="Bucket size (defaults to hours for one day, weeks up to a month, months beyond)",
)
@click.option("--cumulative", is_flag=True, help="Show running totals")
@click.pass_context
def report_trend(
    ctx,
    start_date: str | None,
    end_date: str | None,
    granularity: str | None,
    cumulative: bool,
    **flags,
):
    """Income and expenses over time."""
    service = ReportService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    display = converter.display_currency
    start, end = _window(ctx, start_date, end_date, flags)

    try:
        buckets = service.get_trend(
            start,
            end,
            granularity=Granularity(granularity) if granularity else None,
            cumulative=cumulative,
            converter=converter,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"{'Period':8s} | {'Income':>14s} | {'Expenses':>14s}")
    click.echo("-" * 42)
    for bucket in buckets:
        click.echo(
            f"{bucket.label:8s} | {converter.format(bucket.income, display):>14s} | "
            f"{converter.format(bucket.expenses, display):>14s}"
        )


@report_group.command("ledger")
@period_options
@click.pass_context
def report_ledger(ctx, start_date: str | None, end_date: str | None, **flags):
    """Every transaction, paid bill and loan payment in a window."""
    service = ReportService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    start, end = _window(ctx, start_date, end_date, flags)

    try:
        rows = service.get_ledger(start, end, converter=converter)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not rows:
        click.echo("Nothing recorded in this window.")
        return

    for row in rows:
        amount = converter.format(row.amount, converter.display_currency)
        if row.type == TransactionType.EXPENSE:
            amount = f"-{amount}"
        click.echo(
            f"{row.date} | {row.source.value:11s} | {row.category[:15]:15s} | "
            f"{(row.description or '')[:30]:30s} | {amount:>14s}"
        )


@report_group.command("suggestions")
@period_options
@click.pass_context
def report_suggestions(ctx, start_date: str | None, end_date: str | None, **flags):
    """Suggestions drawn from budgets and savings for a window."""
    service = ReportService(ctx.obj["db"], ctx.obj["owner"])
    start, end = _window(ctx, start_date, end_date, flags)

    try:
        report = service.build_report(start, end, converter=ctx.obj["converter"])
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    for suggestion in report.suggestions:
        click.echo(f"[{suggestion.priority.upper()}] {suggestion.title}")
        click.echo(f"    {suggestion.description}")


@report_group.command("dashboard")
@period_options
@click.pass_context
def report_dashboard(ctx, start_date: str | None, end_date: str | None, **flags):
    """Summary, bills, loans and budget alerts in one view."""
    service = ReportService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    display = converter.display_currency
    start, end = _window(ctx, start_date, end_date, flags)

    try:
        report = service.build_report(start, end, converter=converter)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"\nDashboard ({start} to {end}):")
    click.echo("=" * 50)
    _echo_summary(report.summary, converter)

    click.echo("\nBills:")
    click.echo(f"  Due soon: {report.bills.upcoming_bills}")
    click.echo(f"  Unpaid:   {report.bills.unpaid_count}")
    click.echo(f"  Total:    {converter.format(report.bills.total_bills_amount, display)}")

    click.echo("\nLoans:")
    click.echo(f"  Active:      {report.loans.active_loans}")
    click.echo(f"  Outstanding: {converter.format(report.loans.total_outstanding, display)}")
    click.echo(f"  Monthly EMI: {converter.format(report.loans.monthly_emi, display)}")

    if report.alerts:
        click.echo("\nBudget alerts:")
        for alert in report.alerts:
            click.echo(f"  [{alert.severity.upper()}] {alert.category}: {alert.percentage:.1f}% used")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
