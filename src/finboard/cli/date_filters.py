"""CLI helpers for date range resolution."""

from datetime import date

import click

from finboard.utils.date_parser import get_date_range, parse_date


def period_options(func):
    """Attach the shared --start-date/--end-date and period flags to a command."""
    options = [
        click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'last month')"),
        click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')"),
        click.option("--this-week", is_flag=True, help="Filter to current week"),
        click.option("--this-month", is_flag=True, help="Filter to current month"),
        click.option("--this-year", is_flag=True, help="Filter to current year"),
        click.option("--last-week", is_flag=True, help="Filter to previous week"),
        click.option("--last-month", is_flag=True, help="Filter to previous month"),
        click.option("--last-year", is_flag=True, help="Filter to previous year"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def period_flags_from(kwargs: dict) -> dict[str, bool]:
    """Pop the period flags added by ``period_options`` into a dict keyed by period name."""
    names = ("this_week", "this_month", "this_year", "last_week", "last_month", "last_year")
    return {name.replace("_", "-"): bool(kwargs.pop(name, False)) for name in names}


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date, date] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            "Error: Only one period option (--this-week, --this-month, --this-year, --last-week, --last-month, --last-year) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --this-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            try:
                start = parse_date(start_date)
            except ValueError as e:
                click.echo(f"Error: Invalid start date: {e}", err=True)
                ctx.exit(1)

        if end_date:
            try:
                end = parse_date(end_date)
            except ValueError as e:
                click.echo(f"Error: Invalid end date: {e}", err=True)
                ctx.exit(1)

        if start is None and end is None and default_range is not None:
            start, end = default_range

    if start is not None and end is not None and start > end:
        click.echo("Error: Start date must not be after end date.", err=True)
        ctx.exit(1)

    return start, end
