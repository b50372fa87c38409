"""Net worth commands."""

import click
from finboard.domain.entities import EntryType
from finboard.domain.errors import DomainError
from finboard.domain.net_worth import NetWorthService
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit


@click.group()
def networth_group():
    """Track assets and liabilities."""
    pass


@networth_group.command("add")
@click.argument("entry_type", metavar="TYPE", type=click.Choice([t.value for t in EntryType]))
@click.argument("name")
@click.option("--value", required=True, help="Current value")
@click.option("--category", required=True, help="Category (e.g., Property, Mortgage)")
@click.option("--date", "date_str", default="today", show_default=True, help="Valuation date")
@click.option("--currency", default="USD", show_default=True, help="Currency of the value")
@click.pass_context
def add_entry(ctx, entry_type: str, name: str, value: str, category: str, date_str: str, currency: str):
    """Record an asset or liability.

    Examples:
        finboard networth add asset "House" --value 350000 --category Property
        finboard networth add liability "Mortgage" --value 210000 --category Mortgage
    """
    service = NetWorthService(ctx.obj["db"], ctx.obj["owner"])
    amount = parse_amount_or_exit(ctx, value)
    entry_date = parse_date_or_exit(ctx, date_str)

    try:
        entry_id = service.add_entry(
            type=entry_type,
            name=name,
            value=amount,
            category=category,
            entry_date=entry_date,
            currency=currency,
        )
        click.echo(f"Added {entry_type} '{name}' (ID: {entry_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@networth_group.command("list")
@click.pass_context
def list_entries(ctx):
    """List asset and liability entries, newest first."""
    service = NetWorthService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    entries = service.list_entries()
    if not entries:
        click.echo("No entries found.")
        return

    for entry in entries:
        value = converter.format(entry.value, entry.currency)
        click.echo(
            f"ID: {entry.id:3d} | {entry.date} | {entry.type.value:9s} | {entry.name:20s} | "
            f"{entry.category:12s} | {value:>15s}"
        )


@networth_group.command("show")
@click.option("--history", is_flag=True, help="Also show totals per valuation date")
@click.pass_context
def show_net_worth(ctx, history: bool):
    """Show total assets, liabilities and net worth."""
    service = NetWorthService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    display = converter.display_currency

    summary = service.get_summary(converter=converter)
    click.echo(f"Assets:      {converter.format(summary.assets, display):>18s}")
    click.echo(f"Liabilities: {converter.format(summary.liabilities, display):>18s}")
    click.echo(f"Net worth:   {converter.format_signed(summary.net_worth, display):>18s}")

    if history:
        click.echo("\nHistory:")
        for point in service.get_history(converter=converter):
            click.echo(
                f"{point.date} | assets {converter.format(point.assets, display):>15s} | "
                f"liabilities {converter.format(point.liabilities, display):>15s} | "
                f"net {converter.format_signed(point.net_worth, display):>15s}"
            )


@networth_group.command("update")
@click.argument("entry_id", type=int)
@click.option("--name", help="New name")
@click.option("--value", help="New value")
@click.option("--category", help="New category")
@click.option("--date", "date_str", help="New valuation date")
@click.pass_context
def update_entry(
    ctx,
    entry_id: int,
    name: str | None,
    value: str | None,
    category: str | None,
    date_str: str | None,
):
    """Revalue or rename an entry."""
    service = NetWorthService(ctx.obj["db"], ctx.obj["owner"])
    amount = parse_amount_or_exit(ctx, value) if value is not None else None
    entry_date = parse_date_or_exit(ctx, date_str) if date_str is not None else None

    try:
        service.update_entry(entry_id, name=name, value=amount, category=category, entry_date=entry_date)
        click.echo(f"Updated entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@networth_group.command("delete")
@click.argument("entry_id", type=int)
@click.pass_context
def delete_entry(ctx, entry_id: int):
    """Delete an asset or liability entry."""
    service = NetWorthService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.delete_entry(entry_id)
        click.echo(f"Deleted entry {entry_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register net worth commands with main CLI."""
    cli.add_command(networth_group, name="networth")
