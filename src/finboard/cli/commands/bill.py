"""Recurring bill commands."""

from datetime import date

import click
from finboard.domain.bill import BillService, days_until_due, is_overdue
from finboard.domain.entities import BillFrequency
from finboard.domain.errors import DomainError
from finboard.domain.validation import BILL_CATEGORIES
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit

FREQUENCY_CHOICES = [f.value for f in BillFrequency]


def _due_label(bill, today: date) -> str:
    days = days_until_due(bill, today)
    if is_overdue(bill, today):
        return f"overdue {-days}d"
    if days == 0:
        return "due today"
    return f"in {days}d"


@click.group()
def bill_group():
    """Manage recurring bills."""
    pass


@bill_group.command("create")
@click.argument("name")
@click.option("--amount", required=True, help="Bill amount (e.g., 89.99)")
@click.option("--category", type=click.Choice(BILL_CATEGORIES), default="Other", show_default=True)
@click.option("--due-date", required=True, help="Next due date (YYYY-MM-DD or relative like 'tomorrow')")
@click.option("--frequency", type=click.Choice(FREQUENCY_CHOICES), default="monthly", show_default=True)
@click.option("--reminder-days", type=int, default=3, show_default=True, help="Days of notice before the due date")
@click.option("--currency", default="USD", show_default=True, help="Currency the bill is charged in")
@click.pass_context
def create_bill(
    ctx,
    name: str,
    amount: str,
    category: str,
    due_date: str,
    frequency: str,
    reminder_days: int,
    currency: str,
):
    """Create a recurring bill.

    Examples:
        finboard bill create "Rent" --amount 1000 --category Rent --due-date 2024-02-01
        finboard bill create "Streaming" --amount 15.49 --category Subscriptions --due-date tomorrow
    """
    service = BillService(ctx.obj["db"], ctx.obj["owner"])
    bill_amount = parse_amount_or_exit(ctx, amount)
    due = parse_date_or_exit(ctx, due_date, label="due date")

    try:
        bill_id = service.create_bill(
            name=name,
            amount=bill_amount,
            category=category,
            due_date=due,
            frequency=frequency,
            reminder_days=reminder_days,
            currency=currency,
        )
        click.echo(f"Created bill '{name}' (ID: {bill_id}), next due {due}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@bill_group.command("list")
@click.option("--all", "show_all", is_flag=True, help="Include inactive bills")
@click.pass_context
def list_bills(ctx, show_all: bool):
    """List bills ordered by due date."""
    service = BillService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    today = date.today()

    bills = service.list_bills(active_only=not show_all)
    if not bills:
        click.echo("No bills found.")
        return

    click.echo("\nBills:")
    click.echo("-" * 80)
    for bill in bills:
        amount = converter.format(bill.amount, bill.currency)
        status = _due_label(bill, today) if bill.is_active else "inactive"
        click.echo(
            f"ID: {bill.id:3d} | {bill.name:20s} | {amount:>12s} | {bill.frequency.value:9s} | "
            f"{bill.due_date} ({status})"
        )


@bill_group.command("upcoming")
@click.pass_context
def upcoming_bills(ctx):
    """Show unpaid bills due within their reminder window, and overdue ones."""
    service = BillService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    today = date.today()

    upcoming = service.upcoming_bills(today)
    overdue = service.overdue_bills(today)
    if not upcoming and not overdue:
        click.echo("No bills due soon.")
        return

    for bill in overdue + upcoming:
        amount = converter.format(bill.amount, bill.currency)
        click.echo(f"{bill.name}: {amount} {_due_label(bill, today)} ({bill.due_date})")


@bill_group.command("pay")
@click.argument("bill_id", type=int)
@click.pass_context
def pay_bill(ctx, bill_id: int):
    """Mark a bill as paid.

    Records an expense transaction for the bill and moves its due date on
    by one period.
    """
    service = BillService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    try:
        bill = service.mark_paid(bill_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Paid '{bill.name}' ({converter.format(bill.amount, bill.currency)})")
    click.echo(f"Next due: {bill.due_date}")


@bill_group.command("update")
@click.argument("bill_id", type=int)
@click.option("--name", help="New name")
@click.option("--amount", help="New amount")
@click.option("--category", type=click.Choice(BILL_CATEGORIES), help="New category")
@click.option("--due-date", help="New due date")
@click.option("--frequency", type=click.Choice(FREQUENCY_CHOICES), help="New frequency")
@click.option("--reminder-days", type=int, help="New reminder window in days")
@click.option("--active/--inactive", "is_active", default=None, help="Activate or deactivate the bill")
@click.pass_context
def update_bill(
    ctx,
    bill_id: int,
    name: str | None,
    amount: str | None,
    category: str | None,
    due_date: str | None,
    frequency: str | None,
    reminder_days: int | None,
    is_active: bool | None,
):
    """Update a bill. Only the given fields change."""
    service = BillService(ctx.obj["db"], ctx.obj["owner"])
    bill_amount = parse_amount_or_exit(ctx, amount) if amount is not None else None
    due = parse_date_or_exit(ctx, due_date, label="due date") if due_date is not None else None

    try:
        service.update_bill(
            bill_id,
            name=name,
            amount=bill_amount,
            category=category,
            due_date=due,
            frequency=frequency,
            reminder_days=reminder_days,
            is_active=is_active,
        )
        click.echo(f"Updated bill {bill_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@bill_group.command("delete")
@click.argument("bill_id", type=int)
@click.pass_context
def delete_bill(ctx, bill_id: int):
    """Delete a bill. Past payment transactions are kept."""
    service = BillService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.delete_bill(bill_id)
        click.echo(f"Deleted bill {bill_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register bill commands with main CLI."""
    cli.add_command(bill_group, name="bill")
