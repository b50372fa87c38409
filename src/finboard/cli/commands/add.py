"""Add transaction command."""

import click
from finboard.domain.transaction import TransactionService
from finboard.domain.account import AccountService
from finboard.domain.errors import DomainError
from finboard.cli.account_resolution import resolve_account_or_exit
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit


@click.command("add")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice(["income", "expense"]),
    default="expense",
    show_default=True,
    help="Transaction type",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--category", required=True, help="Category (e.g., Groceries, Salary)")
@click.option("--description", required=True, help="Transaction description")
@click.option(
    "--date",
    "date_str",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--currency", default="USD", show_default=True, help="Currency the amount was paid in")
@click.option("--account", help="Account name or ID")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    amount: str,
    category: str,
    description: str,
    date_str: str,
    currency: str,
    account: str | None,
):
    """Add a transaction manually.

    Examples:
        finboard add --amount 42.10 --category Groceries --description "Weekly shop"
        finboard add --type income --amount 5000 --category Salary --description "Payroll" --date 2024-01-31
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    converter = ctx.obj["converter"]
    transaction_service = TransactionService(db, owner)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db, owner), account)

    txn_date = parse_date_or_exit(ctx, date_str)
    txn_amount = parse_amount_or_exit(ctx, amount)

    try:
        transaction_id = transaction_service.create_transaction(
            type=txn_type,
            category=category,
            amount=txn_amount,
            date=txn_date,
            description=description,
            currency=currency,
            account_id=account_id,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Type: {txn_type}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Amount: {converter.format(txn_amount, currency)}")
    click.echo(f"  Category: {category}")
    click.echo(f"  Description: {description}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
