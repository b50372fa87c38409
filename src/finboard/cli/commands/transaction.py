"""Transaction management commands."""

import click
from finboard.domain.transaction import TransactionService
from finboard.domain.account import AccountService
from finboard.domain.errors import DomainError
from finboard.cli.account_resolution import resolve_account_or_exit
from finboard.cli.date_filters import period_flags_from, period_options, resolve_cli_date_range
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@period_options
@click.option("--type", "txn_type", type=click.Choice(["income", "expense"]), help="Only one type")
@click.option("--category", help="Exact category name")
@click.option("--account", help="Account name or ID")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    txn_type: str | None,
    category: str | None,
    account: str | None,
    **flags,
) -> None:
    """List transactions, newest first.

    Examples:
        finboard transaction list --this-month
        finboard transaction list --type expense --category Groceries
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    converter = ctx.obj["converter"]
    service = TransactionService(db, owner)

    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period_flags=period_flags_from(flags)
    )

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, AccountService(db, owner), account)

    transactions = service.list_transactions(
        start_date=start, end_date=end, type=txn_type, category=category, account_id=account_id
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"{'ID':>5} | {'Date':10} | {'Type':7} | {'Category':15} | {'Amount':>14} | Description")
    click.echo("-" * 80)
    for txn in transactions:
        amount = converter.format(txn.amount, txn.currency)
        if txn.type.value == "expense":
            amount = f"-{amount}"
        click.echo(
            f"{txn.id:5d} | {txn.date} | {txn.type.value:7} | {txn.category[:15]:15} | "
            f"{amount:>14} | {txn.description or ''}"
        )


@transaction_group.command("update")
@click.argument("transaction_id", type=int)
@click.option("--type", "txn_type", type=click.Choice(["income", "expense"]), help="Transaction type")
@click.option("--date", "date_str", help="Transaction date (YYYY-MM-DD or relative like 'today')")
@click.option("--amount", help="Transaction amount (e.g., 123.45)")
@click.option("--category", help="Category name")
@click.option("--description", help="Transaction description")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: int,
    txn_type: str | None,
    date_str: str | None,
    amount: str | None,
    category: str | None,
    description: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided.

    Examples:
        finboard transaction update 1 --amount 75.00
        finboard transaction update 1 --category "Dining Out"
    """
    service = TransactionService(ctx.obj["db"], ctx.obj["owner"])

    txn_date = parse_date_or_exit(ctx, date_str) if date_str is not None else None
    txn_amount = parse_amount_or_exit(ctx, amount) if amount is not None else None

    try:
        service.update_transaction(
            transaction_id,
            type=txn_type,
            category=category,
            amount=txn_amount,
            date=txn_date,
            description=description,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int) -> None:
    """Delete a transaction."""
    service = TransactionService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
