"""Account management commands."""

import click
from finboard.domain.account import AccountService
from finboard.domain.errors import DomainError
from finboard.domain.validation import ACCOUNT_TYPES
from finboard.cli.account_resolution import resolve_account_or_exit
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit


@click.group()
def account_group():
    """Manage accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--type", "account_type", type=click.Choice(ACCOUNT_TYPES), default="checking", show_default=True)
@click.option("--balance", default="0", help="Opening balance (e.g., 1,250.00)")
@click.option("--currency", default="USD", show_default=True, help="Currency the balance is held in")
@click.pass_context
def create_account(ctx, name: str, account_type: str, balance: str, currency: str):
    """Create a new account.

    Examples:
        finboard account create "Everyday" --balance 1200
        finboard account create "Rainy Day" --type savings --currency EUR
    """
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    opening = parse_amount_or_exit(ctx, balance)

    try:
        account_id = service.create_account(name=name, type=account_type, balance=opening, currency=currency)
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.pass_context
def list_accounts(ctx):
    """List all accounts with balances in the display currency."""
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    accounts = service.list_accounts()
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        balance = converter.format_signed(acc.balance, acc.currency)
        click.echo(f"ID: {acc.id:3d} | {acc.name:20s} | {acc.type:10s} | {balance:>18s}")
    click.echo("-" * 70)
    click.echo(f"Total: {converter.format_signed(service.total_balance(converter), converter.display_currency)}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New account name")
@click.option("--balance", help="New balance")
@click.pass_context
def update_account(ctx, account: str, name: str | None, balance: str | None) -> None:
    """Rename an account or set its balance.

    ACCOUNT can be an account name or ID.

    Examples:
        finboard account update "Everyday" --name "Checking"
        finboard account update 1 --balance 980.50
    """
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    account_id = resolve_account_or_exit(ctx, service, account)

    if name is None and balance is None:
        click.echo("Error: Nothing to update. Provide --name and/or --balance.", err=True)
        ctx.exit(1)

    new_balance = parse_amount_or_exit(ctx, balance) if balance is not None else None

    try:
        service.update_account(account_id, name=name, balance=new_balance)
        click.echo(f"Updated account {account_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip the confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool) -> None:
    """Delete an account.

    ACCOUNT can be an account name or ID. The account can only be deleted
    if no transactions reference it.
    """
    service = AccountService(ctx.obj["db"], ctx.obj["owner"])
    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.require_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
