"""Main CLI entry point."""

import click
import structlog

from finboard.database.factories import create_database
from finboard.domain.currency import DEFAULT_CURRENCY, CurrencyConverter
from finboard.domain.errors import DomainError
from finboard.logging_config import configure_logging
from finboard.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from finboard.cli.commands import (
    account,
    add,
    bill,
    budget,
    loan,
    networth,
    report,
    transaction,
)

logger = structlog.get_logger(__name__)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINBOARD_DB_PATH environment variable)",
    envvar="FINBOARD_DB_PATH",
)
@click.option(
    "--db-url",
    envvar="FINBOARD_DATABASE_URL",
    help="SQLAlchemy database URL; takes precedence over --db-path",
)
@click.option(
    "--user",
    "owner",
    default="default",
    show_default=True,
    envvar="FINBOARD_USER",
    help="User whose records are read and written",
)
@click.option(
    "--currency",
    default=DEFAULT_CURRENCY,
    show_default=True,
    envvar="FINBOARD_CURRENCY",
    help="Display currency for amounts (e.g. USD, EUR, INR)",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging on stderr")
@click.pass_context
def cli(ctx, db_path: str | None, db_url: str | None, owner: str, currency: str, verbose: bool):
    """Finboard - Personal finance tracking.

    Track income and expenses, budgets, recurring bills, loans and net
    worth, and report on them in the currency of your choice.
    """
    ctx.ensure_object(dict)
    configure_logging(verbose=verbose)

    try:
        converter = CurrencyConverter(display_currency=currency)
    except DomainError as e:
        handle_domain_error(ctx, e)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(database_url=db_url, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.call_on_close(db.disconnect)
        ctx.obj["db"] = db
        ctx.obj["owner"] = owner
        ctx.obj["converter"] = converter
        logger.debug("session_started", owner=owner, currency=converter.display_currency)


# Register all commands
account.register_commands(cli)
transaction.register_commands(cli)
add.register_commands(cli)
budget.register_commands(cli)
bill.register_commands(cli)
loan.register_commands(cli)
networth.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
