"""Loan commands."""

import click
from finboard.domain.amortization import compute_emi
from finboard.domain.entities import LoanStatus
from finboard.domain.errors import DomainError
from finboard.domain.loan import LoanService
from finboard.domain.validation import LOAN_TYPES
from finboard.cli.error_handling import handle_domain_error, parse_amount_or_exit, parse_date_or_exit


@click.group()
def loan_group():
    """Manage loans and their payments."""
    pass


@loan_group.command("create")
@click.argument("name")
@click.option("--type", "loan_type", type=click.Choice(LOAN_TYPES), default="personal_loan", show_default=True)
@click.option("--principal", required=True, help="Amount borrowed")
@click.option("--rate", required=True, help="Annual interest rate in percent (e.g., 8.5)")
@click.option("--tenure", type=int, required=True, help="Term in months")
@click.option("--start-date", default="today", show_default=True, help="Start date")
@click.option("--due-day", type=int, default=1, show_default=True, help="Day of month payments are due")
@click.option("--currency", default="USD", show_default=True, help="Currency of the loan")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def create_loan(
    ctx,
    name: str,
    loan_type: str,
    principal: str,
    rate: str,
    tenure: int,
    start_date: str,
    due_day: int,
    currency: str,
    notes: str | None,
):
    """Create a loan. The monthly installment is worked out once, here.

    Examples:
        finboard loan create "Car" --type auto_loan --principal 100000 --rate 8.5 --tenure 60
    """
    service = LoanService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    principal_amount = parse_amount_or_exit(ctx, principal)
    interest_rate = parse_amount_or_exit(ctx, rate)
    start = parse_date_or_exit(ctx, start_date, label="start date")

    try:
        loan_id = service.create_loan(
            name=name,
            type=loan_type,
            principal_amount=principal_amount,
            interest_rate=interest_rate,
            tenure_months=tenure,
            start_date=start,
            due_day=due_day,
            currency=currency,
            notes=notes,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    loan = service.require_loan(loan_id)
    click.echo(f"Created loan '{name}' (ID: {loan_id})")
    click.echo(f"  Monthly installment: {converter.format(loan.emi_amount, loan.currency)}")


@loan_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in LoanStatus]), help="Only loans with this status")
@click.pass_context
def list_loans(ctx, status: str | None):
    """List loans."""
    service = LoanService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    loans = service.list_loans(status=LoanStatus(status) if status else None)
    if not loans:
        click.echo("No loans found.")
        return

    click.echo("\nLoans:")
    click.echo("-" * 90)
    for loan in loans:
        outstanding = converter.format(loan.outstanding_balance, loan.currency)
        emi = converter.format(loan.emi_amount, loan.currency)
        click.echo(
            f"ID: {loan.id:3d} | {loan.name:18s} | {loan.status.value:9s} | "
            f"outstanding {outstanding:>14s} | EMI {emi:>12s} | {loan.interest_rate}%"
        )


@loan_group.command("emi")
@click.option("--principal", required=True, help="Amount borrowed")
@click.option("--rate", required=True, help="Annual interest rate in percent")
@click.option("--tenure", type=int, required=True, help="Term in months")
@click.option("--currency", default="USD", show_default=True, help="Currency of the principal")
@click.pass_context
def emi_calculator(ctx, principal: str, rate: str, tenure: int, currency: str):
    """Work out the monthly installment without creating a loan.

    Examples:
        finboard loan emi --principal 100000 --rate 12 --tenure 60
    """
    converter = ctx.obj["converter"]
    principal_amount = parse_amount_or_exit(ctx, principal)
    interest_rate = parse_amount_or_exit(ctx, rate)

    try:
        result = compute_emi(principal_amount, interest_rate, tenure)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Monthly installment: {converter.format(result.emi, currency)}")
    click.echo(f"Total interest:      {converter.format(result.total_interest, currency)}")
    click.echo(f"Total payment:       {converter.format(result.total_payment, currency)}")


@loan_group.command("pay")
@click.argument("loan_id", type=int)
@click.option("--amount", required=True, help="Payment amount")
@click.option("--date", "date_str", default="today", show_default=True, help="Payment date")
@click.option("--notes", help="Free-form notes")
@click.pass_context
def pay_loan(ctx, loan_id: int, amount: str, date_str: str, notes: str | None):
    """Record a payment against an active loan.

    One month of interest on the outstanding balance is paid first; the
    rest reduces the balance. The loan closes when the balance reaches zero.
    """
    service = LoanService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]
    payment_amount = parse_amount_or_exit(ctx, amount)
    payment_date = parse_date_or_exit(ctx, date_str, label="payment date")

    try:
        payment = service.record_payment(loan_id, amount=payment_amount, payment_date=payment_date, notes=notes)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    loan = service.require_loan(loan_id)
    click.echo(f"Recorded payment {payment.id} on loan '{loan.name}'")
    click.echo(f"  Interest:  {converter.format(payment.interest_paid, loan.currency)}")
    click.echo(f"  Principal: {converter.format(payment.principal_paid, loan.currency)}")
    click.echo(f"  Outstanding: {converter.format(loan.outstanding_balance, loan.currency)}")
    if loan.status == LoanStatus.CLOSED:
        click.echo("  Loan closed.")


@loan_group.command("payments")
@click.argument("loan_id", type=int)
@click.pass_context
def list_payments(ctx, loan_id: int):
    """List payments recorded for a loan, newest first."""
    service = LoanService(ctx.obj["db"], ctx.obj["owner"])
    converter = ctx.obj["converter"]

    try:
        loan = service.require_loan(loan_id)
        payments = service.list_payments(loan_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    if not payments:
        click.echo("No payments recorded.")
        return

    for payment in payments:
        click.echo(
            f"{payment.payment_date} | {converter.format(payment.amount, loan.currency):>12s} | "
            f"principal {converter.format(payment.principal_paid, loan.currency):>12s} | "
            f"interest {converter.format(payment.interest_paid, loan.currency):>10s}"
        )


@loan_group.command("update")
@click.argument("loan_id", type=int)
@click.option("--name", help="New name")
@click.option("--rate", help="New annual interest rate (the installment is not recomputed)")
@click.option("--due-day", type=int, help="New payment day of month")
@click.option("--notes", help="New notes")
@click.option("--status", type=click.Choice([s.value for s in LoanStatus]), help="New status")
@click.pass_context
def update_loan(
    ctx,
    loan_id: int,
    name: str | None,
    rate: str | None,
    due_day: int | None,
    notes: str | None,
    status: str | None,
):
    """Edit a loan's descriptive fields."""
    service = LoanService(ctx.obj["db"], ctx.obj["owner"])
    interest_rate = parse_amount_or_exit(ctx, rate) if rate is not None else None

    try:
        service.update_loan(loan_id, name=name, interest_rate=interest_rate, due_day=due_day, notes=notes, status=status)
        click.echo(f"Updated loan {loan_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@loan_group.command("delete")
@click.argument("loan_id", type=int)
@click.pass_context
def delete_loan(ctx, loan_id: int):
    """Delete a loan that has no recorded payments."""
    service = LoanService(ctx.obj["db"], ctx.obj["owner"])
    try:
        service.delete_loan(loan_id)
        click.echo(f"Deleted loan {loan_id}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register loan commands with main CLI."""
    cli.add_command(loan_group, name="loan")
