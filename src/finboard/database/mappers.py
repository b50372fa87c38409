"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so enum columns stored as plain
strings come back as their domain enum types.
"""

from finboard.domain import entities as domain
from finboard.database.models import (
    Account as ORMAccount,
    AssetLiability as ORMAssetLiability,
    Bill as ORMBill,
    Budget as ORMBudget,
    Loan as ORMLoan,
    LoanPayment as ORMLoanPayment,
    Transaction as ORMTransaction,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        owner=orm_account.owner,
        name=orm_account.name,
        type=orm_account.type,
        balance=orm_account.balance,
        currency=orm_account.currency,
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        owner=orm_transaction.owner,
        type=domain.TransactionType(orm_transaction.type),
        category=orm_transaction.category,
        amount=orm_transaction.amount,
        currency=orm_transaction.currency,
        date=orm_transaction.date,
        description=orm_transaction.description,
        account_id=orm_transaction.account_id,
        bill_id=orm_transaction.bill_id,
        created_at=orm_transaction.created_at,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Budget:
    """Convert SQLAlchemy Budget model to domain Budget entity."""
    return domain.Budget(
        id=orm_budget.id,
        owner=orm_budget.owner,
        category=orm_budget.category,
        limit_amount=orm_budget.limit_amount,
        currency=orm_budget.currency,
        period=domain.BudgetPeriod(orm_budget.period),
        created_at=orm_budget.created_at,
    )


def bill_to_domain(orm_bill: ORMBill) -> domain.Bill:
    """Convert SQLAlchemy Bill model to domain Bill entity."""
    return domain.Bill(
        id=orm_bill.id,
        owner=orm_bill.owner,
        name=orm_bill.name,
        amount=orm_bill.amount,
        currency=orm_bill.currency,
        category=orm_bill.category,
        due_date=orm_bill.due_date,
        frequency=domain.BillFrequency(orm_bill.frequency),
        reminder_days=orm_bill.reminder_days,
        is_active=orm_bill.is_active,
        is_paid=orm_bill.is_paid,
        paid_at=orm_bill.paid_at,
    )


def loan_to_domain(orm_loan: ORMLoan) -> domain.Loan:
    """Convert SQLAlchemy Loan model to domain Loan entity."""
    return domain.Loan(
        id=orm_loan.id,
        owner=orm_loan.owner,
        name=orm_loan.name,
        type=orm_loan.type,
        principal_amount=orm_loan.principal_amount,
        interest_rate=orm_loan.interest_rate,
        tenure_months=orm_loan.tenure_months,
        start_date=orm_loan.start_date,
        due_day=orm_loan.due_day,
        emi_amount=orm_loan.emi_amount,
        outstanding_balance=orm_loan.outstanding_balance,
        status=domain.LoanStatus(orm_loan.status),
        currency=orm_loan.currency,
        notes=orm_loan.notes,
    )


def loan_payment_to_domain(orm_payment: ORMLoanPayment) -> domain.LoanPayment:
    """Convert SQLAlchemy LoanPayment model to domain LoanPayment entity."""
    return domain.LoanPayment(
        id=orm_payment.id,
        owner=orm_payment.owner,
        loan_id=orm_payment.loan_id,
        payment_date=orm_payment.payment_date,
        amount=orm_payment.amount,
        principal_paid=orm_payment.principal_paid,
        interest_paid=orm_payment.interest_paid,
        notes=orm_payment.notes,
    )


def asset_liability_to_domain(orm_entry: ORMAssetLiability) -> domain.AssetLiability:
    """Convert SQLAlchemy AssetLiability model to domain AssetLiability entity."""
    return domain.AssetLiability(
        id=orm_entry.id,
        owner=orm_entry.owner,
        type=domain.EntryType(orm_entry.type),
        name=orm_entry.name,
        value=orm_entry.value,
        currency=orm_entry.currency,
        category=orm_entry.category,
        date=orm_entry.date,
    )
