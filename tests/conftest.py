"""Shared pytest fixtures for finboard tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal

import pytest
from click.testing import CliRunner

from finboard.database.factories import create_sqlite_database
from finboard.domain.account import AccountService
from finboard.domain.bill import BillService
from finboard.domain.budget import BudgetService
from finboard.domain.currency import CurrencyConverter
from finboard.domain.loan import LoanService
from finboard.domain.net_worth import NetWorthService
from finboard.domain.report import ReportService
from finboard.domain.transaction import TransactionService

OWNER = "alice"


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def usd():
    return CurrencyConverter("USD")


@pytest.fixture
def account_service(temp_db):
    return AccountService(temp_db, OWNER)


@pytest.fixture
def transaction_service(temp_db):
    return TransactionService(temp_db, OWNER)


@pytest.fixture
def budget_service(temp_db):
    return BudgetService(temp_db, OWNER)


@pytest.fixture
def bill_service(temp_db):
    return BillService(temp_db, OWNER)


@pytest.fixture
def loan_service(temp_db):
    return LoanService(temp_db, OWNER)


@pytest.fixture
def net_worth_service(temp_db):
    return NetWorthService(temp_db, OWNER)


@pytest.fixture
def report_service(temp_db):
    return ReportService(temp_db, OWNER)


@pytest.fixture
def sample_account(account_service):
    """Create a sample account for testing."""
    account_id = account_service.create_account(name="Everyday", type="checking", balance=Decimal("1200"))
    return account_service.get_account(account_id)


@pytest.fixture
def january_transactions(transaction_service):
    """A month of income and expenses in January 2024."""
    rows = [
        ("income", "Salary", "5000", date(2024, 1, 1), "Payroll"),
        ("expense", "Groceries", "120.50", date(2024, 1, 3), "Market"),
        ("expense", "Groceries", "80", date(2024, 1, 17), "Market"),
        ("expense", "Dining Out", "45", date(2024, 1, 9), "Pizza"),
        ("expense", "Transportation", "60", date(2024, 1, 22), "Fuel"),
        ("expense", "Entertainment", "30", date(2024, 1, 29), "Cinema"),
    ]
    return [
        transaction_service.create_transaction(
            type=txn_type, category=category, amount=Decimal(amount), date=day, description=description
        )
        for txn_type, category, amount, day, description in rows
    ]
