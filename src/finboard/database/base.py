"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain services
from finboard.domain.entities import (
    Account,
    AssetLiability,
    Bill,
    BillFrequency,
    Budget,
    BudgetPeriod,
    EntryType,
    Loan,
    LoanPayment,
    LoanStatus,
    Transaction,
    TransactionType,
)


class Database(ABC):
    """Abstract database interface for finboard.

    Every read and write is scoped to an owner; rows belonging to another
    owner behave as if they did not exist.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, owner: str, name: str, type: str, balance: Decimal, currency: str
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, owner: str, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self, owner: str) -> list[Account]:
        """List all accounts, ordered by name."""
        pass

    @abstractmethod
    def update_account(
        self,
        owner: str,
        account_id: int,
        name: Optional[str] = None,
        balance: Optional[Decimal] = None,
    ) -> None:
        """Update account name and/or balance."""
        pass

    @abstractmethod
    def delete_account(self, owner: str, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def get_account_transaction_count(self, owner: str, account_id: int) -> int:
        """Count transactions linked to an account."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        owner: str,
        type: TransactionType,
        category: str,
        amount: Decimal,
        currency: str,
        date: date,
        description: Optional[str] = None,
        account_id: Optional[int] = None,
        bill_id: Optional[int] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, owner: str, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        owner: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            owner: Owner of the transactions
            start_date: Optional inclusive start date filter
            end_date: Optional inclusive end date filter
            type: Optional income/expense filter
            category: Optional exact category filter
            account_id: Optional account ID filter
        """
        pass

    @abstractmethod
    def update_transaction(
        self,
        owner: str,
        transaction_id: int,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update transaction fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_transaction(self, owner: str, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    # Budget operations
    @abstractmethod
    def create_budget(
        self,
        owner: str,
        category: str,
        limit_amount: Decimal,
        period: BudgetPeriod,
        currency: str,
    ) -> int:
        """Create a budget. Returns budget ID."""
        pass

    @abstractmethod
    def get_budget(self, owner: str, budget_id: int) -> Optional[Budget]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def list_budgets(self, owner: str, period: Optional[BudgetPeriod] = None) -> list[Budget]:
        """List budgets, newest first, optionally for one period."""
        pass

    @abstractmethod
    def update_budget(
        self,
        owner: str,
        budget_id: int,
        limit_amount: Optional[Decimal] = None,
        period: Optional[BudgetPeriod] = None,
    ) -> None:
        """Update budget limit and/or period."""
        pass

    @abstractmethod
    def delete_budget(self, owner: str, budget_id: int) -> None:
        """Delete a budget."""
        pass

    # Bill operations
    @abstractmethod
    def create_bill(
        self,
        owner: str,
        name: str,
        amount: Decimal,
        currency: str,
        category: str,
        due_date: date,
        frequency: BillFrequency,
        reminder_days: int,
    ) -> int:
        """Create an active, unpaid bill. Returns bill ID."""
        pass

    @abstractmethod
    def get_bill(self, owner: str, bill_id: int) -> Optional[Bill]:
        """Get bill by ID."""
        pass

    @abstractmethod
    def list_bills(self, owner: str, active_only: bool = True) -> list[Bill]:
        """List bills ordered by due date."""
        pass

    @abstractmethod
    def list_paid_bills(
        self,
        owner: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[Bill]:
        """List bills whose ``paid_at`` falls within the inclusive date range."""
        pass

    @abstractmethod
    def update_bill(
        self,
        owner: str,
        bill_id: int,
        name: Optional[str] = None,
        amount: Optional[Decimal] = None,
        category: Optional[str] = None,
        due_date: Optional[date] = None,
        frequency: Optional[BillFrequency] = None,
        reminder_days: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update bill fields; None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_bill(self, owner: str, bill_id: int) -> None:
        """Delete a bill."""
        pass

    @abstractmethod
    def mark_bill_paid(
        self,
        owner: str,
        bill_id: int,
        next_due_date: date,
        paid_at: datetime,
        transaction_date: date,
    ) -> int:
        """Reschedule a paid bill and insert its expense transaction.

        Both changes are committed together or not at all. Returns the new
        transaction ID.
        """
        pass

    # Loan operations
    @abstractmethod
    def create_loan(
        self,
        owner: str,
        name: str,
        type: str,
        principal_amount: Decimal,
        interest_rate: Decimal,
        tenure_months: int,
        start_date: date,
        due_day: int,
        emi_amount: Decimal,
        outstanding_balance: Decimal,
        currency: str,
        notes: Optional[str] = None,
    ) -> int:
        """Create an active loan. Returns loan ID."""
        pass

    @abstractmethod
    def get_loan(self, owner: str, loan_id: int) -> Optional[Loan]:
        """Get loan by ID."""
        pass

    @abstractmethod
    def list_loans(self, owner: str, status: Optional[LoanStatus] = None) -> list[Loan]:
        """List loans, optionally with one status."""
        pass

    @abstractmethod
    def update_loan(
        self,
        owner: str,
        loan_id: int,
        name: Optional[str] = None,
        interest_rate: Optional[Decimal] = None,
        due_day: Optional[int] = None,
        notes: Optional[str] = None,
        status: Optional[LoanStatus] = None,
    ) -> None:
        """Update descriptive loan fields. Never touches EMI or balance."""
        pass

    @abstractmethod
    def delete_loan(self, owner: str, loan_id: int) -> None:
        """Delete a loan."""
        pass

    @abstractmethod
    def list_loan_payments(
        self,
        owner: str,
        loan_id: Optional[int] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> list[LoanPayment]:
        """List loan payments, newest first."""
        pass

    @abstractmethod
    def record_loan_payment(
        self,
        owner: str,
        loan_id: int,
        payment_date: date,
        amount: Decimal,
        principal_paid: Decimal,
        interest_paid: Decimal,
        notes: Optional[str],
        new_balance: Decimal,
        new_status: LoanStatus,
    ) -> LoanPayment:
        """Insert a payment and update the loan balance and status.

        Both changes are committed together or not at all.
        """
        pass

    # Asset and liability operations
    @abstractmethod
    def create_asset_liability(
        self,
        owner: str,
        type: EntryType,
        name: str,
        value: Decimal,
        currency: str,
        category: str,
        date: date,
    ) -> int:
        """Create an asset or liability entry. Returns entry ID."""
        pass

    @abstractmethod
    def get_asset_liability(self, owner: str, entry_id: int) -> Optional[AssetLiability]:
        """Get asset or liability entry by ID."""
        pass

    @abstractmethod
    def list_assets_liabilities(self, owner: str) -> list[AssetLiability]:
        """List entries, newest first."""
        pass

    @abstractmethod
    def update_asset_liability(
        self,
        owner: str,
        entry_id: int,
        name: Optional[str] = None,
        value: Optional[Decimal] = None,
        category: Optional[str] = None,
        date: Optional[date] = None,
    ) -> None:
        """Update an entry's name, value, category or date."""
        pass

    @abstractmethod
    def delete_asset_liability(self, owner: str, entry_id: int) -> None:
        """Delete an asset or liability entry."""
        pass
