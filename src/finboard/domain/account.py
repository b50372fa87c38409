"""Account domain service."""

from decimal import Decimal
from typing import Optional

from finboard.database.base import Database
from finboard.domain.currency import CurrencyConverter
from finboard.domain.entities import Account as AccountEntity
from finboard.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    account_delete_blocked,
    entity_not_found,
)
from finboard.domain.validation import AccountInput, validate


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database, owner: str):
        """Initialize account service.

        Args:
            db: Database instance
            owner: User whose accounts this service manages
        """
        self.db = db
        self.owner = owner

    def create_account(
        self,
        name: str,
        type: str,
        balance: Decimal = Decimal("0"),
        currency: str = "USD",
    ) -> int:
        """Create a new account.

        Args:
            name: Account name
            type: One of checking, savings, credit, investment
            balance: Opening balance, may be negative
            currency: Currency the balance is held in

        Returns:
            Account ID

        Raises:
            ValidationError: If any field is out of bounds
            ConflictError: If account name already exists
        """
        data = validate(AccountInput, name=name, type=type, balance=balance, currency=currency)

        for acc in self.db.list_accounts(self.owner):
            if acc.name == data.name:
                raise ConflictError(f"Account with name '{data.name}' already exists")

        return self.db.create_account(
            owner=self.owner,
            name=data.name,
            type=data.type,
            balance=data.balance,
            currency=data.currency,
        )

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(self.owner, account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        account = self.get_account(account_id)
        if account is None:
            raise NotFoundError(entity_not_found("account", account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts(self.owner)

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        balance: Optional[Decimal] = None,
    ) -> None:
        """Rename an account or set its balance.

        Raises:
            NotFoundError: If account not found
            ConflictError: If the new name is taken
        """
        account = self.require_account(account_id)
        data = validate(
            AccountInput,
            name=name if name is not None else account.name,
            type=account.type,
            balance=balance if balance is not None else account.balance,
            currency=account.currency,
        )

        for acc in self.db.list_accounts(self.owner):
            if acc.id != account_id and acc.name == data.name:
                raise ConflictError(f"Account with name '{data.name}' already exists")

        self.db.update_account(self.owner, account_id, name=data.name, balance=data.balance)

    def delete_account(self, account_id: int) -> None:
        """Delete an account.

        Raises:
            NotFoundError: If account not found
            DependencyError: If transactions still reference it
        """
        self.require_account(account_id)

        transaction_count = self.db.get_account_transaction_count(self.owner, account_id)
        if transaction_count > 0:
            raise DependencyError(account_delete_blocked(account_id, transaction_count))

        self.db.delete_account(self.owner, account_id)

    def total_balance(self, converter: CurrencyConverter) -> Decimal:
        """Sum of all account balances in the display currency."""
        return sum(
            (converter.convert(acc.balance, acc.currency) for acc in self.list_accounts()),
            Decimal("0"),
        )
