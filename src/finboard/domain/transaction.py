"""Transaction domain service."""

from typing import Optional
from datetime import date
from decimal import Decimal

from finboard.database.base import Database
from finboard.domain.entities import Transaction as TransactionEntity, TransactionType
from finboard.domain.errors import NotFoundError, entity_not_found
from finboard.domain.validation import TransactionInput, validate


class TransactionService:
    """Service for managing transactions."""

    def __init__(self, db: Database, owner: str):
        """Initialize transaction service.

        Args:
            db: Database instance
            owner: User whose transactions this service manages
        """
        self.db = db
        self.owner = owner

    def create_transaction(
        self,
        type: str,
        category: str,
        amount: Decimal,
        date: date,
        description: str,
        currency: str = "USD",
        account_id: Optional[int] = None,
    ) -> int:
        """Create a transaction.

        Args:
            type: "income" or "expense"
            category: Category name
            amount: Positive amount; the type carries the direction
            date: Transaction date
            description: Short description
            currency: Currency the amount was paid in
            account_id: Optional linked account

        Returns:
            Transaction ID

        Raises:
            ValidationError: If any field is out of bounds
            NotFoundError: If the linked account doesn't exist
        """
        data = validate(
            TransactionInput,
            type=type,
            category=category,
            amount=amount,
            date=date,
            description=description,
            currency=currency,
            account_id=account_id,
        )

        # Verify account if provided
        if data.account_id is not None and self.db.get_account(self.owner, data.account_id) is None:
            raise NotFoundError(entity_not_found("account", data.account_id))

        return self.db.create_transaction(
            owner=self.owner,
            type=data.type,
            category=data.category,
            amount=data.amount,
            currency=data.currency,
            date=data.date,
            description=data.description,
            account_id=data.account_id,
        )

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(self.owner, transaction_id)

    def require_transaction(self, transaction_id: int) -> TransactionEntity:
        txn = self.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(entity_not_found("transaction", transaction_id))
        return txn

    def update_transaction(
        self,
        transaction_id: int,
        type: Optional[str] = None,
        category: Optional[str] = None,
        amount: Optional[Decimal] = None,
        date: Optional[date] = None,
        description: Optional[str] = None,
    ) -> None:
        """Update transaction fields.

        Arguments left as None keep their current value.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If the result is out of bounds
        """
        txn = self.require_transaction(transaction_id)
        data = validate(
            TransactionInput,
            type=type if type is not None else txn.type,
            category=category if category is not None else txn.category,
            amount=amount if amount is not None else txn.amount,
            date=date if date is not None else txn.date,
            description=description if description is not None else (txn.description or "-"),
            currency=txn.currency,
            account_id=txn.account_id,
        )

        self.db.update_transaction(
            self.owner,
            transaction_id,
            type=data.type,
            category=data.category,
            amount=data.amount,
            date=data.date,
            description=data.description,
        )

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(self.owner, transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        type: Optional[TransactionType] = None,
        category: Optional[str] = None,
        account_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            type: Optional income/expense filter
            category: Optional exact category filter
            account_id: Optional account ID filter

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            self.owner,
            start_date=start_date,
            end_date=end_date,
            type=TransactionType(type) if type is not None else None,
            category=category,
            account_id=account_id,
        )
