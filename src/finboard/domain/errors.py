"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist for the owner."""


class ConflictError(DomainError):
    """Domain conflict, such as a payment against a closed loan."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class StorageError(DomainError):
    """The data store rejected or failed a read or write."""


def entity_not_found(kind: str, entity_id: int) -> str:
    """Return message for a missing entity of the given kind."""
    return f"{kind.capitalize()} {entity_id} not found"


def unsupported_currency(code: str) -> str:
    """Return message for a currency outside the supported set."""
    return f"Unsupported currency '{code}'"


def loan_not_payable(loan_id: int, status: str) -> str:
    """Return message when a payment targets a loan that is not active."""
    return f"Loan {loan_id} is {status}; payments are only accepted for active loans"


def account_delete_blocked(account_id: int, transaction_count: int) -> str:
    """Return message when account has dependent transactions."""
    return (
        f"Cannot delete account {account_id}: it has "
        f"{transaction_count} transaction{'s' if transaction_count != 1 else ''}. "
        "Please reassign or delete them first."
    )


def loan_delete_blocked(loan_id: int, payment_count: int) -> str:
    """Return message when a loan still has recorded payments."""
    return (
        f"Cannot delete loan {loan_id}: it has "
        f"{payment_count} recorded payment{'s' if payment_count != 1 else ''}"
    )
