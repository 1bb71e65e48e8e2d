"""Shared domain error messages and error types."""

from decimal import Decimal


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


class ProductNotFoundError(NotFoundError):
    """A transaction names a product missing from the catalog."""


class InsufficientStockError(ValidationError):
    """A sale asks for more than the product has on hand."""


class FormatError(ValidationError):
    """Malformed import bundle or delimited text."""


class PersistenceError(DomainError):
    """A store write failed part way through an operation."""


def ledger_not_found(ledger_id: str) -> str:
    """Return message for missing ledger."""
    return f"Ledger '{ledger_id}' not found"


def customer_not_found(customer_id: str) -> str:
    """Return message for missing customer."""
    return f"Customer '{customer_id}' not found"


def product_not_found(name: str) -> str:
    """Return message for a product name missing from the catalog."""
    return f"Product '{name}' not found"


def product_id_not_found(product_id: str) -> str:
    """Return message for missing product by ID."""
    return f"Product '{product_id}' not found"


def transaction_not_found(transaction_id: str) -> str:
    """Return message for missing transaction."""
    return f"Transaction '{transaction_id}' not found"


def duplicate_name(kind: str, name: str) -> str:
    """Return message for a case-insensitive name collision."""
    return f"{kind} with name '{name}' already exists"


def insufficient_stock(name: str, available: Decimal, requested: Decimal) -> str:
    """Return message when a sale exceeds the stock on hand."""
    return (
        f"Not enough stock for '{name}': available {available}, "
        f"requested {requested}"
    )


def customer_delete_blocked(name: str, transaction_count: int) -> str:
    """Return message when a customer still has transactions."""
    return (
        f"Cannot delete customer '{name}': it has {transaction_count} "
        f"transaction{'s' if transaction_count != 1 else ''}. "
        "Confirm cascading deletion to remove them as well."
    )


def persist_failed(record_set: str, reason: object) -> str:
    """Return message for a failed store write."""
    return f"Failed to save {record_set}: {reason}"
