"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class InvalidCurrencyError(ValidationError):
    """Currency constructed with an invalid code or minor unit count."""


class CurrencyMismatchError(DomainError):
    """Operation mixed two amounts of different currencies."""


class ArithmeticOverflowError(DomainError, ArithmeticError):
    """Result does not fit in a signed 64-bit minor unit count."""


class DivisionByZeroError(DomainError, ZeroDivisionError):
    """Money divided by zero."""


class RowParseError(ValidationError):
    """A single CSV row could not be turned into a transaction."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def currency_mismatch(operation: str, left_code: str, right_code: str) -> str:
    """Return message for an operation across two currencies."""
    return f"Cannot {operation} different currencies: {left_code} and {right_code}"


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_name_taken(name: str) -> str:
    """Return message for duplicate account name."""
    return f"Account with name '{name}' already exists"
