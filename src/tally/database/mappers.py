"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: the ORM stores a currency code and
an integer minor unit count, the domain works with Currency and Money.
"""

from tally.domain import entities as domain
from tally.domain.currency import Currency
from tally.domain.errors import InvalidCurrencyError
from tally.domain.money import Money
from tally.database.models import (
    Account as ORMAccount,
    Transaction as ORMTransaction,
)


def currency_from_code(code: str) -> Currency:
    """Resolve a stored currency code."""
    currency = Currency.from_code(code)
    if currency is None:
        raise InvalidCurrencyError(f"Unsupported currency code '{code}'")
    return currency


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        name=orm_account.name,
        currency=currency_from_code(orm_account.currency_code),
        created_at=orm_account.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        amount=Money(
            orm_transaction.amount_minor_units,
            currency_from_code(orm_transaction.currency_code),
        ),
        merchant=orm_transaction.merchant,
        memo=orm_transaction.memo,
        category_id=orm_transaction.category_id,
        status=domain.TransactionStatus(orm_transaction.status),
        cleared_at=orm_transaction.cleared_at,
        transfer_id=orm_transaction.transfer_id,
        created_at=orm_transaction.created_at,
        updated_at=orm_transaction.updated_at,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    """Convert domain Transaction entity to a new SQLAlchemy Transaction model."""
    return ORMTransaction(
        id=transaction.id,
        account_id=transaction.account_id,
        date=transaction.date,
        amount_minor_units=transaction.amount.minor_units,
        currency_code=transaction.amount.currency.code,
        merchant=transaction.merchant,
        memo=transaction.memo,
        category_id=transaction.category_id,
        status=transaction.status.value,
        cleared_at=transaction.cleared_at,
        transfer_id=transaction.transfer_id,
        created_at=transaction.created_at,
        updated_at=transaction.updated_at,
    )
