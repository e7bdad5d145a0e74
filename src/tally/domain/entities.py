"""Domain model entities for tally.

These are pure data classes representing business concepts, independent of
database schema. Amounts are always Money values, never floats or Decimals.
"""

from dataclasses import dataclass
from datetime import datetime, date
from enum import Enum
from typing import Optional

from tally.domain.currency import Currency
from tally.domain.errors import ValidationError
from tally.domain.money import Money


class TransactionStatus(Enum):
    """Lifecycle status of a persisted transaction."""

    PENDING = "pending"
    CLEARED = "cleared"
    RECONCILED = "reconciled"
    VOID = "void"


@dataclass(frozen=True)
class Account:
    """Bank account domain entity. Every account holds one currency."""

    id: int
    name: str
    currency: Currency
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    Negative amounts are expenses, positive amounts income. The two legs of a
    transfer share a ``transfer_id``.
    """

    id: str
    account_id: int
    date: date
    amount: Money
    merchant: str
    created_at: datetime
    updated_at: datetime
    memo: Optional[str] = None
    category_id: Optional[int] = None
    status: TransactionStatus = TransactionStatus.PENDING
    cleared_at: Optional[datetime] = None
    transfer_id: Optional[str] = None

    def __post_init__(self):
        if not self.merchant or not self.merchant.strip():
            raise ValidationError("Merchant cannot be blank")

    @property
    def is_expense(self) -> bool:
        return self.amount.is_expense

    @property
    def is_income(self) -> bool:
        return self.amount.is_income

    @property
    def is_transfer(self) -> bool:
        return self.transfer_id is not None

    @property
    def is_cleared(self) -> bool:
        return self.status in (TransactionStatus.CLEARED, TransactionStatus.RECONCILED)
