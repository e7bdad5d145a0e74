"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional

# Import entities directly to avoid circular import through domain/__init__.py
from tally.domain.entities import Account, Transaction


class Database(ABC):
    """Abstract database interface for tally."""

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
    def create_account(self, name: str, currency_code: str) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def list_accounts(self) -> list[Account]:
        """List all accounts."""
        pass

    # Transaction operations
    @abstractmethod
    def get_transactions_by_account(self, account_id: int) -> list[Transaction]:
        """Get every stored transaction of an account, oldest first."""
        pass

    @abstractmethod
    def save_transactions(self, transactions: list[Transaction]) -> None:
        """Store transactions in one unit of work.

        Either all of them are stored or none; the underlying error is
        re-raised unchanged on failure.
        """
        pass

    @abstractmethod
    def count_transactions(self, account_id: int) -> int:
        """Count stored transactions of an account."""
        pass
