"""Account domain service."""

from typing import Optional
from tally.database.base import Database
from tally.domain.currency import SUPPORTED_CURRENCIES, Currency
from tally.domain.entities import Account as AccountEntity
from tally.domain.errors import (
    ConflictError,
    InvalidCurrencyError,
    NotFoundError,
    ValidationError,
    account_name_taken,
    account_not_found,
)


class AccountService:
    """Service for managing accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(self, name: str, currency_code: str) -> int:
        """Create a new account.

        Args:
            name: Account name
            currency_code: ISO code of the account currency, e.g. "PHP"

        Returns:
            Account ID

        Raises:
            ValidationError: If the name is blank
            InvalidCurrencyError: If the currency is not supported
            ConflictError: If account name already exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Account name cannot be blank")

        currency = Currency.from_code(currency_code)
        if currency is None:
            supported = ", ".join(c.code for c in SUPPORTED_CURRENCIES)
            raise InvalidCurrencyError(
                f"Unsupported currency '{currency_code}'. Supported: {supported}"
            )

        # Check if account with same name exists
        for acc in self.db.list_accounts():
            if acc.name == name:
                raise ConflictError(account_name_taken(name))

        return self.db.create_account(name=name, currency_code=currency.code)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID.

        Args:
            account_id: Account ID

        Returns:
            Account entity or None if not found
        """
        return self.db.get_account(account_id)

    def require_account(self, account_id: int) -> AccountEntity:
        """Get account by ID, raising NotFoundError if it does not exist."""
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        return account

    def list_accounts(self) -> list[AccountEntity]:
        """List all accounts.

        Returns:
            List of account entities
        """
        return self.db.list_accounts()
