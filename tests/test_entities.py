"""Tests for domain entities."""

import pytest
from datetime import datetime, date, UTC

from tally.domain.currency import PHP
from tally.domain.entities import Account, Transaction, TransactionStatus
from tally.domain.errors import ValidationError
from tally.domain.money import Money


class TestAccount:
    """Tests for Account entity."""

    def test_create_account(self):
        """Test creating an Account entity."""
        account = Account(id=1, name="BPI Savings", currency=PHP, created_at=datetime.now(UTC))
        assert account.id == 1
        assert account.name == "BPI Savings"
        assert account.currency == PHP

    def test_account_immutability(self):
        """Test that Account entities are immutable."""
        account = Account(id=1, name="BPI Savings", currency=PHP, created_at=datetime.now(UTC))
        with pytest.raises(Exception):  # dataclass frozen raises FrozenInstanceError
            account.name = "New Name"


class TestTransaction:
    """Tests for Transaction entity."""

    def make(self, **overrides):
        now = datetime(2025, 1, 20, tzinfo=UTC)
        fields = dict(
            id="t1",
            account_id=1,
            date=date(2025, 1, 15),
            amount=Money(-5000, PHP),
            merchant="Grocery Store",
            created_at=now,
            updated_at=now,
        )
        fields.update(overrides)
        return Transaction(**fields)

    def test_defaults(self):
        """Test optional fields."""
        txn = self.make()
        assert txn.status == TransactionStatus.PENDING
        assert txn.memo is None
        assert txn.category_id is None
        assert not txn.is_transfer
        assert not txn.is_cleared

    def test_sign_helpers(self):
        """Test expense/income classification."""
        assert self.make().is_expense
        assert self.make(amount=Money(5000, PHP)).is_income

    def test_cleared_statuses(self):
        """Test which statuses count as cleared."""
        assert self.make(status=TransactionStatus.CLEARED).is_cleared
        assert self.make(status=TransactionStatus.RECONCILED).is_cleared
        assert not self.make(status=TransactionStatus.VOID).is_cleared

    def test_transfer(self):
        """Test transfer legs."""
        assert self.make(transfer_id="pair-1").is_transfer

    @pytest.mark.parametrize("merchant", ["", "   "])
    def test_blank_merchant_rejected(self, merchant):
        """Test that a merchant is required."""
        with pytest.raises(ValidationError):
            self.make(merchant=merchant)

    def test_status_values(self):
        """Test the stored status names."""
        assert [s.value for s in TransactionStatus] == ["pending", "cleared", "reconciled", "void"]
