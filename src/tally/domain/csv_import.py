"""CSV import domain service."""

import logging
import uuid
from datetime import datetime, UTC
from typing import Optional

from tally.database.base import Database
from tally.domain.csv_mapping import AVAILABLE_FORMATS, ColumnMapping
from tally.domain.csv_models import (
    ImportPreview,
    ImportResult,
    ImportTransactionPreview,
    ParsedTransaction,
    RowError,
)
from tally.domain.csv_parser import CSVTransactionParser
from tally.domain.currency import Currency
from tally.domain.duplicate_detector import DuplicateDetector
from tally.domain.entities import Account, Transaction, TransactionStatus
from tally.domain.errors import CurrencyMismatchError, currency_mismatch

logger = logging.getLogger(__name__)


class CSVImportService:
    """Service for importing bank statement CSV text into an account.

    Each run reads the account's stored transactions once (for duplicate
    detection) and writes the chosen rows with a single bulk save. Errors
    raised by the database propagate unchanged.
    """

    def __init__(
        self,
        db: Database,
        parser: Optional[CSVTransactionParser] = None,
        detector: Optional[DuplicateDetector] = None,
    ):
        """Initialize CSV import service.

        Args:
            db: Database instance
            parser: CSV parser, a default one if omitted
            detector: Duplicate detector, default tuning if omitted
        """
        self.db = db
        self.parser = parser or CSVTransactionParser()
        self.detector = detector or DuplicateDetector()

    def generate_preview(
        self, csv_text: str, mapping: ColumnMapping, account: Account
    ) -> ImportPreview:
        """Parse CSV text and classify every row against the account.

        Duplicates start deselected, new rows selected. Nothing is stored.

        Args:
            csv_text: Raw CSV content
            mapping: Column mapping configuration
            account: Account to import into (supplies the currency)

        Returns:
            ImportPreview with per-row status and counts
        """
        transactions, errors = self.parser.parse_with_errors(csv_text, mapping, account.currency)
        return self._build_preview(transactions, errors, account)

    def auto_detect_and_preview(
        self, csv_text: str, account: Account
    ) -> Optional[tuple[ColumnMapping, ImportPreview]]:
        """Detect the CSV layout from its header and build a preview.

        Returns:
            Tuple of (detected mapping, preview), or None if no built-in
            format matches the header
        """
        detected = self.parser.parse_auto_detect(csv_text, account.currency)
        if detected is None:
            return None
        preview = self._build_preview(detected.transactions, detected.errors, account)
        return detected.mapping, preview

    def import_transactions(
        self,
        account_id: int,
        currency: Currency,
        previews: list[ImportTransactionPreview],
        now: Optional[datetime] = None,
    ) -> ImportResult:
        """Store the selected preview rows.

        Args:
            account_id: Account to import into
            currency: Currency of the account
            previews: Preview rows; only those with is_selected are stored
            now: Timestamp for the stored rows, current UTC time if omitted

        Returns:
            ImportResult; deselected rows count as skipped, selected
            duplicates are imported and counted as duplicates
        """
        now = now or datetime.now(UTC)
        selected = [p for p in previews if p.is_selected]
        if not selected:
            logger.info("Nothing selected; skipped %d rows", len(previews))
            return ImportResult(imported_count=0, skipped_count=len(previews))

        for preview in selected:
            if preview.amount.currency != currency:
                raise CurrencyMismatchError(
                    currency_mismatch("import", preview.amount.currency.code, currency.code)
                )

        transactions = [
            self._new_transaction(
                account_id,
                p.date,
                p.amount,
                p.merchant,
                p.raw_description,
                now,
                category_id=p.category_id,
            )
            for p in selected
        ]
        self.db.save_transactions(transactions)

        result = ImportResult(
            imported_count=len(transactions),
            skipped_count=len(previews) - len(selected),
            duplicate_count=sum(1 for p in selected if p.is_duplicate),
        )
        logger.info("Account %s: %s", account_id, result.summary())
        return result

    def import_csv(
        self,
        csv_text: str,
        mapping: ColumnMapping,
        account: Account,
        skip_duplicates: bool = True,
        now: Optional[datetime] = None,
    ) -> ImportResult:
        """Parse, classify and store CSV rows in one call.

        Args:
            csv_text: Raw CSV content
            mapping: Column mapping configuration
            account: Account to import into
            skip_duplicates: Leave rows flagged as duplicates out of storage
            now: Timestamp for the stored rows, current UTC time if omitted

        Returns:
            ImportResult; with skip_duplicates the left-out rows are counted
            as duplicates, and row parse errors are always reported
        """
        now = now or datetime.now(UTC)
        parsed, errors = self.parser.parse_with_errors(csv_text, mapping, account.currency)

        to_import = parsed
        if skip_duplicates:
            existing = self.db.get_transactions_by_account(account.id)
            to_import = [
                p
                for p, check in self.detector.classify_batch(parsed, existing)
                if not check.is_duplicate
            ]

        transactions = [
            self._new_transaction(account.id, p.date, p.amount, p.merchant, p.raw_description, now)
            for p in to_import
        ]
        if transactions:
            self.db.save_transactions(transactions)

        result = ImportResult(
            imported_count=len(transactions),
            duplicate_count=len(parsed) - len(to_import),
            error_count=len(errors),
            errors=errors,
        )
        logger.info("Account %s: %s", account.id, result.summary())
        return result

    @staticmethod
    def get_available_formats() -> list[tuple[str, ColumnMapping]]:
        """Return the built-in formats as (display name, mapping) pairs."""
        return list(AVAILABLE_FORMATS)

    def _build_preview(
        self, transactions: list[ParsedTransaction], errors: list[RowError], account: Account
    ) -> ImportPreview:
        existing = self.db.get_transactions_by_account(account.id)
        rows = [
            ImportTransactionPreview.from_parsed(parsed, check.to_status())
            for parsed, check in self.detector.classify_batch(transactions, existing)
        ]
        preview = ImportPreview.build(rows, errors)
        logger.info(
            "Preview for account %s: %d new, %d duplicates, %d errors",
            account.id,
            preview.new_count,
            preview.duplicate_count,
            preview.error_count,
        )
        return preview

    @staticmethod
    def _new_transaction(
        account_id, txn_date, amount, merchant, raw_description, now, category_id=None
    ) -> Transaction:
        return Transaction(
            id=str(uuid.uuid4()),
            account_id=account_id,
            date=txn_date,
            amount=amount,
            merchant=merchant,
            memo=raw_description if raw_description != merchant else None,
            category_id=category_id,
            status=TransactionStatus.CLEARED,
            cleared_at=now,
            created_at=now,
            updated_at=now,
        )
