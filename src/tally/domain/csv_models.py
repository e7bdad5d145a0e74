"""Value types passed through the CSV import pipeline.

parse -> ParsedTransaction -> DuplicateCheckResult -> ImportTransactionPreview
      -> ImportPreview (user selection) -> ImportResult
"""

import uuid
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Optional, Union

from tally.domain.csv_mapping import ColumnMapping
from tally.domain.money import Money


def _new_id() -> str:
    return str(uuid.uuid4())


@dataclass(frozen=True)
class ParsedTransaction:
    """A candidate transaction read from one CSV row."""

    date: date
    amount: Money
    merchant: str
    raw_description: str
    raw_row_index: int
    id: str = field(default_factory=_new_id)

    @property
    def is_expense(self) -> bool:
        return self.amount.is_expense

    @property
    def is_income(self) -> bool:
        return self.amount.is_income

    def fingerprint(self) -> str:
        """Identity used to spot the same statement line twice: date|amount|merchant."""
        return f"{self.date.isoformat()}|{self.amount.minor_units}|{self.merchant.strip().lower()}"


@dataclass(frozen=True)
class RowError:
    """A CSV row that could not be parsed.

    Attributes:
        row_index: 1-based line number in the file, header included
        message: Human readable reason
        raw_data: The offending row as read, if available
    """

    row_index: int
    message: str
    raw_data: Optional[str] = None

    def __str__(self) -> str:
        return f"Row {self.row_index}: {self.message}"


@dataclass(frozen=True)
class AutoParseResult:
    """Mapping picked by auto-detection together with what it parsed."""

    mapping: ColumnMapping
    transactions: list[ParsedTransaction]
    errors: list[RowError]


@dataclass(frozen=True)
class NewStatus:
    """Candidate has no match among stored transactions."""

    def __str__(self) -> str:
        return "NEW"


@dataclass(frozen=True)
class DuplicateMatch:
    """Candidate likely duplicates a stored transaction.

    Attributes:
        confidence: Match score between 0.0 and 1.0
        existing_transaction_id: ID of the matched stored transaction
    """

    confidence: float
    existing_transaction_id: str

    def __str__(self) -> str:
        return f"DUPLICATE ({self.confidence:.0%})"


NEW = NewStatus()

DuplicateStatus = Union[NewStatus, DuplicateMatch]


@dataclass(frozen=True)
class DuplicateCheckResult:
    """Outcome of checking one candidate against stored transactions."""

    is_duplicate: bool
    confidence: float
    matched_transaction_id: Optional[str] = None

    def to_status(self) -> DuplicateStatus:
        if self.is_duplicate:
            return DuplicateMatch(
                confidence=self.confidence,
                existing_transaction_id=self.matched_transaction_id,
            )
        return NEW


@dataclass(frozen=True)
class ImportTransactionPreview:
    """One row of an import preview, selectable by the user before commit."""

    id: str
    date: date
    amount: Money
    merchant: str
    raw_description: str
    raw_row_index: int
    duplicate_status: DuplicateStatus = NEW
    is_selected: bool = True
    category_id: Optional[int] = None

    @property
    def is_duplicate(self) -> bool:
        return isinstance(self.duplicate_status, DuplicateMatch)

    @classmethod
    def from_parsed(
        cls, parsed: ParsedTransaction, status: DuplicateStatus
    ) -> "ImportTransactionPreview":
        """Build a preview row; duplicates start deselected, new rows selected."""
        return cls(
            id=parsed.id,
            date=parsed.date,
            amount=parsed.amount,
            merchant=parsed.merchant,
            raw_description=parsed.raw_description,
            raw_row_index=parsed.raw_row_index,
            duplicate_status=status,
            is_selected=not isinstance(status, DuplicateMatch),
        )


@dataclass(frozen=True)
class ImportPreview:
    """Staging list shown to the user before anything is stored.

    Selection changes return a new ImportPreview; counts describe the
    classification and don't change with selection.
    """

    transactions: list[ImportTransactionPreview]
    new_count: int
    duplicate_count: int
    error_count: int = 0
    errors: list[RowError] = field(default_factory=list)

    @classmethod
    def build(
        cls, transactions: list[ImportTransactionPreview], errors: list[RowError]
    ) -> "ImportPreview":
        duplicates = sum(1 for t in transactions if t.is_duplicate)
        return cls(
            transactions=transactions,
            new_count=len(transactions) - duplicates,
            duplicate_count=duplicates,
            error_count=len(errors),
            errors=list(errors),
        )

    @property
    def selected_transactions(self) -> list[ImportTransactionPreview]:
        return [t for t in self.transactions if t.is_selected]

    @property
    def duplicate_transactions(self) -> list[ImportTransactionPreview]:
        return [t for t in self.transactions if t.is_duplicate]

    def _update(self, preview_id: Optional[str], **changes) -> "ImportPreview":
        if preview_id is not None and not any(t.id == preview_id for t in self.transactions):
            raise KeyError(preview_id)
        updated = [
            replace(t, **changes) if preview_id is None or t.id == preview_id else t
            for t in self.transactions
        ]
        return replace(self, transactions=updated)

    def toggle(self, preview_id: str) -> "ImportPreview":
        """Flip the selection of one row.

        Raises:
            KeyError: If no row has this ID
        """
        current = next((t for t in self.transactions if t.id == preview_id), None)
        if current is None:
            raise KeyError(preview_id)
        return self._update(preview_id, is_selected=not current.is_selected)

    def select_all(self) -> "ImportPreview":
        return self._update(None, is_selected=True)

    def deselect_all(self) -> "ImportPreview":
        return self._update(None, is_selected=False)

    def with_category(self, preview_id: str, category_id: Optional[int]) -> "ImportPreview":
        """Assign (or clear) the category of one row."""
        return self._update(preview_id, category_id=category_id)


@dataclass(frozen=True)
class ImportResult:
    """Summary of a committed import.

    Attributes:
        imported_count: Rows written to storage
        skipped_count: Rows the user deselected
        duplicate_count: Duplicates; imported anyway from a preview, or left
            out when importing with skip_duplicates
        error_count: Rows that failed to parse
        errors: The row-level parse errors
    """

    imported_count: int
    skipped_count: int = 0
    duplicate_count: int = 0
    error_count: int = 0
    errors: list[RowError] = field(default_factory=list)

    @property
    def is_success(self) -> bool:
        return self.error_count == 0

    def summary(self) -> str:
        parts = [f"Imported: {self.imported_count}"]
        if self.duplicate_count > 0:
            parts.append(f"Duplicates: {self.duplicate_count}")
        if self.skipped_count > 0:
            parts.append(f"Skipped: {self.skipped_count}")
        if self.error_count > 0:
            parts.append(f"Errors: {self.error_count}")
        return ", ".join(parts)
