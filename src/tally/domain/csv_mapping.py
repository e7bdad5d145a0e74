"""CSV column mapping configuration and the built-in bank presets."""

from dataclasses import dataclass, replace
from typing import Optional

from tally.domain.errors import ValidationError


@dataclass(frozen=True)
class ColumnMapping:
    """How to read the columns of a bank statement CSV.

    Either ``amount_column`` is set (one signed amount per row), or both
    ``debit_column`` and ``credit_column`` are set (debits become expenses,
    credits become income).

    Attributes:
        date_column: Header name of the date column
        description_column: Header name of the description/merchant column
        amount_column: Header name of a signed amount column
        debit_column: Header name of the debit (outflow) column
        credit_column: Header name of the credit (inflow) column
        date_format: Date pattern such as "yyyy-MM-dd" or "MM/dd/yyyy"
        delimiter: Field delimiter
        has_header: Whether the first row holds column names. Without a
            header, column names may be given as 0-based positions ("0", "1").
    """

    date_column: str
    description_column: str
    amount_column: Optional[str] = None
    debit_column: Optional[str] = None
    credit_column: Optional[str] = None
    date_format: str = "yyyy-MM-dd"
    delimiter: str = ","
    has_header: bool = True

    def __post_init__(self):
        if not self.date_column or not self.date_column.strip():
            raise ValidationError("Date column cannot be blank")
        if not self.description_column or not self.description_column.strip():
            raise ValidationError("Description column cannot be blank")

        has_debit = bool(self.debit_column)
        has_credit = bool(self.credit_column)
        if has_debit != has_credit:
            raise ValidationError("Debit and credit columns must be specified together")
        if self.amount_column and has_debit:
            raise ValidationError(
                "Specify either amount_column OR debit_column and credit_column, not both"
            )
        if not self.amount_column and not has_debit:
            raise ValidationError(
                "Must specify either amount_column OR both debit_column and credit_column"
            )
        if len(self.delimiter) != 1:
            raise ValidationError(f"Delimiter must be a single character, got '{self.delimiter}'")

    @property
    def uses_debit_credit_columns(self) -> bool:
        return self.debit_column is not None and self.credit_column is not None

    @property
    def required_columns(self) -> list[str]:
        """Column names that must be present in the header."""
        columns = [self.date_column, self.description_column]
        if self.uses_debit_credit_columns:
            columns += [self.debit_column, self.credit_column]
        else:
            columns.append(self.amount_column)
        return columns

    def with_overrides(self, **changes) -> "ColumnMapping":
        """Return a copy with some fields replaced (validated again)."""
        return replace(self, **changes)


SIMPLE = ColumnMapping(
    date_column="Date",
    description_column="Description",
    amount_column="Amount",
)

CHASE = ColumnMapping(
    date_column="Transaction Date",
    description_column="Description",
    amount_column="Amount",
    date_format="MM/dd/yyyy",
)

WELLS_FARGO = ColumnMapping(
    date_column="Date",
    description_column="Description",
    amount_column="Amount",
    date_format="MM/dd/yyyy",
)

BANK_OF_AMERICA = ColumnMapping(
    date_column="Date",
    description_column="Description",
    debit_column="Debit",
    credit_column="Credit",
    date_format="MM/dd/yyyy",
)

# Shown to users choosing a format
AVAILABLE_FORMATS: list[tuple[str, ColumnMapping]] = [
    ("Chase", CHASE),
    ("Wells Fargo", WELLS_FARGO),
    ("Bank of America", BANK_OF_AMERICA),
    ("Simple (Date, Description, Amount)", SIMPLE),
]

# Tried in order against a header row; most specific first. Wells Fargo shares
# the simple layout and is told apart by the sniffed date format.
AUTO_DETECT_ORDER: list[ColumnMapping] = [CHASE, BANK_OF_AMERICA, SIMPLE]


def get_format(name: str) -> Optional[ColumnMapping]:
    """Look up a preset by display name or short name (case-insensitive).

    "simple", "chase", "wells fargo" and "bank of america" all resolve.
    """
    wanted = name.strip().lower()
    for display_name, mapping in AVAILABLE_FORMATS:
        lowered = display_name.lower()
        if wanted == lowered or lowered.split(" (")[0] == wanted:
            return mapping
    return None
