"""Parsing bank statement CSV text into candidate transactions."""

import csv
import io
import logging
import re
from typing import Optional

from tally.domain.currency import Currency
from tally.domain.csv_mapping import AUTO_DETECT_ORDER, ColumnMapping
from tally.domain.csv_models import AutoParseResult, ParsedTransaction, RowError
from tally.domain.errors import RowParseError, ValidationError
from tally.domain.money import Money
from tally.utils.amount_parser import parse_amount
from tally.utils.csv_sniffer import detect_delimiter
from tally.utils.date_parser import detect_date_format, parse_date

logger = logging.getLogger(__name__)

DATE_SAMPLE_ROWS = 5

_WHITESPACE = re.compile(r"\s+")
_MARKERS = re.compile(r"\*+")
_LOCATION_CODE = re.compile(r"\s*#\s*\d+\b")
_PARENTHETICAL_SUFFIX = re.compile(r"\s*\([^()]*\)\s*$")
_TRAILING_REFERENCE = re.compile(r"(\s+\d[\d\-/]*)+\s*$")
_WORD_START = re.compile(r"(^|[-\d])([^\W\d_])")


def normalize_merchant(description: str) -> str:
    """Normalize a statement description into a merchant name.

    Collapses whitespace, drops asterisk markers, "#123" store codes,
    trailing parenthetical locations and trailing reference numbers, then
    title-cases what is left, treating letters after a hyphen or
    digit as word starts.

    Examples:
        >>> normalize_merchant("STARBUCKS #1234")
        'Starbucks'
        >>> normalize_merchant("SM SUPERMARKET (MAKATI)  000123456")
        'Sm Supermarket'
    """
    text = _WHITESPACE.sub(" ", description).strip()
    text = _MARKERS.sub(" ", text)
    text = _LOCATION_CODE.sub("", text)

    # Suffixes can stack, e.g. "SHOP (BGC) 12345 (PH)"
    previous = None
    while previous != text:
        previous = text
        text = _PARENTHETICAL_SUFFIX.sub("", text)
        text = _TRAILING_REFERENCE.sub("", text)

    text = _WHITESPACE.sub(" ", text).strip()
    return " ".join(_capitalize(word) for word in text.split(" "))


def _capitalize(word: str) -> str:
    # Letters after a hyphen or digit start a word too: "7-Eleven", "2K3"
    return _WORD_START.sub(lambda m: m.group(1) + m.group(2).upper(), word.lower())


def parse_amount_to_minor_units(amount_str: str, currency: Currency) -> int:
    """Parse statement amount text into minor units of currency.

    Raises:
        ValueError: If the text is not an amount
    """
    return Money.from_major(parse_amount(amount_str), currency).minor_units


class _ColumnIndex:
    """Resolves mapping column names to positions within a row."""

    def __init__(self, mapping: ColumnMapping, header: Optional[list[str]]):
        self.mapping = mapping
        self.positions: dict[str, int] = {}
        if header is not None:
            lookup = {name.strip().lower(): i for i, name in enumerate(header)}
            for column in mapping.required_columns:
                position = lookup.get(column.strip().lower())
                if position is not None:
                    self.positions[column] = position
        else:
            for column in mapping.required_columns:
                try:
                    self.positions[column] = int(column)
                except ValueError:
                    raise ValidationError(
                        f"Column '{column}' must be a 0-based position when the CSV has no header"
                    )

    @property
    def missing(self) -> list[str]:
        return [c for c in self.mapping.required_columns if c not in self.positions]

    def get(self, row: list[str], column: str) -> str:
        position = self.positions[column]
        if position >= len(row):
            return ""
        return row[position].strip()


class CSVTransactionParser:
    """Parser for bank statement CSV text.

    A malformed row never aborts the parse: it is left out of the result and,
    with ``parse_with_errors``, reported as a RowError carrying its 1-based
    line number (the header counts as line 1).
    """

    def parse(
        self, csv_text: str, mapping: ColumnMapping, currency: Currency
    ) -> list[ParsedTransaction]:
        """Parse CSV text, dropping rows that fail.

        Args:
            csv_text: Raw CSV content
            mapping: Column mapping configuration
            currency: Currency of the account being imported into

        Returns:
            Successfully parsed transactions in file order
        """
        transactions, _ = self.parse_with_errors(csv_text, mapping, currency)
        return transactions

    def parse_with_errors(
        self, csv_text: str, mapping: ColumnMapping, currency: Currency
    ) -> tuple[list[ParsedTransaction], list[RowError]]:
        """Parse CSV text and report rows that fail.

        Rows with a zero amount are skipped without an error.

        Returns:
            Tuple of (parsed transactions, row errors)
        """
        transactions: list[ParsedTransaction] = []
        errors: list[RowError] = []

        rows = enumerate(_read_rows(csv_text, mapping.delimiter), start=1)

        header = None
        header_row = 1
        if mapping.has_header:
            for row_num, row in rows:
                if _is_blank(row):
                    continue
                header, header_row = row, row_num
                break
            if header is None:
                logger.info("CSV has no header row; nothing to parse")
                return transactions, errors

        columns = _ColumnIndex(mapping, header)
        if columns.missing:
            errors.append(
                RowError(
                    row_index=header_row,
                    message=f"CSV missing required columns: {', '.join(columns.missing)}",
                    raw_data=mapping.delimiter.join(header or []),
                )
            )
            return transactions, errors

        for row_num, row in rows:
            if _is_blank(row):
                continue
            try:
                parsed = self._parse_row(row, row_num, columns, currency)
            except RowParseError as e:
                logger.debug("Skipping row %d: %s", row_num, e)
                errors.append(
                    RowError(row_index=row_num, message=str(e), raw_data=mapping.delimiter.join(row))
                )
                continue
            if parsed is not None:
                transactions.append(parsed)

        logger.info("Parsed %d transactions, %d row errors", len(transactions), len(errors))
        return transactions, errors

    def parse_auto_detect(self, csv_text: str, currency: Currency) -> Optional[AutoParseResult]:
        """Detect the layout from the header and parse with it.

        The built-in presets are tried in order against the header; the first
        whose columns are all present wins. The delimiter and the date format
        are sniffed from the content.

        Returns:
            AutoParseResult, or None if no preset matches the header
        """
        text = csv_text.lstrip("\ufeff")
        if not text.strip():
            return None

        delimiter = detect_delimiter(text)
        records = [row for row in _read_rows(text, delimiter) if not _is_blank(row)]
        if not records:
            return None

        header = records[0]
        present = {name.strip().lower() for name in header}
        preset = next(
            (
                m
                for m in AUTO_DETECT_ORDER
                if all(c.strip().lower() in present for c in m.required_columns)
            ),
            None,
        )
        if preset is None:
            logger.info("No built-in format matches header: %s", ", ".join(header))
            return None

        date_position = [name.strip().lower() for name in header].index(preset.date_column.lower())
        samples = [
            row[date_position] for row in records[1 : DATE_SAMPLE_ROWS + 1] if date_position < len(row)
        ]
        mapping = preset.with_overrides(
            date_format=detect_date_format(samples, default=preset.date_format),
            delimiter=delimiter,
            has_header=True,
        )
        logger.info("Detected CSV format: columns %s, dates %s", mapping.required_columns, mapping.date_format)

        transactions, errors = self.parse_with_errors(text, mapping, currency)
        return AutoParseResult(mapping=mapping, transactions=transactions, errors=errors)

    def _parse_row(
        self, row: list[str], row_num: int, columns: _ColumnIndex, currency: Currency
    ) -> Optional[ParsedTransaction]:
        mapping = columns.mapping

        date_str = columns.get(row, mapping.date_column)
        if not date_str:
            raise RowParseError("Missing date")
        try:
            txn_date = parse_date(date_str, mapping.date_format)
        except ValueError as e:
            raise RowParseError(str(e))

        if mapping.uses_debit_credit_columns:
            amount = self._parse_debit_credit(row, columns, currency)
        else:
            amount_str = columns.get(row, mapping.amount_column)
            if not amount_str:
                raise RowParseError("Missing amount")
            amount = self._to_money(amount_str, currency)

        if amount.is_zero:
            return None

        raw_description = columns.get(row, mapping.description_column)
        if not raw_description:
            raise RowParseError("Missing description")

        return ParsedTransaction(
            date=txn_date,
            amount=amount,
            merchant=normalize_merchant(raw_description) or raw_description,
            raw_description=raw_description,
            raw_row_index=row_num,
        )

    def _parse_debit_credit(self, row: list[str], columns: _ColumnIndex, currency: Currency) -> Money:
        """Debits become expenses, credits income; exactly one may be non-zero."""
        mapping = columns.mapping
        debit_str = columns.get(row, mapping.debit_column)
        credit_str = columns.get(row, mapping.credit_column)

        if not debit_str and not credit_str:
            raise RowParseError("Missing both debit and credit values")

        debit = self._to_money(debit_str, currency).abs() if debit_str else Money.zero(currency)
        credit = self._to_money(credit_str, currency).abs() if credit_str else Money.zero(currency)

        if not debit.is_zero and not credit.is_zero:
            raise RowParseError("Both debit and credit values present")
        if not debit.is_zero:
            return debit.negate()
        return credit

    @staticmethod
    def _to_money(amount_str: str, currency: Currency) -> Money:
        try:
            return Money(parse_amount_to_minor_units(amount_str, currency), currency)
        except ValueError as e:
            raise RowParseError(str(e))


def _read_rows(csv_text: str, delimiter: str) -> list[list[str]]:
    return list(csv.reader(io.StringIO(csv_text.lstrip("\ufeff")), delimiter=delimiter))


def _is_blank(row: list[str]) -> bool:
    return not any(cell.strip() for cell in row)
