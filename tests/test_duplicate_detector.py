"""Tests for duplicate detection."""

import pytest
from datetime import date, datetime, timedelta, UTC

from tally.domain.csv_models import ParsedTransaction
from tally.domain.currency import PHP
from tally.domain.duplicate_detector import (
    DuplicateDetector,
    levenshtein_distance,
    string_similarity,
)
from tally.domain.entities import Transaction, TransactionStatus
from tally.domain.money import Money

BASE_DATE = date(2025, 1, 15)


def make_parsed(merchant="Grocery Store", minor_units=-5000, txn_date=BASE_DATE, row=2):
    return ParsedTransaction(
        date=txn_date,
        amount=Money(minor_units, PHP),
        merchant=merchant,
        raw_description=merchant.upper(),
        raw_row_index=row,
    )


def make_existing(txn_id, merchant="Grocery Store", minor_units=-5000, txn_date=BASE_DATE):
    now = datetime(2025, 1, 20, tzinfo=UTC)
    return Transaction(
        id=txn_id,
        account_id=1,
        date=txn_date,
        amount=Money(minor_units, PHP),
        merchant=merchant,
        status=TransactionStatus.CLEARED,
        created_at=now,
        updated_at=now,
    )


@pytest.fixture
def detector():
    """Create a detector with default tuning."""
    return DuplicateDetector()


def test_levenshtein_distance():
    """Test edit distances."""
    assert levenshtein_distance("kitten", "sitting") == 3
    assert levenshtein_distance("", "abc") == 3
    assert levenshtein_distance("same", "same") == 0


def test_string_similarity():
    """Test normalized similarity."""
    assert string_similarity("abc", "abc") == 1.0
    assert string_similarity("abc", "") == 0.0
    assert string_similarity("starbucks", "starbucks coffee") == pytest.approx(1 - 7 / 16)


class TestCheckDuplicate:
    """Tests for classifying a single parsed row."""

    def test_exact_match(self, detector):
        """Test that identical date, amount and merchant is a certain duplicate."""
        result = detector.check_duplicate(make_parsed(), [make_existing("t1")])

        assert result.is_duplicate
        assert result.confidence == 1.0
        assert result.matched_transaction_id == "t1"

    def test_exact_match_ignores_merchant_case(self, detector):
        """Test case-insensitive merchant comparison."""
        result = detector.check_duplicate(
            make_parsed(merchant="GROCERY STORE"), [make_existing("t1", merchant="grocery store")]
        )

        assert result.confidence == 1.0

    def test_amount_mismatch_is_not_duplicate(self, detector):
        """Test that a different amount breaks the match."""
        result = detector.check_duplicate(make_parsed(minor_units=-5001), [make_existing("t1")])

        assert not result.is_duplicate
        assert result.matched_transaction_id is None

    def test_one_day_offset_is_duplicate(self, detector):
        """Test the date tolerance window."""
        parsed = make_parsed(txn_date=BASE_DATE + timedelta(days=1))

        result = detector.check_duplicate(parsed, [make_existing("t1")])

        assert result.is_duplicate
        assert result.confidence > 0.75
        assert result.confidence == pytest.approx(0.9)

    def test_two_day_offset_is_duplicate(self, detector):
        """Test a match further into the window."""
        parsed = make_parsed(txn_date=BASE_DATE - timedelta(days=2))

        result = detector.check_duplicate(parsed, [make_existing("t1")])

        assert result.is_duplicate
        assert result.confidence == pytest.approx(0.8)

    def test_edge_of_window_is_not_duplicate(self, detector):
        """Test that a 3-day offset scores below the threshold."""
        parsed = make_parsed(txn_date=BASE_DATE + timedelta(days=3))

        assert not detector.check_duplicate(parsed, [make_existing("t1")]).is_duplicate

    def test_five_day_offset_is_not_duplicate(self, detector):
        """Test that dates outside the window do not match."""
        parsed = make_parsed(txn_date=BASE_DATE + timedelta(days=5))

        result = detector.check_duplicate(parsed, [make_existing("t1")])

        assert not result.is_duplicate
        assert result.confidence == 0.0

    def test_similar_merchant(self, detector):
        """Test partial merchant credit on the same day and amount."""
        result = detector.check_duplicate(
            make_parsed(merchant="Starbucks"), [make_existing("t1", merchant="Starbucks Coffee")]
        )

        assert result.is_duplicate
        assert result.confidence == pytest.approx(0.8 + 0.2 * (1 - 7 / 16))

    def test_best_match_reported(self, detector):
        """Test that the highest scoring candidate wins."""
        existing = [
            make_existing("two-days", txn_date=BASE_DATE + timedelta(days=2)),
            make_existing("one-day", txn_date=BASE_DATE + timedelta(days=1)),
        ]

        result = detector.check_duplicate(make_parsed(), existing)

        assert result.matched_transaction_id == "one-day"

    def test_exact_match_wins_over_fuzzy(self, detector):
        """Test that an exact match beats any earlier fuzzy match."""
        existing = [
            make_existing("fuzzy", txn_date=BASE_DATE + timedelta(days=1)),
            make_existing("exact"),
        ]

        result = detector.check_duplicate(make_parsed(), existing)

        assert result.matched_transaction_id == "exact"
        assert result.confidence == 1.0

    def test_no_existing_transactions(self, detector):
        """Test an empty account."""
        assert not detector.check_duplicate(make_parsed(), []).is_duplicate

    def test_custom_tuning(self):
        """Test overriding the threshold and tolerance."""
        strict = DuplicateDetector(threshold=0.95)
        loose = DuplicateDetector(date_tolerance_days=10)
        parsed = make_parsed(txn_date=BASE_DATE + timedelta(days=5))
        existing = [make_existing("t1")]

        assert not strict.check_duplicate(make_parsed(txn_date=BASE_DATE + timedelta(days=1)), existing).is_duplicate
        assert loose.check_duplicate(parsed, existing).is_duplicate

    def test_status_conversion(self, detector):
        """Test converting results to preview statuses."""
        duplicate = detector.check_duplicate(make_parsed(), [make_existing("t1")]).to_status()
        new = detector.check_duplicate(make_parsed(minor_units=-1), [make_existing("t1")]).to_status()

        assert duplicate.existing_transaction_id == "t1"
        assert str(duplicate) == "DUPLICATE (100%)"
        assert str(new) == "NEW"


def test_check_duplicates_keeps_order(detector):
    """Test that every row is classified independently, in order."""
    parsed = [make_parsed(minor_units=-1), make_parsed(), make_parsed(minor_units=-2)]

    results = detector.check_duplicates(parsed, [make_existing("t1")])

    assert [p.id for p, _ in results] == [p.id for p in parsed]
    assert [r.is_duplicate for _, r in results] == [False, True, False]


class TestFindInternalDuplicates:
    """Tests for duplicates within one batch."""

    def test_later_repeat_flagged(self, detector):
        """Test that only the repeat of an earlier row is flagged."""
        first = make_parsed(row=2)
        other = make_parsed(merchant="Pharmacy", row=3)
        repeat = make_parsed(merchant="grocery store", row=4)

        assert detector.find_internal_duplicates([first, other, repeat]) == {repeat.id}

    def test_no_repeats(self, detector):
        """Test a batch without repeats."""
        rows = [make_parsed(), make_parsed(minor_units=-1), make_parsed(txn_date=BASE_DATE + timedelta(days=1))]

        assert detector.find_internal_duplicates(rows) == set()

    def test_every_later_copy_flagged(self, detector):
        """Test three copies of the same row."""
        rows = [make_parsed(), make_parsed(), make_parsed()]

        assert detector.find_internal_duplicates(rows) == {rows[1].id, rows[2].id}

    def test_repeats_point_at_first_copy(self, detector):
        """Test that every later copy maps to the first occurrence."""
        rows = [make_parsed(), make_parsed(merchant="Pharmacy"), make_parsed(), make_parsed()]

        assert detector.match_internal_duplicates(rows) == {
            rows[2].id: rows[0].id,
            rows[3].id: rows[0].id,
        }


class TestClassifyBatch:
    """Tests for classifying a batch against storage and itself."""

    def test_repeat_matches_earlier_row(self, detector):
        """Test that a repeat with no stored match is a duplicate of its first copy."""
        first, other, repeat = make_parsed(), make_parsed(merchant="Pharmacy"), make_parsed()

        results = detector.classify_batch([first, other, repeat], [])

        assert [r.is_duplicate for _, r in results] == [False, False, True]
        assert results[2][1].matched_transaction_id == first.id
        assert results[2][1].confidence == 1.0

    def test_stored_match_takes_precedence(self, detector):
        """Test that a stored match is kept for both copies."""
        rows = [make_parsed(), make_parsed()]

        results = detector.classify_batch(rows, [make_existing("t1")])

        assert [r.matched_transaction_id for _, r in results] == ["t1", "t1"]
