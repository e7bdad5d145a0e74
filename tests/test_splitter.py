"""Tests for splitting money."""

import pytest

from tally.domain.currency import PHP
from tally.domain.errors import ValidationError
from tally.domain.money import Money
from tally.domain.splitter import split, split_by_percentages


def units(shares):
    return [share.minor_units for share in shares]


class TestSplit:
    """Tests for equal splits."""

    def test_remainder_goes_to_first_shares(self):
        """Test that 100 / 3 gives 34, 33, 33."""
        assert units(split(Money(100, PHP), 3)) == [34, 33, 33]
        assert units(split(Money(1001, PHP), 4)) == [251, 250, 250, 250]

    def test_negative_amount_is_symmetric(self):
        """Test that -100 / 3 gives -34, -33, -33."""
        assert units(split(Money(-100, PHP), 3)) == [-34, -33, -33]

    def test_zero(self):
        """Test splitting zero."""
        assert units(split(Money(0, PHP), 4)) == [0, 0, 0, 0]

    def test_single_part(self):
        """Test that one part is the whole amount."""
        assert split(Money(12345, PHP), 1) == [Money(12345, PHP)]

    def test_keeps_currency(self):
        """Test that shares keep the currency."""
        assert all(share.currency == PHP for share in split(Money(10, PHP), 3))

    @pytest.mark.parametrize("parts", [0, -1])
    def test_invalid_parts(self, parts):
        """Test that parts must be positive."""
        with pytest.raises(ValidationError):
            split(Money(100, PHP), parts)

    @pytest.mark.parametrize("amount", [1, 7, 100, 9999, -1, -12345, 10**15 + 7])
    @pytest.mark.parametrize("parts", [1, 2, 3, 7, 13])
    def test_sum_is_preserved(self, amount, parts):
        """Test that shares always add up and differ by at most one unit."""
        shares = units(split(Money(amount, PHP), parts))
        assert len(shares) == parts
        assert sum(shares) == amount
        assert max(shares) - min(shares) <= 1


class TestSplitByPercentages:
    """Tests for percentage splits."""

    def test_even_split(self):
        """Test an exact split."""
        assert units(split_by_percentages(Money(10000, PHP), [50, 30, 20])) == [5000, 3000, 2000]

    def test_last_share_absorbs_remainder(self):
        """Test that truncation leftovers land in the last share."""
        assert units(split_by_percentages(Money(101, PHP), [33, 33, 34])) == [33, 33, 35]
        assert units(split_by_percentages(Money(-101, PHP), [50, 50])) == [-50, -51]

    def test_zero_percentage_share(self):
        """Test that a 0% share is allowed."""
        assert units(split_by_percentages(Money(500, PHP), [0, 100])) == [0, 500]

    @pytest.mark.parametrize("amount", [1, 99, 101, 12345, -777])
    @pytest.mark.parametrize("percentages", [[100], [50, 50], [33, 33, 34], [10, 20, 30, 40], [1, 99]])
    def test_sum_is_preserved(self, amount, percentages):
        """Test that shares always add up to the original amount."""
        shares = split_by_percentages(Money(amount, PHP), percentages)
        assert len(shares) == len(percentages)
        assert sum(units(shares)) == amount

    def test_empty_percentages(self):
        """Test that at least one percentage is required."""
        with pytest.raises(ValidationError):
            split_by_percentages(Money(100, PHP), [])

    def test_negative_percentage(self):
        """Test that negative percentages fail even if they sum to 100."""
        with pytest.raises(ValidationError):
            split_by_percentages(Money(100, PHP), [-10, 110])

    def test_percentages_must_sum_to_100(self):
        """Test that an incomplete split fails."""
        with pytest.raises(ValidationError) as excinfo:
            split_by_percentages(Money(100, PHP), [50, 40])
        assert "90" in str(excinfo.value)
