"""Tests for currencies."""

import pytest

from tally.domain.currency import EUR, JPY, PHP, SUPPORTED_CURRENCIES, USD, Currency
from tally.domain.errors import InvalidCurrencyError, ValidationError


def test_builtin_currencies():
    """Test the built-in currency constants."""
    assert PHP.code == "PHP"
    assert PHP.symbol == "₱"
    assert PHP.minor_units_per_major == 100
    assert JPY.minor_units_per_major == 1
    assert SUPPORTED_CURRENCIES == [PHP, USD, EUR, JPY]


def test_invalid_code_length():
    """Test that codes must have three letters."""
    with pytest.raises(InvalidCurrencyError):
        Currency(code="PH", symbol="₱", name="Peso")
    with pytest.raises(InvalidCurrencyError):
        Currency(code="PESO", symbol="₱", name="Peso")


def test_non_positive_minor_units():
    """Test that the minor unit divisor must be positive."""
    with pytest.raises(InvalidCurrencyError):
        Currency(code="XXX", symbol="X", name="Test", minor_units_per_major=0)
    with pytest.raises(ValidationError):
        Currency(code="XXX", symbol="X", name="Test", minor_units_per_major=-100)


def test_from_code_is_case_insensitive():
    """Test looking up a currency by code."""
    assert Currency.from_code("PHP") is PHP
    assert Currency.from_code("usd") is USD
    assert Currency.from_code(" eur ") is EUR


def test_from_code_unknown():
    """Test that unknown codes are not found."""
    assert Currency.from_code("XYZ") is None
