"""Money value type.

Amounts are held as an exact integer count of minor units (centavos, cents)
paired with a Currency. Floats are never used for an amount; decimal inputs
go through ``Decimal`` and are rounded half to even.

Sign convention used everywhere in tally:

- negative: expense / outflow
- positive: income / inflow
- zero: no change

Examples:
    >>> from tally.domain.currency import PHP
    >>> Money(12345, PHP).minor_units
    12345
    >>> Money.from_major("123.45", PHP) + Money(-5, PHP)
    Money(minor_units=12340, currency='PHP')
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_EVEN, InvalidOperation, localcontext
from typing import Iterable, Union

from tally.domain.currency import Currency
from tally.domain.errors import (
    ArithmeticOverflowError,
    CurrencyMismatchError,
    DivisionByZeroError,
    ValidationError,
    currency_mismatch,
)

# Minor units are bounded like a signed 64-bit integer
MIN_MINOR_UNITS = -(2**63)
MAX_MINOR_UNITS = 2**63 - 1

DecimalLike = Union[Decimal, int, float, str]


def _checked(value: int) -> int:
    """Return value unchanged, or raise if it leaves the 64-bit range."""
    if value < MIN_MINOR_UNITS or value > MAX_MINOR_UNITS:
        raise ArithmeticOverflowError(f"Minor unit overflow: {value} is out of range")
    return value


def _to_decimal(value: DecimalLike) -> Decimal:
    # str() keeps floats such as 123.45 from expanding to their binary value
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation:
        raise ValidationError(f"Not a decimal number: '{value}'")


def _scale_half_even(value: Decimal, factor: int) -> int:
    """Return value * factor rounded half to even, with no intermediate rounding."""
    if value.is_zero() or factor == 0:
        return 0
    factor_digits = len(str(abs(factor)))
    if value.adjusted() + factor_digits > 40:
        raise ArithmeticOverflowError(f"Minor unit overflow: {value} x {factor} is out of range")
    with localcontext() as ctx:
        # Wide enough to hold the exact product and its integer part
        ctx.prec = max(len(value.as_tuple().digits), value.adjusted() + 1) + factor_digits + 2
        return int((value * factor).quantize(Decimal(1), rounding=ROUND_HALF_EVEN))


def truncating_div(numerator: int, denominator: int) -> int:
    """Integer division rounding toward zero."""
    quotient = abs(numerator) // abs(denominator)
    if (numerator < 0) != (denominator < 0):
        return -quotient
    return quotient


@dataclass(frozen=True)
class Money:
    """Immutable amount of a single currency in minor units."""

    minor_units: int
    currency: Currency

    def __post_init__(self):
        if isinstance(self.minor_units, bool) or not isinstance(self.minor_units, int):
            raise TypeError(
                f"minor_units must be an int, got {type(self.minor_units).__name__}"
            )

    @classmethod
    def zero(cls, currency: Currency) -> "Money":
        """Zero amount for the given currency."""
        return cls(0, currency)

    @classmethod
    def from_major(cls, value: DecimalLike, currency: Currency) -> "Money":
        """Create Money from a major unit amount such as "123.45" or 12.

        The amount is scaled by ``currency.minor_units_per_major`` and rounded
        half to even to the nearest minor unit.

        Raises:
            ValidationError: If value is not a number
            ArithmeticOverflowError: If the result does not fit
        """
        amount = _to_decimal(value)
        if not amount.is_finite():
            raise ValidationError(f"Not a finite amount: '{value}'")
        return cls(_checked(_scale_half_even(amount, currency.minor_units_per_major)), currency)

    @property
    def is_expense(self) -> bool:
        return self.minor_units < 0

    @property
    def is_income(self) -> bool:
        return self.minor_units > 0

    @property
    def is_zero(self) -> bool:
        return self.minor_units == 0

    def _require_same_currency(self, other: "Money", operation: str) -> None:
        if self.currency != other.currency:
            raise CurrencyMismatchError(
                currency_mismatch(operation, self.currency.code, other.currency.code)
            )

    def add(self, other: "Money") -> "Money":
        """Return self + other.

        Raises:
            CurrencyMismatchError: If currencies differ
            ArithmeticOverflowError: If the sum overflows
        """
        self._require_same_currency(other, "add")
        return Money(_checked(self.minor_units + other.minor_units), self.currency)

    def subtract(self, other: "Money") -> "Money":
        """Return self - other.

        Raises:
            CurrencyMismatchError: If currencies differ
            ArithmeticOverflowError: If the difference overflows
        """
        self._require_same_currency(other, "subtract")
        return Money(_checked(self.minor_units - other.minor_units), self.currency)

    def multiply(self, factor: DecimalLike) -> "Money":
        """Multiply by an integer (exact) or decimal factor (rounded half to even).

        Raises:
            ArithmeticOverflowError: If the product overflows
        """
        if isinstance(factor, int) and not isinstance(factor, bool):
            return Money(_checked(self.minor_units * factor), self.currency)
        decimal_factor = _to_decimal(factor)
        if not decimal_factor.is_finite():
            raise ValidationError(f"Not a finite factor: '{factor}'")
        return Money(_checked(_scale_half_even(decimal_factor, self.minor_units)), self.currency)

    def divide(self, divisor: int) -> "Money":
        """Divide by an integer, truncating toward zero.

        Raises:
            DivisionByZeroError: If divisor is zero
            ArithmeticOverflowError: If the quotient overflows (MIN / -1)
        """
        if divisor == 0:
            raise DivisionByZeroError("Cannot divide by zero")
        return Money(_checked(truncating_div(self.minor_units, divisor)), self.currency)

    def percentage(self, percent: int) -> "Money":
        """Return percent% of this amount, multiplying before dividing.

        Raises:
            ValidationError: If percent is outside 0..100
        """
        if percent < 0 or percent > 100:
            raise ValidationError(f"Percent must be 0-100, got: {percent}")
        return Money(truncating_div(self.minor_units * percent, 100), self.currency)

    def abs(self) -> "Money":
        return Money(_checked(abs(self.minor_units)), self.currency)

    def negate(self) -> "Money":
        return Money(_checked(-self.minor_units), self.currency)

    def compare_to(self, other: "Money") -> int:
        """Return -1, 0 or 1.

        Raises:
            CurrencyMismatchError: If currencies differ
        """
        self._require_same_currency(other, "compare")
        return (self.minor_units > other.minor_units) - (self.minor_units < other.minor_units)

    def __add__(self, other: "Money") -> "Money":
        return self.add(other)

    def __sub__(self, other: "Money") -> "Money":
        return self.subtract(other)

    def __mul__(self, factor: DecimalLike) -> "Money":
        return self.multiply(factor)

    def __neg__(self) -> "Money":
        return self.negate()

    def __abs__(self) -> "Money":
        return self.abs()

    def __lt__(self, other: "Money") -> bool:
        return self.compare_to(other) < 0

    def __le__(self, other: "Money") -> bool:
        return self.compare_to(other) <= 0

    def __gt__(self, other: "Money") -> bool:
        return self.compare_to(other) > 0

    def __ge__(self, other: "Money") -> bool:
        return self.compare_to(other) >= 0

    def __repr__(self) -> str:
        return f"Money(minor_units={self.minor_units}, currency='{self.currency.code}')"


def sum_money(amounts: Iterable[Money]) -> Money:
    """Sum a non-empty list of amounts of one currency.

    Raises:
        ValidationError: If amounts is empty
        CurrencyMismatchError: If currencies differ
        ArithmeticOverflowError: If the running total overflows
    """
    amounts = list(amounts)
    if not amounts:
        raise ValidationError("Cannot sum empty list")
    total = amounts[0]
    for amount in amounts[1:]:
        total = total.add(amount)
    return total


def round_to_major(money: Money) -> Money:
    """Drop the fractional major unit, e.g. 123.50 -> 123.00 (toward zero)."""
    per_major = money.currency.minor_units_per_major
    return Money(truncating_div(money.minor_units, per_major) * per_major, money.currency)
