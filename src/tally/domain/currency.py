"""Currency value type and the built-in currencies."""

from dataclasses import dataclass
from typing import Optional

from tally.domain.errors import InvalidCurrencyError


@dataclass(frozen=True)
class Currency:
    """An ISO 4217 currency.

    Attributes:
        code: Three letter currency code (e.g. "PHP")
        symbol: Display symbol (e.g. "₱")
        name: Display name
        minor_units_per_major: Minor units in one major unit (100 for
            centavos/cents, 1 for currencies without subdivision)
    """

    code: str
    symbol: str
    name: str
    minor_units_per_major: int = 100

    def __post_init__(self):
        if len(self.code) != 3:
            raise InvalidCurrencyError(
                f"Currency code must be 3 characters (ISO 4217), got '{self.code}'"
            )
        if self.minor_units_per_major <= 0:
            raise InvalidCurrencyError(
                f"Minor units per major must be positive, got {self.minor_units_per_major}"
            )

    @staticmethod
    def from_code(code: str) -> Optional["Currency"]:
        """Look up a built-in currency by code (case-insensitive).

        Args:
            code: Currency code

        Returns:
            Currency or None if the code is not supported
        """
        return _BY_CODE.get(code.strip().upper())


PHP = Currency(code="PHP", symbol="₱", name="Philippine Peso", minor_units_per_major=100)
USD = Currency(code="USD", symbol="$", name="US Dollar", minor_units_per_major=100)
EUR = Currency(code="EUR", symbol="€", name="Euro", minor_units_per_major=100)
# Yen has no minor unit
JPY = Currency(code="JPY", symbol="¥", name="Japanese Yen", minor_units_per_major=1)

SUPPORTED_CURRENCIES = [PHP, USD, EUR, JPY]

_BY_CODE = {c.code: c for c in SUPPORTED_CURRENCIES}
