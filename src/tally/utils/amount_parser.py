"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

_CURRENCY_SYMBOLS = re.compile(r"[$€£¥₱]")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "₱123.45"
    - "-123.45"
    - "-$123.45"
    - "+5,000.00"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    original = amount_str
    amount_str = _CURRENCY_SYMBOLS.sub("", amount_str)

    # Remove thousands separators and inner whitespace
    amount_str = amount_str.replace(",", "")
    amount_str = re.sub(r"\s+", "", amount_str)

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    if amount_str.startswith("+"):
        amount_str = amount_str[1:]

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{original.strip()}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{original.strip()}'")

    return -amount if is_negative else amount
