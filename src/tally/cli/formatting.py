"""Display helpers for the command line. Formatting never happens in the domain."""

from decimal import Decimal

from tally.domain.money import Money


def format_money(money: Money) -> str:
    """Render money as e.g. "-₱1,234.50" or "¥1,200"."""
    currency = money.currency
    places = len(str(currency.minor_units_per_major)) - 1
    major = Decimal(abs(money.minor_units)) / currency.minor_units_per_major
    sign = "-" if money.minor_units < 0 else ""
    return f"{sign}{currency.symbol}{major:,.{places}f}"
