"""Splitting money into parts without losing minor units."""

from tally.domain.errors import ValidationError
from tally.domain.money import Money, truncating_div


def split(money: Money, parts: int) -> list[Money]:
    """Split money into equal parts.

    The remainder left by integer division is handed out one minor unit at a
    time to the first shares, so ``split(Money(100, PHP), 3)`` gives
    ``[34, 33, 33]``. Negative amounts split symmetrically (``-100`` gives
    ``[-34, -33, -33]``). The shares always sum to the original amount.

    Args:
        money: Amount to split
        parts: Number of shares

    Returns:
        List of ``parts`` Money values

    Raises:
        ValidationError: If parts < 1
    """
    if parts <= 0:
        raise ValidationError(f"Parts must be positive, got: {parts}")

    sign = -1 if money.minor_units < 0 else 1
    magnitude = abs(money.minor_units)
    base, remainder = divmod(magnitude, parts)

    return [
        Money(sign * (base + 1 if index < remainder else base), money.currency)
        for index in range(parts)
    ]


def split_by_percentages(money: Money, percentages: list[int]) -> list[Money]:
    """Split money by integer percentages.

    Every share but the last is ``minor_units * pct / 100`` (truncated); the
    last share takes whatever is left so the total is exact.

    Args:
        money: Amount to split
        percentages: Non-negative integers summing to 100

    Returns:
        One Money value per percentage

    Raises:
        ValidationError: If percentages are empty, negative, or don't sum to 100
    """
    if not percentages:
        raise ValidationError("Percentages cannot be empty")
    if any(pct < 0 for pct in percentages):
        raise ValidationError("Percentages must be non-negative")
    total = sum(percentages)
    if total != 100:
        raise ValidationError(f"Percentages must sum to 100, got: {total}")

    shares = []
    allocated = 0
    for pct in percentages[:-1]:
        amount = truncating_div(money.minor_units * pct, 100)
        allocated += amount
        shares.append(Money(amount, money.currency))
    shares.append(Money(money.minor_units - allocated, money.currency))
    return shares
