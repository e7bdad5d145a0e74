"""Cross-entity money validation for transfers and split transactions."""

from tally.domain.errors import CurrencyMismatchError, ValidationError, currency_mismatch
from tally.domain.money import Money


def validate_transfer(from_amount: Money, to_amount: Money) -> None:
    """Validate the two legs of a transfer.

    The outgoing leg must be negative, the incoming leg positive, both in the
    same currency, and together they must net to zero.

    Raises:
        CurrencyMismatchError: If the legs use different currencies
        ValidationError: If signs are wrong or the legs don't net to zero
    """
    if from_amount.currency != to_amount.currency:
        raise CurrencyMismatchError(
            currency_mismatch("transfer", from_amount.currency.code, to_amount.currency.code)
        )
    if from_amount.minor_units >= 0:
        raise ValidationError(
            f"From amount must be negative (expense), got: {from_amount.minor_units}"
        )
    if to_amount.minor_units <= 0:
        raise ValidationError(
            f"To amount must be positive (income), got: {to_amount.minor_units}"
        )

    net = from_amount.minor_units + to_amount.minor_units
    if net != 0:
        raise ValidationError(
            f"Transfer must net to zero, got: {net} "
            f"({from_amount.minor_units} + {to_amount.minor_units})"
        )


def validate_splits(total: Money, splits: list[Money]) -> None:
    """Validate that split lines add up to the transaction total.

    Raises:
        ValidationError: If splits are empty or don't sum to total
        CurrencyMismatchError: If any split uses another currency
    """
    if not splits:
        raise ValidationError("Splits cannot be empty")
    for split in splits:
        if split.currency != total.currency:
            raise CurrencyMismatchError(
                currency_mismatch("split", total.currency.code, split.currency.code)
            )

    split_sum = sum(split.minor_units for split in splits)
    if split_sum != total.minor_units:
        raise ValidationError(
            f"Splits must sum to total. Expected: {total.minor_units}, got: {split_sum}"
        )
