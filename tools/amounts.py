"""Money amount parsing and rounding."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from errors import InvalidAmountError

CENT = Decimal("0.01")


def parse_amount(value, *, allow_zero: bool = False) -> Decimal:
    """Convert user or store input into a finite, non-negative Decimal.

    Args:
        value: int, float, Decimal or numeric string.
        allow_zero: Accept 0 (goal progress) instead of requiring > 0.

    Returns:
        The amount as a Decimal.

    Raises:
        InvalidAmountError: If the value is not a finite number, is negative,
            or is zero when zero is not allowed.
    """
    if isinstance(value, bool) or value is None:
        raise InvalidAmountError(f"Amount must be a number, got {value!r}")

    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Amount must be a number, got {value!r}") from e

    if not amount.is_finite():
        raise InvalidAmountError(f"Amount must be finite, got {value!r}")
    if amount < 0:
        raise InvalidAmountError(f"Amount cannot be negative, got {value!r}")
    if amount == 0 and not allow_zero:
        raise InvalidAmountError("Amount must be greater than 0")

    return amount


def round_money(value: Decimal) -> Decimal:
    """Round half-up to two decimal places."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def percentage(part: Decimal, whole: Decimal) -> Decimal:
    """100 * part / whole clamped to [0, 100] and rounded to two decimals."""
    ratio = Decimal(100) * part / whole
    return round_money(min(Decimal(100), max(Decimal(0), ratio)))
