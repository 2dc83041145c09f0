"""
Decimal helpers for monetary amounts.

All money in the ledger is handled as ``Decimal`` with two fractional digits;
floats never enter a computation.
"""

from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def quantize_money(value: Decimal) -> Decimal:
    """Round to cents, half away from zero."""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def fractional_digits(value: Decimal) -> int:
    """Number of digits after the decimal point of a finite Decimal."""
    exponent = value.normalize().as_tuple().exponent if value else 0
    return max(0, -exponent)


def to_decimal(value):
    """
    Convert an API or import value to Decimal without passing through float.

    Returns:
        Decimal or None: None when the value cannot be parsed as a finite number
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = repr(value)
    try:
        result = Decimal(str(value).strip()) if not isinstance(value, Decimal) else value
    except (InvalidOperation, ValueError):
        return None
    if not result.is_finite():
        return None
    return result
