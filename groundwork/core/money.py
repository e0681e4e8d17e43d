"""Decimal helpers shared by every module that does money arithmetic."""

from decimal import Decimal

CENT = Decimal("0.01")
ZERO = Decimal("0")


def to_cents(value) -> Decimal:
    """Round to cents (banker's rounding, the Decimal default)."""
    return Decimal(value).quantize(CENT)


def dsum(values) -> Decimal:
    """Sum of Decimals (or None) that is Decimal("0") for an empty iterable."""
    return sum((Decimal(v or 0) for v in values), ZERO)
