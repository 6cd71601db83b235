"""Decimal money utilities for the single-currency (INR) marketplace.

All prices, fees and totals are Decimal quantized to 2 places. No float.
"""

from decimal import ROUND_HALF_UP, Decimal

ZERO = Decimal("0.00")
_CENT = Decimal("0.01")


def to_money(value: Decimal | int | str | None) -> Decimal:
    """Quantize to 2 decimal places (half-up). None -> 0.00."""
    if value is None:
        return ZERO
    return Decimal(value).quantize(_CENT, rounding=ROUND_HALF_UP)
