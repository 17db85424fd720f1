"""Monetary helpers"""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any

CENT = Decimal("0.01")

# Largest decimal exponent accepted from loose input; 1e16 and above are rejected
MAX_EXPONENT = 15


def round_currency(amount: Decimal) -> Decimal:
    """Round to 2 decimal places, half-up (presentation only)"""
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def _usable(value: Decimal) -> bool:
    return value.is_finite() and (value.is_zero() or value.adjusted() <= MAX_EXPONENT)


def to_decimal(value: Any, default: Decimal = Decimal("0")) -> Decimal:
    """
    Coerce a loosely-typed numeric to Decimal.

    None, booleans, unparseable strings, NaN/Infinity and magnitudes of
    10**(MAX_EXPONENT + 1) or more yield the default.
    """
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, Decimal):
        return value if _usable(value) else default
    try:
        # str() keeps float inputs at their printed precision (0.1 -> 0.1)
        result = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return default
    return result if _usable(result) else default
