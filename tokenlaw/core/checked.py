"""Overflow-checked fixed-width integer arithmetic.

Python integers never wrap, so every helper compares the exact result
against the declared width and raises instead of truncating.
"""

from .constants import U128_MAX


def checked_add_u128(a: int, b: int) -> int:
    """Add two uint128 values, raising OverflowError past 2**128 - 1."""
    result = a + b
    if result > U128_MAX:
        raise OverflowError(f"uint128 add overflow: {a} + {b}")
    return result


def checked_mul_u128(a: int, b: int) -> int:
    """Multiply two uint128 values, raising OverflowError past 2**128 - 1."""
    result = a * b
    if result > U128_MAX:
        raise OverflowError(f"uint128 mul overflow: {a} * {b}")
    return result


def saturating_sub(a: int, b: int) -> int:
    """Unsigned subtraction clamped at zero."""
    return a - b if a > b else 0


def in_range(value: int, low: int, high: int) -> bool:
    """True if value is an int (not bool) within [low, high]."""
    return isinstance(value, int) and not isinstance(value, bool) and low <= value <= high
