"""Wide-intermediate multiply, divide and shift helpers for 128/256-bit values."""

from __future__ import annotations

import enum

U128_MAX = (1 << 128) - 1
U256_MAX = (1 << 256) - 1


class Rounding(enum.Enum):
    """Rounding direction for divisions."""

    UP = "up"
    DOWN = "down"


def _divide(numerator: int, denominator: int, rounding: Rounding) -> int:
    if rounding is Rounding.UP:
        return -(-numerator // denominator)
    return numerator // denominator


def mul_shr(x: int, y: int, offset: int) -> int | None:
    """Return ``(x * y) >> offset`` rounded down, or None if it exceeds 128 bits."""
    quotient = (x * y) >> offset
    return quotient if quotient <= U128_MAX else None


def mul_shr_256(x: int, y: int, offset: int) -> int | None:
    """Return ``(x * y) >> offset`` for 256-bit inputs, or None if it exceeds 128 bits."""
    quotient = (x * y) >> offset
    return quotient if quotient <= U128_MAX else None


def _shifted(x: int, offset: int) -> int | None:
    if offset >= 256:
        return None
    prod = x << offset
    return prod if prod <= U256_MAX else None


def shl_div(x: int, y: int, offset: int, rounding: Rounding) -> int | None:
    """Return ``(x << offset) / y`` with rounding, or None on zero divisor or overflow."""
    if y == 0:
        return None
    prod = _shifted(x, offset)
    if prod is None:
        return None
    quotient = _divide(prod, y, rounding)
    return quotient if quotient <= U128_MAX else None


def shl_div_256(x: int, y: int, offset: int) -> int | None:
    """Return ``(x << offset) // y`` as a 256-bit value, or None on zero divisor or overflow."""
    if y == 0:
        return None
    prod = _shifted(x, offset)
    if prod is None:
        return None
    return prod // y


def mul_div_u256(x: int, y: int, denominator: int, rounding: Rounding) -> int | None:
    """Return ``(x * y) / denominator`` with rounding, or None if it exceeds 256 bits."""
    if denominator == 0:
        return None
    result = _divide(x * y, denominator, rounding)
    return result if result <= U256_MAX else None