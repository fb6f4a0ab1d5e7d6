"""Checked wide-intermediate arithmetic that casts results to a target width."""

from __future__ import annotations

from .safe_math import ErrorCode, PoolError, safe_add, safe_div, safe_mul, safe_sub
from .u128x128_math import U128_MAX, Rounding, mul_shr, mul_shr_256, shl_div


def _cast(value: int, bits: int) -> int:
    if value > (1 << bits) - 1:
        raise PoolError(ErrorCode.TYPE_CAST_FAILED)
    return value


def _require(value: int | None) -> int:
    if value is None:
        raise PoolError(ErrorCode.MATH_OVERFLOW)
    return value


def safe_mul_shr_cast(x: int, y: int, offset: int, bits: int = 64) -> int:
    """``(x * y) >> offset`` cast to an unsigned integer of ``bits`` width."""
    return _cast(_require(mul_shr(x, y, offset)), bits)


def safe_mul_shr_256_cast(x: int, y: int, offset: int, bits: int = 64) -> int:
    """``(x * y) >> offset`` for 256-bit inputs, cast to ``bits`` width."""
    return _cast(_require(mul_shr_256(x, y, offset)), bits)


def safe_mul_div_cast_u64(
    x: int, y: int, denominator: int, rounding: Rounding, bits: int = 64
) -> int:
    """``x * y / denominator`` for 64-bit inputs with 128-bit intermediate."""
    prod = safe_mul(x, y, bits=128)
    if rounding is Rounding.UP:
        result = safe_div(
            safe_sub(safe_add(prod, denominator, bits=128), 1, bits=128),
            denominator,
            bits=128,
        )
    else:
        result = safe_div(prod, denominator, bits=128)
    return _cast(result, bits)


def safe_mul_div_cast_u128(x: int, y: int, denominator: int, rounding: Rounding) -> int:
    """``x * y / denominator`` for 128-bit inputs with 256-bit intermediate."""
    prod = safe_mul(x, y, bits=256)
    if rounding is Rounding.UP:
        if denominator == 0:
            raise PoolError(ErrorCode.MATH_OVERFLOW, "division by zero")
        result = -(-prod // denominator)
    else:
        result = safe_div(prod, denominator, bits=256)
    if result > U128_MAX:
        raise PoolError(ErrorCode.TYPE_CAST_FAILED)
    return result


def safe_shl_div_cast(
    x: int, y: int, offset: int, rounding: Rounding, bits: int = 64
) -> int:
    """``(x << offset) / y`` with rounding, cast to ``bits`` width."""
    return _cast(_require(shl_div(x, y, offset, rounding)), bits)