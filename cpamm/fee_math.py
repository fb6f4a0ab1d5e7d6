"""Fixed-point (Q64.64) power and exponential fee schedule."""

from __future__ import annotations

from .safe_math import ErrorCode, PoolError, safe_div, safe_mul, safe_shl, safe_sub
from .u128x128_math import U128_MAX

BASIS_POINT_MAX = 10_000
ONE_Q64 = 1 << 64
MAX_EXPONENTIAL = 0x80000
SCALE_OFFSET = 64
_EXPONENT_BITS = 19


def get_fee_in_period(
    cliff_fee_numerator: int, reduction_factor: int, passed_period: int
) -> int:
    """``cliff_fee_numerator * (1 - reduction_factor / 10_000) ** passed_period``."""
    if reduction_factor == 0:
        return cliff_fee_numerator
    bps = safe_div(
        safe_shl(reduction_factor, SCALE_OFFSET, bits=128), BASIS_POINT_MAX, bits=128
    )
    base = safe_sub(ONE_Q64, bps, bits=128)
    result = pow(base, passed_period)
    if result is None:
        raise PoolError(ErrorCode.MATH_OVERFLOW)
    fee = safe_mul(result, cliff_fee_numerator, bits=128) >> SCALE_OFFSET
    if fee > (1 << 64) - 1:
        raise PoolError(ErrorCode.TYPE_CAST_FAILED)
    return fee


def _mul_q64(lhs: int, rhs: int) -> int | None:
    product = lhs * rhs
    if product > U128_MAX:
        return None
    return product >> SCALE_OFFSET


def pow(base: int, exp: int) -> int | None:  # noqa: A001
    """Raise a Q64.64 ``base`` to an integer power; None on overflow."""
    invert = exp < 0
    if exp == 0:
        return ONE_Q64
    exp = abs(exp)
    if exp >= MAX_EXPONENTIAL:
        return None

    squared_base = base
    result = ONE_Q64
    if squared_base >= result:
        squared_base = U128_MAX // squared_base
        invert = not invert

    for bit in range(_EXPONENT_BITS):
        if bit > 0:
            squared_base = _mul_q64(squared_base, squared_base)
            if squared_base is None:
                return None
        if exp & (1 << bit):
            result = _mul_q64(result, squared_base)
            if result is None:
                return None

    if result == 0:
        return None
    if invert:
        result = U128_MAX // result
    return result