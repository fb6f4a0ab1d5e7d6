"""Checked integer arithmetic over fixed-width integer types."""

from __future__ import annotations

import enum


class ErrorCode(enum.Enum):
    """Failure reasons reported by pool operations."""

    MATH_OVERFLOW = "Math operation overflow"
    TYPE_CAST_FAILED = "Type cast error"
    INVALID_FEE = "Invalid fee setup"
    EXCEED_MAX_FEE_BPS = "Exceeded max fee bps"
    INVALID_INPUT = "Invalid input"
    INVALID_ACTIVATION_TYPE = "Invalid activation type"
    INVALID_ACTIVATION_POINT = "Invalid activation point"
    INVALID_COLLECT_FEE_MODE = "Invalid collect fee mode"
    PRICE_RANGE_VIOLATION = "Trade is over price range"
    INSUFFICIENT_LIQUIDITY = "Insufficient liquidity"
    INVALID_REWARD_INDEX = "Invalid reward index"
    INVALID_ADMIN = "Invalid admin"
    FEE_INVERSE_IS_INCORRECT = "Fee inverse is incorrect"
    UNSUPPORTED_NATIVE_MINT_TOKEN_2022 = "Unsupported native mint token 2022"


class PoolError(Exception):
    """Raised when a pool operation fails; ``code`` tells why."""

    def __init__(self, code: ErrorCode, detail: str | None = None) -> None:
        self.code = code
        message = code.value if detail is None else f"{code.value}: {detail}"
        super().__init__(message)


def _bounds(bits: int, signed: bool) -> tuple[int, int]:
    if signed:
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def _checked(result: int, bits: int, signed: bool) -> int:
    low, high = _bounds(bits, signed)
    if not low <= result <= high:
        raise PoolError(ErrorCode.MATH_OVERFLOW)
    return result


def _wrap(value: int, bits: int, signed: bool) -> int:
    value &= (1 << bits) - 1
    if signed and value >> (bits - 1):
        value -= 1 << bits
    return value


def safe_add(lhs: int, rhs: int, bits: int = 64, signed: bool = False) -> int:
    """Add, raising on overflow of the given integer width."""
    return _checked(lhs + rhs, bits, signed)


def safe_sub(lhs: int, rhs: int, bits: int = 64, signed: bool = False) -> int:
    """Subtract, raising on overflow of the given integer width."""
    return _checked(lhs - rhs, bits, signed)


def safe_mul(lhs: int, rhs: int, bits: int = 64, signed: bool = False) -> int:
    """Multiply, raising on overflow of the given integer width."""
    return _checked(lhs * rhs, bits, signed)


def _trunc_div(lhs: int, rhs: int) -> int:
    quotient = abs(lhs) // abs(rhs)
    return quotient if (lhs < 0) == (rhs < 0) else -quotient


def safe_div(lhs: int, rhs: int, bits: int = 64, signed: bool = False) -> int:
    """Divide truncating toward zero; raise on zero divisor or overflow."""
    if rhs == 0:
        raise PoolError(ErrorCode.MATH_OVERFLOW, "division by zero")
    return _checked(_trunc_div(lhs, rhs), bits, signed)


def safe_rem(lhs: int, rhs: int, bits: int = 64, signed: bool = False) -> int:
    """Remainder with the sign of the dividend; raise on zero divisor or overflow."""
    if rhs == 0:
        raise PoolError(ErrorCode.MATH_OVERFLOW, "division by zero")
    _checked(_trunc_div(lhs, rhs), bits, signed)
    return lhs - rhs * _trunc_div(lhs, rhs)


def safe_shl(value: int, offset: int, bits: int = 64, signed: bool = False) -> int:
    """Shift left; raise when the offset is not below the width. Shifted-out bits are dropped."""
    if not 0 <= offset < bits:
        raise PoolError(ErrorCode.MATH_OVERFLOW, "shift offset out of range")
    return _wrap(value << offset, bits, signed)


def safe_shr(value: int, offset: int, bits: int = 64, signed: bool = False) -> int:
    """Shift right; raise when the offset is not below the width."""
    if not 0 <= offset < bits:
        raise PoolError(ErrorCode.MATH_OVERFLOW, "shift offset out of range")
    return _wrap(value, bits, signed) >> offset