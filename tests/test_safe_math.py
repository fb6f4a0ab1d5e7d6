import pytest

from cpamm.safe_math import (
    ErrorCode,
    PoolError,
    safe_add,
    safe_div,
    safe_mul,
    safe_rem,
    safe_shl,
    safe_shr,
    safe_sub,
)

U64_MAX = (1 << 64) - 1


def test_safe_add():
    with pytest.raises(PoolError) as excinfo:
        safe_add(U64_MAX, U64_MAX)
    assert excinfo.value.code is ErrorCode.MATH_OVERFLOW
    assert safe_add(100, 100) == 200


def test_safe_sub():
    with pytest.raises(PoolError):
        safe_sub(0, U64_MAX)
    assert safe_sub(200, 100) == 100


def test_safe_mul():
    with pytest.raises(PoolError):
        safe_mul(U64_MAX, U64_MAX)
    assert safe_mul(100, 100) == 10000


def test_safe_div():
    with pytest.raises(PoolError):
        safe_div(100, 0)
    assert safe_div(200, 100) == 2


def test_safe_shl():
    assert safe_shl(1, 8, bits=128) == 256
    with pytest.raises(PoolError):
        safe_shl(100, 128, bits=128)
    assert safe_shl(100, 8, bits=128) == 25600


def test_safe_shr():
    assert safe_shr(100, 1, bits=128) == 50
    with pytest.raises(PoolError):
        safe_shr(200, 129, bits=128)
    assert safe_shr(200, 1, bits=128) == 100


def test_signed_division_truncates_toward_zero():
    assert safe_div(-7, 2, bits=64, signed=True) == -3
    assert safe_rem(-7, 2, bits=64, signed=True) == -1


def test_signed_min_divided_by_minus_one_overflows():
    i32_min = -(1 << 31)
    with pytest.raises(PoolError):
        safe_div(i32_min, -1, bits=32, signed=True)
    with pytest.raises(PoolError):
        safe_rem(i32_min, -1, bits=32, signed=True)


def test_rem_by_zero_raises():
    with pytest.raises(PoolError) as excinfo:
        safe_rem(5, 0)
    assert excinfo.value.code is ErrorCode.MATH_OVERFLOW


def test_shl_drops_high_bits():
    assert safe_shl(0xFFFF, 8, bits=16) == 0xFF00


def test_u16_add_limit():
    assert safe_add(0xFFFE, 1, bits=16) == 0xFFFF
    with pytest.raises(PoolError):
        safe_add(0xFFFF, 1, bits=16)