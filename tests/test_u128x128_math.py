import pytest

from cpamm.u128x128_math import (
    U128_MAX,
    U256_MAX,
    Rounding,
    mul_div_u256,
    mul_shr,
    mul_shr_256,
    shl_div,
    shl_div_256,
)


def test_mul_shr_without_shift_is_product():
    assert mul_shr(12345, 6789, 0) == 12345 * 6789


def test_mul_shr_overflow_returns_none():
    assert mul_shr(U128_MAX, U128_MAX, 0) is None
    assert mul_shr(U128_MAX, U128_MAX, 128) is not None
    assert mul_shr(U128_MAX, U128_MAX, 128) < U128_MAX


def test_mul_shr_one_q64_is_identity():
    value = 987654321
    assert mul_shr(value, 1 << 64, 64) == value


def test_mul_shr_256_handles_wide_inputs():
    big = 1 << 200
    assert mul_shr_256(big, 3, 200) == 3
    assert mul_shr_256(big, big, 0) is None


def test_shl_div_zero_divisor():
    assert shl_div(10, 0, 64, Rounding.DOWN) is None
    assert shl_div_256(10, 0, 64) is None


@pytest.mark.parametrize("x,y", [(1, 3), (10, 7), (123456789, 1000003)])
def test_shl_div_round_up_is_down_or_one_more(x, y):
    down = shl_div(x, y, 64, Rounding.DOWN)
    up = shl_div(x, y, 64, Rounding.UP)
    assert up - down in (0, 1)
    assert down * y <= x << 64 <= up * y


def test_shl_div_exact_division_rounds_equal():
    assert shl_div(6, 3, 64, Rounding.UP) == shl_div(6, 3, 64, Rounding.DOWN)


def test_shl_div_result_too_wide():
    assert shl_div(U128_MAX, 1, 64, Rounding.DOWN) is None
    assert shl_div_256(U128_MAX, 1, 64) == U128_MAX << 64


def test_shl_overflow_of_256_bits():
    assert shl_div_256(U128_MAX, 1, 200) is None
    assert shl_div(1, 1, 255, Rounding.DOWN) is None


def test_mul_div_u256_zero_denominator():
    assert mul_div_u256(1, 1, 0, Rounding.UP) is None


def test_mul_div_u256_rounding_and_overflow():
    assert mul_div_u256(U256_MAX, U256_MAX, U256_MAX, Rounding.DOWN) == U256_MAX
    assert mul_div_u256(U256_MAX, 2, 1, Rounding.DOWN) is None
    down = mul_div_u256(10, 10, 3, Rounding.DOWN)
    up = mul_div_u256(10, 10, 3, Rounding.UP)
    assert up == down + 1