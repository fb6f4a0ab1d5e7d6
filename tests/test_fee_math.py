import pytest

from cpamm.fee_math import MAX_EXPONENTIAL, ONE_Q64, get_fee_in_period, pow
from cpamm.safe_math import ErrorCode, PoolError
from cpamm.u128x128_math import U128_MAX


def test_pow_zero_exponent_is_one():
    assert pow(12345, 0) == 1 << 64


def test_pow_one_returns_base_below_one():
    base = ONE_Q64 - (ONE_Q64 // 3)
    assert pow(base, 1) == base


def test_pow_negative_exponent_inverts():
    base = ONE_Q64 - (ONE_Q64 // 7)
    assert pow(base, -1) == U128_MAX // pow(base, 1)


def test_pow_exponent_limit():
    assert pow(ONE_Q64 // 2, MAX_EXPONENTIAL) is None
    assert pow(ONE_Q64 // 2, -MAX_EXPONENTIAL) is None


def test_pow_zero_base_returns_none():
    assert pow(0, 3) is None


def test_pow_decreasing_for_base_below_one():
    base = ONE_Q64 - ONE_Q64 // 100
    values = [pow(base, exp) for exp in range(1, 20)]
    assert all(later <= earlier for earlier, later in zip(values, values[1:]))


def test_pow_increasing_for_base_above_one():
    base = ONE_Q64 + ONE_Q64 // 100
    assert pow(base, 2) > pow(base, 1) > ONE_Q64


def test_fee_without_reduction_is_cliff():
    assert get_fee_in_period(5_000_000, 0, 30) == 5_000_000


def test_fee_at_period_zero_is_cliff():
    assert get_fee_in_period(5_000_000, 100, 0) == 5_000_000


def test_fee_after_one_period_close_to_linear_reduction():
    cliff = 500_000_000
    fee = get_fee_in_period(cliff, 100, 1)
    assert abs(fee - cliff * 9_900 // 10_000) <= 1


def test_fee_is_non_increasing_over_periods():
    fees = [get_fee_in_period(100_000_000, 250, period) for period in range(0, 50)]
    assert all(later <= earlier for earlier, later in zip(fees, fees[1:]))


def test_reduction_factor_above_max_overflows():
    with pytest.raises(PoolError) as excinfo:
        get_fee_in_period(1_000, 10_001, 1)
    assert excinfo.value.code is ErrorCode.MATH_OVERFLOW


def test_full_reduction_overflows():
    with pytest.raises(PoolError) as excinfo:
        get_fee_in_period(1_000, 10_000, 1)
    assert excinfo.value.code is ErrorCode.MATH_OVERFLOW