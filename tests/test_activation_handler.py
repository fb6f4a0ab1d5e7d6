import pytest

from cpamm.activation_handler import ActivationHandler, ActivationType, Clock
from cpamm.safe_math import ErrorCode, PoolError


def test_current_point_by_slot():
    clock = Clock(slot=12_345, unix_timestamp=1_700_000_000)
    assert ActivationHandler.get_current_point(ActivationType.SLOT, clock) == 12_345


def test_current_point_by_timestamp():
    clock = Clock(slot=12_345, unix_timestamp=1_700_000_000)
    assert ActivationHandler.get_current_point(ActivationType.TIMESTAMP, clock) == 1_700_000_000


def test_current_point_negative_timestamp_wraps():
    clock = Clock(unix_timestamp=-1)
    assert ActivationHandler.get_current_point(1, clock) == (1 << 64) - 1


def test_current_point_invalid_type():
    with pytest.raises(PoolError) as info:
        ActivationHandler.get_current_point(2, Clock())
    assert info.value.code is ErrorCode.INVALID_ACTIVATION_TYPE


def test_pre_activation_start_point_invariant():
    handler = ActivationHandler(curr_point=0, activation_point=10_000, buffer_duration=3_600)
    pre = handler.get_pre_activation_start_point()
    assert pre + handler.buffer_duration == handler.activation_point


def test_last_join_point_invariant():
    handler = ActivationHandler(curr_point=0, activation_point=10_000, buffer_duration=3_600)
    last_join = handler.get_last_join_point()
    pre = handler.get_pre_activation_start_point()
    assert last_join + handler.buffer_duration // 12 == pre
    assert last_join < pre


def test_pre_activation_underflow():
    handler = ActivationHandler(curr_point=0, activation_point=10, buffer_duration=20)
    with pytest.raises(PoolError) as info:
        handler.get_pre_activation_start_point()
    assert info.value.code is ErrorCode.MATH_OVERFLOW


def test_last_join_underflow():
    handler = ActivationHandler(curr_point=0, activation_point=24, buffer_duration=24)
    with pytest.raises(PoolError) as info:
        handler.get_last_join_point()
    assert info.value.code is ErrorCode.MATH_OVERFLOW


def test_zero_buffer_keeps_activation_point():
    handler = ActivationHandler(curr_point=0, activation_point=500, buffer_duration=0)
    assert handler.get_last_join_point() == handler.activation_point