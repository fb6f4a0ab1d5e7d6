import pytest

from cpamm.fee import (
    BaseFeeStruct,
    CollectFeeMode,
    DynamicFeeStruct,
    FeeMode,
    FeeSchedulerMode,
    PoolFeesStruct,
    TradeDirection,
)
from cpamm.fee_math import ONE_Q64, get_fee_in_period
from cpamm.safe_math import ErrorCode, PoolError


def test_fee_mode_output_token_a_to_b():
    fee_mode = FeeMode.get_fee_mode(CollectFeeMode.BOTH_TOKEN, TradeDirection.A_TO_B, False)
    assert fee_mode.fees_on_input is False
    assert fee_mode.fees_on_token_a is False
    assert fee_mode.has_referral is False


def test_fee_mode_output_token_b_to_a():
    fee_mode = FeeMode.get_fee_mode(CollectFeeMode.BOTH_TOKEN, TradeDirection.B_TO_A, True)
    assert fee_mode.fees_on_input is False
    assert fee_mode.fees_on_token_a is True
    assert fee_mode.has_referral is True


def test_fee_mode_quote_token_a_to_b():
    fee_mode = FeeMode.get_fee_mode(CollectFeeMode.ONLY_B, TradeDirection.A_TO_B, False)
    assert fee_mode.fees_on_input is False
    assert fee_mode.fees_on_token_a is False
    assert fee_mode.has_referral is False


def test_fee_mode_quote_token_b_to_a():
    fee_mode = FeeMode.get_fee_mode(CollectFeeMode.ONLY_B, TradeDirection.B_TO_A, True)
    assert fee_mode.fees_on_input is True
    assert fee_mode.fees_on_token_a is False
    assert fee_mode.has_referral is True


def test_invalid_collect_fee_mode():
    with pytest.raises(PoolError) as info:
        FeeMode.get_fee_mode(2, TradeDirection.B_TO_A, False)
    assert info.value.code is ErrorCode.INVALID_COLLECT_FEE_MODE


def test_fee_mode_default():
    fee_mode = FeeMode()
    assert fee_mode.fees_on_input is False
    assert fee_mode.fees_on_token_a is False
    assert fee_mode.has_referral is False


def test_fee_mode_properties():
    fee_mode = FeeMode.get_fee_mode(CollectFeeMode.ONLY_B, TradeDirection.A_TO_B, True)
    assert fee_mode.fees_on_input is False
    fee_mode = FeeMode.get_fee_mode(CollectFeeMode.ONLY_B, TradeDirection.B_TO_A, False)
    assert fee_mode.fees_on_token_a is False


def _linear(cliff=1000, reduction=10, periods=5, frequency=10):
    return BaseFeeStruct(
        cliff_fee_numerator=cliff,
        fee_scheduler_mode=FeeSchedulerMode.LINEAR,
        number_of_period=periods,
        period_frequency=frequency,
        reduction_factor=reduction,
    )


def test_base_fee_zero_frequency_is_cliff():
    base = _linear(frequency=0)
    assert base.get_current_base_fee_numerator(1_000, 0) == 1000
    assert base.get_max_base_fee_numerator() == 1000


def test_base_fee_linear_periods():
    base = _linear()
    assert base.get_current_base_fee_numerator(0, 0) == 1000
    assert base.get_current_base_fee_numerator(25, 0) == 980
    assert base.get_current_base_fee_numerator(10_000, 0) == 950


def test_base_fee_before_activation_uses_min():
    base = _linear()
    assert base.get_current_base_fee_numerator(0, 100) == base.get_min_base_fee_numerator()
    assert base.get_min_base_fee_numerator() == 950


def test_base_fee_linear_underflow():
    base = _linear(cliff=10, reduction=10, periods=2)
    with pytest.raises(PoolError) as info:
        base.get_min_base_fee_numerator()
    assert info.value.code is ErrorCode.MATH_OVERFLOW


def test_base_fee_exponential_matches_fee_math():
    base = BaseFeeStruct(
        cliff_fee_numerator=500_000,
        fee_scheduler_mode=FeeSchedulerMode.EXPONENTIAL,
        number_of_period=20,
        period_frequency=5,
        reduction_factor=100,
    )
    assert base.get_current_base_fee_numerator(30, 0) == get_fee_in_period(500_000, 100, 6)
    assert base.get_min_base_fee_numerator() < base.get_max_base_fee_numerator()


def test_base_fee_invalid_mode():
    base = BaseFeeStruct(cliff_fee_numerator=10, fee_scheduler_mode=2, period_frequency=1)
    with pytest.raises(PoolError) as info:
        base.get_current_base_fee_numerator(1, 0)
    assert info.value.code is ErrorCode.TYPE_CAST_FAILED


def test_delta_bin_id_equal_prices_is_zero():
    assert DynamicFeeStruct.get_delta_bin_id(1, ONE_Q64, ONE_Q64) == 0


def test_delta_bin_id_symmetric():
    a, b = 2 * ONE_Q64, ONE_Q64
    assert DynamicFeeStruct.get_delta_bin_id(ONE_Q64, a, b) == 2
    assert DynamicFeeStruct.get_delta_bin_id(ONE_Q64, b, a) == 2


def test_delta_bin_id_zero_price_fails():
    with pytest.raises(PoolError):
        DynamicFeeStruct.get_delta_bin_id(1, ONE_Q64, 0)


def test_variable_fee_disabled_is_zero():
    dyn = DynamicFeeStruct(volatility_accumulator=10_000, bin_step=1, variable_fee_control=1)
    assert dyn.is_dynamic_fee_enable() is False
    assert dyn.get_variable_fee() == 0


def test_variable_fee_enabled():
    dyn = DynamicFeeStruct(
        initialized=1, volatility_accumulator=10_000, bin_step=1, variable_fee_control=100_000
    )
    assert dyn.get_variable_fee() == 100


def test_variable_fee_rounds_up():
    dyn = DynamicFeeStruct(
        initialized=1, volatility_accumulator=1, bin_step=1, variable_fee_control=1
    )
    assert dyn.get_variable_fee() == 1


def test_update_volatility_accumulator_clamps():
    dyn = DynamicFeeStruct(
        initialized=1,
        bin_step_u128=ONE_Q64,
        sqrt_price_reference=ONE_Q64,
        max_volatility_accumulator=5_000,
    )
    dyn.update_volatility_accumulator(2 * ONE_Q64)
    assert dyn.volatility_accumulator == 5_000


def test_update_volatility_accumulator_unclamped():
    dyn = DynamicFeeStruct(
        initialized=1,
        bin_step_u128=ONE_Q64,
        sqrt_price_reference=ONE_Q64,
        max_volatility_accumulator=1_000_000,
        volatility_reference=7,
    )
    dyn.update_volatility_accumulator(2 * ONE_Q64)
    assert dyn.volatility_accumulator == 20_007


def test_update_references_within_filter_keeps_state():
    dyn = DynamicFeeStruct(
        filter_period=10, decay_period=100, last_update_timestamp=50,
        sqrt_price_reference=1, volatility_reference=3, volatility_accumulator=10_000,
    )
    dyn.update_references(999, 55)
    assert dyn.sqrt_price_reference == 1
    assert dyn.volatility_reference == 3


def test_update_references_decay_window():
    dyn = DynamicFeeStruct(
        filter_period=10, decay_period=100, reduction_factor=5_000,
        last_update_timestamp=0, volatility_accumulator=10_000,
    )
    dyn.update_references(999, 50)
    assert dyn.sqrt_price_reference == 999
    assert dyn.volatility_reference == 5_000


def test_update_references_past_decay_resets():
    dyn = DynamicFeeStruct(
        filter_period=10, decay_period=100, reduction_factor=5_000,
        volatility_accumulator=10_000, volatility_reference=42,
    )
    dyn.update_references(999, 100)
    assert dyn.volatility_reference == 0


def test_update_references_time_backwards():
    dyn = DynamicFeeStruct(last_update_timestamp=10)
    with pytest.raises(PoolError):
        dyn.update_references(1, 5)


def _fees(cliff=100):
    return PoolFeesStruct(
        base_fee=BaseFeeStruct(cliff_fee_numerator=cliff),
        protocol_fee_percent=20,
        partner_fee_percent=50,
        referral_fee_percent=20,
    )


def test_total_trading_fee_adds_variable():
    fees = _fees()
    fees.dynamic_fee = DynamicFeeStruct(
        initialized=1, volatility_accumulator=10_000, bin_step=1, variable_fee_control=100_000
    )
    assert fees.get_total_trading_fee(0, 0) == 200


def test_fee_on_amount_split():
    result = _fees().get_fee_on_amount(1000, True, 0, 0, True, 500, 1000)
    assert result.amount == 900
    assert result.lp_fee == 80
    assert result.referral_fee == 4
    assert result.partner_fee == 8
    assert result.protocol_fee == 8


def test_fee_on_amount_conserves_total():
    result = _fees().get_fee_on_amount(123_457, True, 0, 0, False, 500, 1000)
    total = (
        result.amount + result.lp_fee + result.protocol_fee
        + result.partner_fee + result.referral_fee
    )
    assert total == 123_457
    assert result.partner_fee == 0


def test_fee_on_amount_caps_at_max():
    result = _fees(cliff=900).get_fee_on_amount(1000, False, 0, 0, False, 500, 1000)
    assert result.amount == 500
    assert result.referral_fee == 0
    assert result.lp_fee + result.protocol_fee == 500