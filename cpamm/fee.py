"""Trading fee model: base fee schedule, dynamic (volatility) fee and fee split."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .fee_math import BASIS_POINT_MAX, ONE_Q64, get_fee_in_period
from .safe_math import (
    ErrorCode,
    PoolError,
    safe_add,
    safe_div,
    safe_mul,
    safe_sub,
)
from .u128x128_math import Rounding
from .utils_math import safe_mul_div_cast_u64, safe_shl_div_cast

_U128_MAX = (1 << 128) - 1
_VARIABLE_FEE_SCALE = 100_000_000_000


class TradeDirection(enum.IntEnum):
    """Direction of a swap."""

    A_TO_B = 0
    B_TO_A = 1


class CollectFeeMode(enum.IntEnum):
    """Which token trading fees are collected in."""

    BOTH_TOKEN = 0
    ONLY_B = 1


class FeeSchedulerMode(enum.IntEnum):
    """Shape of the base fee decay over time."""

    LINEAR = 0
    EXPONENTIAL = 1


@dataclass(frozen=True)
class FeeOnAmountResult:
    """An amount after fees together with how the fee was split."""

    amount: int
    lp_fee: int
    protocol_fee: int
    partner_fee: int
    referral_fee: int


@dataclass
class BaseFeeStruct:
    """Base fee that decays from a cliff value over a number of periods."""

    cliff_fee_numerator: int = 0
    fee_scheduler_mode: int = 0
    number_of_period: int = 0
    period_frequency: int = 0
    reduction_factor: int = 0

    def get_max_base_fee_numerator(self) -> int:
        """The highest base fee, charged at the cliff."""
        return self.cliff_fee_numerator

    def get_min_base_fee_numerator(self) -> int:
        """The lowest base fee, reached after every period has passed."""
        return self.get_current_base_fee_numerator(0, 1)

    def get_current_base_fee_numerator(
        self, current_point: int, activation_point: int
    ) -> int:
        """Base fee numerator at ``current_point`` for a pool activated at ``activation_point``."""
        if self.period_frequency == 0:
            return self.cliff_fee_numerator
        if current_point < activation_point:
            # Trading before activation happens only through the alpha vault.
            period = self.number_of_period
        else:
            period = safe_div(
                safe_sub(current_point, activation_point), self.period_frequency
            )
            period = min(period, self.number_of_period)
        try:
            mode = FeeSchedulerMode(self.fee_scheduler_mode)
        except ValueError:
            raise PoolError(ErrorCode.TYPE_CAST_FAILED) from None

        if mode is FeeSchedulerMode.LINEAR:
            return safe_sub(
                self.cliff_fee_numerator, safe_mul(period, self.reduction_factor)
            )
        if period > 0xFFFF:
            raise PoolError(ErrorCode.MATH_OVERFLOW)
        return get_fee_in_period(self.cliff_fee_numerator, self.reduction_factor, period)


@dataclass
class DynamicFeeStruct:
    """Volatility-driven variable fee state."""

    initialized: int = 0
    max_volatility_accumulator: int = 0
    variable_fee_control: int = 0
    bin_step: int = 0
    filter_period: int = 0
    decay_period: int = 0
    reduction_factor: int = 0
    last_update_timestamp: int = 0
    bin_step_u128: int = 0
    sqrt_price_reference: int = 0
    volatility_accumulator: int = 0
    volatility_reference: int = 0

    @staticmethod
    def get_delta_bin_id(bin_step_u128: int, sqrt_price_a: int, sqrt_price_b: int) -> int:
        """Approximate number of bins between two sqrt prices, doubled."""
        upper, lower = max(sqrt_price_a, sqrt_price_b), min(sqrt_price_a, sqrt_price_b)
        price_ratio = safe_shl_div_cast(upper, lower, 64, Rounding.DOWN, bits=128)
        delta_bin_id = safe_div(
            safe_sub(price_ratio, ONE_Q64, bits=128), bin_step_u128, bits=128
        )
        return safe_mul(delta_bin_id, 2, bits=128)

    def update_volatility_accumulator(self, sqrt_price: int) -> None:
        """Recompute the accumulator from the distance to the reference price."""
        delta_price = self.get_delta_bin_id(
            self.bin_step_u128, sqrt_price, self.sqrt_price_reference
        )
        accumulator = safe_add(
            self.volatility_reference,
            safe_mul(delta_price, BASIS_POINT_MAX, bits=128),
            bits=128,
        )
        self.volatility_accumulator = min(accumulator, self.max_volatility_accumulator)

    def update_references(self, sqrt_price_current: int, current_timestamp: int) -> None:
        """Move the reference price and decay the reference volatility."""
        elapsed = safe_sub(current_timestamp, self.last_update_timestamp)
        if elapsed < self.filter_period:
            return
        self.sqrt_price_reference = sqrt_price_current
        if elapsed < self.decay_period:
            self.volatility_reference = safe_div(
                safe_mul(self.volatility_accumulator, self.reduction_factor, bits=128),
                BASIS_POINT_MAX,
                bits=128,
            )
        else:
            self.volatility_reference = 0

    def is_dynamic_fee_enable(self) -> bool:
        """Whether the variable fee is switched on."""
        return self.initialized != 0

    def get_variable_fee(self) -> int:
        """Variable fee numerator derived from current volatility."""
        if not self.is_dynamic_fee_enable():
            return 0
        vfa_bin = safe_mul(self.volatility_accumulator, self.bin_step, bits=128)
        square_vfa_bin = vfa_bin * vfa_bin
        if square_vfa_bin > _U128_MAX:
            raise PoolError(ErrorCode.MATH_OVERFLOW)
        v_fee = safe_mul(square_vfa_bin, self.variable_fee_control, bits=128)
        return safe_div(
            safe_add(v_fee, _VARIABLE_FEE_SCALE - 1, bits=128),
            _VARIABLE_FEE_SCALE,
            bits=128,
        )


@dataclass
class PoolFeesStruct:
    """All fee settings of a pool."""

    base_fee: BaseFeeStruct = field(default_factory=BaseFeeStruct)
    protocol_fee_percent: int = 0
    partner_fee_percent: int = 0
    referral_fee_percent: int = 0
    dynamic_fee: DynamicFeeStruct = field(default_factory=DynamicFeeStruct)

    def get_total_trading_fee(self, current_point: int, activation_point: int) -> int:
        """Base plus variable fee numerator."""
        base = self.base_fee.get_current_base_fee_numerator(current_point, activation_point)
        return safe_add(self.dynamic_fee.get_variable_fee(), base, bits=128)

    def get_fee_on_amount(
        self,
        amount: int,
        has_referral: bool,
        current_point: int,
        activation_point: int,
        has_partner: bool,
        max_fee_numerator: int,
        fee_denominator: int,
    ) -> FeeOnAmountResult:
        """Charge the trading fee on ``amount`` and split it between the parties."""
        trade_fee_numerator = min(
            self.get_total_trading_fee(current_point, activation_point), max_fee_numerator
        )
        lp_fee = safe_mul_div_cast_u64(
            amount, trade_fee_numerator, fee_denominator, Rounding.UP
        )
        amount = safe_sub(amount, lp_fee)

        protocol_fee = safe_mul_div_cast_u64(
            lp_fee, self.protocol_fee_percent, 100, Rounding.DOWN
        )
        lp_fee = safe_sub(lp_fee, protocol_fee)

        referral_fee = (
            safe_mul_div_cast_u64(protocol_fee, self.referral_fee_percent, 100, Rounding.DOWN)
            if has_referral
            else 0
        )
        protocol_after_referral = safe_sub(protocol_fee, referral_fee)

        partner_fee = (
            safe_mul_div_cast_u64(
                protocol_after_referral, self.partner_fee_percent, 100, Rounding.DOWN
            )
            if has_partner and self.partner_fee_percent > 0
            else 0
        )
        protocol_fee = safe_sub(protocol_after_referral, partner_fee)

        return FeeOnAmountResult(
            amount=amount,
            lp_fee=lp_fee,
            protocol_fee=protocol_fee,
            partner_fee=partner_fee,
            referral_fee=referral_fee,
        )


_FEE_PLACEMENT = {
    (CollectFeeMode.BOTH_TOKEN, TradeDirection.A_TO_B): (False, False),
    (CollectFeeMode.BOTH_TOKEN, TradeDirection.B_TO_A): (False, True),
    (CollectFeeMode.ONLY_B, TradeDirection.A_TO_B): (False, False),
    (CollectFeeMode.ONLY_B, TradeDirection.B_TO_A): (True, False),
}


@dataclass
class FeeMode:
    """Where the fee of a particular swap is taken from."""

    fees_on_input: bool = False
    fees_on_token_a: bool = False
    has_referral: bool = False

    @classmethod
    def get_fee_mode(
        cls, collect_fee_mode: int, trade_direction: TradeDirection, has_referral: bool
    ) -> FeeMode:
        """Work out the fee placement for a collect mode and trade direction."""
        try:
            mode = CollectFeeMode(collect_fee_mode)
        except ValueError:
            raise PoolError(ErrorCode.INVALID_COLLECT_FEE_MODE) from None
        fees_on_input, fees_on_token_a = _FEE_PLACEMENT[(mode, TradeDirection(trade_direction))]
        return cls(
            fees_on_input=fees_on_input,
            fees_on_token_a=fees_on_token_a,
            has_referral=has_referral,
        )