"""User-supplied fee parameters, their validation and fee helper functions."""

from __future__ import annotations

from dataclasses import dataclass

from .fee import BaseFeeStruct, DynamicFeeStruct, FeeSchedulerMode, PoolFeesStruct
from .fee_math import BASIS_POINT_MAX, get_fee_in_period
from .safe_math import ErrorCode, PoolError, safe_mul, safe_sub

U24_MAX = (1 << 24) - 1
_U64_MAX = (1 << 64) - 1
_U128_MAX = (1 << 128) - 1
DEFAULT_PUBKEY = bytes(32)


def _require(condition: bool, code: ErrorCode) -> None:
    if not condition:
        raise PoolError(code)


@dataclass(frozen=True)
class BaseFeeParameters:
    """Base fee schedule as requested by a pool creator."""

    cliff_fee_numerator: int = 0
    number_of_period: int = 0
    period_frequency: int = 0
    reduction_factor: int = 0
    fee_scheduler_mode: int = 0

    def get_max_base_fee_numerator(self) -> int:
        """The fee at the cliff, which is the highest base fee."""
        return self.cliff_fee_numerator

    def get_min_base_fee_numerator(self) -> int:
        """The fee after every period has passed, which is the lowest base fee."""
        try:
            mode = FeeSchedulerMode(self.fee_scheduler_mode)
        except ValueError:
            raise PoolError(ErrorCode.TYPE_CAST_FAILED) from None
        if mode is FeeSchedulerMode.LINEAR:
            return safe_sub(
                self.cliff_fee_numerator,
                safe_mul(self.reduction_factor, self.number_of_period),
            )
        return get_fee_in_period(
            self.cliff_fee_numerator, self.reduction_factor, self.number_of_period
        )

    def validate(
        self, min_fee_numerator: int, max_fee_numerator: int, fee_denominator: int
    ) -> None:
        """Check the whole schedule stays within the allowed fee range."""
        lowest = self.get_min_base_fee_numerator()
        highest = self.get_max_base_fee_numerator()
        validate_fee_fraction(lowest, fee_denominator)
        validate_fee_fraction(highest, fee_denominator)
        _require(
            lowest >= min_fee_numerator and highest <= max_fee_numerator,
            ErrorCode.EXCEED_MAX_FEE_BPS,
        )

    def to_base_fee_struct(self) -> BaseFeeStruct:
        """The pool-state form of this schedule."""
        return BaseFeeStruct(
            cliff_fee_numerator=self.cliff_fee_numerator,
            fee_scheduler_mode=self.fee_scheduler_mode,
            number_of_period=self.number_of_period,
            period_frequency=self.period_frequency,
            reduction_factor=self.reduction_factor,
        )


@dataclass(frozen=True)
class DynamicFeeParameters:
    """Settings of the volatility-driven variable fee."""

    bin_step: int = 0
    bin_step_u128: int = 0
    filter_period: int = 0
    decay_period: int = 0
    reduction_factor: int = 0
    max_volatility_accumulator: int = 0
    variable_fee_control: int = 0

    def to_dynamic_fee_struct(self) -> DynamicFeeStruct:
        """The pool-state form of these settings, switched on."""
        return DynamicFeeStruct(
            initialized=1,
            bin_step=self.bin_step,
            bin_step_u128=self.bin_step_u128,
            filter_period=self.filter_period,
            decay_period=self.decay_period,
            reduction_factor=self.reduction_factor,
            max_volatility_accumulator=self.max_volatility_accumulator,
            variable_fee_control=self.variable_fee_control,
        )

    def validate(self, bin_step: int, bin_step_u128: int) -> None:
        """Check the settings against the supported bin step and value limits."""
        _require(self.bin_step == bin_step, ErrorCode.INVALID_INPUT)
        _require(self.bin_step_u128 == bin_step_u128, ErrorCode.INVALID_INPUT)
        _require(self.filter_period < self.decay_period, ErrorCode.INVALID_INPUT)
        _require(self.reduction_factor <= BASIS_POINT_MAX, ErrorCode.INVALID_INPUT)
        _require(self.variable_fee_control <= U24_MAX, ErrorCode.INVALID_INPUT)
        _require(self.max_volatility_accumulator <= U24_MAX, ErrorCode.INVALID_INPUT)


@dataclass(frozen=True)
class PoolFeeParameters:
    """Base fee schedule plus optional dynamic fee."""

    base_fee: BaseFeeParameters = BaseFeeParameters()
    dynamic_fee: DynamicFeeParameters | None = None

    def to_pool_fees_struct(
        self,
        protocol_fee_percent: int,
        partner_fee_percent: int,
        referral_fee_percent: int,
    ) -> PoolFeesStruct:
        """The pool-state fee settings with the given fee split."""
        dynamic = (
            self.dynamic_fee.to_dynamic_fee_struct()
            if self.dynamic_fee is not None
            else DynamicFeeStruct()
        )
        return PoolFeesStruct(
            base_fee=self.base_fee.to_base_fee_struct(),
            protocol_fee_percent=protocol_fee_percent,
            partner_fee_percent=partner_fee_percent,
            referral_fee_percent=referral_fee_percent,
            dynamic_fee=dynamic,
        )

    def validate(
        self,
        min_fee_numerator: int,
        max_fee_numerator: int,
        fee_denominator: int,
        bin_step: int,
        bin_step_u128: int,
    ) -> None:
        """Check that the fees are reasonable."""
        self.base_fee.validate(min_fee_numerator, max_fee_numerator, fee_denominator)
        if self.dynamic_fee is not None:
            self.dynamic_fee.validate(bin_step, bin_step_u128)


@dataclass
class PartnerInfo:
    """Partner that shares in the protocol fee."""

    fee_percent: int = 0
    partner_authority: bytes = DEFAULT_PUBKEY
    pending_fee_a: int = 0
    pending_fee_b: int = 0

    def have_partner(self) -> bool:
        """Whether a partner authority is set."""
        return self.partner_authority != DEFAULT_PUBKEY

    def validate(self) -> None:
        """A partner fee share needs a partner."""
        if not self.have_partner():
            _require(self.fee_percent == 0, ErrorCode.INVALID_FEE)


def calculate_fee(token_amount: int, fee_numerator: int, fee_denominator: int) -> int | None:
    """Swap fee on ``token_amount``, at least one token when any fee is due; None on overflow."""
    if fee_numerator == 0 or token_amount == 0:
        return 0
    product = token_amount * fee_numerator
    if product > _U128_MAX or fee_denominator == 0:
        return None
    fee = product // fee_denominator
    return fee if fee else 1


def validate_fee_fraction(numerator: int, denominator: int) -> None:
    """Raise unless ``numerator / denominator`` is a proper fraction."""
    if denominator == 0 or numerator >= denominator:
        raise PoolError(ErrorCode.INVALID_FEE)


def to_bps(numerator: int, denominator: int) -> int | None:
    """Convert a fee fraction to basis points; None on overflow or zero denominator."""
    product = numerator * BASIS_POINT_MAX
    if product > _U128_MAX or denominator == 0:
        return None
    bps = product // denominator
    return bps if bps <= _U64_MAX else None