"""Pool configuration accounts and timing constraints."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from .fee import BaseFeeStruct, DynamicFeeStruct, PoolFeesStruct
from .fee_parameters import (
    DEFAULT_PUBKEY,
    BaseFeeParameters,
    DynamicFeeParameters,
    PartnerInfo,
    PoolFeeParameters,
)
from .safe_math import ErrorCode, PoolError, safe_add


class ConfigType(enum.IntEnum):
    """Whether pools take their parameters from the config or from the creator."""

    STATIC = 0
    DYNAMIC = 1


@dataclass
class BaseFeeConfig:
    """Stored base fee schedule."""

    cliff_fee_numerator: int = 0
    fee_scheduler_mode: int = 0
    number_of_period: int = 0
    period_frequency: int = 0
    reduction_factor: int = 0

    @classmethod
    def from_parameters(cls, parameters: BaseFeeParameters) -> BaseFeeConfig:
        """Build the stored form of a base fee schedule."""
        return cls(
            cliff_fee_numerator=parameters.cliff_fee_numerator,
            fee_scheduler_mode=parameters.fee_scheduler_mode,
            number_of_period=parameters.number_of_period,
            period_frequency=parameters.period_frequency,
            reduction_factor=parameters.reduction_factor,
        )

    def to_base_fee_parameters(self) -> BaseFeeParameters:
        """Back to parameter form."""
        return BaseFeeParameters(
            cliff_fee_numerator=self.cliff_fee_numerator,
            number_of_period=self.number_of_period,
            period_frequency=self.period_frequency,
            reduction_factor=self.reduction_factor,
            fee_scheduler_mode=self.fee_scheduler_mode,
        )

    def to_base_fee_struct(self) -> BaseFeeStruct:
        """The pool-state form."""
        return BaseFeeStruct(
            cliff_fee_numerator=self.cliff_fee_numerator,
            fee_scheduler_mode=self.fee_scheduler_mode,
            number_of_period=self.number_of_period,
            period_frequency=self.period_frequency,
            reduction_factor=self.reduction_factor,
        )


@dataclass
class DynamicFeeConfig:
    """Stored dynamic fee settings; ``initialized == 0`` means switched off."""

    initialized: int = 0
    max_volatility_accumulator: int = 0
    variable_fee_control: int = 0
    bin_step: int = 0
    filter_period: int = 0
    decay_period: int = 0
    reduction_factor: int = 0
    bin_step_u128: int = 0

    @classmethod
    def from_parameters(cls, parameters: DynamicFeeParameters) -> DynamicFeeConfig:
        """Build the stored form of dynamic fee settings, switched on."""
        return cls(
            initialized=1,
            max_volatility_accumulator=parameters.max_volatility_accumulator,
            variable_fee_control=parameters.variable_fee_control,
            bin_step=parameters.bin_step,
            filter_period=parameters.filter_period,
            decay_period=parameters.decay_period,
            reduction_factor=parameters.reduction_factor,
            bin_step_u128=parameters.bin_step_u128,
        )

    def to_dynamic_fee_struct(self) -> DynamicFeeStruct:
        """The pool-state form; a blank struct when switched off."""
        if self.initialized == 0:
            return DynamicFeeStruct()
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


@dataclass
class PoolFeesConfig:
    """Stored fee settings of a config."""

    base_fee: BaseFeeConfig = field(default_factory=BaseFeeConfig)
    dynamic_fee: DynamicFeeConfig = field(default_factory=DynamicFeeConfig)
    protocol_fee_percent: int = 0
    partner_fee_percent: int = 0
    referral_fee_percent: int = 0

    @classmethod
    def from_parameters(
        cls,
        parameters: PoolFeeParameters,
        protocol_fee_percent: int,
        partner_fee_percent: int,
        referral_fee_percent: int,
    ) -> PoolFeesConfig:
        """Build stored fee settings from parameters and a fee split."""
        dynamic = (
            DynamicFeeConfig.from_parameters(parameters.dynamic_fee)
            if parameters.dynamic_fee is not None
            else DynamicFeeConfig()
        )
        return cls(
            base_fee=BaseFeeConfig.from_parameters(parameters.base_fee),
            dynamic_fee=dynamic,
            protocol_fee_percent=protocol_fee_percent,
            partner_fee_percent=partner_fee_percent,
            referral_fee_percent=referral_fee_percent,
        )

    def to_pool_fee_parameters(self) -> PoolFeeParameters:
        """Back to parameter form."""
        dynamic = self.dynamic_fee
        dynamic_parameters = (
            DynamicFeeParameters(
                bin_step=dynamic.bin_step,
                bin_step_u128=dynamic.bin_step_u128,
                filter_period=dynamic.filter_period,
                decay_period=dynamic.decay_period,
                reduction_factor=dynamic.reduction_factor,
                max_volatility_accumulator=dynamic.max_volatility_accumulator,
                variable_fee_control=dynamic.variable_fee_control,
            )
            if dynamic.initialized == 1
            else None
        )
        return PoolFeeParameters(
            base_fee=self.base_fee.to_base_fee_parameters(),
            dynamic_fee=dynamic_parameters,
        )

    def to_pool_fees_struct(self) -> PoolFeesStruct:
        """The pool-state form."""
        return PoolFeesStruct(
            base_fee=self.base_fee.to_base_fee_struct(),
            protocol_fee_percent=self.protocol_fee_percent,
            partner_fee_percent=self.partner_fee_percent,
            referral_fee_percent=self.referral_fee_percent,
            dynamic_fee=self.dynamic_fee.to_dynamic_fee_struct(),
        )


@dataclass
class BootstrappingConfig:
    """Activation settings for a bootstrapped pool."""

    activation_point: int
    vault_config_key: bytes
    activation_type: int


@dataclass(frozen=True)
class TimingConstraint:
    """Timing limits for one activation type, at a current point."""

    current_point: int
    min_activation_duration: int
    max_activation_duration: int
    pre_activation_swap_duration: int
    last_join_buffer: int
    max_fee_curve_duration: int
    max_high_tax_duration: int

    def get_max_activation_point_from_current_time(self) -> int:
        """The latest activation point allowed from now."""
        return safe_add(self.current_point, self.max_activation_duration)


@dataclass
class Config:
    """A pool configuration set up by the protocol."""

    vault_config_key: bytes = DEFAULT_PUBKEY
    pool_creator_authority: bytes = DEFAULT_PUBKEY
    pool_fees: PoolFeesConfig = field(default_factory=PoolFeesConfig)
    activation_type: int = 0
    collect_fee_mode: int = 0
    config_type: int = ConfigType.STATIC
    index: int = 0
    sqrt_min_price: int = 0
    sqrt_max_price: int = 0

    def init_static_config(
        self,
        index: int,
        pool_fees: PoolFeeParameters,
        vault_config_key: bytes,
        pool_creator_authority: bytes,
        activation_type: int,
        sqrt_min_price: int,
        sqrt_max_price: int,
        collect_fee_mode: int,
        protocol_fee_percent: int,
        partner_fee_percent: int,
        referral_fee_percent: int,
    ) -> None:
        """Fill in a config whose pools take every parameter from it."""
        self.index = index
        self.pool_fees = PoolFeesConfig.from_parameters(
            pool_fees, protocol_fee_percent, partner_fee_percent, referral_fee_percent
        )
        self.vault_config_key = vault_config_key
        self.pool_creator_authority = pool_creator_authority
        self.activation_type = activation_type
        self.sqrt_min_price = sqrt_min_price
        self.sqrt_max_price = sqrt_max_price
        self.collect_fee_mode = collect_fee_mode
        self.config_type = ConfigType.STATIC

    def get_config_type(self) -> ConfigType:
        """The config type, validated."""
        try:
            return ConfigType(self.config_type)
        except ValueError:
            raise PoolError(ErrorCode.TYPE_CAST_FAILED) from None

    def init_dynamic_config(self, index: int, pool_creator_authority: bytes) -> None:
        """Fill in a private config whose pools choose their own parameters."""
        self.index = index
        self.pool_creator_authority = pool_creator_authority
        self.config_type = ConfigType.DYNAMIC

    def get_partner_info(self) -> PartnerInfo:
        """Partner of pools created from this config."""
        return PartnerInfo(
            partner_authority=self.pool_creator_authority,
            fee_percent=self.pool_fees.partner_fee_percent,
        )

    def has_alpha_vault(self) -> bool:
        """Whether pools from this config are paired with an alpha vault."""
        return self.vault_config_key != DEFAULT_PUBKEY


@dataclass
class ClaimFeeOperator:
    """An account allowed to claim protocol fees."""

    operator: bytes = DEFAULT_PUBKEY


@dataclass
class TokenBadge:
    """Marks a token mint as supported by the protocol."""

    token_mint: bytes = DEFAULT_PUBKEY