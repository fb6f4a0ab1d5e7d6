"""Pool-level bookkeeping: status, metrics, farming rewards and operation results."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .fee_parameters import DEFAULT_PUBKEY
from .safe_math import ErrorCode, PoolError, safe_add, safe_mul, safe_sub
from .u128x128_math import Rounding, shl_div_256
from .utils_math import safe_mul_shr_cast, safe_shl_div_cast

_U64_MASK = (1 << 64) - 1


class PoolStatus(enum.IntEnum):
    """Whether a pool accepts trading and liquidity changes."""

    ENABLE = 0
    DISABLE = 1


class PoolType(enum.IntEnum):
    """How a pool was created."""

    PERMISSIONLESS = 0
    CUSTOMIZABLE = 1


@dataclass
class PoolMetrics:
    """Running totals of fees collected and positions opened in a pool."""

    total_lp_a_fee: int = 0
    total_lp_b_fee: int = 0
    total_protocol_a_fee: int = 0
    total_protocol_b_fee: int = 0
    total_partner_a_fee: int = 0
    total_partner_b_fee: int = 0
    total_position: int = 0

    def increase_position(self) -> None:
        """Count one more position, wrapping at 64 bits."""
        self.total_position = (self.total_position + 1) & _U64_MASK

    def reduce_position(self) -> None:
        """Count one position fewer, wrapping at 64 bits."""
        self.total_position = (self.total_position - 1) & _U64_MASK

    def accumulate_fee(
        self, lp_fee: int, protocol_fee: int, partner_fee: int, is_token_a: bool
    ) -> None:
        """Add the fees of one swap to the totals of token A or token B."""
        if is_token_a:
            self.total_lp_a_fee = safe_add(self.total_lp_a_fee, lp_fee, bits=128)
            self.total_protocol_a_fee = safe_add(self.total_protocol_a_fee, protocol_fee)
            self.total_partner_a_fee = safe_add(self.total_partner_a_fee, partner_fee)
        else:
            self.total_lp_b_fee = safe_add(self.total_lp_b_fee, lp_fee, bits=128)
            self.total_protocol_b_fee = safe_add(self.total_protocol_b_fee, protocol_fee)
            self.total_partner_b_fee = safe_add(self.total_partner_b_fee, partner_fee)


@dataclass
class RewardInfo:
    """State of one liquidity-mining reward of a pool."""

    initialized: int = 0
    reward_token_flag: int = 0
    mint: bytes = DEFAULT_PUBKEY
    vault: bytes = DEFAULT_PUBKEY
    funder: bytes = DEFAULT_PUBKEY
    reward_duration: int = 0
    reward_duration_end: int = 0
    reward_rate: int = 0
    reward_per_token_stored: int = 0
    last_update_time: int = 0
    cumulative_seconds_with_empty_liquidity_reward: int = 0

    def is_initialized(self) -> bool:
        """Whether the reward has been set up; it never goes back."""
        return self.initialized != 0

    def init_reward(
        self,
        mint: bytes,
        vault: bytes,
        funder: bytes,
        reward_duration: int,
        reward_token_flag: int,
    ) -> None:
        """Set the reward up."""
        self.initialized = 1
        self.mint = mint
        self.vault = vault
        self.funder = funder
        self.reward_duration = reward_duration
        self.reward_token_flag = reward_token_flag

    def update_rewards(
        self, liquidity_supply: int, current_time: int, liquidity_scale: int
    ) -> None:
        """Accumulate reward per liquidity up to ``current_time``.

        While no liquidity is present the elapsed time is remembered so the
        undistributed reward can be withdrawn later.
        """
        if not self.is_initialized():
            return
        if liquidity_supply > 0:
            delta = self.calculate_reward_per_token_stored_since_last_update(
                current_time, liquidity_supply, liquidity_scale
            )
            self.accumulate_reward_per_token_stored(delta)
        else:
            elapsed = self.get_seconds_elapsed_since_last_update(current_time)
            self.cumulative_seconds_with_empty_liquidity_reward = safe_add(
                self.cumulative_seconds_with_empty_liquidity_reward, elapsed
            )
        self.update_last_update_time(current_time)

    def update_last_update_time(self, current_time: int) -> None:
        """Move the last update time, never past the end of the reward window."""
        self.last_update_time = min(current_time, self.reward_duration_end)

    def get_seconds_elapsed_since_last_update(self, current_time: int) -> int:
        """Rewarded seconds since the last update."""
        last_applicable = min(current_time, self.reward_duration_end)
        return safe_sub(last_applicable, self.last_update_time)

    def calculate_reward_per_token_stored_since_last_update(
        self, current_time: int, liquidity_supply: int, liquidity_scale: int
    ) -> int:
        """Reward per unit of liquidity earned since the last update."""
        elapsed = self.get_seconds_elapsed_since_last_update(current_time)
        total_reward = safe_mul(elapsed, self.reward_rate, bits=128)
        result = shl_div_256(total_reward, liquidity_supply, liquidity_scale)
        if result is None:
            raise PoolError(ErrorCode.MATH_OVERFLOW)
        return result

    def accumulate_reward_per_token_stored(self, delta: int) -> None:
        """Add ``delta`` to the stored reward per unit of liquidity."""
        self.reward_per_token_stored = safe_add(
            self.reward_per_token_stored, delta, bits=256
        )

    def update_rate_after_funding(
        self, current_time: int, funding_amount: int, reward_rate_scale: int
    ) -> None:
        """Spread newly funded reward, plus any leftover, over a fresh window."""
        if current_time >= self.reward_duration_end:
            total_amount = funding_amount
        else:
            remaining_seconds = safe_sub(self.reward_duration_end, current_time)
            leftover = safe_mul_shr_cast(
                self.reward_rate, remaining_seconds, reward_rate_scale
            )
            total_amount = safe_add(funding_amount, leftover)

        self.reward_rate = safe_shl_div_cast(
            total_amount,
            self.reward_duration,
            reward_rate_scale,
            Rounding.DOWN,
            bits=128,
        )
        self.last_update_time = current_time
        self.reward_duration_end = safe_add(current_time, self.reward_duration)


@dataclass(frozen=True)
class SwapResult:
    """Outcome of a swap."""

    output_amount: int
    next_sqrt_price: int
    lp_fee: int
    protocol_fee: int
    partner_fee: int
    referral_fee: int


@dataclass(frozen=True)
class ModifyLiquidityResult:
    """Token amounts for a change of liquidity."""

    token_a_amount: int
    token_b_amount: int


@dataclass(frozen=True)
class SplitAmountInfo:
    """What a position split moved from one position to the other."""

    permanent_locked_liquidity: int
    unlocked_liquidity: int
    fee_a: int
    fee_b: int
    reward_0: int
    reward_1: int