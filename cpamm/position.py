"""Liquidity positions: liquidity buckets, pending fees and farming rewards."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .fee_parameters import DEFAULT_PUBKEY
from .safe_math import ErrorCode, PoolError, safe_add, safe_sub
from .u128x128_math import Rounding
from .utils_math import (
    safe_mul_div_cast_u64,
    safe_mul_div_cast_u128,
    safe_mul_shr_256_cast,
)

NUM_REWARDS = 2
_U64_MASK = (1 << 64) - 1


@dataclass
class UserRewardInfo:
    """A position's progress on one farming reward."""

    reward_per_token_checkpoint: int = 0
    reward_pendings: int = 0
    total_claimed_rewards: int = 0

    def update_rewards(
        self, position_liquidity: int, reward_per_token_stored: int, total_reward_scale: int
    ) -> None:
        """Accrue rewards earned since the last checkpoint."""
        delta = safe_sub(
            reward_per_token_stored, self.reward_per_token_checkpoint, bits=256
        )
        new_reward = safe_mul_shr_256_cast(position_liquidity, delta, total_reward_scale)
        self.reward_pendings = safe_add(new_reward, self.reward_pendings)
        self.reward_per_token_checkpoint = reward_per_token_stored


@dataclass
class PositionMetrics:
    """Running totals of fees claimed by a position."""

    total_claimed_a_fee: int = 0
    total_claimed_b_fee: int = 0

    def accumulate_claimed_fee(self, token_a_amount: int, token_b_amount: int) -> None:
        """Add claimed fee amounts to the totals."""
        self.total_claimed_a_fee = safe_add(self.total_claimed_a_fee, token_a_amount)
        self.total_claimed_b_fee = safe_add(self.total_claimed_b_fee, token_b_amount)


@dataclass(frozen=True)
class SplitFeeAmount:
    """Pending fee amounts moved by a split."""

    fee_a_amount: int
    fee_b_amount: int


@dataclass(frozen=True)
class SplitPositionInfo:
    """Amounts moved into a new position by a split."""

    liquidity: int
    fee_a: int
    fee_b: int
    reward_0: int
    reward_1: int


def _reward_infos() -> list[UserRewardInfo]:
    return [UserRewardInfo() for _ in range(NUM_REWARDS)]


@dataclass
class Position:
    """A share of a pool's liquidity, with its pending fees and rewards."""

    pool: bytes = DEFAULT_PUBKEY
    nft_mint: bytes = DEFAULT_PUBKEY
    fee_a_per_token_checkpoint: int = 0
    fee_b_per_token_checkpoint: int = 0
    fee_a_pending: int = 0
    fee_b_pending: int = 0
    unlocked_liquidity: int = 0
    vested_liquidity: int = 0
    permanent_locked_liquidity: int = 0
    metrics: PositionMetrics = field(default_factory=PositionMetrics)
    reward_infos: list[UserRewardInfo] = field(default_factory=_reward_infos)

    def has_sufficient_liquidity(self, liquidity: int) -> bool:
        """Whether at least ``liquidity`` is unlocked."""
        return self.unlocked_liquidity >= liquidity

    def get_total_liquidity(self) -> int:
        """Unlocked, vested and permanently locked liquidity together."""
        return safe_add(
            safe_add(self.unlocked_liquidity, self.vested_liquidity, bits=128),
            self.permanent_locked_liquidity,
            bits=128,
        )

    def lock(self, total_lock_liquidity: int) -> None:
        """Move unlocked liquidity into vesting."""
        if not self.has_sufficient_liquidity(total_lock_liquidity):
            raise PoolError(ErrorCode.INSUFFICIENT_LIQUIDITY)
        self.remove_unlocked_liquidity(total_lock_liquidity)
        self.vested_liquidity = safe_add(
            self.vested_liquidity, total_lock_liquidity, bits=128
        )

    def permanent_lock_liquidity(self, permanent_lock_liquidity: int) -> None:
        """Move unlocked liquidity into the permanent lock."""
        if not self.has_sufficient_liquidity(permanent_lock_liquidity):
            raise PoolError(ErrorCode.INSUFFICIENT_LIQUIDITY)
        self.remove_unlocked_liquidity(permanent_lock_liquidity)
        self.permanent_locked_liquidity = safe_add(
            self.permanent_locked_liquidity, permanent_lock_liquidity, bits=128
        )

    def remove_permanent_locked_liquidity(self, permanent_locked_liquidity_delta: int) -> None:
        """Take liquidity out of the permanent lock (used when splitting)."""
        if permanent_locked_liquidity_delta > self.permanent_locked_liquidity:
            raise PoolError(ErrorCode.INSUFFICIENT_LIQUIDITY)
        self.permanent_locked_liquidity = safe_sub(
            self.permanent_locked_liquidity, permanent_locked_liquidity_delta, bits=128
        )

    def add_permanent_locked_liquidity(self, permanent_lock_liquidity_delta: int) -> None:
        """Add liquidity to the permanent lock."""
        self.permanent_locked_liquidity = safe_add(
            self.permanent_locked_liquidity, permanent_lock_liquidity_delta, bits=128
        )

    def remove_fee_pending(self, fee_a_delta: int, fee_b_delta: int) -> None:
        """Reduce pending fees."""
        self.fee_a_pending = safe_sub(self.fee_a_pending, fee_a_delta)
        self.fee_b_pending = safe_sub(self.fee_b_pending, fee_b_delta)

    def add_fee_pending(self, fee_a_delta: int, fee_b_delta: int) -> None:
        """Increase pending fees."""
        self.fee_a_pending = safe_add(self.fee_a_pending, fee_a_delta)
        self.fee_b_pending = safe_add(self.fee_b_pending, fee_b_delta)

    def remove_reward_pending(self, reward_index: int, reward_amount: int) -> None:
        """Reduce the pending amount of one reward."""
        info = self.reward_infos[reward_index]
        info.reward_pendings = safe_sub(info.reward_pendings, reward_amount)

    def add_reward_pending(self, reward_index: int, reward_amount: int) -> None:
        """Increase the pending amount of one reward."""
        info = self.reward_infos[reward_index]
        info.reward_pendings = safe_add(info.reward_pendings, reward_amount)

    def update_fee(
        self, fee_a_per_token_stored: int, fee_b_per_token_stored: int, liquidity_scale: int
    ) -> None:
        """Accrue fees earned since the last checkpoint and move the checkpoints."""
        liquidity = self.get_total_liquidity()
        if liquidity > 0:
            new_fee_a = safe_mul_shr_256_cast(
                liquidity,
                safe_sub(fee_a_per_token_stored, self.fee_a_per_token_checkpoint, bits=256),
                liquidity_scale,
            )
            self.fee_a_pending = safe_add(new_fee_a, self.fee_a_pending)
            new_fee_b = safe_mul_shr_256_cast(
                liquidity,
                safe_sub(fee_b_per_token_stored, self.fee_b_per_token_checkpoint, bits=256),
                liquidity_scale,
            )
            self.fee_b_pending = safe_add(new_fee_b, self.fee_b_pending)
        self.fee_a_per_token_checkpoint = fee_a_per_token_stored
        self.fee_b_per_token_checkpoint = fee_b_per_token_stored

    def release_vested_liquidity(self, released_liquidity: int) -> None:
        """Move vested liquidity back to unlocked."""
        self.vested_liquidity = safe_sub(self.vested_liquidity, released_liquidity, bits=128)
        self.add_liquidity(released_liquidity)

    def add_liquidity(self, liquidity_delta: int) -> None:
        """Add unlocked liquidity."""
        self.unlocked_liquidity = safe_add(self.unlocked_liquidity, liquidity_delta, bits=128)

    def remove_unlocked_liquidity(self, liquidity_delta: int) -> None:
        """Remove unlocked liquidity."""
        self.unlocked_liquidity = safe_sub(self.unlocked_liquidity, liquidity_delta, bits=128)

    def reset_pending_fee(self) -> None:
        """Clear pending fees after they were claimed."""
        self.fee_a_pending = 0
        self.fee_b_pending = 0

    def update_position_reward(self, pool: Any, total_reward_scale: int) -> None:
        """Accrue rewards for every initialized reward of ``pool``."""
        liquidity = self.get_total_liquidity()
        for pool_reward, user_reward in zip(pool.reward_infos, self.reward_infos):
            if pool_reward.is_initialized():
                user_reward.update_rewards(
                    liquidity, pool_reward.reward_per_token_stored, total_reward_scale
                )

    def claim_reward(self, reward_index: int) -> int:
        """Hand out the pending amount of one reward and clear it."""
        info = self.reward_infos[reward_index]
        total_reward = info.reward_pendings
        info.total_claimed_rewards = (info.total_claimed_rewards + total_reward) & _U64_MASK
        self.reset_all_pending_reward(reward_index)
        return total_reward

    def reset_all_pending_reward(self, reward_index: int) -> None:
        """Clear the pending amount of one reward."""
        self.reward_infos[reward_index].reward_pendings = 0

    def is_empty(self) -> bool:
        """Whether nothing is left in the position: no liquidity, fees or rewards."""
        if any(info.reward_pendings != 0 for info in self.reward_infos):
            return False
        return (
            self.get_total_liquidity() == 0
            and self.fee_a_pending == 0
            and self.fee_b_pending == 0
        )

    def get_unlocked_liquidity_by_numerator(self, numerator: int, denominator: int) -> int:
        """Share ``numerator / denominator`` of the unlocked liquidity, rounded down."""
        return safe_mul_div_cast_u128(
            self.unlocked_liquidity, numerator, denominator, Rounding.DOWN
        )

    def get_permanent_locked_liquidity_by_numerator(
        self, numerator: int, denominator: int
    ) -> int:
        """Share ``numerator / denominator`` of the permanent lock, rounded down."""
        return safe_mul_div_cast_u128(
            self.permanent_locked_liquidity, numerator, denominator, Rounding.DOWN
        )

    def get_pending_fee_by_numerator(
        self, fee_a_numerator: int, fee_b_numerator: int, denominator: int
    ) -> SplitFeeAmount:
        """Shares of the pending fees, rounded down."""
        return SplitFeeAmount(
            fee_a_amount=safe_mul_div_cast_u64(
                self.fee_a_pending, fee_a_numerator, denominator, Rounding.DOWN
            ),
            fee_b_amount=safe_mul_div_cast_u64(
                self.fee_b_pending, fee_b_numerator, denominator, Rounding.DOWN
            ),
        )

    def get_pending_reward_by_numerator(
        self, reward_index: int, reward_numerator: int, denominator: int
    ) -> int:
        """Share of one pending reward, rounded down."""
        return safe_mul_div_cast_u64(
            self.reward_infos[reward_index].reward_pendings,
            reward_numerator,
            denominator,
            Rounding.DOWN,
        )