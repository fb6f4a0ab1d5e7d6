"""Pool state: liquidity, accumulated fees, dynamic fee updates and rewards."""

from __future__ import annotations

from dataclasses import dataclass, field

from .fee import DynamicFeeStruct, FeeMode, PoolFeesStruct
from .fee_parameters import DEFAULT_PUBKEY
from .position import NUM_REWARDS, Position
from .rewards import PoolMetrics, RewardInfo, SplitAmountInfo, SwapResult
from .safe_math import ErrorCode, PoolError, safe_add, safe_sub
from .u128x128_math import shl_div_256
from .utils_math import safe_mul_shr_cast


def _reward_infos() -> list[RewardInfo]:
    return [RewardInfo() for _ in range(NUM_REWARDS)]


@dataclass
class Pool:
    """A constant-product pool over a bounded sqrt price range."""

    pool_fees: PoolFeesStruct = field(default_factory=PoolFeesStruct)
    token_a_mint: bytes = DEFAULT_PUBKEY
    token_b_mint: bytes = DEFAULT_PUBKEY
    token_a_vault: bytes = DEFAULT_PUBKEY
    token_b_vault: bytes = DEFAULT_PUBKEY
    whitelisted_vault: bytes = DEFAULT_PUBKEY
    partner: bytes = DEFAULT_PUBKEY
    liquidity: int = 0
    protocol_a_fee: int = 0
    protocol_b_fee: int = 0
    partner_a_fee: int = 0
    partner_b_fee: int = 0
    sqrt_min_price: int = 0
    sqrt_max_price: int = 0
    sqrt_price: int = 0
    activation_point: int = 0
    activation_type: int = 0
    pool_status: int = 0
    token_a_flag: int = 0
    token_b_flag: int = 0
    collect_fee_mode: int = 0
    pool_type: int = 0
    fee_a_per_liquidity: int = 0
    fee_b_per_liquidity: int = 0
    permanent_lock_liquidity: int = 0
    metrics: PoolMetrics = field(default_factory=PoolMetrics)
    creator: bytes = DEFAULT_PUBKEY
    reward_infos: list[RewardInfo] = field(default_factory=_reward_infos)

    def pool_reward_initialized(self) -> bool:
        """Whether any farming reward has been set up."""
        return any(info.is_initialized() for info in self.reward_infos)

    def add_position(self, position: Position) -> None:
        """Count a newly opened position of this pool."""
        del position
        self.metrics.increase_position()

    def apply_swap_result(
        self,
        swap_result: SwapResult,
        fee_mode: FeeMode,
        current_timestamp: int,
        liquidity_scale: int,
    ) -> None:
        """Move the price and book the fees of a completed swap."""
        old_sqrt_price = self.sqrt_price
        self.sqrt_price = swap_result.next_sqrt_price

        fee_per_token_stored = shl_div_256(
            swap_result.lp_fee, self.liquidity, liquidity_scale
        )
        if fee_per_token_stored is None:
            raise PoolError(ErrorCode.MATH_OVERFLOW)

        if fee_mode.fees_on_token_a:
            self.partner_a_fee = safe_add(self.partner_a_fee, swap_result.partner_fee)
            self.protocol_a_fee = safe_add(self.protocol_a_fee, swap_result.protocol_fee)
            self.fee_a_per_liquidity = safe_add(
                self.fee_a_per_liquidity, fee_per_token_stored, bits=256
            )
        else:
            self.partner_b_fee = safe_add(self.partner_b_fee, swap_result.partner_fee)
            self.protocol_b_fee = safe_add(self.protocol_b_fee, swap_result.protocol_fee)
            self.fee_b_per_liquidity = safe_add(
                self.fee_b_per_liquidity, fee_per_token_stored, bits=256
            )
        self.metrics.accumulate_fee(
            swap_result.lp_fee,
            swap_result.protocol_fee,
            swap_result.partner_fee,
            fee_mode.fees_on_token_a,
        )

        self.update_post_swap(old_sqrt_price, current_timestamp)

    def apply_add_liquidity(
        self, position: Position, liquidity_delta: int, liquidity_scale: int
    ) -> None:
        """Settle the position's fees, then add liquidity to it and to the pool."""
        position.update_fee(
            self.fee_a_per_liquidity, self.fee_b_per_liquidity, liquidity_scale
        )
        position.add_liquidity(liquidity_delta)
        self.liquidity = safe_add(self.liquidity, liquidity_delta, bits=128)

    def apply_remove_liquidity(
        self, position: Position, liquidity_delta: int, liquidity_scale: int
    ) -> None:
        """Settle the position's fees, then remove liquidity from it and the pool."""
        position.update_fee(
            self.fee_a_per_liquidity, self.fee_b_per_liquidity, liquidity_scale
        )
        position.remove_unlocked_liquidity(liquidity_delta)
        self.liquidity = safe_sub(self.liquidity, liquidity_delta, bits=128)

    def apply_split_position(
        self,
        first_position: Position,
        second_position: Position,
        unlocked_liquidity_numerator: int,
        permanent_locked_liquidity_numerator: int,
        fee_a_numerator: int,
        fee_b_numerator: int,
        reward_0_numerator: int,
        reward_1_numerator: int,
        liquidity_scale: int,
        split_denominator: int,
    ) -> SplitAmountInfo:
        """Move shares of one position's holdings into another."""
        for position in (first_position, second_position):
            position.update_fee(
                self.fee_a_per_liquidity, self.fee_b_per_liquidity, liquidity_scale
            )

        unlocked_split = 0
        if unlocked_liquidity_numerator > 0:
            unlocked_split = first_position.get_unlocked_liquidity_by_numerator(
                unlocked_liquidity_numerator, split_denominator
            )
            first_position.remove_unlocked_liquidity(unlocked_split)
            second_position.add_liquidity(unlocked_split)

        permanent_split = 0
        if permanent_locked_liquidity_numerator > 0:
            permanent_split = first_position.get_permanent_locked_liquidity_by_numerator(
                permanent_locked_liquidity_numerator, split_denominator
            )
            first_position.remove_permanent_locked_liquidity(permanent_split)
            second_position.add_permanent_locked_liquidity(permanent_split)

        fee_a_split = fee_b_split = 0
        if fee_a_numerator > 0 or fee_b_numerator > 0:
            split_fee = first_position.get_pending_fee_by_numerator(
                fee_a_numerator, fee_b_numerator, split_denominator
            )
            first_position.remove_fee_pending(split_fee.fee_a_amount, split_fee.fee_b_amount)
            second_position.add_fee_pending(split_fee.fee_a_amount, split_fee.fee_b_amount)
            fee_a_split, fee_b_split = split_fee.fee_a_amount, split_fee.fee_b_amount

        reward_splits = [0] * NUM_REWARDS
        if self.pool_reward_initialized():
            numerators = (reward_0_numerator, reward_1_numerator)
            for index, numerator in enumerate(numerators):
                if numerator <= 0 or not self.reward_infos[index].is_initialized():
                    continue
                split_reward = first_position.get_pending_reward_by_numerator(
                    index, numerator, split_denominator
                )
                first_position.remove_reward_pending(index, split_reward)
                second_position.add_reward_pending(index, split_reward)
                reward_splits[index] = split_reward

        return SplitAmountInfo(
            permanent_locked_liquidity=permanent_split,
            unlocked_liquidity=unlocked_split,
            fee_a=fee_a_split,
            fee_b=fee_b_split,
            reward_0=reward_splits[0],
            reward_1=reward_splits[1],
        )

    def update_pre_swap(self, current_timestamp: int) -> None:
        """Refresh the dynamic fee references before a swap."""
        dynamic_fee = self.pool_fees.dynamic_fee
        if dynamic_fee.is_dynamic_fee_enable():
            dynamic_fee.update_references(self.sqrt_price, current_timestamp)

    def update_post_swap(self, old_sqrt_price: int, current_timestamp: int) -> None:
        """Update volatility after a swap; stamp the time if a bin was crossed."""
        dynamic_fee = self.pool_fees.dynamic_fee
        if not dynamic_fee.is_dynamic_fee_enable():
            return
        dynamic_fee.update_volatility_accumulator(self.sqrt_price)
        delta_price = DynamicFeeStruct.get_delta_bin_id(
            dynamic_fee.bin_step_u128, old_sqrt_price, self.sqrt_price
        )
        if delta_price > 0:
            dynamic_fee.last_update_timestamp = current_timestamp

    def accumulate_permanent_locked_liquidity(self, permanent_locked_liquidity: int) -> None:
        """Add to the pool's total of permanently locked liquidity."""
        self.permanent_lock_liquidity = safe_add(
            self.permanent_lock_liquidity, permanent_locked_liquidity, bits=128
        )

    def claim_protocol_fee(self, max_amount_a: int, max_amount_b: int) -> tuple[int, int]:
        """Take up to the given amounts of protocol fee; return what was taken."""
        token_a_amount = min(self.protocol_a_fee, max_amount_a)
        token_b_amount = min(self.protocol_b_fee, max_amount_b)
        self.protocol_a_fee = safe_sub(self.protocol_a_fee, token_a_amount)
        self.protocol_b_fee = safe_sub(self.protocol_b_fee, token_b_amount)
        return token_a_amount, token_b_amount

    def claim_partner_fee(self, max_amount_a: int, max_amount_b: int) -> tuple[int, int]:
        """Take up to the given amounts of partner fee; return what was taken."""
        token_a_amount = min(self.partner_a_fee, max_amount_a)
        token_b_amount = min(self.partner_b_fee, max_amount_b)
        self.partner_a_fee = safe_sub(self.partner_a_fee, token_a_amount)
        self.partner_b_fee = safe_sub(self.partner_b_fee, token_b_amount)
        return token_a_amount, token_b_amount

    def update_rewards(self, current_time: int, liquidity_scale: int) -> None:
        """Update the reward per unit of liquidity of every reward."""
        for reward_info in self.reward_infos:
            reward_info.update_rewards(self.liquidity, current_time, liquidity_scale)

    def update_position_rewards(
        self,
        position: Position,
        current_time: int,
        liquidity_scale: int,
        total_reward_scale: int,
    ) -> None:
        """Bring pool rewards up to date, then accrue them to ``position``."""
        if self.pool_reward_initialized():
            self.update_rewards(current_time, liquidity_scale)
            position.update_position_reward(self, total_reward_scale)

    def claim_ineligible_reward(self, reward_index: int, reward_rate_scale: int) -> int:
        """Withdraw reward that accrued while the pool held no liquidity."""
        reward_info = self.reward_infos[reward_index]
        ineligible_reward = safe_mul_shr_cast(
            reward_info.cumulative_seconds_with_empty_liquidity_reward,
            reward_info.reward_rate,
            reward_rate_scale,
        )
        reward_info.cumulative_seconds_with_empty_liquidity_reward = 0
        return ineligible_reward

    def has_partner(self) -> bool:
        """Whether the pool has a partner sharing protocol fees."""
        return self.partner != DEFAULT_PUBKEY