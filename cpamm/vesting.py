"""Liquidity vesting schedule attached to a position."""

from __future__ import annotations

from dataclasses import dataclass

from .fee_parameters import DEFAULT_PUBKEY
from .safe_math import safe_add, safe_div, safe_mul, safe_sub


@dataclass
class Vesting:
    """Liquidity locked behind a cliff and then released period by period."""

    position: bytes = DEFAULT_PUBKEY
    cliff_point: int = 0
    period_frequency: int = 0
    cliff_unlock_liquidity: int = 0
    liquidity_per_period: int = 0
    total_released_liquidity: int = 0
    number_of_period: int = 0

    def get_total_lock_amount(self) -> int:
        """All liquidity the schedule will ever release."""
        return safe_add(
            self.cliff_unlock_liquidity,
            safe_mul(self.liquidity_per_period, self.number_of_period, bits=128),
            bits=128,
        )

    def get_max_unlocked_liquidity(self, current_point: int) -> int:
        """Liquidity unlocked in total by ``current_point``."""
        if current_point < self.cliff_point:
            return 0
        if self.period_frequency == 0:
            return self.cliff_unlock_liquidity
        period = safe_div(
            safe_sub(current_point, self.cliff_point), self.period_frequency
        )
        period = min(period, self.number_of_period)
        return safe_add(
            self.cliff_unlock_liquidity,
            safe_mul(period, self.liquidity_per_period, bits=128),
            bits=128,
        )

    def get_new_release_liquidity(self, current_point: int) -> int:
        """Unlocked liquidity not yet released."""
        unlocked = self.get_max_unlocked_liquidity(current_point)
        return safe_sub(unlocked, self.total_released_liquidity, bits=128)

    def accumulate_released_liquidity(self, released_liquidity: int) -> None:
        """Record that ``released_liquidity`` has been released."""
        self.total_released_liquidity = safe_add(
            self.total_released_liquidity, released_liquidity, bits=128
        )

    def done(self) -> bool:
        """Whether everything locked has been released."""
        return self.total_released_liquidity == self.get_total_lock_amount()