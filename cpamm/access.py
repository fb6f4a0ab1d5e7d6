"""Which pool actions are currently allowed."""

from __future__ import annotations

from dataclasses import dataclass

from .activation_handler import ActivationHandler, ActivationType, Clock
from .fee_parameters import DEFAULT_PUBKEY
from .pool import Pool
from .rewards import PoolStatus
from .safe_math import safe_sub


@dataclass(frozen=True)
class PermissionlessActionAccess:
    """Action permissions of a permissionless pool at a point in time."""

    is_enabled: bool
    activation_point: int
    pre_activation_point: int
    current_point: int
    whitelisted_vault: bytes = DEFAULT_PUBKEY

    @classmethod
    def from_pool(
        cls, pool: Pool, clock: Clock, slot_buffer: int, time_buffer: int
    ) -> PermissionlessActionAccess:
        """Work out the permissions of ``pool`` at the time given by ``clock``."""
        current_point = ActivationHandler.get_current_point(pool.activation_type, clock)
        buffer_time = (
            slot_buffer
            if ActivationType(pool.activation_type) is ActivationType.SLOT
            else time_buffer
        )
        pre_activation_point = (
            safe_sub(pool.activation_point, buffer_time)
            if pool.activation_point >= buffer_time
            else 0
        )
        return cls(
            is_enabled=pool.pool_status == PoolStatus.ENABLE,
            activation_point=pool.activation_point,
            pre_activation_point=pre_activation_point,
            current_point=current_point,
            whitelisted_vault=pool.whitelisted_vault,
        )

    def can_add_liquidity(self) -> bool:
        """Liquidity may be added while the pool is enabled."""
        return self.is_enabled

    def can_remove_liquidity(self) -> bool:
        """Liquidity may be removed once the pool is active."""
        return self.current_point >= self.activation_point

    def can_swap(self, sender: bytes) -> bool:
        """The whitelisted vault may swap early; everyone else after activation."""
        if not self.is_enabled:
            return False
        if sender == self.whitelisted_vault:
            return self.current_point >= self.pre_activation_point
        return self.current_point >= self.activation_point

    def can_create_position(self) -> bool:
        """Positions may be opened while the pool is enabled."""
        return self.is_enabled

    def can_lock_position(self) -> bool:
        """Positions may be locked while the pool is enabled."""
        return self.is_enabled

    def can_split_position(self) -> bool:
        """Positions may be split while the pool is enabled."""
        return self.is_enabled


def get_pool_access_validator(
    pool: Pool, clock: Clock, slot_buffer: int, time_buffer: int
) -> PermissionlessActionAccess:
    """The access rules that apply to ``pool``."""
    return PermissionlessActionAccess.from_pool(pool, clock, slot_buffer, time_buffer)