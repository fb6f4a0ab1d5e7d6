"""Activation points measured in slots or timestamps."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .safe_math import ErrorCode, PoolError, safe_div, safe_sub

_LAST_JOIN_DIVISOR = 12


class ActivationType(enum.IntEnum):
    """Unit an activation point is measured in."""

    SLOT = 0
    TIMESTAMP = 1


@dataclass(frozen=True)
class Clock:
    """A snapshot of chain time."""

    slot: int = 0
    unix_timestamp: int = 0
    epoch: int = 0


@dataclass
class ActivationHandler:
    """Timing around a pool's activation point."""

    curr_point: int
    activation_point: int
    buffer_duration: int
    whitelisted_vault: bytes = bytes(32)

    @staticmethod
    def get_current_point(activation_type: int, clock: Clock) -> int:
        """Current slot or timestamp, depending on ``activation_type``."""
        try:
            kind = ActivationType(activation_type)
        except ValueError:
            raise PoolError(ErrorCode.INVALID_ACTIVATION_TYPE) from None
        if kind is ActivationType.SLOT:
            return clock.slot
        return clock.unix_timestamp % (1 << 64)

    def get_pre_activation_start_point(self) -> int:
        """Point from which the whitelisted vault may trade."""
        return safe_sub(self.activation_point, self.buffer_duration)

    def get_last_join_point(self) -> int:
        """Last point at which the alpha vault may be joined."""
        pre_start = self.get_pre_activation_start_point()
        return safe_sub(pre_start, safe_div(self.buffer_duration, _LAST_JOIN_DIVISOR))