"""Validation of a new pool's activation settings."""

from __future__ import annotations

from dataclasses import dataclass

from .activation_handler import ActivationHandler, ActivationType
from .config import TimingConstraint
from .safe_math import ErrorCode, PoolError, safe_add, safe_sub


def _require(condition: bool) -> None:
    if not condition:
        raise PoolError(ErrorCode.INVALID_ACTIVATION_POINT)


@dataclass(frozen=True)
class ActivationParams:
    """When a new pool starts trading, and whether it has an alpha vault."""

    activation_point: int | None
    has_alpha_vault: bool
    activation_type: int

    def validate(self, timing_constraint: TimingConstraint) -> int | None:
        """Raise unless the settings are acceptable; return the activation point."""
        try:
            ActivationType(self.activation_type)
        except ValueError:
            raise PoolError(ErrorCode.INVALID_ACTIVATION_TYPE) from None

        current_point = timing_constraint.current_point
        activation_point = self.activation_point

        if self.has_alpha_vault:
            # An alpha vault needs a known activation point to be set up.
            if activation_point is None:
                raise PoolError(ErrorCode.INVALID_ACTIVATION_POINT)
            _require(activation_point > current_point)
            duration = safe_sub(activation_point, current_point)
            _require(
                timing_constraint.min_activation_duration
                <= duration
                <= timing_constraint.max_activation_duration
            )
            handler = ActivationHandler(
                curr_point=current_point,
                activation_point=activation_point,
                buffer_duration=timing_constraint.pre_activation_swap_duration,
            )
            last_join_point = handler.get_last_join_point()
            pre_last_join_point = safe_sub(
                last_join_point, timing_constraint.last_join_buffer
            )
            _require(pre_last_join_point >= current_point)
        elif activation_point is not None:
            _require(
                activation_point >= current_point
                and safe_add(current_point, timing_constraint.max_activation_duration)
                >= activation_point
            )
        return activation_point