"""Checked fixed-point accounting for a constant-product liquidity pool.

Fee schedules, dynamic fees, positions, vesting, farming rewards and pool
state, using integers checked against fixed widths.
"""

__version__ = "0.1.0"
__all__ = [
    "access",
    "activation",
    "activation_handler",
    "config",
    "fee",
    "fee_math",
    "fee_parameters",
    "pool",
    "position",
    "rewards",
    "safe_math",
    "u128x128_math",
    "utils_math",
    "vesting",
]