# cpamm

Exact integer accounting for a constant-product liquidity pool. The package
models pool state, liquidity positions, fee schedules, the volatility-driven
dynamic fee, liquidity-mining rewards and vesting with plain Python integers,
each checked against the fixed width it stands for (64, 128 or 256 bits).
Every overflow, underflow, division by zero or failed narrowing raises
`cpamm.safe_math.PoolError`, whose `code` attribute is an `ErrorCode`.

Account keys (mints, vaults, authorities) are 32-byte `bytes` values; the
all-zero key `cpamm.fee_parameters.DEFAULT_PUBKEY` means "not set". Scale
factors such as the liquidity scale, reward scales, split denominator and fee
limits are passed in as arguments rather than fixed in the package.

## Install

```
pip install .
pip install ".[test]"   # with pytest for the test suite
```

The package has no runtime dependencies.

## Modules

- `cpamm.safe_math` – `safe_add`, `safe_sub`, `safe_mul`, `safe_div`,
  `safe_rem`, `safe_shl`, `safe_shr`, each taking `bits` (default 64) and
  `signed` (default `False`); `PoolError` and `ErrorCode`.
- `cpamm.u128x128_math` – `mul_shr`, `mul_shr_256`, `shl_div`, `shl_div_256`
  and `mul_div_u256`, which return `None` on overflow; `Rounding.UP` and
  `Rounding.DOWN`.
- `cpamm.utils_math` – `safe_mul_shr_cast`, `safe_mul_shr_256_cast`,
  `safe_mul_div_cast_u64`, `safe_mul_div_cast_u128`, `safe_shl_div_cast`:
  the same operations, raising instead of returning `None` and casting the
  result to a target width.
- `cpamm.fee_math` – Q64.64 `pow` and `get_fee_in_period`, the exponential
  fee decay `cliff * (1 - reduction_factor / 10_000) ** period`.
- `cpamm.fee` – `BaseFeeStruct`, `DynamicFeeStruct`, `PoolFeesStruct`,
  `FeeOnAmountResult`, `FeeMode` and the enums `TradeDirection`,
  `CollectFeeMode`, `FeeSchedulerMode`.
- `cpamm.fee_parameters` – `BaseFeeParameters`, `DynamicFeeParameters`,
  `PoolFeeParameters`, `PartnerInfo` with their validation, and the helpers
  `calculate_fee`, `validate_fee_fraction` and `to_bps`.
- `cpamm.config` – `Config`, `PoolFeesConfig`, `BaseFeeConfig`,
  `DynamicFeeConfig`, `ConfigType`, `TimingConstraint`,
  `BootstrappingConfig`, `ClaimFeeOperator` and `TokenBadge`.
- `cpamm.activation_handler` – `ActivationType`, a `Clock` snapshot and
  `ActivationHandler` for the pre-activation and last-join points.
- `cpamm.activation` – `ActivationParams.validate`, which checks a new
  pool's activation point against a `TimingConstraint`.
- `cpamm.vesting` – `Vesting`, a cliff-then-periodic release schedule.
- `cpamm.position` – `Position`, `UserRewardInfo`, `PositionMetrics`,
  `SplitFeeAmount`, `SplitPositionInfo`.
- `cpamm.rewards` – `RewardInfo`, `PoolMetrics`, `PoolStatus`, `PoolType`
  and the result records `SwapResult`, `ModifyLiquidityResult`,
  `SplitAmountInfo`.
- `cpamm.pool` – `Pool`: applying swap results, adding and removing
  liquidity, splitting positions, dynamic fee updates, claiming protocol and
  partner fees, and reward updates.
- `cpamm.access` – `PermissionlessActionAccess` and
  `get_pool_access_validator`, which decide what a pool allows at a given
  `Clock`.

## Examples

```python
from cpamm.safe_math import ErrorCode, PoolError, safe_add

safe_add(100, 100)                     # 200
try:
    safe_add(2**64 - 1, 1)
except PoolError as exc:
    assert exc.code is ErrorCode.MATH_OVERFLOW
```

Charging a fee and splitting it:

```python
from cpamm.fee import BaseFeeStruct, PoolFeesStruct

fees = PoolFeesStruct(
    base_fee=BaseFeeStruct(cliff_fee_numerator=2_500_000),
    protocol_fee_percent=20,
)
result = fees.get_fee_on_amount(
    1_000_000,
    has_referral=False,
    current_point=0,
    activation_point=0,
    has_partner=False,
    max_fee_numerator=500_000_000,
    fee_denominator=1_000_000_000,
)
# result.amount == 997_500, result.lp_fee == 2_000, result.protocol_fee == 500
```

Where a swap's fee is taken:

```python
from cpamm.fee import CollectFeeMode, FeeMode, TradeDirection

mode = FeeMode.get_fee_mode(CollectFeeMode.ONLY_B, TradeDirection.B_TO_A, False)
# mode.fees_on_input is True, mode.fees_on_token_a is False
```

A vesting schedule:

```python
from cpamm.vesting import Vesting

vesting = Vesting(
    cliff_point=100,
    period_frequency=10,
    cliff_unlock_liquidity=1_000,
    liquidity_per_period=100,
    number_of_period=5,
)
vesting.get_max_unlocked_liquidity(125)   # 1_200
vesting.get_total_lock_amount()           # 1_500
```

## What the package does not do

- It does not compute swaps along the price curve: there is no function that
  turns an input amount into an output amount and next sqrt price. A
  `SwapResult` computed elsewhere can be booked with `Pool.apply_swap_result`.
- It does not work out token amounts for a liquidity change; only the
  `ModifyLiquidityResult` record is provided.
- It moves no tokens, handles no transfer fees, reads no clock of its own
  (callers pass a `Clock` or a `TimingConstraint`) and stores nothing: all
  state lives in the dataclasses you hold.
- It has no command-line tool.

## Tests

```
pytest
```