"""Constant product quoting with a fee on input, in integer base units."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Tuple

from amm_swap.core.assets import Asset, Pool, normalize_id
from amm_swap.errors import InvalidPairing

# Uniswap v2 charges 0.3% on the input side: only 997/1000 of it trades
FEE_NUMERATOR = 997
FEE_DENOMINATOR = 1000

BPS_DENOMINATOR = 10_000
DEFAULT_TOLERANCE_BPS = 100  # 1%

Reserves = Tuple[int, int]


def quote_output(input_reserve: int, output_reserve: int, input_amount: int) -> int:
    """Output amount for an exact input against a constant product pool.

    Uses the Uniswap v2 fee-on-input model with γ = 997/1000:
        (x + γ·Δx)(y - Δy) = x·y
        Δy = γ·Δx·y / (x + γ·Δx)
    scaled by 1000 to stay in integers. The division truncates, so the
    result never exceeds what the pool contract would pay out.

    Args:
        input_reserve: Pool reserve of the asset being sold (x)
        output_reserve: Pool reserve of the asset being bought (y)
        input_amount: Base units sold into the pool (Δx)

    Returns:
        Base units received, 0 for a degenerate pool
    """
    if input_reserve < 0 or output_reserve < 0 or input_amount < 0:
        raise ValueError(
            f"reserves and amount must be >= 0, got "
            f"({input_reserve}, {output_reserve}, {input_amount})"
        )

    fee_adjusted_input = input_amount * FEE_NUMERATOR
    denominator = fee_adjusted_input + input_reserve * FEE_DENOMINATOR
    if denominator == 0:
        return 0
    return fee_adjusted_input * output_reserve // denominator


def direction(pool: Pool, input_asset_id: str, reserves: Reserves) -> Reserves:
    """Order a pool's reserves as (input_reserve, output_reserve).

    Args:
        pool: Pool whose reserves were read
        input_asset_id: Asset the trader sells into the pool
        reserves: (reserve_a, reserve_b) in the pool's asset order

    Raises:
        InvalidPairing: If input_asset_id is on neither side of the pool
    """
    asset_id = normalize_id(input_asset_id)
    reserve_a, reserve_b = reserves
    if asset_id == pool.asset_a.id:
        return reserve_a, reserve_b
    if asset_id == pool.asset_b.id:
        return reserve_b, reserve_a
    raise InvalidPairing(pool.id, asset_id)


def minimum_acceptable_output(
    output_amount: int, tolerance_bps: int = DEFAULT_TOLERANCE_BPS
) -> int:
    """Slippage-bounded minimum: output * (10000 - tolerance) / 10000, rounded down."""
    if output_amount < 0:
        raise ValueError(f"output_amount must be >= 0, got {output_amount}")
    if not 0 <= tolerance_bps <= BPS_DENOMINATOR:
        raise ValueError(
            f"tolerance_bps must be in [0, {BPS_DENOMINATOR}], got {tolerance_bps}"
        )
    return output_amount * (BPS_DENOMINATOR - tolerance_bps) // BPS_DENOMINATOR


@dataclass(frozen=True)
class SwapQuote:
    """A priced exchange through one pool."""
    pool: Pool
    input_asset: Asset
    output_asset: Asset
    input_amount: int    # Base units of input_asset
    output_amount: int   # Base units of output_asset
    minimum_output: int  # output_amount after slippage tolerance
    tolerance_bps: int
    input_reserve: int
    output_reserve: int

    @property
    def spot_price(self) -> Decimal:
        """Output per input at current reserves, before fees, in display units."""
        if self.input_reserve == 0:
            return Decimal("0")
        return _scaled(self.output_reserve, self.output_asset) / _scaled(
            self.input_reserve, self.input_asset
        )

    @property
    def execution_price(self) -> Decimal:
        """Output per input actually received, in display units."""
        if self.input_amount == 0:
            return Decimal("0")
        return _scaled(self.output_amount, self.output_asset) / _scaled(
            self.input_amount, self.input_asset
        )


def _scaled(amount: int, asset: Asset) -> Decimal:
    return Decimal(amount).scaleb(-asset.precision)


def build_quote(
    pool: Pool,
    input_asset_id: str,
    reserves: Reserves,
    input_amount: int,
    tolerance_bps: int = DEFAULT_TOLERANCE_BPS,
) -> SwapQuote:
    """Price input_amount of input_asset_id through pool at the given reserves."""
    input_reserve, output_reserve = direction(pool, input_asset_id, reserves)
    output_amount = quote_output(input_reserve, output_reserve, input_amount)
    input_asset = pool.asset_a if pool.asset_a.id == normalize_id(input_asset_id) else pool.asset_b
    return SwapQuote(
        pool=pool,
        input_asset=input_asset,
        output_asset=pool.other(input_asset.id),
        input_amount=input_amount,
        output_amount=output_amount,
        minimum_output=minimum_acceptable_output(output_amount, tolerance_bps),
        tolerance_bps=tolerance_bps,
        input_reserve=input_reserve,
        output_reserve=output_reserve,
    )
