"""
Grid action parameters

Pydantic models for the user inputs of grid actions, and their conversion
to contract call arguments (raw token amounts, slippage in basis points,
grid step in tick-spacing units).
"""
import math
from decimal import Decimal, ROUND_DOWN
from enum import IntEnum
from typing import Tuple

from pydantic import BaseModel, Field, model_validator

from .constants import MAX_SLIPPAGE_PERCENT
from .data.types import PoolInfo, Token
from .math.amount_math import to_raw_token_amount
from .math.tick_math import price_to_tick


class GridType(IntEnum):
    """Which side of the current price a deposit is placed on"""
    NEUTRAL = 0
    BUY = 1
    SELL = 2


class DistributionType(IntEnum):
    """How liquidity is spread across the grid's positions"""
    FLAT = 0
    LINEAR = 1
    REVERSE_LINEAR = 2
    SIGMOID = 3
    FIBONACCI = 4
    LOGARITHMIC = 5


def slippage_to_bps(percent: float) -> int:
    """Slippage percent -> basis points (0.1% -> 10)

    Fractions of a basis point are dropped (0.125% -> 12), never rounded up.
    Floats are read through their shortest str, so 0.29% is 29 bps.

    Raises:
        ValueError: negative or above MAX_SLIPPAGE_PERCENT
    """
    if not math.isfinite(percent) or percent < 0:
        raise ValueError(f"Slippage must be a non-negative number: {percent}")
    if percent > MAX_SLIPPAGE_PERCENT:
        raise ValueError(
            f"Slippage cannot exceed {MAX_SLIPPAGE_PERCENT}% "
            f"({int(MAX_SLIPPAGE_PERCENT * 100)} basis points)"
        )
    return int(Decimal(str(percent)).scaleb(2).to_integral_value(rounding=ROUND_DOWN))


def price_range_from_percentage(price: float, percent: float) -> Tuple[float, float]:
    """Symmetric range around a price: price -/+ percent%"""
    if price <= 0:
        raise ValueError(f"Price must be positive: {price}")
    delta = price * percent / 100
    return price - delta, price + delta


def compute_grid_step(tick_lower: int, tick_upper: int, tick_spacing: int, grid_size: int) -> int:
    """Grid step (in tick spacings) that fits grid_size positions in a range

    step = floor(floor(|upper - lower| / spacing) / grid_size)

    Raises:
        ValueError: the range is too small for the grid size
    """
    if tick_spacing <= 0:
        raise ValueError(f"Tick spacing must be positive: {tick_spacing}")
    if grid_size <= 0:
        raise ValueError(f"Grid size must be greater than 0: {grid_size}")

    tick_range = abs(tick_upper - tick_lower) // tick_spacing
    grid_step = tick_range // grid_size
    if grid_step < 1:
        raise ValueError("Price range is too small for the grid size")
    return grid_step


class GridDeployParams(BaseModel):
    """Inputs of a grid deployment"""
    grid_size: int = Field(..., description="Number of grid positions", ge=1)
    price_lower: float = Field(..., description="Lower bound of the price range", gt=0)
    price_upper: float = Field(..., description="Upper bound of the price range", gt=0)

    @model_validator(mode="after")
    def check_range(self) -> "GridDeployParams":
        if self.price_lower >= self.price_upper:
            raise ValueError("Price lower must be less than price upper")
        return self

    def to_ticks(self, base_token: Token, quote_token: Token, tick_spacing: int) -> Tuple[int, int]:
        """Range bounds as usable ticks, lower tick first"""
        ticks = (
            price_to_tick(base_token, quote_token, self.price_lower, tick_spacing),
            price_to_tick(base_token, quote_token, self.price_upper, tick_spacing),
        )
        return min(ticks), max(ticks)

    def grid_step(self, base_token: Token, quote_token: Token, tick_spacing: int) -> int:
        tick_lower, tick_upper = self.to_ticks(base_token, quote_token, tick_spacing)
        return compute_grid_step(tick_lower, tick_upper, tick_spacing, self.grid_size)


class _SlippageParams(BaseModel):
    slippage: float = Field(0.1, description="Slippage tolerance in percent", ge=0, le=MAX_SLIPPAGE_PERCENT)

    @property
    def slippage_bps(self) -> int:
        return slippage_to_bps(self.slippage)


class DepositParams(_SlippageParams):
    """deposit(amount0, amount1, slippageBps, gridType, distributionType)"""
    token0_amount: Decimal = Field(..., ge=0)
    token1_amount: Decimal = Field(..., ge=0)
    grid_type: GridType = GridType.NEUTRAL
    distribution_type: DistributionType = DistributionType.FLAT

    def to_args(self, pool: PoolInfo) -> tuple:
        return (
            to_raw_token_amount(self.token0_amount, pool.token0.decimals),
            to_raw_token_amount(self.token1_amount, pool.token1.decimals),
            self.slippage_bps,
            int(self.grid_type),
            int(self.distribution_type),
        )


class CompoundParams(_SlippageParams):
    """compound/sweep(slippageBps, gridType, distributionType)"""
    grid_type: GridType = GridType.NEUTRAL
    distribution_type: DistributionType = DistributionType.FLAT

    def to_args(self) -> tuple:
        return (self.slippage_bps, int(self.grid_type), int(self.distribution_type))


class AddLiquidityParams(_SlippageParams):
    """addLiquidityToPosition(tokenId, slippageBps, amount0, amount1)"""
    token_id: int = Field(..., ge=0)
    token0_amount: Decimal = Field(..., ge=0)
    token1_amount: Decimal = Field(..., ge=0)

    def to_args(self, pool: PoolInfo) -> tuple:
        return (
            self.token_id,
            self.slippage_bps,
            to_raw_token_amount(self.token0_amount, pool.token0.decimals),
            to_raw_token_amount(self.token1_amount, pool.token1.decimals),
        )


class MinFeesParams(BaseModel):
    """setMinFees(token0MinFees, token1MinFees)"""
    token0_min_fees: Decimal = Field(..., ge=0)
    token1_min_fees: Decimal = Field(..., ge=0)

    def to_args(self, pool: PoolInfo) -> tuple:
        return (
            to_raw_token_amount(self.token0_min_fees, pool.token0.decimals),
            to_raw_token_amount(self.token1_min_fees, pool.token1.decimals),
        )
