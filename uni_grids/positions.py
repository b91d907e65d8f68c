"""
Position summaries

Turns the raw position tuples of a grid (getActivePositions) into values
for display: price bounds, backing token amounts and uncollected fees,
plus grid totals.

All displayed values are denominated in one token of the pool: token1 by
default, token0 when `display_in_token0` is set. Prices follow the same
rule, so by default a price is token1 per token0.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .data.types import GridPosition, PoolInfo, PoolState
from .math.amount_math import from_raw_token_amount
from .math.liquidity_math import get_amounts_for_liquidity, liquidity_to_token_amounts
from .math.tick_math import get_sqrt_ratio_at_tick, tick_to_price


@dataclass
class PositionSummary:
    token_id: int
    tick_lower: int
    tick_upper: int
    liquidity: int
    index: int
    price_lower: float
    price_upper: float
    fees_token0: Decimal
    fees_token1: Decimal
    liquidity_token0: Decimal
    liquidity_token1: Decimal
    # Amounts held at the current pool tick, when it was given
    value_token0: Optional[Decimal] = None
    value_token1: Optional[Decimal] = None


def _price(tick: int, token0_decimals: int, token1_decimals: int, display_in_token0: bool) -> float:
    prices = tick_to_price(tick, token0_decimals, token1_decimals)
    return prices.price_of_1_in_0 if display_in_token0 else prices.price_of_0_in_1


def summarize_position(
    position: GridPosition,
    pool: PoolInfo,
    fees: Tuple[int, int] = (0, 0),
    display_in_token0: bool = False,
    current_tick: Optional[int] = None
) -> PositionSummary:
    """Display values of one grid position

    Args:
        position: position from the grid contract
        pool: pool of the grid
        fees: raw uncollected fees (token0, token1), e.g. from a simulated collect()
        display_in_token0: price the bounds in token0 (token0 per token1)
            instead of token1 (token1 per token0)
        current_tick: pool tick; when given, value_token0/value_token1 hold
            what the position is worth at that tick

    Returns:
        PositionSummary
    """
    decimals0 = pool.token0.decimals
    decimals1 = pool.token1.decimals
    amounts = liquidity_to_token_amounts(
        position.liquidity, position.tick_lower, position.tick_upper, decimals0, decimals1
    )
    price_a = _price(position.tick_lower, decimals0, decimals1, display_in_token0)
    price_b = _price(position.tick_upper, decimals0, decimals1, display_in_token0)

    summary = PositionSummary(
        token_id=position.token_id,
        tick_lower=position.tick_lower,
        tick_upper=position.tick_upper,
        liquidity=position.liquidity,
        index=position.index,
        price_lower=min(price_a, price_b),
        price_upper=max(price_a, price_b),
        fees_token0=from_raw_token_amount(fees[0], decimals0),
        fees_token1=from_raw_token_amount(fees[1], decimals1),
        liquidity_token0=amounts.amount0,
        liquidity_token1=amounts.amount1,
    )

    if current_tick is not None:
        held = get_amounts_for_liquidity(
            get_sqrt_ratio_at_tick(current_tick),
            position.tick_lower,
            position.tick_upper,
            position.liquidity,
        )
        summary.value_token0 = from_raw_token_amount(held.amount0, decimals0)
        summary.value_token1 = from_raw_token_amount(held.amount1, decimals1)

    return summary


def summarize_positions(
    positions: Iterable[GridPosition],
    pool: PoolInfo,
    fees: Optional[Mapping[int, Tuple[int, int]]] = None,
    display_in_token0: bool = False,
    current_tick: Optional[int] = None
) -> List[PositionSummary]:
    """Summaries of all positions of a grid

    Sorted by price_lower when displaying in token0, by price_upper otherwise.
    `fees` maps token id -> raw fees; missing ids count as no fees.
    """
    fees = fees or {}
    summaries = [
        summarize_position(p, pool, fees.get(p.token_id, (0, 0)), display_in_token0, current_tick)
        for p in positions
    ]
    key = (lambda s: s.price_lower) if display_in_token0 else (lambda s: s.price_upper)
    return sorted(summaries, key=key)


def in_range_position_index(positions: Sequence, current_tick: int) -> Optional[int]:
    """Index of the first position with tick_lower <= current_tick < tick_upper

    Works on GridPosition or PositionSummary lists. None when the price is
    outside every position.
    """
    for i, position in enumerate(positions):
        if position.tick_lower <= current_tick < position.tick_upper:
            return i
    return None


def current_price(pool_state: PoolState, display_in_token0: bool = False) -> float:
    """Current pool price on the displayed side (see summarize_position)"""
    return _price(
        pool_state.current_tick,
        pool_state.token0_decimals,
        pool_state.token1_decimals,
        display_in_token0,
    )


def _value_in_display_token(
    pool_state: PoolState,
    amount0: Decimal,
    amount1: Decimal,
    display_in_token0: bool
) -> Decimal:
    # Converts the other token through the pool price at the current tick
    price = Decimal(repr(current_price(pool_state, display_in_token0)))
    if display_in_token0:
        return amount0 + amount1 * price
    return amount1 + amount0 * price


def grid_liquidity_value(
    pool_state: PoolState,
    token0_liquidity: int,
    token1_liquidity: int,
    display_in_token0: bool = False
) -> Decimal:
    """Total value of a grid's tokens (getLiquidity) in the displayed token

    Args:
        pool_state: pool decimals and current tick
        token0_liquidity: raw token0 held by the grid
        token1_liquidity: raw token1 held by the grid
        display_in_token0: value in token0 instead of token1
    """
    return _value_in_display_token(
        pool_state,
        from_raw_token_amount(token0_liquidity, pool_state.token0_decimals),
        from_raw_token_amount(token1_liquidity, pool_state.token1_decimals),
        display_in_token0,
    )


def total_fees(
    summaries: Iterable[PositionSummary],
    pool_state: PoolState,
    display_in_token0: bool = False
) -> Decimal:
    """Uncollected fees of all positions, in the displayed token"""
    fees0 = Decimal(0)
    fees1 = Decimal(0)
    for summary in summaries:
        fees0 += summary.fees_token0
        fees1 += summary.fees_token1
    return _value_in_display_token(pool_state, fees0, fees1, display_in_token0)


def is_open_grid(token0_liquidity: int, token1_liquidity: int) -> bool:
    """A grid is open while it still holds either token (getLiquidity)"""
    return token0_liquidity > 0 or token1_liquidity > 0
