"""
Liquidity Math - liquidity <-> token amounts

Converts a position's liquidity over a tick range into the token amounts
backing it, and back. Integer arithmetic throughout: liquidity is a uint128
and floats would misstate large positions.

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
- Uniswap V3 Periphery: contracts/libraries/LiquidityAmounts.sol

Core formulas:
    L = dy / (sqrtP_upper - sqrtP_lower)          # token1
    L = dx / (1/sqrtP_lower - 1/sqrtP_upper)      # token0
"""

from decimal import Decimal
from typing import NamedTuple, Union

from ..constants import Q96, UINT128_MAX
from .amount_math import from_raw_token_amount
from .sqrt_price_math import get_amount0_delta, get_amount1_delta
from .tick_math import get_sqrt_ratio_at_tick


class InvalidTickRangeError(ValueError):
    """tick_upper is not strictly greater than tick_lower"""


class TokenAmounts(NamedTuple):
    amount0: Union[int, Decimal]
    amount1: Union[int, Decimal]


def liquidity_to_raw_amounts(liquidity: int, tick_lower: int, tick_upper: int) -> TokenAmounts:
    """Raw token amounts spanned by a liquidity over [tick_lower, tick_upper]

    amount0 is the token0 needed to cover the whole range and amount1 the
    token1 needed to cover it, both rounded up like the pool does.

    Args:
        liquidity: position liquidity (uint128)
        tick_lower: lower tick
        tick_upper: upper tick (> tick_lower)

    Returns:
        TokenAmounts of raw integers

    Raises:
        InvalidTickRangeError: tick_upper <= tick_lower
        ValueError: tick or liquidity out of range
    """
    if tick_upper <= tick_lower:
        raise InvalidTickRangeError(
            f"tick_upper must be greater than tick_lower: {tick_lower} >= {tick_upper}"
        )
    _check_liquidity(liquidity)

    sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)

    return TokenAmounts(
        get_amount0_delta(sqrt_lower, sqrt_upper, liquidity, True),
        get_amount1_delta(sqrt_lower, sqrt_upper, liquidity, True),
    )


def liquidity_to_token_amounts(
    liquidity: int,
    tick_lower: int,
    tick_upper: int,
    token0_decimals: int,
    token1_decimals: int
) -> TokenAmounts:
    """Human token amounts spanned by a liquidity over a tick range

    liquidity_to_raw_amounts() rebased by each token's decimals.
    """
    raw = liquidity_to_raw_amounts(liquidity, tick_lower, tick_upper)
    return TokenAmounts(
        from_raw_token_amount(raw.amount0, token0_decimals),
        from_raw_token_amount(raw.amount1, token1_decimals),
    )


def get_liquidity_for_amount0(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, amount0: int) -> int:
    """Liquidity that amount0 alone buys across [sqrt_a, sqrt_b] (rounded down)

    L = amount0 * sqrtP_a * sqrtP_b / (sqrtP_b - sqrtP_a)
    """
    sqrt_lower, sqrt_upper = _price_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    return amount0 * (sqrt_lower * sqrt_upper // Q96) // (sqrt_upper - sqrt_lower)


def get_liquidity_for_amount1(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int, amount1: int) -> int:
    """Liquidity that amount1 alone buys across [sqrt_a, sqrt_b] (rounded down)

    L = amount1 / (sqrtP_b - sqrtP_a)
    """
    sqrt_lower, sqrt_upper = _price_range(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    return amount1 * Q96 // (sqrt_upper - sqrt_lower)


def get_amounts_for_liquidity(
    sqrt_price_x96: int,
    tick_lower: int,
    tick_upper: int,
    liquidity: int
) -> TokenAmounts:
    """Raw amounts a position holds at the given pool price

    Below the range the position is all token0, above it all token1, and
    inside it splits at the current price. Rounded down: this is what a
    withdrawal would pay out, unlike liquidity_to_raw_amounts().

    Raises:
        InvalidTickRangeError: tick_upper <= tick_lower
        ValueError: tick or liquidity out of range
    """
    if tick_upper <= tick_lower:
        raise InvalidTickRangeError(
            f"tick_upper must be greater than tick_lower: {tick_lower} >= {tick_upper}"
        )
    _check_liquidity(liquidity)

    sqrt_lower = get_sqrt_ratio_at_tick(tick_lower)
    sqrt_upper = get_sqrt_ratio_at_tick(tick_upper)
    # Outside the range one delta collapses to zero
    sqrt_current = min(max(sqrt_price_x96, sqrt_lower), sqrt_upper)

    return TokenAmounts(
        get_amount0_delta(sqrt_current, sqrt_upper, liquidity, False),
        get_amount1_delta(sqrt_lower, sqrt_current, liquidity, False),
    )


def _price_range(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int):
    sqrt_lower, sqrt_upper = sorted((sqrt_ratio_a_x96, sqrt_ratio_b_x96))
    if sqrt_lower == sqrt_upper:
        raise InvalidTickRangeError("Empty price range")
    return sqrt_lower, sqrt_upper


def _check_liquidity(liquidity: int) -> None:
    if liquidity < 0 or liquidity > UINT128_MAX:
        raise ValueError(f"Liquidity out of uint128 range: {liquidity}")
