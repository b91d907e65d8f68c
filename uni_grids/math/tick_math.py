"""
Tick Math - Tick <-> Price conversion

Tick functions of the AMM. The sqrt ratio functions are exact integer ports
of the contract; the human price functions use floating point and are only
meant for display and range selection.

References:
- Uniswap V3 Core: contracts/libraries/TickMath.sol
- Uniswap V3 SDK: nearestUsableTick, priceToClosestTick

Core formulas:
    price = 1.0001^tick
    tick = log_1.0001(price)
    sqrtPriceX96 = sqrt(price) * 2^96
"""

import logging
import math
from typing import NamedTuple

from ..constants import (
    MIN_TICK,
    MAX_TICK,
    MIN_SQRT_RATIO,
    MAX_SQRT_RATIO,
    TICK_BASE,
    TICK_SPACINGS,
    UINT256_MAX,
)

logger = logging.getLogger(__name__)

# log(price) / log(1.0001) within this distance of an integer is that integer
_LOG_TICK_TOLERANCE = 1e-9


class PricePair(NamedTuple):
    """Both directions of a pool price, in human units."""
    price_of_0_in_1: float  # token1 per token0
    price_of_1_in_0: float  # token0 per token1


def get_sqrt_ratio_at_tick(tick: int) -> int:
    """Compute sqrtPriceX96 at a tick

    Same algorithm as Solidity TickMath.getSqrtRatioAtTick(), integer only.

    Args:
        tick: tick index (-887272 ~ 887272)

    Returns:
        sqrtPriceX96 (Q64.96)

    Raises:
        ValueError: tick outside the protocol range
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"Tick out of range: {tick} (range: {MIN_TICK} ~ {MAX_TICK})")

    abs_tick = abs(tick)

    ratio = 0x100000000000000000000000000000000 if abs_tick & 0x1 == 0 \
        else 0xfffcb933bd6fad37aa2d162d1a594001

    if abs_tick & 0x2:
        ratio = (ratio * 0xfff97272373d413259a46990580e213a) >> 128
    if abs_tick & 0x4:
        ratio = (ratio * 0xfff2e50f5f656932ef12357cf3c7fdcc) >> 128
    if abs_tick & 0x8:
        ratio = (ratio * 0xffe5caca7e10e4e61c3624eaa0941cd0) >> 128
    if abs_tick & 0x10:
        ratio = (ratio * 0xffcb9843d60f6159c9db58835c926644) >> 128
    if abs_tick & 0x20:
        ratio = (ratio * 0xff973b41fa98c081472e6896dfb254c0) >> 128
    if abs_tick & 0x40:
        ratio = (ratio * 0xff2ea16466c96a3843ec78b326b52861) >> 128
    if abs_tick & 0x80:
        ratio = (ratio * 0xfe5dee046a99a2a811c461f1969c3053) >> 128
    if abs_tick & 0x100:
        ratio = (ratio * 0xfcbe86c7900a88aedcffc83b479aa3a4) >> 128
    if abs_tick & 0x200:
        ratio = (ratio * 0xf987a7253ac413176f2b074cf7815e54) >> 128
    if abs_tick & 0x400:
        ratio = (ratio * 0xf3392b0822b70005940c7a398e4b70f3) >> 128
    if abs_tick & 0x800:
        ratio = (ratio * 0xe7159475a2c29b7443b29c7fa6e889d9) >> 128
    if abs_tick & 0x1000:
        ratio = (ratio * 0xd097f3bdfd2022b8845ad8f792aa5825) >> 128
    if abs_tick & 0x2000:
        ratio = (ratio * 0xa9f746462d870fdf8a65dc1f90e061e5) >> 128
    if abs_tick & 0x4000:
        ratio = (ratio * 0x70d869a156d2a1b890bb3df62baf32f7) >> 128
    if abs_tick & 0x8000:
        ratio = (ratio * 0x31be135f97d08fd981231505542fcfa6) >> 128
    if abs_tick & 0x10000:
        ratio = (ratio * 0x9aa508b5b7a84e1c677de54f3e99bc9) >> 128
    if abs_tick & 0x20000:
        ratio = (ratio * 0x5d6af8dedb81196699c329225ee604) >> 128
    if abs_tick & 0x40000:
        ratio = (ratio * 0x2216e584f5fa1ea926041bedfe98) >> 128
    if abs_tick & 0x80000:
        ratio = (ratio * 0x48a170391f7dc42444e8fa2) >> 128

    if tick > 0:
        ratio = UINT256_MAX // ratio

    # Q128.128 -> Q64.96, rounding up
    return (ratio >> 32) + (1 if ratio % (1 << 32) != 0 else 0)


def get_tick_at_sqrt_ratio(sqrt_price_x96: int) -> int:
    """Compute the greatest tick whose sqrt ratio is <= sqrt_price_x96

    Same algorithm as Solidity TickMath.getTickAtSqrtRatio().

    Raises:
        ValueError: sqrtPriceX96 outside [MIN_SQRT_RATIO, MAX_SQRT_RATIO)
    """
    if sqrt_price_x96 < MIN_SQRT_RATIO or sqrt_price_x96 >= MAX_SQRT_RATIO:
        raise ValueError(f"sqrtPriceX96 out of range: {sqrt_price_x96}")

    ratio = sqrt_price_x96 << 32

    # Most significant bit
    msb = ratio.bit_length() - 1

    if msb >= 128:
        r = ratio >> (msb - 127)
    else:
        r = ratio << (127 - msb)

    log_2 = (msb - 128) << 64

    for i in range(14):
        r = (r * r) >> 127
        f = r >> 128
        log_2 |= f << (63 - i)
        r >>= f

    log_sqrt10001 = log_2 * 255738958999603826347141

    tick_low = (log_sqrt10001 - 3402992956809132418596140100660247210) >> 128
    tick_high = (log_sqrt10001 + 291339464771989622907027621153398088495) >> 128

    if tick_low == tick_high:
        return tick_low

    if get_sqrt_ratio_at_tick(tick_high) <= sqrt_price_x96:
        return tick_high
    return tick_low


def tick_to_price(tick: int, token0_decimals: int, token1_decimals: int) -> PricePair:
    """Convert a tick to human-readable prices in both directions

    price_of_0_in_1 = 1.0001^tick * 10^(token0_decimals - token1_decimals)
    price_of_1_in_0 = 1 / price_of_0_in_1

    Floating point: good for display and range inputs, not for settlement.

    Args:
        tick: tick index
        token0_decimals: decimals of the pool's token0 (e.g. WETH = 18)
        token1_decimals: decimals of the pool's token1 (e.g. USDC = 6)

    Returns:
        PricePair(price_of_0_in_1, price_of_1_in_0)

    Raises:
        ValueError: tick outside the protocol range, or a price that is not
            a finite positive float

    Example:
        >>> tick_to_price(0, 18, 18)
        PricePair(price_of_0_in_1=1.0, price_of_1_in_0=1.0)
    """
    if tick < MIN_TICK or tick > MAX_TICK:
        raise ValueError(f"Tick out of range: {tick} (range: {MIN_TICK} ~ {MAX_TICK})")

    try:
        price = TICK_BASE ** tick * 10.0 ** (token0_decimals - token1_decimals)
    except OverflowError as e:
        raise ValueError(
            f"Price at tick {tick} overflows for decimals "
            f"{token0_decimals}/{token1_decimals}"
        ) from e

    if not math.isfinite(price) or price <= 0:
        raise ValueError(
            f"Price at tick {tick} is not representable for decimals "
            f"{token0_decimals}/{token1_decimals}"
        )

    inverse = 1 / price
    if not math.isfinite(inverse):
        raise ValueError(f"Inverse price at tick {tick} is not representable")

    return PricePair(price, inverse)


def price_to_tick(base_token, quote_token, price: float, tick_spacing: int) -> int:
    """Convert a human price to the nearest usable tick

    `price` is the amount of quote_token paid for one base_token. Tokens are
    any objects with `address` and `decimals` (see data.types.Token). The
    pool orders its tokens by address, so when base_token is token1 the
    price is inverted before taking the logarithm.

    Approximation for UI range selection only.

    Args:
        base_token: token being priced
        quote_token: token the price is expressed in
        price: human price (quote per base)
        tick_spacing: pool tick spacing (> 0)

    Returns:
        tick index, a multiple of tick_spacing

    Raises:
        ValueError: non-positive spacing or a price that is not finite and > 0
    """
    if tick_spacing <= 0:
        raise ValueError(f"Tick spacing must be positive: {tick_spacing}")
    if not math.isfinite(price) or price <= 0:
        raise ValueError(f"Price must be a finite positive number: {price}")

    if _sorts_before(base_token, quote_token):
        # base is token0: pool ratio is token1/token0
        ratio = price * 10.0 ** (quote_token.decimals - base_token.decimals)
    else:
        ratio = (1 / price) * 10.0 ** (base_token.decimals - quote_token.decimals)

    if not math.isfinite(ratio) or ratio <= 0:
        raise ValueError(f"Price {price} is outside the representable range")

    tick = _floor_tick(math.log(ratio) / math.log(TICK_BASE))
    return nearest_usable_tick(tick, tick_spacing)


def nearest_usable_tick(tick: int, tick_spacing: int) -> int:
    """Snap a tick to the nearest multiple of tick_spacing

    Ties round up (same as Math.round in the SDK). The result is clamped to
    the usable range so it can always be passed to the contract.

    Args:
        tick: tick to snap
        tick_spacing: tick spacing (e.g. 60 for 0.3% fee)

    Returns:
        nearest usable tick
    """
    if tick_spacing <= 0:
        raise ValueError(f"Tick spacing must be positive: {tick_spacing}")

    rounded = ((2 * tick + tick_spacing) // (2 * tick_spacing)) * tick_spacing

    min_usable = -(-MIN_TICK // tick_spacing) * tick_spacing
    max_usable = (MAX_TICK // tick_spacing) * tick_spacing
    if rounded < min_usable:
        logger.warning("Tick %s clamped to min usable tick %s", tick, min_usable)
        return min_usable
    if rounded > max_usable:
        logger.warning("Tick %s clamped to max usable tick %s", tick, max_usable)
        return max_usable
    return rounded


def get_tick_spacing_for_fee(fee_tier: int) -> int:
    """Tick spacing of a fee tier

    Raises:
        ValueError: unknown fee tier
    """
    if fee_tier not in TICK_SPACINGS:
        raise ValueError(f"Unsupported fee tier: {fee_tier}")
    return TICK_SPACINGS[fee_tier]


def _floor_tick(raw_tick: float) -> int:
    nearest = round(raw_tick)
    if abs(raw_tick - nearest) < _LOG_TICK_TOLERANCE:
        return int(nearest)
    return math.floor(raw_tick)


def _sorts_before(token_a, token_b) -> bool:
    return token_a.address.lower() < token_b.address.lower()
