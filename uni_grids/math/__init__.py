"""
Math layer for the grid console

Pure conversion functions, matching the contract's fixed-point math:
- tick_math: tick <-> sqrtPriceX96 <-> price, tick spacing snapping
- sqrt_price_math: exact amount deltas, sqrtPriceX96 -> price
- amount_math: raw <-> decimal token amounts
- liquidity_math: liquidity <-> token amounts over a tick range
"""

from .tick_math import (
    PricePair,
    get_sqrt_ratio_at_tick,
    get_tick_at_sqrt_ratio,
    tick_to_price,
    price_to_tick,
    nearest_usable_tick,
    get_tick_spacing_for_fee,
)
from .sqrt_price_math import (
    get_amount0_delta,
    get_amount1_delta,
    sqrt_price_x96_to_price,
)
from .amount_math import (
    from_raw_token_amount,
    to_raw_token_amount,
    truncate_amount,
)
from .liquidity_math import (
    InvalidTickRangeError,
    TokenAmounts,
    liquidity_to_raw_amounts,
    liquidity_to_token_amounts,
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_amounts_for_liquidity,
)
