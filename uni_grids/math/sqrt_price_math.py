"""
Sqrt Price Math - sqrtPriceX96 calculations

Prices are stored on-chain as sqrtPriceX96 = sqrt(price) * 2^96.
All functions here use exact integer (or Fraction) arithmetic.

References:
- Uniswap V3 Core: contracts/libraries/SqrtPriceMath.sol
- Uniswap V3 Core: contracts/libraries/FullMath.sol
"""

from fractions import Fraction

from ..constants import Q96, Q192
from .tick_math import PricePair


def get_amount0_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """Token0 amount between two sqrt prices for a liquidity

    Formula: dx = L * (sqrtP_b - sqrtP_a) / (sqrtP_a * sqrtP_b)
                = L * (1/sqrtP_a - 1/sqrtP_b)

    Args:
        sqrt_ratio_a_x96: one bound (sqrtPriceX96)
        sqrt_ratio_b_x96: other bound (sqrtPriceX96)
        liquidity: liquidity (L)
        round_up: round up like the pool does when it receives tokens

    Returns:
        amount0 in token0's smallest unit
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _ordered(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    if liquidity < 0:
        raise ValueError(f"Liquidity must be non-negative: {liquidity}")

    numerator1 = liquidity << 96
    numerator2 = sqrt_ratio_b_x96 - sqrt_ratio_a_x96

    if round_up:
        return div_rounding_up(
            mul_div_rounding_up(numerator1, numerator2, sqrt_ratio_b_x96),
            sqrt_ratio_a_x96
        )
    return (numerator1 * numerator2 // sqrt_ratio_b_x96) // sqrt_ratio_a_x96


def get_amount1_delta(
    sqrt_ratio_a_x96: int,
    sqrt_ratio_b_x96: int,
    liquidity: int,
    round_up: bool = True
) -> int:
    """Token1 amount between two sqrt prices for a liquidity

    Formula: dy = L * (sqrtP_b - sqrtP_a)

    Args:
        sqrt_ratio_a_x96: one bound (sqrtPriceX96)
        sqrt_ratio_b_x96: other bound (sqrtPriceX96)
        liquidity: liquidity (L)
        round_up: round up like the pool does when it receives tokens

    Returns:
        amount1 in token1's smallest unit
    """
    sqrt_ratio_a_x96, sqrt_ratio_b_x96 = _ordered(sqrt_ratio_a_x96, sqrt_ratio_b_x96)
    if liquidity < 0:
        raise ValueError(f"Liquidity must be non-negative: {liquidity}")

    if round_up:
        return mul_div_rounding_up(liquidity, sqrt_ratio_b_x96 - sqrt_ratio_a_x96, Q96)
    return liquidity * (sqrt_ratio_b_x96 - sqrt_ratio_a_x96) // Q96


def sqrt_price_x96_to_price(
    sqrt_price_x96: int,
    token0_decimals: int,
    token1_decimals: int
) -> PricePair:
    """Convert a pool's sqrtPriceX96 (slot0) to human prices

    price_of_0_in_1 = sqrtPriceX96^2 / 2^192 * 10^(token0_decimals - token1_decimals)

    The square is taken exactly; only the final value is rounded to float.
    """
    if sqrt_price_x96 <= 0:
        raise ValueError(f"sqrtPriceX96 must be positive: {sqrt_price_x96}")

    price = Fraction(sqrt_price_x96 * sqrt_price_x96, Q192)
    price *= Fraction(10) ** (token0_decimals - token1_decimals)
    return PricePair(float(price), float(1 / price))


def mul_div_rounding_up(a: int, b: int, denominator: int) -> int:
    """(a * b) / denominator, rounded up"""
    product = a * b
    result = product // denominator
    if product % denominator > 0:
        result += 1
    return result


def div_rounding_up(numerator: int, denominator: int) -> int:
    """numerator / denominator, rounded up"""
    result = numerator // denominator
    if numerator % denominator > 0:
        result += 1
    return result


def _ordered(sqrt_ratio_a_x96: int, sqrt_ratio_b_x96: int):
    if sqrt_ratio_a_x96 > sqrt_ratio_b_x96:
        sqrt_ratio_a_x96, sqrt_ratio_b_x96 = sqrt_ratio_b_x96, sqrt_ratio_a_x96
    if sqrt_ratio_a_x96 <= 0:
        raise ValueError(f"sqrtPriceX96 must be positive: {sqrt_ratio_a_x96}")
    return sqrt_ratio_a_x96, sqrt_ratio_b_x96
