"""
Liquidity Math tests

Liquidity <-> token amount conversion, including the position decomposition
used for display.
"""

from decimal import Decimal

import pytest

from ..math.liquidity_math import (
    InvalidTickRangeError,
    TokenAmounts,
    liquidity_to_raw_amounts,
    liquidity_to_token_amounts,
    get_liquidity_for_amount0,
    get_liquidity_for_amount1,
    get_amounts_for_liquidity,
)
from ..math.amount_math import from_raw_token_amount
from ..math.sqrt_price_math import (
    get_amount0_delta,
    get_amount1_delta,
    sqrt_price_x96_to_price,
)
from ..math.tick_math import get_sqrt_ratio_at_tick
from ..constants import Q96, UINT128_MAX, MAX_TICK


class TestGetAmountDeltas:
    """get_amount0_delta, get_amount1_delta tests"""

    def test_basic(self):
        sqrt_a = get_sqrt_ratio_at_tick(0)
        sqrt_b = get_sqrt_ratio_at_tick(100)
        assert get_amount0_delta(sqrt_a, sqrt_b, 10 ** 18) > 0
        assert get_amount1_delta(sqrt_a, sqrt_b, 10 ** 18) > 0

    def test_swap_order(self):
        sqrt_a = get_sqrt_ratio_at_tick(0)
        sqrt_b = get_sqrt_ratio_at_tick(100)
        assert get_amount0_delta(sqrt_a, sqrt_b, 10 ** 18) == get_amount0_delta(sqrt_b, sqrt_a, 10 ** 18)
        assert get_amount1_delta(sqrt_a, sqrt_b, 10 ** 18) == get_amount1_delta(sqrt_b, sqrt_a, 10 ** 18)

    def test_round_up_is_at_most_one_more(self):
        sqrt_a = get_sqrt_ratio_at_tick(-887)
        sqrt_b = get_sqrt_ratio_at_tick(1213)
        liquidity = 123456789123456789
        for delta in (get_amount0_delta, get_amount1_delta):
            up = delta(sqrt_a, sqrt_b, liquidity, True)
            down = delta(sqrt_a, sqrt_b, liquidity, False)
            assert 0 <= up - down <= 1

    def test_zero_liquidity(self):
        sqrt_a = get_sqrt_ratio_at_tick(0)
        sqrt_b = get_sqrt_ratio_at_tick(100)
        assert get_amount0_delta(sqrt_a, sqrt_b, 0) == 0
        assert get_amount1_delta(sqrt_a, sqrt_b, 0) == 0

    def test_amount1_exact_value(self):
        """L * (sqrtB - sqrtA) / 2^96 rounded up"""
        sqrt_a = Q96
        sqrt_b = 2 * Q96
        assert get_amount1_delta(sqrt_a, sqrt_b, 10 ** 18) == 10 ** 18
        assert get_amount0_delta(sqrt_a, sqrt_b, 10 ** 18) == 5 * 10 ** 17

    def test_negative_liquidity(self):
        with pytest.raises(ValueError):
            get_amount0_delta(Q96, 2 * Q96, -1)
        with pytest.raises(ValueError):
            get_amount1_delta(Q96, 2 * Q96, -1)


class TestSqrtPriceToPrice:

    def test_price_1(self):
        assert sqrt_price_x96_to_price(Q96, 18, 18) == (1.0, 1.0)

    def test_matches_tick_price(self):
        price = sqrt_price_x96_to_price(get_sqrt_ratio_at_tick(1000), 18, 18)
        assert price.price_of_0_in_1 == pytest.approx(1.0001 ** 1000, rel=1e-9)
        assert price.price_of_1_in_0 == pytest.approx(1.0001 ** -1000, rel=1e-9)

    def test_decimals(self):
        price = sqrt_price_x96_to_price(2 * Q96, 18, 6)
        assert price.price_of_0_in_1 == pytest.approx(4e12)

    def test_invalid(self):
        with pytest.raises(ValueError):
            sqrt_price_x96_to_price(0, 18, 18)


class TestLiquidityToTokenAmounts:
    """Position decomposition over a tick range"""

    def test_concrete_scenario(self):
        """L=1e12 over [-100, 100], WETH(18)/USDC(6)"""
        liquidity = 1_000_000_000_000
        amounts = liquidity_to_token_amounts(liquidity, -100, 100, 18, 6)
        assert isinstance(amounts, TokenAmounts)
        assert amounts.amount0 > 0
        assert amounts.amount1 > 0

        # Rescaled amounts give back the same liquidity
        raw0 = int(amounts.amount0.scaleb(18))
        raw1 = int(amounts.amount1.scaleb(6))
        sqrt_a = get_sqrt_ratio_at_tick(-100)
        sqrt_b = get_sqrt_ratio_at_tick(100)
        assert get_liquidity_for_amount0(sqrt_a, sqrt_b, raw0) == pytest.approx(liquidity, rel=1e-6)
        assert get_liquidity_for_amount1(sqrt_a, sqrt_b, raw1) == pytest.approx(liquidity, rel=1e-6)

    def test_rebasing_commutes(self):
        """Decomposing then rebasing == rebasing the raw decomposition"""
        liquidity = 987654321987654321
        raw = liquidity_to_raw_amounts(liquidity, -6000, 4200)
        amounts = liquidity_to_token_amounts(liquidity, -6000, 4200, 18, 6)
        assert amounts.amount0 == from_raw_token_amount(raw.amount0, 18)
        assert amounts.amount1 == from_raw_token_amount(raw.amount1, 6)

    def test_uses_round_up(self):
        sqrt_a = get_sqrt_ratio_at_tick(-60)
        sqrt_b = get_sqrt_ratio_at_tick(120)
        raw = liquidity_to_raw_amounts(10 ** 15 + 7, -60, 120)
        assert raw.amount0 == get_amount0_delta(sqrt_a, sqrt_b, 10 ** 15 + 7, True)
        assert raw.amount1 == get_amount1_delta(sqrt_a, sqrt_b, 10 ** 15 + 7, True)

    def test_symmetric_range_same_decimals(self):
        """Around price 1 both sides hold the same raw amount"""
        raw = liquidity_to_raw_amounts(10 ** 18, -500, 500)
        assert abs(raw.amount0 - raw.amount1) <= 2

    def test_returns_decimals(self):
        amounts = liquidity_to_token_amounts(10 ** 18, -60, 60, 18, 18)
        assert isinstance(amounts.amount0, Decimal)
        assert isinstance(amounts.amount1, Decimal)

    def test_zero_liquidity(self):
        assert liquidity_to_token_amounts(0, -60, 60, 18, 6) == (0, 0)

    def test_widening_never_decreases(self):
        liquidity = 10 ** 20
        base = liquidity_to_raw_amounts(liquidity, -600, 600)
        wider_lower = liquidity_to_raw_amounts(liquidity, -1200, 600)
        wider_upper = liquidity_to_raw_amounts(liquidity, -600, 1200)
        for wider in (wider_lower, wider_upper):
            assert wider.amount0 >= base.amount0
            assert wider.amount1 >= base.amount1

    def test_max_liquidity_is_exact(self):
        """uint128 liquidity over the widest range, no float involved"""
        raw = liquidity_to_raw_amounts(UINT128_MAX, -MAX_TICK, MAX_TICK)
        assert isinstance(raw.amount0, int)
        assert raw.amount0 > UINT128_MAX
        assert raw.amount1 > UINT128_MAX

    def test_equal_ticks_rejected(self):
        with pytest.raises(InvalidTickRangeError):
            liquidity_to_token_amounts(10 ** 12, 100, 100, 18, 6)

    def test_inverted_ticks_rejected(self):
        with pytest.raises(ValueError):
            liquidity_to_token_amounts(10 ** 12, 100, -100, 18, 6)

    def test_out_of_range_ticks(self):
        with pytest.raises(ValueError):
            liquidity_to_raw_amounts(10 ** 12, -100, MAX_TICK + 1)

    def test_liquidity_bounds(self):
        with pytest.raises(ValueError):
            liquidity_to_raw_amounts(-1, -100, 100)
        with pytest.raises(ValueError):
            liquidity_to_raw_amounts(UINT128_MAX + 1, -100, 100)


class TestGetLiquidityForAmount:
    """get_liquidity_for_amount0/1 tests"""

    def test_inverts_amount_deltas(self):
        sqrt_a = get_sqrt_ratio_at_tick(-600)
        sqrt_b = get_sqrt_ratio_at_tick(600)
        liquidity = 10 ** 18
        amount0 = get_amount0_delta(sqrt_a, sqrt_b, liquidity, False)
        amount1 = get_amount1_delta(sqrt_a, sqrt_b, liquidity, False)
        assert get_liquidity_for_amount0(sqrt_a, sqrt_b, amount0) == pytest.approx(liquidity, rel=1e-12)
        assert get_liquidity_for_amount1(sqrt_a, sqrt_b, amount1) == pytest.approx(liquidity, rel=1e-12)

    def test_bounds_order_does_not_matter(self):
        sqrt_a = get_sqrt_ratio_at_tick(0)
        sqrt_b = get_sqrt_ratio_at_tick(100)
        assert get_liquidity_for_amount0(sqrt_a, sqrt_b, 10 ** 18) == get_liquidity_for_amount0(sqrt_b, sqrt_a, 10 ** 18)
        assert get_liquidity_for_amount1(sqrt_a, sqrt_b, 10 ** 18) == get_liquidity_for_amount1(sqrt_b, sqrt_a, 10 ** 18)

    def test_empty_range(self):
        with pytest.raises(InvalidTickRangeError):
            get_liquidity_for_amount0(Q96, Q96, 10 ** 18)
        with pytest.raises(InvalidTickRangeError):
            get_liquidity_for_amount1(Q96, Q96, 10 ** 18)


class TestGetAmountsForLiquidity:
    """Position amounts at the current price"""

    def test_below_range(self):
        amounts = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(-200), 0, 100, 10 ** 18)
        assert amounts.amount0 == get_amount0_delta(
            get_sqrt_ratio_at_tick(0), get_sqrt_ratio_at_tick(100), 10 ** 18, False
        )
        assert amounts.amount1 == 0

    def test_above_range(self):
        amounts = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(200), 0, 100, 10 ** 18)
        assert amounts.amount0 == 0
        assert amounts.amount1 == get_amount1_delta(
            get_sqrt_ratio_at_tick(0), get_sqrt_ratio_at_tick(100), 10 ** 18, False
        )

    def test_in_range(self):
        sqrt_current = get_sqrt_ratio_at_tick(50)
        amounts = get_amounts_for_liquidity(sqrt_current, 0, 100, 10 ** 18)
        assert amounts.amount0 == get_amount0_delta(sqrt_current, get_sqrt_ratio_at_tick(100), 10 ** 18, False)
        assert amounts.amount1 == get_amount1_delta(get_sqrt_ratio_at_tick(0), sqrt_current, 10 ** 18, False)

    def test_at_bounds(self):
        """At the lower tick the position is all token0, at the upper all token1"""
        at_lower = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(0), 0, 100, 10 ** 18)
        at_upper = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(100), 0, 100, 10 ** 18)
        assert at_lower.amount0 > 0 and at_lower.amount1 == 0
        assert at_upper.amount0 == 0 and at_upper.amount1 > 0

    def test_never_more_than_full_range(self):
        """Value at any price is below the full-range decomposition"""
        full = liquidity_to_raw_amounts(10 ** 18, 0, 100)
        for tick in (-200, 0, 50, 100, 200):
            amounts = get_amounts_for_liquidity(get_sqrt_ratio_at_tick(tick), 0, 100, 10 ** 18)
            assert amounts.amount0 <= full.amount0
            assert amounts.amount1 <= full.amount1

    def test_liquidity_roundtrip(self):
        sqrt_current = get_sqrt_ratio_at_tick(50)
        liquidity = 10 ** 18

        amount0, amount1 = get_amounts_for_liquidity(sqrt_current, 0, 100, liquidity)
        liquidity0 = get_liquidity_for_amount0(sqrt_current, get_sqrt_ratio_at_tick(100), amount0)
        liquidity1 = get_liquidity_for_amount1(get_sqrt_ratio_at_tick(0), sqrt_current, amount1)

        assert min(liquidity0, liquidity1) == pytest.approx(liquidity, rel=1e-9)

    def test_invalid_range(self):
        with pytest.raises(InvalidTickRangeError):
            get_amounts_for_liquidity(Q96, 100, 100, 10 ** 18)
        with pytest.raises(ValueError):
            get_amounts_for_liquidity(Q96, -100, 100, -1)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
