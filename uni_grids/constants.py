"""
Protocol constants for the grid console.

Constants shared by the math layer and the data layer:
- Q96 / Q192: sqrt price fixed-point encoding (2^96, 2^192)
- MIN_TICK / MAX_TICK and the matching sqrt ratio bounds
- FEE_TIERS / TICK_SPACINGS: fee tier -> tick spacing
- DEFAULT_TOKEN_DECIMALS: decimals assumed when a token does not report any
"""

from typing import Dict

# Fixed-point encoding
Q96: int = 2 ** 96
Q128: int = 2 ** 128
Q192: int = 2 ** 192

# Tick range (TickMath.sol)
MIN_TICK: int = -887272
MAX_TICK: int = 887272

MIN_SQRT_RATIO: int = 4295128739
MAX_SQRT_RATIO: int = 1461446703485210103287273052203988822378723970342

# price = TICK_BASE ** tick
TICK_BASE: float = 1.0001

UINT128_MAX: int = 2 ** 128 - 1
UINT256_MAX: int = 2 ** 256 - 1

# Fee tiers (hundredths of a bip)
FEE_TIERS: Dict[int, str] = {
    100: "0.01%",
    500: "0.05%",
    3000: "0.30%",
    10000: "1.00%",
}

TICK_SPACINGS: Dict[int, int] = {
    100: 1,
    500: 10,
    3000: 60,
    10000: 200,
}

# Most ERC20 tokens on the target chains use 18 decimals
DEFAULT_TOKEN_DECIMALS: int = 18

# Grid actions reject slippage above 5% (500 bps)
MAX_SLIPPAGE_PERCENT: float = 5.0

CHAIN_IDS: Dict[str, int] = {
    "base": 8453,
    "arbitrum": 42161,
}

GRAPH_GATEWAY_URL: str = "https://gateway.thegraph.com/api"

# Grids deployed within this many seconds are flagged as new
NEW_GRID_WINDOW_SECONDS: int = 24 * 60 * 60
