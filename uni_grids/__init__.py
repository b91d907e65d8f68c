"""
Uniswap V3 Grid Console Library

Client-side math and data helpers for managing liquidity-grid positions:
tick/price/liquidity conversions with on-chain precision, grid parameter
builders and a subgraph client for grid deployments.
"""

__version__ = "0.1.0"

from .constants import Q96, Q192, MIN_TICK, MAX_TICK, DEFAULT_TOKEN_DECIMALS, TICK_SPACINGS, CHAIN_IDS
