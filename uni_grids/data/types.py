"""
Grid console data types

Value types for what the chain client and the subgraph return.
Numeric fields are ints (uint128/uint256 values arrive as strings or ints).
"""

import time
from dataclasses import dataclass
from typing import Optional

from ..config import settings
from ..constants import NEW_GRID_WINDOW_SECONDS


@dataclass(frozen=True)
class Token:
    """The two fields the math needs from an ERC20 token"""
    address: str
    decimals: int

    def sorts_before(self, other: "Token") -> bool:
        """True if this token is token0 of a pool with `other`"""
        return self.address.lower() < other.address.lower()


@dataclass(frozen=True)
class TokenMetadata:
    """ERC20 token information"""
    address: str
    symbol: str
    decimals: int

    @property
    def token(self) -> Token:
        return Token(self.address, self.decimals)

    @classmethod
    def from_dict(cls, data: dict) -> "TokenMetadata":
        decimals = data.get("decimals")
        return cls(
            address=data["address"],
            symbol=data.get("symbol", ""),
            decimals=settings.token_decimals(decimals),
        )


@dataclass
class PoolInfo:
    """Pool a grid position manager trades in (getPoolInfo)"""
    address: str
    token0: TokenMetadata
    token1: TokenMetadata
    fee: int

    @classmethod
    def from_dict(cls, data: dict) -> "PoolInfo":
        """Build from a nested dict or from the flat getPoolInfo tuple fields"""
        if isinstance(data.get("token0"), dict):
            token0 = TokenMetadata.from_dict(data["token0"])
            token1 = TokenMetadata.from_dict(data["token1"])
        else:
            token0 = TokenMetadata.from_dict({
                "address": data["token0"],
                "symbol": data.get("token0Symbol", ""),
                "decimals": data.get("token0Decimals"),
            })
            token1 = TokenMetadata.from_dict({
                "address": data["token1"],
                "symbol": data.get("token1Symbol", ""),
                "decimals": data.get("token1Decimals"),
            })
        return cls(
            address=data.get("pool") or data["address"],
            token0=token0,
            token1=token1,
            fee=int(data.get("fee", 0)),
        )


@dataclass(frozen=True)
class PoolState:
    """What price display needs from a pool"""
    token0_decimals: int
    token1_decimals: int
    current_tick: int

    @classmethod
    def from_slot0(cls, pool: PoolInfo, slot0: tuple) -> "PoolState":
        # slot0 = (sqrtPriceX96, tick, ...)
        return cls(
            token0_decimals=pool.token0.decimals,
            token1_decimals=pool.token1.decimals,
            current_tick=int(slot0[1]),
        )


@dataclass
class GridPosition:
    """Open position of a grid (getActivePositions)

    - tokenId: NFT position id
    - tickLower / tickUpper: range bounds (int24)
    - liquidity: position liquidity (uint128)
    - index: index in the grid's position array
    """
    token_id: int
    tick_lower: int
    tick_upper: int
    liquidity: int
    index: int

    @classmethod
    def from_dict(cls, data: dict) -> "GridPosition":
        return cls(
            token_id=int(data["tokenId"]),
            tick_lower=int(data["tickLower"]),
            tick_upper=int(data["tickUpper"]),
            liquidity=int(data["liquidity"]),
            index=int(data.get("index", 0)),
        )


@dataclass
class GridDeployment:
    """GridDeployed event, from the subgraph or from on-chain logs"""
    owner: str
    grid_position_manager: str
    pool: str
    block_number: int
    block_timestamp: Optional[int] = None

    @classmethod
    def from_dict(cls, data: dict) -> "GridDeployment":
        timestamp = data.get("blockTimestamp")
        return cls(
            owner=data.get("owner", ""),
            grid_position_manager=data["gridPositionManager"],
            pool=data["pool"],
            block_number=int(data["blockNumber"]),
            block_timestamp=int(timestamp) if timestamp is not None else None,
        )

    @classmethod
    def from_log(cls, log: dict) -> "GridDeployment":
        """Build from a decoded event log: {"args": {...}, "blockNumber": ...}"""
        args = log["args"]
        return cls.from_dict({
            "owner": args.get("owner", ""),
            "gridPositionManager": args["gridPositionManager"],
            "pool": args["pool"],
            "blockNumber": log["blockNumber"],
            "blockTimestamp": log.get("blockTimestamp"),
        })

    def is_new(self, now: Optional[float] = None) -> bool:
        """Deployed less than NEW_GRID_WINDOW_SECONDS before `now` (default: current time)

        A deployment without a known timestamp is never new.
        """
        if self.block_timestamp is None:
            return False
        if now is None:
            now = time.time()
        return self.block_timestamp > now - NEW_GRID_WINDOW_SECONDS
