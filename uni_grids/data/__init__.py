"""
Data layer for the grid console

Value types for chain client results and the GridManager subgraph client
"""

from .types import Token, TokenMetadata, PoolInfo, PoolState, GridPosition, GridDeployment
from .graph_client import GraphClient, GraphClientError, merge_grid_deployments
