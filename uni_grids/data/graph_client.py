"""
The Graph API client

Queries the GridManager subgraph for grid deployments. The subgraph can lag
behind the chain, so results are merged with on-chain GridDeployed logs
fetched by the caller's chain client.
"""

import logging
import time
from dataclasses import replace
from typing import Optional, List, Dict, Any, Iterable

import requests

from ..config import settings
from ..constants import CHAIN_IDS, GRAPH_GATEWAY_URL
from .types import GridDeployment
from . import queries

logger = logging.getLogger(__name__)


class GraphClientError(Exception):
    """Graph API error"""
    pass


class GraphClient:
    """GridManager subgraph client

    Usage:
        client = GraphClient(api_key="your_api_key", subgraph_id="...")
        grids = client.get_grid_deployments("0x...")
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        chain: Optional[str] = None,
        subgraph_id: Optional[str] = None,
        timeout: Optional[int] = None,
        max_retries: Optional[int] = None,
        session: Optional[requests.Session] = None
    ):
        """
        Args:
            api_key: The Graph API key. Falls back to GRAPH_API_KEY
            chain: chain name (base, arbitrum). Falls back to GRID_CHAIN
            subgraph_id: GridManager subgraph id. Falls back to GRID_MANAGER_SUBGRAPH_ID
            timeout: request timeout (seconds)
            max_retries: attempts per query on network errors
            session: requests session to reuse
        """
        self.api_key = api_key or settings.GRAPH_API_KEY
        if not self.api_key:
            raise GraphClientError(
                "An API key is required. Set GRAPH_API_KEY or pass api_key. "
                "Keys are issued at https://thegraph.com/studio/"
            )

        chain_lower = (chain or settings.GRID_CHAIN).lower()
        if chain_lower not in CHAIN_IDS:
            raise GraphClientError(
                f"Unsupported chain: {chain_lower}. "
                f"Supported chains: {', '.join(CHAIN_IDS.keys())}"
            )
        self.chain_id = CHAIN_IDS[chain_lower]

        self.subgraph_id = subgraph_id or settings.GRID_MANAGER_SUBGRAPH_ID
        if not self.subgraph_id:
            raise GraphClientError(
                "A subgraph id is required. Set GRID_MANAGER_SUBGRAPH_ID or pass subgraph_id"
            )

        self.timeout = timeout or settings.GRAPH_TIMEOUT
        self.max_retries = max(1, max_retries or settings.GRAPH_MAX_RETRIES)
        self._session = session or requests.Session()

    @property
    def endpoint(self) -> str:
        """GraphQL endpoint URL"""
        return f"{GRAPH_GATEWAY_URL}/{self.api_key}/subgraphs/id/{self.subgraph_id}"

    def _execute_query(
        self,
        query: str,
        variables: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Execute a GraphQL query

        Network errors are retried up to max_retries; GraphQL errors are not.

        Raises:
            GraphClientError: on API errors
        """
        payload: Dict[str, Any] = {"query": query}
        if variables:
            payload["variables"] = variables

        last_error = None
        for attempt in range(self.max_retries):
            try:
                response = self._session.post(
                    self.endpoint,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout
                )
                response.raise_for_status()
            except requests.exceptions.Timeout:
                last_error = GraphClientError(f"Request timed out ({self.timeout}s)")
            except requests.exceptions.RequestException as e:
                last_error = GraphClientError(f"Network error: {e}")
            else:
                try:
                    data = response.json()
                except ValueError as e:
                    raise GraphClientError(f"Invalid JSON response: {e}") from e
                if "errors" in data:
                    error_messages = [e.get("message", str(e)) for e in data["errors"]]
                    raise GraphClientError(f"GraphQL error: {'; '.join(error_messages)}")
                if "data" not in data:
                    raise GraphClientError("Response has no 'data' field")
                return data["data"]

            logger.warning(
                "Subgraph query failed (attempt %d/%d): %s",
                attempt + 1, self.max_retries, last_error
            )
            if attempt < self.max_retries - 1:
                time.sleep(1.0 * (attempt + 1))

        raise last_error

    def get_grid_deployments(self, owner: str) -> List[GridDeployment]:
        """Grids deployed by an owner

        Args:
            owner: owner wallet address

        Returns:
            GridDeployment list in subgraph order
        """
        data = self._execute_query(
            queries.GRID_DEPLOYEDS_QUERY,
            {"owner": owner.lower()}
        )
        deployments = data.get("gridDeployeds") or []
        return [GridDeployment.from_dict({"owner": owner, **d}) for d in deployments]


def merge_grid_deployments(
    subgraph_deployments: Iterable[GridDeployment],
    log_deployments: Iterable[GridDeployment],
    fallback_timestamp: Optional[int] = None
) -> List[GridDeployment]:
    """Merge subgraph results with on-chain logs

    Deployments are keyed by grid position manager address (case-insensitive).
    Logs only fill in grids the subgraph has not indexed yet; for a grid in
    both, the subgraph entry is kept. Missing timestamps (logs carry none)
    are filled with fallback_timestamp, usually the latest block's timestamp.

    Returns:
        GridDeployment list, newest block first
    """
    merged: Dict[str, GridDeployment] = {}
    for deployment in list(log_deployments) + list(subgraph_deployments):
        key = deployment.grid_position_manager.lower()
        previous = merged.get(key)
        if deployment.block_timestamp is None and previous is not None:
            deployment = replace(deployment, block_timestamp=previous.block_timestamp)
        merged[key] = deployment

    result = [
        replace(d, block_timestamp=fallback_timestamp) if d.block_timestamp is None else d
        for d in merged.values()
    ]
    return sorted(result, key=lambda d: d.block_number, reverse=True)
