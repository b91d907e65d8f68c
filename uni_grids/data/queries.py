"""
GraphQL queries

Queries against the GridManager subgraph.
"""

# Grids deployed by an owner (GridDeployed events)
GRID_DEPLOYEDS_QUERY = """
query Grids($owner: String!) {
  gridDeployeds(where: { owner: $owner }) {
    owner
    gridPositionManager
    pool
    blockNumber
    blockTimestamp
  }
}
"""
