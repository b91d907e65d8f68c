"""
Configuration settings for the grid console library

Loads environment variables (and a local .env file) into a Settings object.
"""
import os
from typing import Optional

from dotenv import load_dotenv

from .constants import DEFAULT_TOKEN_DECIMALS

# Load environment variables from .env file
load_dotenv()


class Settings:
    """Library settings"""

    # The Graph API
    GRAPH_API_KEY: str = os.getenv("GRAPH_API_KEY", "")
    GRAPH_TIMEOUT: int = int(os.getenv("GRAPH_TIMEOUT", 30))
    GRAPH_MAX_RETRIES: int = int(os.getenv("GRAPH_MAX_RETRIES", 3))

    # Grid manager deployment
    GRID_CHAIN: str = os.getenv("GRID_CHAIN", "base")
    GRID_MANAGER_SUBGRAPH_ID: str = os.getenv("GRID_MANAGER_SUBGRAPH_ID", "")

    # Decimals assumed for tokens that do not report any
    DEFAULT_TOKEN_DECIMALS: int = int(
        os.getenv("DEFAULT_TOKEN_DECIMALS", DEFAULT_TOKEN_DECIMALS)
    )

    def token_decimals(self, decimals: Optional[int]) -> int:
        """Token decimals, or the configured default when unknown"""
        if decimals is None:
            return self.DEFAULT_TOKEN_DECIMALS
        return int(decimals)


# Create global settings instance
settings = Settings()
