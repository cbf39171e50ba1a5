# =============================================================================
# GitHub Gateway - Package
# =============================================================================
"""
Caching gateway for the GitHub REST and GraphQL APIs.

Provides a single async entry point for:
- The authenticated user and their repositories
- Issue management (list, get, create, update)
- Milestones, labels and pull requests
- Projects (v2) through the GraphQL API

Reads go through a TTL cache; successful writes invalidate the cached
reads they affect.
"""

from .gateway import GitHubGateway

__version__ = "0.1.0"

__all__ = ["GitHubGateway", "__version__"]
