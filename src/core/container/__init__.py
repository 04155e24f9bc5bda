"""Container module - Centralized dependency injection.

This module re-exports all factory functions from submodules:

    from src.core.container import get_cache, get_rate_limit, ...

The container is organized into modules:
- infrastructure: Redis client, cache, rate limit, response cache,
  invalidation, analytics, logging
- repositories: Document repository for the collaborator routes
"""

# Infrastructure services
from src.core.container.infrastructure import (
    close_redis_client,
    get_analytics,
    get_cache,
    get_cache_invalidator,
    get_logger,
    get_rate_limit,
    get_redis_client,
    get_response_cache,
)

# Repositories
from src.core.container.repositories import get_document_repository

__all__ = [
    # Infrastructure
    "close_redis_client",
    "get_analytics",
    "get_cache",
    "get_cache_invalidator",
    "get_logger",
    "get_rate_limit",
    "get_redis_client",
    "get_response_cache",
    # Repositories
    "get_document_repository",
]
