"""Cache infrastructure package.

This package provides the Redis-backed keyed store and the response cache
built on it. All cache dependencies are managed through src.core.container.

Architecture:
- RedisAdapter: Concrete Redis implementation of CacheProtocol
- ResponseCache: Fail-soft store of JSON response bodies
- CacheInvalidator: Explicit invalidation hooks for mutation routes
- Use src.core.container.get_cache() for dependency injection
"""

from src.infrastructure.cache.cache_keys import CacheKeys, canonical_query
from src.infrastructure.cache.invalidation import (
    CacheInvalidator,
    InvalidationPlan,
    default_invalidation_plans,
)
from src.infrastructure.cache.redis_adapter import RedisAdapter
from src.infrastructure.cache.response_cache import (
    CacheNamespace,
    CacheTTL,
    ResponseCache,
)

__all__ = [
    "CacheInvalidator",
    "CacheKeys",
    "CacheNamespace",
    "CacheTTL",
    "InvalidationPlan",
    "RedisAdapter",
    "ResponseCache",
    "canonical_query",
    "default_invalidation_plans",
]
