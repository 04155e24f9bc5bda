"""Domain enums for the request-shaping layer.

Enums are centralized here for discoverability and maintainability.

Available Enums:
    - CacheStatus: X-Cache header tokens (HIT, MISS)
    - IdentityStrategy: How a request is identified for rate limiting
    - RateLimitTier: Named fixed-window tiers
    - ResourceType: Resource types with cached reads
"""

from src.domain.enums.cache_status import CacheStatus
from src.domain.enums.identity_strategy import IdentityStrategy
from src.domain.enums.rate_limit_tier import RateLimitTier
from src.domain.enums.resource_type import ResourceType

__all__ = [
    "CacheStatus",
    "IdentityStrategy",
    "RateLimitTier",
    "ResourceType",
]
