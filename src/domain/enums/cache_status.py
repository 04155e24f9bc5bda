"""Response cache status tokens (X-Cache header values)."""

from enum import Enum


class CacheStatus(str, Enum):
    """Whether a cached route was answered from the store or the handler."""

    HIT = "HIT"
    MISS = "MISS"
