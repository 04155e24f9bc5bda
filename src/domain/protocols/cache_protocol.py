"""Cache protocol for domain layer.

This module defines the keyed store interface the request-shaping layer
needs (rate limit counters, cached responses, analytics counters), without
knowing about any specific implementation. Infrastructure adapters implement
this protocol to provide the store.

Architecture:
- Protocol-based - uses structural typing
- All operations return Result types
- No framework dependencies in domain layer
- Callers pick the fallback: a failed get is a miss, a failed increment is
  the first request in the window
"""

from typing import Any, Protocol

from src.core.errors import DomainError
from src.core.result import Result


class CacheProtocol(Protocol):
    """Cache protocol - what domain needs from the keyed store.

    Defines store operations using Protocol (structural typing).
    Infrastructure adapters implement this without inheritance.

    All operations return Result types for error handling.
    Fail-open strategy: store failures should not break core functionality.
    """

    async def get(self, key: str) -> Result[str | None, DomainError]:
        """Get value from cache.

        Args:
            key: Cache key.

        Returns:
            Result with value if found, None if not found, or CacheError.

        Example:
            result = await cache.get("rate_limit:auth:ip:1.2.3.4:1700000000000")
            match result:
                case Success(value=raw) if raw:
                    count = int(raw)
                case Success(value=None):
                    count = 0
                case Failure(error=error):
                    count = 0  # fail open
        """
        ...

    async def get_json(self, key: str) -> Result[Any | None, DomainError]:
        """Get JSON value from cache.

        Convenience method that deserializes JSON automatically. Invalid JSON
        is reported as a CacheError rather than raised.

        Args:
            key: Cache key.

        Returns:
            Result with parsed value if found, None if not found, or CacheError.
        """
        ...

    async def get_many(self, keys: list[str]) -> Result[list[str | None], DomainError]:
        """Get several values in one round trip.

        Args:
            keys: Cache keys.

        Returns:
            Result with one entry per key (None where missing), or CacheError.

        Example:
            result = await cache.get_many([
                "analytics:pageviews:2024-03-01",
                "analytics:pageviews:2024-03-02",
            ])
        """
        ...

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Set value in cache.

        Args:
            key: Cache key.
            value: Value to cache (string).
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        ...

    async def set_json(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> Result[None, DomainError]:
        """Set JSON value in cache.

        Convenience method that serializes to JSON automatically. A value
        that cannot be serialized is a CacheError, never an exception.

        Args:
            key: Cache key.
            value: JSON-compatible value.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.

        Example:
            result = await cache.set_json(
                "books:list:/api/v1/books:{}",
                [{"id": "b1", "title": "Dune"}],
                ttl=1800,
            )
        """
        ...

    async def delete(self, key: str) -> Result[bool, DomainError]:
        """Delete key from cache.

        Args:
            key: Cache key to delete.

        Returns:
            Result with True if key was deleted, False if key didn't exist,
            or CacheError. A missing key is not an error.
        """
        ...

    async def delete_pattern(self, pattern: str) -> Result[int, DomainError]:
        """Delete all keys matching pattern.

        Uses incremental SCAN, never KEYS, so the store is not blocked.

        Args:
            pattern: Glob-style pattern (e.g., "books:list:*").

        Returns:
            Result with number of keys deleted (0 if none matched), or CacheError.
        """
        ...

    async def scan_keys(self, pattern: str) -> Result[list[str], DomainError]:
        """List keys matching pattern.

        Args:
            pattern: Glob-style pattern (e.g., "analytics:recent:*").

        Returns:
            Result with matching keys (unordered), or CacheError.
        """
        ...

    async def increment(self, key: str, amount: int = 1) -> Result[int, DomainError]:
        """Increment numeric value in cache (atomic).

        If key doesn't exist, it's created with value = amount.

        Args:
            key: Cache key.
            amount: Amount to increment by (default: 1).

        Returns:
            Result with new value after increment, or CacheError.
        """
        ...

    async def increment_with_ttl(self, key: str, ttl: int) -> Result[int, DomainError]:
        """Increment a counter and start its TTL when it is created.

        The TTL is applied only when the increment returns 1, so a window
        counter expires at a fixed time after its first hit and later hits
        never extend it.

        Args:
            key: Counter key.
            ttl: Seconds until the counter expires, set on creation.

        Returns:
            Result with new value after increment, or CacheError.

        Example (fixed window):
            result = await cache.increment_with_ttl(
                "rate_limit:lax:ip:1.2.3.4:1700000000000", 900
            )
            match result:
                case Success(value=count) if count > 200:
                    ...  # reject
                case Failure(_):
                    ...  # fail open, treat as first request
        """
        ...

    async def expire(self, key: str, seconds: int) -> Result[bool, DomainError]:
        """Set expiration time on key.

        Args:
            key: Cache key.
            seconds: Seconds until expiration.

        Returns:
            Result with True if timeout was set, False if key doesn't exist,
            or CacheError.
        """
        ...

    async def ttl(self, key: str) -> Result[int | None, DomainError]:
        """Get time to live for key.

        Args:
            key: Cache key.

        Returns:
            Result with seconds until expiration, None if no TTL or key doesn't
            exist, or CacheError.
        """
        ...

    async def increment_score(
        self, key: str, member: str, ttl: int
    ) -> Result[int, DomainError]:
        """Add 1 to a member's score in a sorted set.

        Args:
            key: Sorted set key.
            member: Member whose score is incremented.
            ttl: Seconds until the set expires, applied when a member is created.

        Returns:
            Result with the member's new score, or CacheError.
        """
        ...

    async def sum_scores(self, keys: list[str]) -> Result[dict[str, int], DomainError]:
        """Sum member scores across several sorted sets.

        Args:
            keys: Sorted set keys.

        Returns:
            Result with member -> summed score, or CacheError.
        """
        ...

    async def ping(self) -> Result[bool, DomainError]:
        """Check cache connectivity (health check).

        Returns:
            Result with True if cache is reachable, or CacheError.
        """
        ...
