"""Redis adapter implementing CacheProtocol.

This adapter provides the Redis implementation of the keyed store shared by
the rate limiter, the response cache, the invalidator and the analytics
pipeline. It wraps the async Redis client and handles all Redis-specific
operations and error mapping.

Architecture:
- Implements CacheProtocol without inheritance (structural typing)
- Maps Redis exceptions to CacheError with proper ErrorCode
- Returns Result types for all operations; nothing raises
- Command duration is bounded by the client's socket timeouts
"""

import json
from typing import Any

from redis.asyncio import Redis
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError

# Keys deleted per DEL command during pattern deletion
DELETE_BATCH_SIZE = 500

# SCAN hint for keys examined per iteration
SCAN_COUNT = 500


def _decode(value: bytes | str) -> str:
    return value.decode("utf-8") if isinstance(value, bytes) else value


def _store_error(
    operation: str,
    infrastructure_code: InfrastructureErrorCode,
    error: Exception,
    **details: Any,
) -> CacheError:
    """Map an exception raised by the Redis client to a CacheError."""
    if isinstance(error, RedisTimeoutError):
        infrastructure_code = InfrastructureErrorCode.CACHE_TIMEOUT
    return CacheError(
        code=ErrorCode.CACHE_UNAVAILABLE,
        infrastructure_code=infrastructure_code,
        message=f"Cache {operation} failed",
        details={
            **details,
            "operation": operation,
            "error": str(error),
            "type": type(error).__name__,
        },
    )


class RedisAdapter:
    """Redis implementation of CacheProtocol.

    This adapter wraps an async Redis client and implements all store
    operations defined in CacheProtocol.

    Note: Does NOT inherit from CacheProtocol (uses structural typing).

    Attributes:
        _redis: Async Redis client instance.
    """

    def __init__(self, redis_client: Redis) -> None:
        """Initialize Redis adapter.

        Args:
            redis_client: Async Redis client instance.
        """
        self._redis = redis_client

    async def get(self, key: str) -> Result[str | None, CacheError]:
        """Get value from Redis.

        Args:
            key: Cache key.

        Returns:
            Result with value if found, None if not found, or CacheError.
        """
        try:
            value = await self._redis.get(key)
        except Exception as e:
            return Failure(
                error=_store_error("get", InfrastructureErrorCode.CACHE_GET_ERROR, e, key=key)
            )
        if value is None:
            return Success(value=None)
        return Success(value=_decode(value))

    async def get_json(self, key: str) -> Result[Any | None, CacheError]:
        """Get JSON value from Redis.

        Args:
            key: Cache key.

        Returns:
            Result with parsed value if found, None if not found, or CacheError.
        """
        result = await self.get(key)

        match result:
            case Success(value=None):
                return Success(value=None)
            case Success(value=raw):
                try:
                    return Success(value=json.loads(raw))
                except json.JSONDecodeError as e:
                    return Failure(
                        error=CacheError(
                            code=ErrorCode.CACHE_SERIALIZATION_FAILED,
                            infrastructure_code=InfrastructureErrorCode.CACHE_GET_ERROR,
                            message=f"Failed to parse JSON for key '{key}'",
                            details={"key": key, "error": str(e)},
                        )
                    )
            case Failure(error=err):
                return Failure(error=err)
            case _:
                # Unreachable but needed for type checker
                return Success(value=None)

    async def get_many(self, keys: list[str]) -> Result[list[str | None], CacheError]:
        """Get several values with one MGET.

        Args:
            keys: Cache keys.

        Returns:
            Result with one entry per key (None where missing), or CacheError.
        """
        if not keys:
            return Success(value=[])
        try:
            values = await self._redis.mget(keys)
        except Exception as e:
            return Failure(
                error=_store_error(
                    "mget", InfrastructureErrorCode.CACHE_GET_ERROR, e, keys=len(keys)
                )
            )
        return Success(value=[None if v is None else _decode(v) for v in values])

    async def set(
        self,
        key: str,
        value: str,
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set value in Redis.

        Args:
            key: Cache key.
            value: Value to cache.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        try:
            if ttl is not None:
                await self._redis.setex(key, ttl, value)
            else:
                await self._redis.set(key, value)
            return Success(value=None)
        except Exception as e:
            return Failure(
                error=_store_error(
                    "set", InfrastructureErrorCode.CACHE_SET_ERROR, e, key=key, ttl=ttl
                )
            )

    async def set_json(
        self,
        key: str,
        value: Any,
        ttl: int | None = None,
    ) -> Result[None, CacheError]:
        """Set JSON value in Redis.

        Args:
            key: Cache key.
            value: JSON-compatible value.
            ttl: Time to live in seconds (None = no expiration).

        Returns:
            Result with None on success, or CacheError.
        """
        try:
            serialized = json.dumps(value, separators=(",", ":"))
        except (TypeError, ValueError) as e:
            return Failure(
                error=CacheError(
                    code=ErrorCode.CACHE_SERIALIZATION_FAILED,
                    infrastructure_code=InfrastructureErrorCode.CACHE_SET_ERROR,
                    message=f"Failed to serialize value for key '{key}'",
                    details={"key": key, "error": str(e)},
                )
            )
        return await self.set(key, serialized, ttl)

    async def delete(self, key: str) -> Result[bool, CacheError]:
        """Delete key from Redis.

        Args:
            key: Cache key to delete.

        Returns:
            Result with True if deleted, False if key didn't exist, or CacheError.
        """
        try:
            deleted_count = await self._redis.delete(key)
            return Success(value=deleted_count > 0)
        except Exception as e:
            return Failure(
                error=_store_error(
                    "delete", InfrastructureErrorCode.CACHE_DELETE_ERROR, e, key=key
                )
            )

    async def scan_keys(self, pattern: str) -> Result[list[str], CacheError]:
        """List keys matching a glob pattern with incremental SCAN.

        Args:
            pattern: Glob-style pattern.

        Returns:
            Result with matching keys, or CacheError.
        """
        try:
            keys = [
                _decode(key)
                async for key in self._redis.scan_iter(match=pattern, count=SCAN_COUNT)
            ]
        except Exception as e:
            return Failure(
                error=_store_error(
                    "scan", InfrastructureErrorCode.CACHE_SCAN_ERROR, e, pattern=pattern
                )
            )
        return Success(value=keys)

    async def delete_pattern(self, pattern: str) -> Result[int, CacheError]:
        """Delete all keys matching pattern.

        Keys are collected with SCAN and removed in DEL batches of
        DELETE_BATCH_SIZE. Keys written while the scan runs may survive.

        Args:
            pattern: Glob-style pattern (e.g., "books:list:*").

        Returns:
            Result with number of keys deleted, or CacheError.
        """
        scanned = await self.scan_keys(pattern)
        if isinstance(scanned, Failure):
            return scanned

        keys = scanned.value
        deleted = 0
        try:
            for start in range(0, len(keys), DELETE_BATCH_SIZE):
                deleted += await self._redis.delete(*keys[start : start + DELETE_BATCH_SIZE])
        except Exception as e:
            return Failure(
                error=_store_error(
                    "delete_pattern",
                    InfrastructureErrorCode.CACHE_DELETE_ERROR,
                    e,
                    pattern=pattern,
                    deleted=deleted,
                )
            )
        return Success(value=deleted)

    async def expire(self, key: str, seconds: int) -> Result[bool, CacheError]:
        """Set expiration on key in Redis.

        Args:
            key: Cache key.
            seconds: Seconds until expiration.

        Returns:
            Result with True if timeout set, False if key doesn't exist, or CacheError.
        """
        try:
            was_set = await self._redis.expire(key, seconds)
            return Success(value=bool(was_set))
        except Exception as e:
            return Failure(
                error=_store_error(
                    "expire", InfrastructureErrorCode.CACHE_SET_ERROR, e, key=key, seconds=seconds
                )
            )

    async def ttl(self, key: str) -> Result[int | None, CacheError]:
        """Get time to live for key in Redis.

        Args:
            key: Cache key.

        Returns:
            Result with seconds until expiration, None if no TTL or key doesn't exist, or CacheError.
        """
        try:
            ttl_value = await self._redis.ttl(key)
        except Exception as e:
            return Failure(
                error=_store_error("ttl", InfrastructureErrorCode.CACHE_GET_ERROR, e, key=key)
            )
        # Redis returns -2 if key doesn't exist, -1 if no expiration
        if ttl_value in (-2, -1):
            return Success(value=None)
        return Success(value=ttl_value)

    async def increment(self, key: str, amount: int = 1) -> Result[int, CacheError]:
        """Increment value in Redis (atomic).

        Args:
            key: Cache key.
            amount: Amount to increment by.

        Returns:
            Result with new value after increment, or CacheError.
        """
        try:
            new_value = await self._redis.incrby(key, amount)
            return Success(value=new_value)
        except Exception as e:
            return Failure(
                error=_store_error(
                    "increment",
                    InfrastructureErrorCode.CACHE_INCREMENT_ERROR,
                    e,
                    key=key,
                    amount=amount,
                )
            )

    async def increment_with_ttl(self, key: str, ttl: int) -> Result[int, CacheError]:
        """Increment a counter, applying the TTL when the counter is created.

        INCR is atomic, so exactly one caller observes 1 and sets the TTL;
        later increments in the same window never extend it.

        Args:
            key: Counter key.
            ttl: Seconds until expiry, applied on creation.

        Returns:
            Result with new value after increment, or CacheError. A failed
            EXPIRE is reported as a failure even though the increment landed.
        """
        incremented = await self.increment(key)
        if isinstance(incremented, Failure):
            return incremented

        if incremented.value == 1:
            expired = await self.expire(key, ttl)
            if isinstance(expired, Failure):
                return expired
        return incremented

    async def increment_score(
        self, key: str, member: str, ttl: int
    ) -> Result[int, CacheError]:
        """Add 1 to a member's score in a sorted set (ZINCRBY).

        The TTL is applied when the increment creates a member, so a set
        keyed by day expires shortly after its last new member.

        Args:
            key: Sorted set key.
            member: Member whose score is incremented.
            ttl: Seconds until expiry, applied when the member is created.

        Returns:
            Result with the member's new score, or CacheError.
        """
        try:
            score = int(await self._redis.zincrby(key, 1, member))
        except Exception as e:
            return Failure(
                error=_store_error(
                    "zincrby",
                    InfrastructureErrorCode.CACHE_INCREMENT_ERROR,
                    e,
                    key=key,
                )
            )

        if score == 1:
            expired = await self.expire(key, ttl)
            if isinstance(expired, Failure):
                return expired
        return Success(value=score)

    async def sum_scores(self, keys: list[str]) -> Result[dict[str, int], CacheError]:
        """Sum member scores across several sorted sets in one round trip.

        Args:
            keys: Sorted set keys (missing keys contribute nothing).

        Returns:
            Result with member -> summed score, or CacheError.
        """
        if not keys:
            return Success(value={})
        try:
            async with self._redis.pipeline(transaction=False) as pipe:
                for key in keys:
                    pipe.zrange(key, 0, -1, withscores=True)
                rows = await pipe.execute()
        except Exception as e:
            return Failure(
                error=_store_error(
                    "zrange", InfrastructureErrorCode.CACHE_GET_ERROR, e, keys=len(keys)
                )
            )

        totals: dict[str, int] = {}
        for row in rows:
            for member, score in row:
                name = _decode(member)
                totals[name] = totals.get(name, 0) + int(score)
        return Success(value=totals)

    async def ping(self) -> Result[bool, CacheError]:
        """Check Redis connectivity (health check).

        Returns:
            Result with True if Redis is reachable, or CacheError.
        """
        try:
            # Type ignore due to redis.asyncio ping() return type ambiguity
            await self._redis.ping()  # type: ignore[misc]
            return Success(value=True)
        except Exception as e:
            return Failure(
                error=_store_error("ping", InfrastructureErrorCode.CACHE_CONNECTION_ERROR, e)
            )
