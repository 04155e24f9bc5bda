"""Infrastructure dependency factories.

Application-scoped singletons for the request-shaping layer:
- Redis client (one connection pool per process)
- Cache (RedisAdapter over the shared client)
- Rate limiting (fixed window)
- Response cache and invalidation hooks
- Analytics counter pipeline
- Logging (console, structlog)

Every consumer of the store goes through get_redis_client(), so the limiter,
the response cache and the analytics pipeline share one pool.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from src.core.config import settings

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from src.domain.protocols.analytics_protocol import AnalyticsProtocol
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol
    from src.domain.protocols.rate_limit_protocol import RateLimitProtocol
    from src.infrastructure.cache.invalidation import CacheInvalidator
    from src.infrastructure.cache.response_cache import ResponseCache


# ============================================================================
# Application-Scoped Dependencies (Singletons)
# ============================================================================


@lru_cache()
def get_redis_client() -> "Redis":
    """Get the process-wide Redis client (app-scoped).

    Socket and connect timeouts bound every command, so a hung store can
    never hold a request indefinitely.

    Returns:
        Async Redis client backed by a shared connection pool.
    """
    from redis.asyncio import ConnectionPool, Redis

    pool = ConnectionPool.from_url(
        settings.redis_url,
        max_connections=settings.redis_max_connections,
        decode_responses=False,
        socket_connect_timeout=settings.redis_connect_timeout,
        socket_timeout=settings.redis_socket_timeout,
        retry_on_timeout=True,
        socket_keepalive=True,
        socket_keepalive_options={
            1: 1,  # TCP_KEEPIDLE
            2: 1,  # TCP_KEEPINTVL
            3: 5,  # TCP_KEEPCNT
        },
    )
    return Redis(connection_pool=pool)


async def close_redis_client() -> None:
    """Close the shared Redis client and its pool, if one was created."""
    if get_redis_client.cache_info().currsize == 0:
        return
    client = get_redis_client()
    await client.aclose()
    await client.connection_pool.disconnect()
    get_redis_client.cache_clear()


@lru_cache()
def get_cache() -> "CacheProtocol":
    """Get cache client singleton (app-scoped).

    Returns:
        RedisAdapter over the shared client, implementing CacheProtocol.

    Usage:
        cache = get_cache()
        await cache.set("key", "value", ttl=60)
    """
    from src.infrastructure.cache.redis_adapter import RedisAdapter

    return RedisAdapter(redis_client=get_redis_client())  # type: ignore[return-value]


@lru_cache()
def get_rate_limit() -> "RateLimitProtocol":
    """Get rate limiter singleton (app-scoped).

    Fail-Open Design:
        check() returns allowed=True on store failures. Rate limiting should
        NEVER cause denial of service.

    Returns:
        FixedWindowAdapter implementing RateLimitProtocol.
    """
    from src.infrastructure.rate_limit import FixedWindowAdapter

    return FixedWindowAdapter(cache=get_cache(), logger=get_logger())


@lru_cache()
def get_response_cache() -> "ResponseCache":
    """Get response cache singleton (app-scoped)."""
    from src.infrastructure.cache.response_cache import ResponseCache

    return ResponseCache(cache=get_cache(), logger=get_logger())


@lru_cache()
def get_cache_invalidator() -> "CacheInvalidator":
    """Get cache invalidator singleton (app-scoped).

    Invalidation plans are built for the configured v1 prefix so singleton
    keys match the ones the read routes write.
    """
    from src.infrastructure.cache.invalidation import (
        CacheInvalidator,
        default_invalidation_plans,
    )

    return CacheInvalidator(
        cache=get_cache(),
        logger=get_logger(),
        plans=default_invalidation_plans(settings.api_v1_prefix),
    )


@lru_cache()
def get_analytics() -> "AnalyticsProtocol":
    """Get analytics pipeline singleton (app-scoped).

    Retention comes from settings (counter days, snapshot seconds, event days).
    """
    from src.infrastructure.analytics import RedisAnalyticsAdapter

    return RedisAnalyticsAdapter(
        cache=get_cache(),
        logger=get_logger(),
        counter_ttl_seconds=settings.analytics_counter_ttl_days * 24 * 3600,
        recent_ttl_seconds=settings.analytics_recent_ttl_seconds,
        event_ttl_seconds=settings.analytics_event_ttl_days * 24 * 3600,
    )


# ============================================================================
# Logging (Application-Scoped)
# ============================================================================


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Renderer selection is centralized here (composition root):
    - development: human-readable console output
    - testing/ci/production: JSON lines

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from src.infrastructure.logging.console_adapter import ConsoleAdapter

    return ConsoleAdapter(
        use_json=not settings.is_development,
        level=settings.log_level,
        service=settings.app_name,
    )
