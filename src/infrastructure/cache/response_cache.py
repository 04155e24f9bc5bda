"""Response cache backed by the keyed store.

Stores JSON response bodies of successful reads and serves them back
verbatim. Every failure is soft: a failed lookup is a miss, a failed write
is logged and skipped, and the response is delivered either way.

Key Pattern:
    {namespace}:{path}:{canonical_query_json}

Usage:
    from src.core.container import get_response_cache

    response_cache = get_response_cache()
    key = response_cache.key_for("books:list", "/api/v1/books", {"page": "2"})
    body = await response_cache.lookup(key)
    if body is None:
        body = await load_books()
        await response_cache.store(key, body, CacheTTL.LIST)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Mapping

from src.core.result import Failure, Success
from src.infrastructure.cache.cache_keys import CacheKeys

if TYPE_CHECKING:
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol


class CacheTTL:
    """Response TTLs in seconds, by kind of route."""

    LIST = 1800
    """List/browse routes (30 minutes)."""

    DETAIL = 3600
    """Single-item routes and curated singletons such as featured (1 hour)."""

    REFERENCE = 7200
    """Near-static reference data: categories, authors (2 hours)."""


class CacheNamespace:
    """Response cache namespaces.

    Detail namespaces carry a path parameter placeholder filled from the
    route's path parameters, so one id's entries can be dropped without
    touching the rest.
    """

    BOOK_LIST = "books:list"
    BOOK_FEATURED = "books:featured"
    BOOK_DETAIL = "books:detail:{book_id}"

    EVENT_LIST = "events:list"
    EVENT_UPCOMING = "events:upcoming"
    EVENT_DETAIL = "events:detail:{event_id}"

    USER_PROFILE = "users:profile:{user_id}"

    CATEGORY_LIST = "categories:list"
    AUTHOR_LIST = "authors:list"


class ResponseCache:
    """Fail-soft store of serialized response bodies.

    Args:
        cache: Keyed store.
        logger: Structured logger.
        keys: Key builder (defaults to the standard prefixes).
    """

    def __init__(
        self,
        *,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        keys: CacheKeys | None = None,
    ) -> None:
        self._cache = cache
        self._logger = logger
        self._keys = keys or CacheKeys()

    def key_for(
        self,
        namespace: str,
        path: str,
        query: Mapping[str, str | list[str]],
    ) -> str:
        """Build the entry key for a request."""
        return self._keys.response(namespace, path, query)

    async def lookup(self, key: str) -> Any | None:
        """Return the cached body, or None on miss or store failure."""
        result = await self._cache.get_json(key)
        match result:
            case Success(value=body):
                return body
            case Failure(error=error):
                self._logger.warning(
                    "response_cache_read_failed",
                    key=key,
                    namespace=self._keys.namespace_from_key(key),
                    error_code=error.code.value,
                    error_message=str(error),
                )
                return None
            case _:
                # Unreachable but needed for type checker
                return None

    async def store(self, key: str, body: Any, ttl: int) -> bool:
        """Persist a body with a TTL.

        Returns:
            bool: True when written; False when serialization or the store
            failed (logged, never raised).
        """
        result = await self._cache.set_json(key, body, ttl)
        match result:
            case Success():
                return True
            case Failure(error=error):
                self._logger.warning(
                    "response_cache_write_failed",
                    key=key,
                    namespace=self._keys.namespace_from_key(key),
                    error_code=error.code.value,
                    error_message=str(error),
                )
                return False
            case _:
                # Unreachable but needed for type checker
                return False
