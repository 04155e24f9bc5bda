"""Response cache decorator for read routes.

Wraps a FastAPI route handler: a cached body is served without calling the
handler; otherwise the handler's return value is observed, stored when the
outcome is 2xx, and sent. Both paths emit the body through JSONResponse so a
HIT is byte-identical to the MISS that stored it.

The decorated handler must declare a `request: Request` parameter.

Usage:
    @router.get("/books/{book_id}")
    @cached_response(CacheTTL.DETAIL, CacheNamespace.BOOK_DETAIL)
    async def get_book(request: Request, book_id: str) -> dict[str, Any]:
        ...
"""

import functools
import json
from typing import TYPE_CHECKING, Any, Awaitable, Callable, TypeVar

from fastapi.encoders import jsonable_encoder
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from src.core.config import settings
from src.domain.enums import CacheStatus
from src.presentation.routers.api.middleware.identity import describe_request

if TYPE_CHECKING:
    from src.infrastructure.cache.response_cache import ResponseCache

CACHE_STATUS_HEADER = "X-Cache"

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def _find_request(args: tuple[Any, ...], kwargs: dict[str, Any]) -> Request | None:
    for value in (*kwargs.values(), *args):
        if isinstance(value, Request):
            return value
    return None


def _get_response_cache() -> "ResponseCache":
    from src.core.container import get_response_cache

    return get_response_cache()


def _cacheable_body(result: Any) -> tuple[bool, Any]:
    """Extract a storable JSON body from a handler's return value.

    Returns:
        (True, body) for plain return values and 2xx JSONResponses,
        (False, None) for anything that must not be cached.
    """
    if isinstance(result, JSONResponse):
        if not 200 <= result.status_code < 300:
            return False, None
        return True, json.loads(bytes(result.body))
    if isinstance(result, Response):
        return False, None
    if result is None:
        return False, None
    return True, jsonable_encoder(result)


def cached_response(
    ttl_seconds: int,
    namespace: str,
    *,
    vary_on_query: bool = True,
) -> Callable[[F], F]:
    """Cache successful GET/HEAD responses of a route.

    Args:
        ttl_seconds: Entry lifetime (see CacheTTL).
        namespace: Cache namespace; `{path_param}` placeholders are filled
            from the route's path parameters.
        vary_on_query: Include the canonical query in the key. Disabled for
            singleton routes so their one entry can be dropped by key.

    Returns:
        Decorator preserving the handler's signature for FastAPI.
    """

    def decorator(handler: F) -> F:
        @functools.wraps(handler)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            request = _find_request(args, kwargs)
            if (
                request is None
                or not settings.response_cache_enabled
                or request.method not in ("GET", "HEAD")
            ):
                return await handler(*args, **kwargs)

            response_cache = _get_response_cache()
            key: str | None = None
            cached: Any = None
            try:
                descriptor = describe_request(request)
                key = response_cache.key_for(
                    namespace.format(**request.path_params),
                    descriptor.path,
                    descriptor.query if vary_on_query else {},
                )
                cached = await response_cache.lookup(key)
            except Exception as exc:
                # Cache layer broken: behave as if it did not exist
                from src.core.container import get_logger

                get_logger().warning(
                    "response_cache_lookup_failed",
                    path=request.url.path,
                    error_message=str(exc),
                )

            if cached is not None:
                return JSONResponse(
                    cached, headers={CACHE_STATUS_HEADER: CacheStatus.HIT.value}
                )

            result = await handler(*args, **kwargs)

            cacheable, body = _cacheable_body(result)
            if not cacheable:
                if isinstance(result, Response):
                    result.headers[CACHE_STATUS_HEADER] = CacheStatus.MISS.value
                return result

            if key is not None:
                await response_cache.store(key, body, ttl_seconds)

            status_code = result.status_code if isinstance(result, JSONResponse) else 200
            return JSONResponse(
                body,
                status_code=status_code,
                headers={CACHE_STATUS_HEADER: CacheStatus.MISS.value},
            )

        return wrapper  # type: ignore[return-value]

    return decorator
