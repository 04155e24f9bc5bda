"""Rate limit middleware for FastAPI.

This middleware intercepts all HTTP requests and applies the fixed-window
tiers bound to the request path. It handles:
- Stacked tiers (general -> specific, first rejection wins)
- IP and per-user identity strategies
- Success-skipping tiers (successful and rejected attempts are released)
- HTTP 429 responses with RFC 7807 body and Retry-After
- Fail-open semantics (never blocks if rate limit infrastructure fails)

Architecture:
    Presentation Layer middleware that uses RateLimitProtocol (domain) via
    FixedWindowAdapter (infrastructure) from the container.

Usage:
    # In main.py
    from src.presentation.routers.api.middleware.rate_limit_middleware import RateLimitMiddleware

    app.add_middleware(RateLimitMiddleware)
"""

from typing import TYPE_CHECKING, Awaitable, Callable

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette.types import ASGIApp

from src.core.config import settings
from src.core.result import Failure, Success
from src.domain.enums import RateLimitTier
from src.domain.value_objects.rate_limit_rule import RateLimitResult, RateLimitRule
from src.infrastructure.rate_limit.fixed_window_adapter import current_time_ms
from src.infrastructure.rate_limit.tiers import (
    RATE_LIMIT_TIERS,
    TIER_BINDINGS,
    TierBinding,
    get_rules_for_path,
)
from src.presentation.routers.api.middleware.identity import resolve_identity
from src.presentation.routers.api.v1.errors.error_response_builder import (
    ErrorResponseBuilder,
)

if TYPE_CHECKING:
    from src.domain.protocols import RateLimitProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol

SKIP_PREFIXES = (
    "/health",
    "/docs",
    "/redoc",
    "/openapi.json",
    "/favicon.ico",
)


def rate_limit_headers(result: RateLimitResult) -> dict[str, str]:
    """X-RateLimit-* headers for a check result (reset in epoch millis)."""
    return {
        "X-RateLimit-Limit": str(result.limit),
        "X-RateLimit-Remaining": str(result.remaining),
        "X-RateLimit-Reset": str(result.reset_at_ms),
    }


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Starlette middleware applying fixed-window tiers to HTTP requests.

    Fail-Open Design:
        Store failures and unexpected errors during the check let the request
        through. Rate limit infrastructure failures should NEVER cause denial
        of service.

    Response Headers:
        - Retry-After: Seconds until retry allowed (on 429)
        - X-RateLimit-Limit: Ceiling of the most specific tier checked
        - X-RateLimit-Remaining: Requests left in that tier's window
        - X-RateLimit-Reset: Epoch millis when that window ends

    Args:
        app: The ASGI application to wrap.
        rate_limit: Limiter to use (lazy loaded from container when None).
        logger: Logger to use (lazy loaded from container when None).
        bindings: Route prefix -> tier bindings.
        tiers: Tier definitions the bindings resolve to.
        enabled: Override settings.rate_limit_enabled.
        trust_forwarded: Override settings.trust_forwarded_headers.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        rate_limit: "RateLimitProtocol | None" = None,
        logger: "LoggerProtocol | None" = None,
        bindings: tuple[TierBinding, ...] = TIER_BINDINGS,
        tiers: dict[RateLimitTier, RateLimitRule] = RATE_LIMIT_TIERS,
        enabled: bool | None = None,
        trust_forwarded: bool | None = None,
    ) -> None:
        super().__init__(app)
        self._rate_limit = rate_limit
        self._logger = logger
        self._bindings = bindings
        self._tiers = tiers
        self._enabled = settings.rate_limit_enabled if enabled is None else enabled
        self._trust_forwarded = (
            settings.trust_forwarded_headers if trust_forwarded is None else trust_forwarded
        )

    def _get_rate_limit(self) -> "RateLimitProtocol":
        """Lazy load rate limiter from container."""
        if self._rate_limit is None:
            from src.core.container import get_rate_limit

            self._rate_limit = get_rate_limit()
        return self._rate_limit

    def _get_logger(self) -> "LoggerProtocol":
        """Lazy load logger from container."""
        if self._logger is None:
            from src.core.container import get_logger

            self._logger = get_logger()
        return self._logger

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Check every tier bound to the request, then call the route.

        Args:
            request: Incoming HTTP request.
            call_next: Next handler in middleware chain.

        Returns:
            Response: Either rate limit error (429) or downstream response.
        """
        path = request.url.path
        if not self._enabled or self._should_skip(path):
            return await call_next(request)

        rules = get_rules_for_path(
            path, request.method, bindings=self._bindings, tiers=self._tiers
        )
        if not rules:
            return await call_next(request)

        try:
            checked = await self._check_all(request, rules)
        except Exception as exc:
            self._log_fail_open("rate_limit_middleware_exception", path, error=str(exc))
            return await call_next(request)

        if checked and not checked[-1][1].allowed:
            rejected = checked[-1][1]
            # A rejected attempt never reaches the route, so it is not a failure
            for rule, result in checked:
                if rule.skip_successful_requests:
                    await self._release(path, rule, result)
            return ErrorResponseBuilder.rate_limited(
                request, rejected, rate_limit_headers(rejected)
            )

        response = await call_next(request)

        headers_from: RateLimitResult | None = None
        for rule, result in checked:
            headers_from = result
            if rule.skip_successful_requests and response.status_code < 400:
                headers_from = await self._release(path, rule, result)
        if headers_from is not None:
            response.headers.update(rate_limit_headers(headers_from))
        return response

    async def _check_all(
        self, request: Request, rules: list[RateLimitRule]
    ) -> list[tuple[RateLimitRule, RateLimitResult]]:
        """Check tiers general -> specific, stopping at the first rejection.

        The clock is read once so every tier buckets the request into the
        same instant.
        """
        rate_limit = self._get_rate_limit()
        now_ms = current_time_ms()
        checked: list[tuple[RateLimitRule, RateLimitResult]] = []
        for rule in rules:
            identity = resolve_identity(request, rule, trust_forwarded=self._trust_forwarded)
            result = await rate_limit.check(identity, rule, now_ms=now_ms)
            match result:
                case Success(value=rate_result):
                    checked.append((rule, rate_result))
                    if not rate_result.allowed:
                        break
                case Failure(error=error):
                    self._log_fail_open(
                        "rate_limit_result_failure",
                        request.url.path,
                        tier=rule.tier.value,
                        error=str(error),
                    )
        return checked

    async def _release(
        self, path: str, rule: RateLimitRule, result: RateLimitResult
    ) -> RateLimitResult:
        """Give back the hit a success-skipping tier counted.

        Returns the result to report in headers, with remaining updated to
        the released count when the store accepted the decrement.
        """
        try:
            released = await self._get_rate_limit().release(result, rule)
        except Exception as exc:
            self._log_fail_open("rate_limit_release_exception", path, error=str(exc))
            return result

        match released:
            case Success(value=count):
                return RateLimitResult(
                    allowed=result.allowed,
                    total_hits=count,
                    limit=result.limit,
                    remaining=max(0, result.limit - count),
                    reset_at_ms=result.reset_at_ms,
                    retry_after_seconds=result.retry_after_seconds,
                    key=result.key,
                )
            case Failure(error=error):
                self._log_fail_open(
                    "rate_limit_release_failure", path, tier=rule.tier.value, error=str(error)
                )
        return result

    def _should_skip(self, path: str) -> bool:
        """Skip health checks, docs, and static files."""
        return path == "/" or path.startswith(SKIP_PREFIXES)

    def _log_fail_open(self, event: str, path: str, **context: str | None) -> None:
        """Log fail-open event for monitoring."""
        self._get_logger().warning(
            "rate_limit_fail_open",
            event=event,
            path=path,
            result="fail_open",
            **context,
        )
