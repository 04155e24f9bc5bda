"""Rate Limit protocol (port) for fixed-window rate limiting.

This protocol defines the contract for rate limiting systems. Infrastructure
adapters implement this protocol (Redis-backed fixed window, etc.).

Following hexagonal architecture:
- Domain defines the PORT (this protocol)
- Infrastructure provides ADAPTERS (FixedWindowAdapter)
- Presentation layer uses the protocol (doesn't know about specific adapters)

Usage:
    from src.domain.protocols import RateLimitProtocol

    rate_limit: RateLimitProtocol = get_rate_limit()

    result = await rate_limit.check(
        identity="lax:ip:192.168.1.1",
        rule=RATE_LIMIT_TIERS[RateLimitTier.LAX],
    )
    if not result.value.allowed:
        ...  # 429 with Retry-After: result.value.retry_after_seconds
"""

from typing import Protocol

from src.core.result import Result
from src.domain.errors import RateLimitError
from src.domain.value_objects.rate_limit_rule import RateLimitResult, RateLimitRule


class RateLimitProtocol(Protocol):
    """Protocol for rate limiting systems.

    Fail-Open Design:
        check() MUST return Success with allowed=True if the store fails.
        Rate limit failures should NEVER cause denial-of-service.

    Error Handling:
        Methods return Result types (Success or Failure).
        A rejected request is Success(allowed=False), not a Failure.
    """

    async def check(
        self,
        identity: str,
        rule: RateLimitRule,
        *,
        now_ms: int | None = None,
    ) -> Result[RateLimitResult, RateLimitError]:
        """Count the request in its window and decide whether it is allowed.

        Every check is counted atomically. For rules with
        skip_successful_requests the caller gives the hit back with release()
        once the attempt succeeds or is rejected by that rule.

        Args:
            identity: Tier-prefixed identity, e.g. "auth:ip:10.0.0.7".
            rule: Tier configuration.
            now_ms: Current epoch millis. Defaults to the wall clock.

        Returns:
            Result[RateLimitResult, RateLimitError]:
                - Success(RateLimitResult) with the decision and header values

        Fail-Open:
            On store errors returns the first-request-in-window result:
            total_hits=1, reset_at_ms=now_ms + window.
        """
        ...

    async def release(
        self,
        result: RateLimitResult,
        rule: RateLimitRule,
    ) -> Result[int, RateLimitError]:
        """Give back a hit that check() counted.

        Success-skipping tiers call this when the attempt succeeded or when
        the tier itself rejected it, so only failures stay counted.

        Args:
            result: The RateLimitResult returned by check(); its key is reused.
            rule: Tier configuration.

        Returns:
            Result[int, RateLimitError]:
                - Success(count) - Counter value after the release
                - Failure(RateLimitError) - Store failure (callers log it)
        """
        ...

    async def reset(
        self,
        identity: str,
        rule: RateLimitRule,
        *,
        now_ms: int | None = None,
    ) -> Result[bool, RateLimitError]:
        """Delete the current window's counter for an identity.

        Administrative operation. Useful for:
        - Customer support (unlock a rate-limited user)
        - Testing (reset limits between tests)

        Args:
            identity: Tier-prefixed identity.
            rule: Tier configuration.
            now_ms: Current epoch millis. Defaults to the wall clock.

        Returns:
            Result[bool, RateLimitError]:
                - Success(True) - Counter deleted
                - Success(False) - No counter in the current window
                - Failure(RateLimitError) - If reset failed

        Note:
            Unlike check(), this method does NOT fail-open.
            Admin operations should know if they succeeded or failed.
        """
        ...
