"""Rate limit rule value object.

Immutable configuration for a single fixed-window rate limit tier: request
ceiling, window size, identity strategy and whether successful requests are
counted.

Usage:
    from src.domain.value_objects import RateLimitRule
    from src.domain.enums import IdentityStrategy, RateLimitTier

    rule = RateLimitRule(
        tier=RateLimitTier.AUTH,
        max_requests=5,
        window_ms=5 * 60 * 1000,
        identity=IdentityStrategy.IP,
        skip_successful_requests=True,
    )
"""

import math
from dataclasses import dataclass

from src.domain.enums.identity_strategy import IdentityStrategy
from src.domain.enums.rate_limit_tier import RateLimitTier


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitRule:
    """Rate limit rule configuration (value object).

    Fixed Window Algorithm:
        - Time is cut into windows of `window_ms` aligned to the epoch
        - Each (identity, window) pair owns one counter
        - Each counted request increments the counter
        - Request allowed while counter <= max_requests
        - Counter disappears when the window's TTL elapses

    Attributes:
        tier: Tier name, part of the counter key.
        max_requests: Ceiling per window.
        window_ms: Window size in milliseconds.
        identity: How to identify the caller (IP or USER).
        skip_successful_requests: Only count requests that end in failure.
        enabled: Whether this rule is active.

    Raises:
        ValueError: If max_requests <= 0 or window_ms <= 0.
    """

    tier: RateLimitTier
    """Tier name. Prefixes the identity so stacked tiers never share a key."""

    max_requests: int
    """Maximum counted requests per window.

    Typical values:
        - 5 for login attempts
        - 50-200 for general API traffic
    """

    window_ms: int
    """Window size in milliseconds.

    Window start is floor(now_ms / window_ms) * window_ms, so all processes
    agree on window boundaries without coordination.
    """

    identity: IdentityStrategy = IdentityStrategy.IP
    """How the request is identified.

    Determines the counter key format:
        - IP: rate_limit:{tier}:ip:{address}:{window_start}
        - USER: rate_limit:{tier}:user:{principal_id}:{window_start}
    """

    skip_successful_requests: bool = False
    """Count only requests whose response status is >= 400.

    Used by the auth tier: a user who logs in successfully never consumes
    the budget, a credential-stuffing client does.
    """

    enabled: bool = True
    """Whether this rule is active.

    Disabled rules always allow requests (bypass rate limiting).
    """

    def __post_init__(self) -> None:
        """Validate rule configuration after initialization.

        Raises:
            ValueError: If any numeric field is invalid.
        """
        if self.max_requests <= 0:
            raise ValueError(f"max_requests must be positive, got {self.max_requests}")
        if self.window_ms <= 0:
            raise ValueError(f"window_ms must be positive, got {self.window_ms}")

    @property
    def ttl_seconds(self) -> int:
        """Redis key TTL: the window size rounded up to whole seconds.

        Returns:
            int: TTL applied when a window's counter is created.
        """
        return math.ceil(self.window_ms / 1000)

    def window_start(self, now_ms: int) -> int:
        """Start of the window containing `now_ms`.

        Args:
            now_ms: Current time in epoch milliseconds.

        Returns:
            int: Window start in epoch milliseconds.

        Example:
            rule = RateLimitRule(..., window_ms=900_000)
            rule.window_start(1_700_000_123_456)  # 1_700_000_100_000
        """
        return (now_ms // self.window_ms) * self.window_ms


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitResult:
    """Result of a rate limit check.

    Returned by RateLimitProtocol.check() to indicate whether a request is
    allowed and provide metadata for response headers.

    Attributes:
        allowed: Whether the request is allowed.
        total_hits: Counter value observed by this check.
        limit: Ceiling of the tier.
        remaining: Requests left in the window (never negative).
        reset_at_ms: Epoch millis when the window ends.
        retry_after_seconds: Seconds until retry allowed (0 if allowed).
        key: Counter key this check resolved to.
    """

    allowed: bool
    """Whether the request is allowed."""

    total_hits: int = 0
    """Counter value observed by this check."""

    limit: int = 0
    """Ceiling of the tier.

    Used for X-RateLimit-Limit header.
    """

    remaining: int = 0
    """Requests left in the window, max(0, limit - total_hits).

    Used for X-RateLimit-Remaining header.
    """

    reset_at_ms: int = 0
    """Epoch milliseconds at which the window ends.

    Used for X-RateLimit-Reset header.
    """

    retry_after_seconds: int = 0
    """Seconds until retry allowed.

    Only meaningful when allowed=False. Used for Retry-After header.
    """

    key: str = ""
    """Counter key resolved for this check.

    Carried so that release() decrements the same window the check
    counted, even when the response completes after a window boundary.
    Empty when nothing was counted (disabled rule or fail-open).
    """
