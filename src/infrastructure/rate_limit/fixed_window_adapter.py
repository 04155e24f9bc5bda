"""Fixed window adapter implementing RateLimitProtocol.

This adapter turns the keyed store's atomic increment into a fixed-window
rate limiter:
- Window bucketing aligned to the epoch (all processes agree on boundaries)
- Key construction: rate_limit:{identity}:{window_start}
- Counter TTL set once, when the window's first request creates it
- Success-skipping tiers (count every attempt, release successes afterwards)
- Structured logging
- Fail-open semantics on every store failure

Architecture:
    Domain Protocol <- FixedWindowAdapter -> CacheProtocol (RedisAdapter) -> Redis

Usage:
    from src.core.container import get_rate_limit
    from src.infrastructure.rate_limit.tiers import RATE_LIMIT_TIERS

    rate_limit = get_rate_limit()
    result = await rate_limit.check(
        "lax:ip:192.168.1.1",
        RATE_LIMIT_TIERS[RateLimitTier.LAX],
    )
"""

from __future__ import annotations

import math
import time
from typing import TYPE_CHECKING

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import RateLimitError
from src.domain.value_objects.rate_limit_rule import RateLimitResult, RateLimitRule
from src.infrastructure.cache.cache_keys import CacheKeys

if TYPE_CHECKING:
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol


def current_time_ms() -> int:
    """Wall clock in epoch milliseconds."""
    return int(time.time() * 1000)


class FixedWindowAdapter:
    """Fixed window rate limiter implementing RateLimitProtocol.

    Fail-Open Design:
        check() returns Success with allowed=True when the store fails,
        reporting the request as the first one in a fresh window.

    Args:
        cache: Keyed store holding the counters.
        logger: Structured logger for observability.
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

    # -------------------------------------------------------------------------
    # RateLimitProtocol implementation
    # -------------------------------------------------------------------------
    async def check(
        self,
        identity: str,
        rule: RateLimitRule,
        *,
        now_ms: int | None = None,
    ) -> Result[RateLimitResult, RateLimitError]:
        """Count the request in its window and decide whether it is allowed.

        Args:
            identity: Tier-prefixed identity, e.g. "lax:ip:10.0.0.7".
            rule: Tier configuration.
            now_ms: Current epoch millis. Defaults to the wall clock.

        Returns:
            Result[RateLimitResult, RateLimitError]: Always Success.
        """
        if now_ms is None:
            now_ms = current_time_ms()

        if not rule.enabled:
            return Success(
                value=RateLimitResult(
                    allowed=True,
                    total_hits=0,
                    limit=rule.max_requests,
                    remaining=rule.max_requests,
                    reset_at_ms=now_ms + rule.window_ms,
                )
            )

        window_start = rule.window_start(now_ms)
        key = self._keys.rate_limit(identity, window_start)
        reset_at_ms = window_start + rule.window_ms

        incremented = await self._cache.increment_with_ttl(key, rule.ttl_seconds)
        match incremented:
            case Success(value=count):
                pass
            case Failure(error=error):
                self._log_fail_open(identity, rule, error)
                count = 1
                reset_at_ms = now_ms + rule.window_ms
                # Nothing was counted, so there is nothing to release later
                key = ""
        allowed = count <= rule.max_requests

        retry_after = 0
        if not allowed:
            retry_after = max(1, math.ceil((reset_at_ms - now_ms) / 1000))
            self._logger.info(
                "rate_limit_exceeded",
                tier=rule.tier.value,
                identity=identity,
                total_hits=count,
                limit=rule.max_requests,
                retry_after=retry_after,
            )

        return Success(
            value=RateLimitResult(
                allowed=allowed,
                total_hits=count,
                limit=rule.max_requests,
                remaining=max(0, rule.max_requests - count),
                reset_at_ms=reset_at_ms,
                retry_after_seconds=retry_after,
                key=key,
            )
        )

    async def release(
        self,
        result: RateLimitResult,
        rule: RateLimitRule,
    ) -> Result[int, RateLimitError]:
        """Give back the hit a check counted.

        Success-skipping tiers count every attempt up front, so concurrent
        attempts can never observe the same count. The hit is released
        when the attempt succeeds or when this tier rejected it.

        Args:
            result: Result of check(); its key is reused.
            rule: Tier configuration.

        Returns:
            Result[int, RateLimitError]: Counter value after the release.
        """
        if not result.key:
            # Disabled rule or fail-open: nothing was counted
            return Success(value=0)

        decremented = await self._cache.increment(result.key, -1)
        match decremented:
            case Success(value=count) if count < 0:
                # The window expired in between: DECR recreated the key without a TTL
                await self._cache.delete(result.key)
                return Success(value=0)
            case Success(value=count):
                return Success(value=count)
            case Failure(error=error):
                return Failure(
                    error=RateLimitError(
                        code=ErrorCode.RATE_LIMIT_CHECK_FAILED,
                        message="Failed to release counted request",
                        details={
                            "tier": rule.tier.value,
                            "key": result.key,
                            "cause": str(error),
                        },
                    )
                )
            case _:
                # Unreachable but needed for type checker
                return Success(value=0)

    async def reset(
        self,
        identity: str,
        rule: RateLimitRule,
        *,
        now_ms: int | None = None,
    ) -> Result[bool, RateLimitError]:
        """Delete the current window's counter for an identity.

        Unlike check(), this method does NOT fail-open.
        Admin operations should know if they succeeded or failed.

        Args:
            identity: Tier-prefixed identity.
            rule: Tier configuration.
            now_ms: Current epoch millis. Defaults to the wall clock.

        Returns:
            Result[bool, RateLimitError]: Whether a counter was deleted.
        """
        if now_ms is None:
            now_ms = current_time_ms()
        key = self._keys.rate_limit(identity, rule.window_start(now_ms))

        deleted = await self._cache.delete(key)
        match deleted:
            case Success(value=existed):
                self._logger.info(
                    "rate_limit_reset",
                    tier=rule.tier.value,
                    identity=identity,
                    existed=existed,
                )
                return Success(value=existed)
            case Failure(error=error):
                self._logger.error(
                    "rate_limit_reset_failed",
                    tier=rule.tier.value,
                    identity=identity,
                    error_message=str(error),
                )
                return Failure(
                    error=RateLimitError(
                        code=ErrorCode.RATE_LIMIT_RESET_FAILED,
                        message="Failed to reset rate limit",
                        details={"tier": rule.tier.value, "identity": identity},
                    )
                )
            case _:
                # Unreachable but needed for type checker
                return Success(value=False)

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    def _log_fail_open(self, identity: str, rule: RateLimitRule, error: object) -> None:
        self._logger.warning(
            "rate_limit_fail_open",
            tier=rule.tier.value,
            identity=identity,
            error_message=str(error),
        )
