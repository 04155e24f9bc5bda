"""Rate limit error types.

Used when rate limiting operations fail (Redis errors, invalid tier, etc.).

Usage:
    from src.domain.errors import RateLimitError
    from src.core.enums import ErrorCode
    from src.core.result import Failure

    return Failure(RateLimitError(
        code=ErrorCode.RATE_LIMIT_RESET_FAILED,
        message="Failed to reset rate limit: Redis connection lost"
    ))
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Rate limit system failure.

    A rejected request is NOT an error: it is a successful check that
    returns allowed=False. This error class is for actual system failures.

    Attributes:
        code: ErrorCode enum (RATE_LIMIT_CHECK_FAILED, etc.).
        message: Human-readable message.
        details: Additional context (tier, identity, key).

    Design:
        The fixed-window check is fail-open: on store errors it returns
        Success with a first-request-in-window result instead of this error.
        This error type is returned by:
        - reset(), since an admin needs to know whether the reset worked
        - release() when the counted hit could not be given back
    """

    pass  # Inherits all fields from DomainError
