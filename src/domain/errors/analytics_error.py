"""Analytics error types.

Returned by analytics queries. Tracking never fails from the caller's point
of view (it logs and skips), so only reads produce this error.
"""

from dataclasses import dataclass

from src.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalyticsError(DomainError):
    """Analytics query failure.

    Attributes:
        code: ErrorCode enum (INVALID_DATE_RANGE, ANALYTICS_QUERY_FAILED).
        message: Human-readable message.
        details: Additional context (start_date, end_date).
    """

    pass  # Inherits all fields from DomainError
