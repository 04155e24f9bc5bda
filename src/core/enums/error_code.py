"""Domain-level error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.

Categories:
- Validation errors (INVALID_*, VALIDATION_*)
- Resource errors (*_NOT_FOUND)
- Authorization errors (PERMISSION_*)
- Rate limit errors (RATE_LIMIT_*)
- Cache errors (CACHE_*)
- Analytics errors (ANALYTICS_*)
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain-level error codes (machine-readable).

    Error codes follow ENTITY_ACTION_REASON naming convention.
    """

    # Validation errors
    INVALID_DATE_RANGE = "invalid_date_range"
    VALIDATION_FAILED = "validation_failed"

    # Resource errors
    RESOURCE_NOT_FOUND = "resource_not_found"

    # Authorization errors
    PERMISSION_DENIED = "permission_denied"

    # Rate limit errors
    RATE_LIMIT_EXCEEDED = "rate_limit_exceeded"
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_RESET_FAILED = "rate_limit_reset_failed"

    # Cache errors
    CACHE_UNAVAILABLE = "cache_unavailable"
    CACHE_SERIALIZATION_FAILED = "cache_serialization_failed"

    # Analytics errors
    ANALYTICS_QUERY_FAILED = "analytics_query_failed"
