"""Infrastructure-specific error codes.

These are internal codes for tracking store failures. They are mapped to
domain ErrorCode when flowing to the domain layer.

Categories:
- Cache errors (CACHE_*): Redis connectivity and command failures
"""

from enum import Enum


class InfrastructureErrorCode(Enum):
    """Infrastructure-specific error codes.

    Internal codes for tracking store failures; paired with a domain
    ErrorCode on every CacheError.
    """

    CACHE_CONNECTION_ERROR = "cache_connection_error"
    CACHE_TIMEOUT = "cache_timeout"
    CACHE_GET_ERROR = "cache_get_error"
    CACHE_SET_ERROR = "cache_set_error"
    CACHE_DELETE_ERROR = "cache_delete_error"
    CACHE_INCREMENT_ERROR = "cache_increment_error"
    CACHE_SCAN_ERROR = "cache_scan_error"
