"""Domain errors package.

Exports all domain-level error classes for convenient importing.

Usage:
    from src.domain.errors import AnalyticsError, RateLimitError
"""

from src.domain.errors.analytics_error import AnalyticsError
from src.domain.errors.rate_limit_error import RateLimitError

__all__ = [
    "AnalyticsError",
    "RateLimitError",
]
