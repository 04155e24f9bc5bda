"""Domain value objects.

Immutable objects defined by their attributes rather than identity.
"""

from src.domain.value_objects.analytics_event import (
    AnalyticsReport,
    AnalyticsSummary,
    BusinessEvent,
    DailyAnalytics,
    PageCount,
    PageView,
    RealTimeAnalytics,
    UserAction,
)
from src.domain.value_objects.rate_limit_rule import RateLimitResult, RateLimitRule
from src.domain.value_objects.request_descriptor import RequestDescriptor

__all__ = [
    "AnalyticsReport",
    "AnalyticsSummary",
    "BusinessEvent",
    "DailyAnalytics",
    "PageCount",
    "PageView",
    "RateLimitResult",
    "RateLimitRule",
    "RealTimeAnalytics",
    "RequestDescriptor",
    "UserAction",
]
