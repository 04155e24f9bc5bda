"""Analytics protocol (port) for the counter pipeline.

Tracking methods are fire-and-forget: they never raise and never return an
error, because losing one page view must never fail the request that caused
it. Query methods return Result types.
"""

from datetime import date, datetime
from typing import Protocol

from src.core.result import Result
from src.domain.errors import AnalyticsError
from src.domain.value_objects.analytics_event import (
    AnalyticsReport,
    BusinessEvent,
    PageView,
    RealTimeAnalytics,
    UserAction,
)


class AnalyticsProtocol(Protocol):
    """Protocol for analytics counter stores.

    Implementations:
        - RedisAnalyticsAdapter: Counters in the shared keyed store
    """

    async def track_page_view(self, page_view: PageView) -> None:
        """Increment daily, hourly and per-page counters; store a snapshot."""
        ...

    async def track_user_action(self, action: UserAction) -> None:
        """Increment action counters (total, per action, per user); store a snapshot."""
        ...

    async def track_business_event(self, event: BusinessEvent) -> None:
        """Increment event counters and store the event payload."""
        ...

    async def get_analytics(
        self,
        start_date: date,
        end_date: date,
    ) -> Result[AnalyticsReport, AnalyticsError]:
        """Aggregate counters over an inclusive UTC date range.

        Args:
            start_date: First day.
            end_date: Last day (inclusive).

        Returns:
            Result[AnalyticsReport, AnalyticsError]:
                - Success(AnalyticsReport) with zero-filled days
                - Failure(AnalyticsError) for an invalid range
        """
        ...

    async def get_real_time_analytics(
        self,
        now: datetime | None = None,
    ) -> RealTimeAnalytics:
        """Summarize activity recorded in the last hour."""
        ...
