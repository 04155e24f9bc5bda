"""Analytics and admin response schemas.

Pydantic mirrors of the analytics value objects, so the admin routes get a
documented response model and the report cache stores plain JSON.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, Field

from src.domain.value_objects.analytics_event import AnalyticsReport, RealTimeAnalytics


class DailyAnalyticsResponse(BaseModel):
    """Counters for one UTC day."""

    date: date
    page_views: int
    user_actions: int
    business_events: int


class PageCountResponse(BaseModel):
    """Page view total for one page."""

    page: str
    views: int


class AnalyticsSummaryResponse(BaseModel):
    """Totals over the report range."""

    total_page_views: int
    total_user_actions: int
    total_business_events: int


class AnalyticsReportResponse(BaseModel):
    """Response schema for the analytics overview.

    GET /api/v1/analytics/overview
    """

    start_date: date
    end_date: date
    daily: list[DailyAnalyticsResponse]
    summary: AnalyticsSummaryResponse
    top_pages: list[PageCountResponse] = Field(default_factory=list)

    @classmethod
    def from_report(cls, report: AnalyticsReport) -> "AnalyticsReportResponse":
        """Convert a domain report to the response schema."""
        return cls(
            start_date=report.start_date,
            end_date=report.end_date,
            daily=[
                DailyAnalyticsResponse(
                    date=day.date,
                    page_views=day.page_views,
                    user_actions=day.user_actions,
                    business_events=day.business_events,
                )
                for day in report.daily
            ],
            summary=AnalyticsSummaryResponse(
                total_page_views=report.summary.total_page_views,
                total_user_actions=report.summary.total_user_actions,
                total_business_events=report.summary.total_business_events,
            ),
            top_pages=[
                PageCountResponse(page=entry.page, views=entry.views)
                for entry in report.top_pages
            ],
        )


class RealTimeAnalyticsResponse(BaseModel):
    """Response schema for the real-time view.

    GET /api/v1/analytics/realtime
    """

    active_users: int
    recent_page_views: list[dict[str, Any]]
    recent_actions: list[dict[str, Any]]
    generated_at: datetime

    @classmethod
    def from_snapshot(cls, snapshot: RealTimeAnalytics) -> "RealTimeAnalyticsResponse":
        return cls(
            active_users=snapshot.active_users,
            recent_page_views=snapshot.recent_page_views,
            recent_actions=snapshot.recent_actions,
            generated_at=snapshot.generated_at,
        )


class RateLimitResetResponse(BaseModel):
    """Response schema for an administrative rate limit reset.

    DELETE /api/v1/admin/rate-limits/{tier}/{identity}
    """

    tier: str
    identity: str
    reset: bool = Field(..., description="False when no counter existed")
