"""Analytics value objects.

Events flowing into the counter pipeline and the reports read back out of
it. Timestamps are timezone-aware UTC datetimes; counter bucketing uses the
UTC calendar date and hour.
"""

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from typing import Any


def _utc_now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True, slots=True, kw_only=True)
class PageView:
    """A rendered page or API read observed by the analytics middleware.

    Attributes:
        page: Route template the request matched, e.g. "/api/v1/books/{book_id}".
        path: Concrete request path (kept in the recent snapshot only).
        user_id: Authenticated principal id, when known.
        session_id: Client-supplied session id.
        user_agent: User-Agent header.
        referrer: Referer header.
        client_address: Resolved client network address.
        timestamp: When the request arrived (UTC).
    """

    page: str
    path: str | None = None
    user_id: str | None = None
    session_id: str | None = None
    user_agent: str | None = None
    referrer: str | None = None
    client_address: str | None = None
    timestamp: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True, kw_only=True)
class UserAction:
    """A named action performed by a user (add to cart, search, ...).

    Attributes:
        action: Action name, part of the counter key.
        user_id: Authenticated principal id, when known.
        session_id: Client-supplied session id.
        metadata: Free-form context stored in the recent snapshot.
        timestamp: When the action happened (UTC).
    """

    action: str
    user_id: str | None = None
    session_id: str | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True, kw_only=True)
class BusinessEvent:
    """A business milestone (order placed, event registration, ...).

    Attributes:
        event: Event name, part of the counter key.
        properties: Free-form payload stored in the event snapshot.
        timestamp: When the event happened (UTC).
    """

    event: str
    properties: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utc_now)


@dataclass(frozen=True, slots=True, kw_only=True)
class DailyAnalytics:
    """Counters for one UTC day. Missing counters read as 0."""

    date: date
    page_views: int = 0
    user_actions: int = 0
    business_events: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class PageCount:
    """Page view total for a single page over a report range."""

    page: str
    views: int


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalyticsSummary:
    """Totals over a report range."""

    total_page_views: int = 0
    total_user_actions: int = 0
    total_business_events: int = 0


@dataclass(frozen=True, slots=True, kw_only=True)
class AnalyticsReport:
    """Aggregated counters over an inclusive date range.

    Attributes:
        start_date: First day of the range.
        end_date: Last day of the range.
        daily: One entry per day, zero-filled, in ascending order.
        summary: Sums of the daily entries.
        top_pages: Most viewed pages over the range, descending.
    """

    start_date: date
    end_date: date
    daily: list[DailyAnalytics]
    summary: AnalyticsSummary
    top_pages: list[PageCount] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class RealTimeAnalytics:
    """Snapshot of recent activity.

    An approximation bounded by the recent-record TTL (one hour by default).

    Attributes:
        active_users: Distinct users (or sessions) seen in the last hour.
        recent_page_views: Recent page view snapshots, newest first.
        recent_actions: Recent action snapshots, newest first.
        generated_at: When the snapshot was taken (UTC).
    """

    active_users: int
    recent_page_views: list[dict[str, Any]]
    recent_actions: list[dict[str, Any]]
    generated_at: datetime
