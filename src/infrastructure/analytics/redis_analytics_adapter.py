"""Redis analytics adapter implementing AnalyticsProtocol.

Counts page views, user actions and business events in UTC day (and hour)
buckets, using the same increment-then-expire primitive as the rate limiter,
and keeps short-lived JSON snapshots for the real-time view.

Key Patterns:
    analytics:pageviews:{date}                    daily page views
    analytics:pageviews:{date}:{hour}             hourly page views
    analytics:pages:{date}                        per-route daily views (sorted set)
    analytics:actions:{date}                      daily actions
    analytics:actions:{action}:{date}             per-action daily count
    analytics:users:{user_id}:actions:{date}      per-user daily actions
    analytics:events:{date}                       daily business events
    analytics:events:{event}:{date}               per-event daily count
    analytics:recent:{pageview|action}:{ts}:{n}   snapshot, 1 hour
    analytics:event:{event}:{ts}:{n}              event payload, 7 days

Tracking never raises: failures are logged and the request carries on.
"""

from __future__ import annotations

import json
from datetime import UTC, date, datetime, timedelta
from typing import TYPE_CHECKING, Any
from uuid import uuid4

from src.core.enums import ErrorCode
from src.core.result import Failure, Result, Success
from src.domain.errors import AnalyticsError
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
from src.infrastructure.cache.cache_keys import CacheKeys

if TYPE_CHECKING:
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol

# Longest range get_analytics() accepts, in days (inclusive)
MAX_RANGE_DAYS = 366

# Entries returned per list in the real-time view
RECENT_LIMIT = 50

# Snapshots read per real-time query (newest first)
RECENT_SCAN_LIMIT = 1000

TOP_PAGES_LIMIT = 10


def _to_ms(moment: datetime) -> int:
    return int(moment.timestamp() * 1000)


def _utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def _count(raw: str | None) -> int:
    return int(raw) if raw else 0


class RedisAnalyticsAdapter:
    """Analytics counter pipeline implementing AnalyticsProtocol.

    Note: Does NOT inherit from AnalyticsProtocol (uses structural typing).

    Args:
        cache: Keyed store.
        logger: Structured logger.
        counter_ttl_seconds: Retention of daily/hourly counters.
        recent_ttl_seconds: Retention of page view / action snapshots.
        event_ttl_seconds: Retention of business event payloads.
        keys: Key builder (defaults to the standard prefixes).
    """

    def __init__(
        self,
        *,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        counter_ttl_seconds: int = 30 * 24 * 3600,
        recent_ttl_seconds: int = 3600,
        event_ttl_seconds: int = 7 * 24 * 3600,
        keys: CacheKeys | None = None,
    ) -> None:
        self._cache = cache
        self._logger = logger
        self._counter_ttl = counter_ttl_seconds
        self._recent_ttl = recent_ttl_seconds
        self._event_ttl = event_ttl_seconds
        self._keys = keys or CacheKeys()

    # -------------------------------------------------------------------------
    # Tracking
    # -------------------------------------------------------------------------
    async def track_page_view(self, page_view: PageView) -> None:
        """Count a page view and store a recent snapshot."""
        moment = _utc(page_view.timestamp)
        day = moment.date()
        await self._increment_all(
            "page_view",
            [
                self._keys.page_views(day),
                self._keys.page_views_hourly(day, moment.hour),
            ],
        )
        pages_key = self._keys.pages(day)
        ranked = await self._cache.increment_score(pages_key, page_view.page, self._counter_ttl)
        if isinstance(ranked, Failure):
            self._logger.warning(
                "analytics_track_failed",
                kind="page_view",
                key=pages_key,
                error_message=str(ranked.error),
            )
        await self._snapshot(
            "page_view",
            self._keys.recent_page_view(_to_ms(moment), uuid4().hex[:8]),
            {
                "type": "pageview",
                "page": page_view.page,
                "path": page_view.path or page_view.page,
                "user_id": page_view.user_id,
                "session_id": page_view.session_id,
                "user_agent": page_view.user_agent,
                "referrer": page_view.referrer,
                "client_address": page_view.client_address,
                "timestamp": moment.isoformat(),
            },
            self._recent_ttl,
        )

    async def track_user_action(self, action: UserAction) -> None:
        """Count a user action (total, per action, per user) and snapshot it."""
        moment = _utc(action.timestamp)
        day = moment.date()
        keys = [self._keys.actions(day), self._keys.action(action.action, day)]
        if action.user_id:
            keys.append(self._keys.user_actions(action.user_id, day))
        await self._increment_all("user_action", keys)
        await self._snapshot(
            "user_action",
            self._keys.recent_action(_to_ms(moment), uuid4().hex[:8]),
            {
                "type": "action",
                "action": action.action,
                "user_id": action.user_id,
                "session_id": action.session_id,
                "metadata": action.metadata,
                "timestamp": moment.isoformat(),
            },
            self._recent_ttl,
        )

    async def track_business_event(self, event: BusinessEvent) -> None:
        """Count a business event and keep its payload for a week."""
        moment = _utc(event.timestamp)
        day = moment.date()
        await self._increment_all(
            "business_event",
            [self._keys.events(day), self._keys.event(event.event, day)],
        )
        await self._snapshot(
            "business_event",
            self._keys.event_snapshot(event.event, _to_ms(moment), uuid4().hex[:8]),
            {
                "event": event.event,
                "properties": event.properties,
                "timestamp": moment.isoformat(),
            },
            self._event_ttl,
        )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    async def get_analytics(
        self,
        start_date: date,
        end_date: date,
    ) -> Result[AnalyticsReport, AnalyticsError]:
        """Aggregate daily counters over an inclusive date range.

        Days without counters read as zero. Top pages are summed from the
        per-day page sorted sets of every day in the range.

        Args:
            start_date: First day (UTC).
            end_date: Last day (UTC), inclusive.

        Returns:
            Result[AnalyticsReport, AnalyticsError]:
                - Success(AnalyticsReport)
                - Failure(AnalyticsError) with INVALID_DATE_RANGE when
                  start_date > end_date or the range exceeds MAX_RANGE_DAYS,
                  ANALYTICS_QUERY_FAILED when the store fails
        """
        if start_date > end_date:
            return Failure(
                error=AnalyticsError(
                    code=ErrorCode.INVALID_DATE_RANGE,
                    message="start_date must not be after end_date",
                    details={
                        "start_date": start_date.isoformat(),
                        "end_date": end_date.isoformat(),
                    },
                )
            )
        span = (end_date - start_date).days + 1
        if span > MAX_RANGE_DAYS:
            return Failure(
                error=AnalyticsError(
                    code=ErrorCode.INVALID_DATE_RANGE,
                    message=f"Date range must not exceed {MAX_RANGE_DAYS} days",
                    details={"days": span},
                )
            )

        days = [start_date + timedelta(days=offset) for offset in range(span)]
        keys: list[str] = []
        for day in days:
            keys.extend(
                [self._keys.page_views(day), self._keys.actions(day), self._keys.events(day)]
            )

        fetched = await self._cache.get_many(keys)
        if isinstance(fetched, Failure):
            return self._query_failed("daily_counters", fetched.error)
        values = fetched.value

        daily: list[DailyAnalytics] = []
        for index, day in enumerate(days):
            page_views, actions, events = values[index * 3 : index * 3 + 3]
            daily.append(
                DailyAnalytics(
                    date=day,
                    page_views=_count(page_views),
                    user_actions=_count(actions),
                    business_events=_count(events),
                )
            )

        top_pages = await self._top_pages(days)
        if isinstance(top_pages, Failure):
            return top_pages

        return Success(
            value=AnalyticsReport(
                start_date=start_date,
                end_date=end_date,
                daily=daily,
                summary=AnalyticsSummary(
                    total_page_views=sum(d.page_views for d in daily),
                    total_user_actions=sum(d.user_actions for d in daily),
                    total_business_events=sum(d.business_events for d in daily),
                ),
                top_pages=top_pages.value,
            )
        )

    async def get_real_time_analytics(
        self,
        now: datetime | None = None,
    ) -> RealTimeAnalytics:
        """Summarize snapshots recorded in the last recent-TTL period.

        An approximation: snapshots are bounded by their TTL and at most
        RECENT_SCAN_LIMIT of the newest are read. Store failures produce an
        empty view.
        """
        now = _utc(now) if now is not None else datetime.now(UTC)
        cutoff_ms = _to_ms(now) - self._recent_ttl * 1000
        empty = RealTimeAnalytics(
            active_users=0, recent_page_views=[], recent_actions=[], generated_at=now
        )

        scanned = await self._cache.scan_keys(self._keys.recent_pattern())
        if isinstance(scanned, Failure):
            self._log_query_failure("recent_scan", scanned.error)
            return empty

        recent: list[tuple[int, str]] = []
        for key in scanned.value:
            # analytics:recent:{kind}:{ts_ms}:{nonce}
            parts = key.split(":")
            if len(parts) < 5 or not parts[3].isdigit():
                continue
            ts_ms = int(parts[3])
            if ts_ms >= cutoff_ms:
                recent.append((ts_ms, key))
        recent.sort(reverse=True)
        recent = recent[:RECENT_SCAN_LIMIT]

        fetched = await self._cache.get_many([key for _, key in recent])
        if isinstance(fetched, Failure):
            self._log_query_failure("recent_fetch", fetched.error)
            return empty

        visitors: set[str] = set()
        page_views: list[dict[str, Any]] = []
        actions: list[dict[str, Any]] = []
        for raw in fetched.value:
            if raw is None:
                continue  # expired between SCAN and MGET
            try:
                snapshot = json.loads(raw)
            except json.JSONDecodeError:
                continue
            visitor = snapshot.get("user_id") or snapshot.get("session_id")
            if visitor:
                visitors.add(str(visitor))
            if snapshot.get("type") == "pageview":
                page_views.append(snapshot)
            elif snapshot.get("type") == "action":
                actions.append(snapshot)

        return RealTimeAnalytics(
            active_users=len(visitors),
            recent_page_views=page_views[:RECENT_LIMIT],
            recent_actions=actions[:RECENT_LIMIT],
            generated_at=now,
        )

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------
    async def _increment_all(self, kind: str, keys: list[str]) -> None:
        for key in keys:
            result = await self._cache.increment_with_ttl(key, self._counter_ttl)
            if isinstance(result, Failure):
                self._logger.warning(
                    "analytics_track_failed",
                    kind=kind,
                    key=key,
                    error_message=str(result.error),
                )

    async def _snapshot(
        self, kind: str, key: str, payload: dict[str, Any], ttl: int
    ) -> None:
        result = await self._cache.set_json(key, payload, ttl)
        if isinstance(result, Failure):
            self._logger.warning(
                "analytics_snapshot_failed",
                kind=kind,
                key=key,
                error_message=str(result.error),
            )

    async def _top_pages(
        self, days: list[date]
    ) -> Result[list[PageCount], AnalyticsError]:
        summed = await self._cache.sum_scores([self._keys.pages(day) for day in days])
        if isinstance(summed, Failure):
            return self._query_failed("page_counters", summed.error)

        ranked = sorted(summed.value.items(), key=lambda item: (-item[1], item[0]))
        return Success(
            value=[PageCount(page=page, views=views) for page, views in ranked[:TOP_PAGES_LIMIT]]
        )

    def _query_failed(self, stage: str, error: object) -> Failure[AnalyticsError]:
        self._log_query_failure(stage, error)
        return Failure(
            error=AnalyticsError(
                code=ErrorCode.ANALYTICS_QUERY_FAILED,
                message="Analytics store query failed",
                details={"stage": stage},
            )
        )

    def _log_query_failure(self, stage: str, error: object) -> None:
        self._logger.warning(
            "analytics_query_failed",
            stage=stage,
            error_message=str(error),
        )
