"""Unit tests for RedisAnalyticsAdapter.

Tracking and queries run over fakeredis with explicit UTC timestamps.
"""

from datetime import UTC, date, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.core.enums import ErrorCode
from src.core.result import Failure, Success
from src.domain.value_objects.analytics_event import BusinessEvent, PageView, UserAction
from src.infrastructure.analytics.redis_analytics_adapter import (
    MAX_RANGE_DAYS,
    RedisAnalyticsAdapter,
)
from src.infrastructure.enums import InfrastructureErrorCode
from src.infrastructure.errors import CacheError

NOON = datetime(2024, 3, 2, 12, 30, tzinfo=UTC)


@pytest.fixture
def analytics(cache_adapter, mock_logger) -> RedisAnalyticsAdapter:
    return RedisAnalyticsAdapter(cache=cache_adapter, logger=mock_logger)


def _store_down() -> CacheError:
    return CacheError(
        code=ErrorCode.CACHE_UNAVAILABLE,
        infrastructure_code=InfrastructureErrorCode.CACHE_CONNECTION_ERROR,
        message="Cache unreachable",
    )


class TestTracking:
    """Counters land in UTC day and hour buckets."""

    async def test_page_view_counters(self, analytics, redis_client) -> None:
        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=NOON))
        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=NOON))

        assert await redis_client.get("analytics:pageviews:2024-03-02") == b"2"
        assert await redis_client.get("analytics:pageviews:2024-03-02:12") == b"2"
        assert await redis_client.zscore("analytics:pages:2024-03-02", "/api/v1/books") == 2

    async def test_pages_share_one_set_per_day(self, analytics, redis_client) -> None:
        """Every page of a day lives in one sorted set with the counter TTL."""
        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=NOON))
        await analytics.track_page_view(
            PageView(page="/api/v1/books/{book_id}", path="/api/v1/books/b-1", timestamp=NOON)
        )
        await analytics.track_page_view(
            PageView(page="/api/v1/books/{book_id}", path="/api/v1/books/b-2", timestamp=NOON)
        )

        members = await redis_client.zrange("analytics:pages:2024-03-02", 0, -1, withscores=True)
        assert members == [(b"/api/v1/books", 1.0), (b"/api/v1/books/{book_id}", 2.0)]
        assert [key async for key in redis_client.scan_iter(match="analytics:pages:*")] == [
            b"analytics:pages:2024-03-02"
        ]
        ttl = await redis_client.ttl("analytics:pages:2024-03-02")
        assert 29 * 24 * 3600 < ttl <= 30 * 24 * 3600

    async def test_counter_ttl(self, analytics, redis_client) -> None:
        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=NOON))

        ttl = await redis_client.ttl("analytics:pageviews:2024-03-02")
        assert 29 * 24 * 3600 < ttl <= 30 * 24 * 3600

    async def test_naive_timestamp_treated_as_utc(self, analytics, redis_client) -> None:
        await analytics.track_page_view(
            PageView(page="/api/v1/books", timestamp=datetime(2024, 3, 2, 23, 59))
        )

        assert await redis_client.get("analytics:pageviews:2024-03-02") == b"1"

    async def test_user_action_counters(self, analytics, redis_client) -> None:
        await analytics.track_user_action(
            UserAction(action="add_to_cart", user_id="reader-1", timestamp=NOON)
        )
        await analytics.track_user_action(UserAction(action="add_to_cart", timestamp=NOON))

        assert await redis_client.get("analytics:actions:2024-03-02") == b"2"
        assert await redis_client.get("analytics:actions:add_to_cart:2024-03-02") == b"2"
        assert await redis_client.get("analytics:users:reader-1:actions:2024-03-02") == b"1"

    async def test_business_event_snapshot(self, analytics, redis_client) -> None:
        await analytics.track_business_event(
            BusinessEvent(event="order_placed", properties={"total": "42.00"}, timestamp=NOON)
        )

        assert await redis_client.get("analytics:events:2024-03-02") == b"1"
        assert await redis_client.get("analytics:events:order_placed:2024-03-02") == b"1"
        snapshots = [key async for key in redis_client.scan_iter(match="analytics:event:*")]
        assert len(snapshots) == 1
        ttl = await redis_client.ttl(snapshots[0])
        assert 6 * 24 * 3600 < ttl <= 7 * 24 * 3600

    async def test_store_down_never_raises(self, mock_logger) -> None:
        cache = AsyncMock()
        cache.increment_with_ttl.return_value = Failure(error=_store_down())
        cache.increment_score.return_value = Failure(error=_store_down())
        cache.set_json.return_value = Failure(error=_store_down())
        analytics = RedisAnalyticsAdapter(cache=cache, logger=mock_logger)

        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=NOON))

        # two counters, the page set and one snapshot
        assert mock_logger.warning.call_count == 4


class TestGetAnalytics:
    """Range aggregation with zero-filled days."""

    async def test_range_sums_and_zero_fills(self, analytics) -> None:
        """Days without counters read as zero; the summary sums the days."""
        day1 = datetime(2024, 3, 1, 9, tzinfo=UTC)
        day3 = datetime(2024, 3, 3, 18, tzinfo=UTC)
        for _ in range(3):
            await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=day1))
        await analytics.track_page_view(PageView(page="/api/v1/events", timestamp=day3))
        await analytics.track_user_action(UserAction(action="search", timestamp=day3))
        await analytics.track_business_event(BusinessEvent(event="order_placed", timestamp=day1))

        result = await analytics.get_analytics(date(2024, 3, 1), date(2024, 3, 3))

        assert isinstance(result, Success)
        report = result.value
        assert [d.date for d in report.daily] == [
            date(2024, 3, 1),
            date(2024, 3, 2),
            date(2024, 3, 3),
        ]
        assert [d.page_views for d in report.daily] == [3, 0, 1]
        assert [d.user_actions for d in report.daily] == [0, 0, 1]
        assert [d.business_events for d in report.daily] == [1, 0, 0]
        assert report.summary.total_page_views == 4
        assert report.summary.total_user_actions == 1
        assert report.summary.total_business_events == 1

    async def test_empty_range_is_all_zero(self, analytics) -> None:
        result = await analytics.get_analytics(date(2024, 1, 1), date(2024, 1, 7))

        assert isinstance(result, Success)
        assert len(result.value.daily) == 7
        assert result.value.summary.total_page_views == 0
        assert result.value.top_pages == []

    async def test_single_day_range(self, analytics) -> None:
        result = await analytics.get_analytics(date(2024, 3, 2), date(2024, 3, 2))

        assert isinstance(result, Success)
        assert len(result.value.daily) == 1

    async def test_top_pages_over_range(self, analytics) -> None:
        for day, page, views in (
            (1, "/api/v1/books", 2),
            (2, "/api/v1/books", 3),
            (2, "/api/v1/events", 4),
            (2, "/api/v1/authors", 1),
        ):
            moment = datetime(2024, 3, day, 10, tzinfo=UTC)
            for _ in range(views):
                await analytics.track_page_view(PageView(page=page, timestamp=moment))

        result = await analytics.get_analytics(date(2024, 3, 1), date(2024, 3, 2))

        assert isinstance(result, Success)
        assert [(p.page, p.views) for p in result.value.top_pages] == [
            ("/api/v1/books", 5),
            ("/api/v1/events", 4),
            ("/api/v1/authors", 1),
        ]

    async def test_start_after_end_rejected(self, analytics) -> None:
        result = await analytics.get_analytics(date(2024, 3, 3), date(2024, 3, 1))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.INVALID_DATE_RANGE

    async def test_range_too_long_rejected(self, analytics) -> None:
        start = date(2023, 1, 1)

        longest = await analytics.get_analytics(start, start + timedelta(days=MAX_RANGE_DAYS - 1))
        too_long = await analytics.get_analytics(start, start + timedelta(days=MAX_RANGE_DAYS))

        assert isinstance(longest, Success)
        assert isinstance(too_long, Failure)
        assert too_long.error.code == ErrorCode.INVALID_DATE_RANGE

    async def test_store_down_is_query_failure(self, mock_logger) -> None:
        cache = AsyncMock()
        cache.get_many.return_value = Failure(error=_store_down())
        analytics = RedisAnalyticsAdapter(cache=cache, logger=mock_logger)

        result = await analytics.get_analytics(date(2024, 3, 1), date(2024, 3, 2))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ANALYTICS_QUERY_FAILED

    async def test_top_pages_read_without_scanning(self, mock_logger) -> None:
        """The report reads the day sets directly, never walking the keyspace."""
        cache = AsyncMock()
        cache.get_many.return_value = Success(value=[None] * 3 * 30)
        cache.sum_scores.return_value = Success(value={"/api/v1/books": 3})
        analytics = RedisAnalyticsAdapter(cache=cache, logger=mock_logger)

        result = await analytics.get_analytics(date(2024, 3, 1), date(2024, 3, 30))

        assert isinstance(result, Success)
        assert [(p.page, p.views) for p in result.value.top_pages] == [("/api/v1/books", 3)]
        cache.scan_keys.assert_not_called()
        cache.sum_scores.assert_awaited_once()
        assert len(cache.sum_scores.call_args.args[0]) == 30

    async def test_page_set_failure_is_query_failure(self, mock_logger) -> None:
        cache = AsyncMock()
        cache.get_many.return_value = Success(value=[None] * 3)
        cache.sum_scores.return_value = Failure(error=_store_down())
        analytics = RedisAnalyticsAdapter(cache=cache, logger=mock_logger)

        result = await analytics.get_analytics(date(2024, 3, 1), date(2024, 3, 1))

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.ANALYTICS_QUERY_FAILED
        assert result.error.details == {"stage": "page_counters"}


class TestRealTimeAnalytics:
    """Recent snapshots from the last hour."""

    async def test_recent_activity(self, analytics) -> None:
        now = NOON
        await analytics.track_page_view(
            PageView(page="/api/v1/books", user_id="reader-1", timestamp=now - timedelta(minutes=5))
        )
        await analytics.track_page_view(
            PageView(page="/api/v1/events", session_id="s-9", timestamp=now - timedelta(minutes=1))
        )
        await analytics.track_user_action(
            UserAction(action="search", user_id="reader-1", timestamp=now - timedelta(minutes=2))
        )
        # Older than the window: ignored even though its snapshot still exists
        await analytics.track_page_view(
            PageView(page="/api/v1/old", user_id="reader-7", timestamp=now - timedelta(hours=2))
        )

        snapshot = await analytics.get_real_time_analytics(now)

        assert snapshot.active_users == 2
        assert [v["page"] for v in snapshot.recent_page_views] == [
            "/api/v1/events",
            "/api/v1/books",
        ]
        assert [a["action"] for a in snapshot.recent_actions] == ["search"]
        assert snapshot.generated_at == now

    async def test_recent_lists_are_capped(self, analytics) -> None:
        for minute in range(55):
            await analytics.track_page_view(
                PageView(page=f"/p/{minute}", timestamp=NOON - timedelta(seconds=minute))
            )

        snapshot = await analytics.get_real_time_analytics(NOON)

        assert len(snapshot.recent_page_views) == 50
        assert snapshot.recent_page_views[0]["page"] == "/p/0"

    async def test_store_down_is_empty_view(self, mock_logger) -> None:
        cache = AsyncMock()
        cache.scan_keys.return_value = Failure(error=_store_down())
        analytics = RedisAnalyticsAdapter(cache=cache, logger=mock_logger)

        snapshot = await analytics.get_real_time_analytics(NOON)

        assert snapshot.active_users == 0
        assert snapshot.recent_page_views == []
        mock_logger.warning.assert_called_once()
