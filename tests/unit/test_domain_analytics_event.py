"""Unit tests for analytics value objects and the limiter clock."""

from datetime import UTC, datetime, timedelta

import pytest
from freezegun import freeze_time

from src.domain.value_objects.analytics_event import BusinessEvent, PageView, UserAction
from src.infrastructure.rate_limit.fixed_window_adapter import current_time_ms


@pytest.mark.unit
class TestEventTimestamps:
    """Events default to the current UTC time."""

    @freeze_time("2024-01-01 12:00:00")
    def test_page_view_defaults_to_now(self) -> None:
        page_view = PageView(page="/api/v1/books")

        assert page_view.timestamp == datetime(2024, 1, 1, 12, 0, tzinfo=UTC)

    @freeze_time("2024-01-01 23:59:59")
    def test_user_action_defaults(self) -> None:
        action = UserAction(action="add_to_cart")

        assert action.timestamp == datetime(2024, 1, 1, 23, 59, 59, tzinfo=UTC)
        assert action.metadata == {}
        assert action.user_id is None

    def test_events_do_not_share_properties(self) -> None:
        first = BusinessEvent(event="order_placed")
        second = BusinessEvent(event="order_placed")

        assert first.properties is not second.properties

    def test_timestamp_can_be_given(self) -> None:
        moment = datetime(2023, 6, 1, 8, 30, tzinfo=UTC)

        assert BusinessEvent(event="signup", timestamp=moment).timestamp == moment


@pytest.mark.unit
class TestCurrentTimeMs:
    """Wall clock in epoch milliseconds."""

    @freeze_time("2024-01-01 12:00:00")
    def test_epoch_millis(self) -> None:
        assert current_time_ms() == 1_704_110_400_000

    def test_advances_with_clock(self) -> None:
        with freeze_time("2024-01-01 12:00:00") as frozen:
            before = current_time_ms()
            frozen.tick(delta=timedelta(seconds=2.5))
            after = current_time_ms()

        assert after - before == 2_500
