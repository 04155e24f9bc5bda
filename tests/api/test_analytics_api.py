"""HTTP tests for the analytics and rate limit admin routes."""

from datetime import UTC, datetime, timedelta
from unittest.mock import AsyncMock

import pytest

from src.domain.value_objects.analytics_event import BusinessEvent, PageView, UserAction

OVERVIEW = "/api/v1/analytics/overview"
REALTIME = "/api/v1/analytics/realtime"


@pytest.mark.api
class TestAdminToken:
    """Admin routes require the shared token."""

    async def test_missing_token_is_rejected(self, client) -> None:
        response = await client.get(OVERVIEW)

        assert response.status_code == 403
        body = response.json()
        assert body["status"] == 403
        assert body["detail"] == "Admin token required"

    async def test_wrong_token_is_rejected(self, client) -> None:
        response = await client.get(REALTIME, headers={"X-Admin-Token": "nope"})

        assert response.status_code == 403

    async def test_unset_token_rejects_everyone(
        self, client, app_settings, monkeypatch
    ) -> None:
        monkeypatch.setattr(app_settings, "admin_api_token", None)

        response = await client.get(REALTIME, headers={"X-Admin-Token": "test-admin-token"})

        assert response.status_code == 403


@pytest.mark.api
class TestOverview:
    """GET /analytics/overview."""

    async def test_defaults_to_last_thirty_days(self, client, admin_headers) -> None:
        today = datetime.now(UTC).date()

        response = await client.get(OVERVIEW, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["end_date"] == today.isoformat()
        assert body["start_date"] == (today - timedelta(days=29)).isoformat()
        assert len(body["daily"]) == 30
        assert body["summary"]["total_page_views"] == 0

    async def test_reports_tracked_counters(self, client, container, admin_headers) -> None:
        analytics = container.get_analytics()
        day = datetime(2024, 1, 2, 9, 15, tzinfo=UTC)
        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=day))
        await analytics.track_page_view(PageView(page="/api/v1/books", timestamp=day))
        await analytics.track_page_view(PageView(page="/api/v1/events", timestamp=day))
        await analytics.track_user_action(UserAction(action="search", timestamp=day))
        await analytics.track_business_event(BusinessEvent(event="order_placed", timestamp=day))

        response = await client.get(
            OVERVIEW,
            params={"start_date": "2024-01-01", "end_date": "2024-01-03"},
            headers=admin_headers,
        )

        body = response.json()
        assert [d["page_views"] for d in body["daily"]] == [0, 3, 0]
        assert body["summary"] == {
            "total_page_views": 3,
            "total_user_actions": 1,
            "total_business_events": 1,
        }
        assert body["top_pages"][0] == {"page": "/api/v1/books", "views": 2}

    async def test_report_is_cached_for_an_hour(
        self, client, container, redis_client, admin_headers
    ) -> None:
        params = {"start_date": "2024-01-01", "end_date": "2024-01-01"}
        await client.get(OVERVIEW, params=params, headers=admin_headers)

        analytics = container.get_analytics()
        await analytics.track_page_view(
            PageView(page="/api/v1/books", timestamp=datetime(2024, 1, 1, tzinfo=UTC))
        )
        response = await client.get(OVERVIEW, params=params, headers=admin_headers)

        assert response.json()["summary"]["total_page_views"] == 0
        ttl = await redis_client.ttl("analytics:overview:2024-01-01:2024-01-01")
        assert 0 < ttl <= 3600

    async def test_reversed_range_is_rejected(self, client, admin_headers) -> None:
        response = await client.get(
            OVERVIEW,
            params={"start_date": "2024-02-01", "end_date": "2024-01-01"},
            headers=admin_headers,
        )

        assert response.status_code == 400
        assert response.json()["type"].endswith("/errors/invalid_date_range")

    async def test_oversized_range_is_rejected(self, client, admin_headers) -> None:
        response = await client.get(
            OVERVIEW,
            params={"start_date": "2022-01-01", "end_date": "2024-01-01"},
            headers=admin_headers,
        )

        assert response.status_code == 400

    async def test_malformed_date_is_a_validation_error(self, client, admin_headers) -> None:
        response = await client.get(
            OVERVIEW, params={"start_date": "yesterday"}, headers=admin_headers
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "query.start_date"


@pytest.mark.api
class TestRealtime:
    """GET /analytics/realtime."""

    async def test_recent_activity(self, client, container, admin_headers) -> None:
        analytics = container.get_analytics()
        await analytics.track_page_view(PageView(page="/api/v1/books", user_id="reader-1"))
        await analytics.track_page_view(PageView(page="/api/v1/books", session_id="s-9"))
        await analytics.track_user_action(UserAction(action="search", user_id="reader-1"))

        response = await client.get(REALTIME, headers=admin_headers)

        assert response.status_code == 200
        body = response.json()
        assert body["active_users"] == 2
        assert len(body["recent_page_views"]) == 2
        assert body["recent_actions"][0]["action"] == "search"

    async def test_empty_store(self, client, admin_headers) -> None:
        response = await client.get(REALTIME, headers=admin_headers)

        body = response.json()
        assert body["active_users"] == 0
        assert body["recent_page_views"] == []


@pytest.mark.api
class TestRateLimitReset:
    """DELETE /admin/rate-limits/{tier}/{identity}."""

    async def test_reset_existing_counter(self, client, admin_headers) -> None:
        await client.get("/api/v1/books")

        response = await client.delete(
            "/api/v1/admin/rate-limits/lax/ip:10.0.0.7", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json() == {"tier": "lax", "identity": "ip:10.0.0.7", "reset": True}

    async def test_reset_restores_budget(self, client, admin_headers) -> None:
        await client.get("/api/v1/books")
        await client.delete("/api/v1/admin/rate-limits/lax/ip:10.0.0.7", headers=admin_headers)

        response = await client.get("/api/v1/books")

        assert response.headers["X-RateLimit-Remaining"] == "199"

    async def test_reset_missing_counter(self, client, admin_headers) -> None:
        response = await client.delete(
            "/api/v1/admin/rate-limits/auth/ip:203.0.113.99", headers=admin_headers
        )

        assert response.status_code == 200
        assert response.json()["reset"] is False

    async def test_unknown_tier(self, client, admin_headers) -> None:
        response = await client.delete(
            "/api/v1/admin/rate-limits/bogus/ip:10.0.0.7", headers=admin_headers
        )

        assert response.status_code == 400

    async def test_store_failure_is_reported(
        self, client, redis_client, admin_headers, monkeypatch
    ) -> None:
        monkeypatch.setattr(
            redis_client, "delete", AsyncMock(side_effect=ConnectionError("down"))
        )

        response = await client.delete(
            "/api/v1/admin/rate-limits/lax/ip:10.0.0.7", headers=admin_headers
        )

        assert response.status_code == 503
