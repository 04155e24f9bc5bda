"""HTTP tests for page view and action tracking."""

import asyncio
from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from unittest.mock import AsyncMock

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient

from src.domain.value_objects.analytics_event import PageView
from src.infrastructure.analytics import RedisAnalyticsAdapter
from src.presentation.routers.api.middleware.analytics_middleware import (
    AnalyticsMiddleware,
)


def build_inner_app() -> FastAPI:
    app = FastAPI()

    @app.get("/api/v1/books")
    async def list_books() -> list[dict]:
        return [{"id": "cosmos"}]

    @app.post("/api/v1/books")
    async def create_book() -> dict:
        return {"id": "new"}

    @app.get("/api/v1/books/{book_id}")
    async def get_book(book_id: str) -> dict:
        return {"id": book_id}

    @app.get("/health")
    async def health() -> dict:
        return {"status": "healthy"}

    return app


def open_client(asgi_app) -> AsyncClient:
    transport = ASGITransport(app=asgi_app, client=("10.0.0.7", 50000))
    return AsyncClient(transport=transport, base_url="http://test")


@pytest.fixture
def analytics(cache_adapter, mock_logger):
    return RedisAnalyticsAdapter(
        cache=cache_adapter,
        logger=mock_logger,
        counter_ttl_seconds=86400,
        recent_ttl_seconds=3600,
        event_ttl_seconds=86400,
    )


@pytest_asyncio.fixture
async def tracked(analytics, mock_logger) -> AsyncGenerator[tuple, None]:
    middleware = AnalyticsMiddleware(
        build_inner_app(), analytics=analytics, logger=mock_logger, enabled=True
    )
    async with open_client(middleware) as client:
        yield client, middleware


@pytest.mark.api
class TestPageViewTracking:
    """AnalyticsMiddleware records GET /api/... requests."""

    async def test_api_read_is_counted(self, tracked, analytics) -> None:
        client, middleware = tracked
        today = datetime.now(UTC).date()

        response = await client.get("/api/v1/books")
        await middleware.drain()

        assert response.status_code == 200
        report = (await analytics.get_analytics(today, today)).value
        assert report.summary.total_page_views == 1
        assert report.top_pages[0].page == "/api/v1/books"

    async def test_writes_and_system_routes_are_ignored(self, tracked, analytics) -> None:
        client, middleware = tracked
        today = datetime.now(UTC).date()

        await client.post("/api/v1/books")
        await client.get("/health")
        await middleware.drain()

        report = (await analytics.get_analytics(today, today)).value
        assert report.summary.total_page_views == 0

    async def test_pages_are_keyed_by_route_template(self, tracked, analytics) -> None:
        client, middleware = tracked
        today = datetime.now(UTC).date()

        await client.get("/api/v1/books/b-1")
        await client.get("/api/v1/books/b-2")
        await middleware.drain()

        report = (await analytics.get_analytics(today, today)).value
        assert [(p.page, p.views) for p in report.top_pages] == [("/api/v1/books/{book_id}", 2)]

    async def test_unmatched_paths_are_ignored(self, tracked, analytics, redis_client) -> None:
        client, middleware = tracked
        today = datetime.now(UTC).date()

        for n in range(5):
            response = await client.get(f"/api/v1/random-{n}")
            assert response.status_code == 404
        await middleware.drain()

        report = (await analytics.get_analytics(today, today)).value
        assert report.summary.total_page_views == 0
        assert [key async for key in redis_client.scan_iter(match="analytics:pages:*")] == []

    async def test_snapshot_carries_request_context(self, mock_logger) -> None:
        analytics = AsyncMock()
        middleware = AnalyticsMiddleware(
            build_inner_app(), analytics=analytics, logger=mock_logger, enabled=True
        )

        async with open_client(middleware) as client:
            await client.get(
                "/api/v1/books",
                headers={"X-Session-Id": "s-1", "Referer": "https://books.example/"},
            )
        await middleware.drain()

        page_view = analytics.track_page_view.call_args.args[0]
        assert isinstance(page_view, PageView)
        assert page_view.page == "/api/v1/books"
        assert page_view.path == "/api/v1/books"
        assert page_view.session_id == "s-1"
        assert page_view.referrer == "https://books.example/"
        assert page_view.client_address == "10.0.0.7"

    async def test_tracking_failure_never_reaches_client(self, mock_logger) -> None:
        analytics = AsyncMock()
        analytics.track_page_view.side_effect = RuntimeError("store down")
        middleware = AnalyticsMiddleware(
            build_inner_app(), analytics=analytics, logger=mock_logger, enabled=True
        )

        async with open_client(middleware) as client:
            response = await client.get("/api/v1/books")
        await middleware.drain()

        assert response.status_code == 200
        assert response.json() == [{"id": "cosmos"}]
        mock_logger.warning.assert_called_once()
        assert mock_logger.warning.call_args.args[0] == "analytics_track_failed"

    async def test_disabled_tracking(self, mock_logger) -> None:
        analytics = AsyncMock()
        middleware = AnalyticsMiddleware(
            build_inner_app(), analytics=analytics, logger=mock_logger, enabled=False
        )

        async with open_client(middleware) as client:
            await client.get("/api/v1/books")
        await middleware.drain()

        analytics.track_page_view.assert_not_called()


@pytest.mark.api
class TestActionTracking:
    """track_action and business events on the registration route."""

    async def test_registration_records_action_and_event(
        self, client, container, app_settings, monkeypatch
    ) -> None:
        monkeypatch.setattr(app_settings, "analytics_enabled", True)
        today = datetime.now(UTC).date()

        response = await client.post(
            "/api/v1/events/author-night/registrations",
            json={"attendee_name": "Sam", "seats": 1},
        )

        assert response.status_code == 201
        report = (await container.get_analytics().get_analytics(today, today)).value
        assert report.summary.total_user_actions == 1
        assert report.summary.total_business_events == 1

    async def test_no_tracking_when_disabled(self, client, container) -> None:
        today = datetime.now(UTC).date()

        await client.post(
            "/api/v1/events/author-night/registrations",
            json={"attendee_name": "Sam", "seats": 1},
        )

        report = (await container.get_analytics().get_analytics(today, today)).value
        assert report.summary.total_user_actions == 0
        assert report.summary.total_business_events == 0

    async def test_full_event_is_rejected(self, client) -> None:
        response = await client.post(
            "/api/v1/events/author-night/registrations",
            json={"attendee_name": "Group", "seats": 10},
        )
        assert response.status_code == 201

        for _ in range(3):
            await client.post(
                "/api/v1/events/author-night/registrations",
                json={"attendee_name": "Group", "seats": 10},
            )
        response = await client.post(
            "/api/v1/events/author-night/registrations",
            json={"attendee_name": "Late", "seats": 1},
        )

        assert response.status_code == 400


@pytest.mark.api
class TestShutdown:
    """The application waits for page view tracking before closing the store."""

    async def test_pending_page_views_finish_before_pool_closes(
        self, container, app_settings, monkeypatch
    ) -> None:
        import src.main as main_module
        from src.main import create_app

        monkeypatch.setattr(app_settings, "analytics_enabled", True)
        analytics = container.get_analytics()
        track_page_view = analytics.track_page_view

        async def slow_track(page_view: PageView) -> None:
            await asyncio.sleep(0.05)
            await track_page_view(page_view)

        monkeypatch.setattr(analytics, "track_page_view", slow_track)

        seen_at_close: list[tuple[int, int]] = []

        async def close_redis_client() -> None:
            today = datetime.now(UTC).date()
            report = (await analytics.get_analytics(today, today)).value
            seen_at_close.append((len(app.state.analytics_tasks), report.summary.total_page_views))

        monkeypatch.setattr(main_module, "close_redis_client", close_redis_client)

        app = create_app()
        async with app.router.lifespan_context(app):
            async with open_client(app) as client:
                response = await client.get("/api/v1/books")
            assert response.status_code == 200

        assert seen_at_close == [(0, 1)]
