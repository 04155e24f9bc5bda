"""HTTP tests for system routes and generic error handling."""

from unittest.mock import AsyncMock

import pytest

from src.core.enums import Environment


@pytest.mark.api
class TestSystemRoutes:
    async def test_root(self, client, app_settings) -> None:
        response = await client.get("/")

        assert response.status_code == 200
        assert response.json()["message"] == app_settings.app_name

    async def test_health_with_store(self, client) -> None:
        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "store": "up"}

    async def test_health_without_store(self, client, redis_client, monkeypatch) -> None:
        """The service keeps serving, so health stays 200 but degraded."""
        monkeypatch.setattr(redis_client, "ping", AsyncMock(side_effect=ConnectionError("down")))

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "degraded", "store": "down"}

    async def test_config_in_development(self, client, app_settings, monkeypatch) -> None:
        monkeypatch.setattr(app_settings, "environment", Environment.DEVELOPMENT)

        response = await client.get("/config")

        assert response.status_code == 200
        body = response.json()
        assert body["cache"]["url"] == "<redacted>"
        assert body["rate_limit"]["enabled"] is True

    async def test_config_hidden_in_production(self, client, app_settings, monkeypatch) -> None:
        monkeypatch.setattr(app_settings, "environment", Environment.PRODUCTION)

        response = await client.get("/config")

        assert response.status_code == 403


@pytest.mark.api
class TestErrorHandling:
    """Framework errors come back as problem details."""

    async def test_unknown_route(self, client) -> None:
        response = await client.get("/api/v1/nothing-here")

        assert response.status_code == 404
        body = response.json()
        assert body["title"] == "Resource Not Found"
        assert body["instance"] == "/api/v1/nothing-here"

    async def test_wrong_method(self, client) -> None:
        response = await client.put("/api/v1/books")

        assert response.status_code == 405
        assert response.json()["status"] == 405

    async def test_body_validation(self, client) -> None:
        response = await client.post(
            "/api/v1/books",
            json={"title": "Free", "author_id": "x", "category": "fiction", "price": "-1"},
        )

        assert response.status_code == 422
        assert response.json()["errors"][0]["field"] == "price"
