"""Pytest configuration and shared fixtures.

This configuration ensures:
1. Async tests run under pytest-asyncio
2. Every test gets its own in-memory Redis (fakeredis), so counters and
   cached bodies never leak between tests
3. Container singletons are reset around API tests
"""

import asyncio
from collections.abc import AsyncGenerator
from functools import lru_cache
from unittest.mock import Mock

import fakeredis.aioredis
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

# Configure pytest-asyncio
pytest_plugins = ("pytest_asyncio",)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked or in-memory stores")
    config.addinivalue_line("markers", "api: HTTP tests through the ASGI app")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if asyncio.iscoroutinefunction(item.function):
            item.add_marker(pytest.mark.asyncio)


# =============================================================================
# Store fixtures
# =============================================================================


@pytest_asyncio.fixture
async def redis_client() -> AsyncGenerator[fakeredis.aioredis.FakeRedis, None]:
    """Provide a fresh fakeredis client (in-memory Redis emulation).

    decode_responses=False matches the production pool, so the adapter's
    bytes decoding is exercised.
    """
    client = fakeredis.aioredis.FakeRedis(decode_responses=False)
    yield client
    await client.flushall()
    await client.aclose()


@pytest.fixture
def cache_adapter(redis_client):
    """Provide a RedisAdapter over the per-test fakeredis client.

    Usage:
        async def test_something(cache_adapter):
            result = await cache_adapter.set("key", "value", ttl=60)
    """
    from src.infrastructure.cache.redis_adapter import RedisAdapter

    return RedisAdapter(redis_client=redis_client)


@pytest.fixture
def mock_logger():
    """Provide a mock logger for testing.

    Usage:
        def test_something(mock_logger):
            service = MyService(logger=mock_logger)
            service.do_something()
            mock_logger.info.assert_called_once()
    """
    logger = Mock()
    logger.info = Mock()
    logger.debug = Mock()
    logger.error = Mock()
    logger.warning = Mock()
    return logger


# =============================================================================
# Application fixtures
# =============================================================================


def _clear_container_caches() -> None:
    from src.core.container import infrastructure, repositories

    for factory in (
        infrastructure.get_cache,
        infrastructure.get_rate_limit,
        infrastructure.get_response_cache,
        infrastructure.get_cache_invalidator,
        infrastructure.get_analytics,
        repositories.get_document_repository,
    ):
        factory.cache_clear()


@pytest.fixture
def container(redis_client, monkeypatch):
    """Point the container at the per-test fakeredis client.

    Every factory built on get_redis_client() (cache, limiter, response
    cache, invalidator, analytics) is rebuilt over the fake client, and
    the document repository is reseeded.
    """
    from src.core.container import infrastructure

    @lru_cache()
    def fake_redis_client():
        return redis_client

    monkeypatch.setattr(infrastructure, "get_redis_client", fake_redis_client)
    _clear_container_caches()
    yield infrastructure
    _clear_container_caches()


@pytest.fixture
def app_settings(monkeypatch):
    """Settings with every layer enabled and analytics off.

    Page view tracking runs in detached tasks; tests that assert on it
    enable analytics explicitly.
    """
    from src.core.config import settings

    monkeypatch.setattr(settings, "rate_limit_enabled", True)
    monkeypatch.setattr(settings, "response_cache_enabled", True)
    monkeypatch.setattr(settings, "analytics_enabled", False)
    monkeypatch.setattr(settings, "admin_api_token", "test-admin-token")
    return settings


@pytest_asyncio.fixture
async def client(container, app_settings) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client bound to a freshly built application.

    The app is built per test so middleware instances never hold services
    from a previous test's container.
    """
    from src.main import create_app

    transport = ASGITransport(app=create_app(), client=("10.0.0.7", 50000))
    async with AsyncClient(transport=transport, base_url="http://test") as http_client:
        yield http_client


@pytest.fixture
def admin_headers(app_settings) -> dict[str, str]:
    return {"X-Admin-Token": app_settings.admin_api_token}
