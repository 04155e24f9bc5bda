"""
Main FastAPI application entry point.

Wires the request-shaping layer around the v1 routers:

    AnalyticsMiddleware (outermost, observes every request)
      -> RateLimitMiddleware (stacked fixed-window tiers)
        -> route (response cache decorator on read routes)
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.core.config import settings
from src.core.container import close_redis_client, get_logger
from src.presentation.routers import system_router
from src.presentation.routers.api.middleware.analytics_middleware import (
    AnalyticsMiddleware,
    drain_tasks,
)
from src.presentation.routers.api.middleware.rate_limit_middleware import (
    RateLimitMiddleware,
)
from src.presentation.routers.api.v1 import v1_router
from src.presentation.routers.api.v1.errors import register_exception_handlers


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Handles startup and shutdown events:
    - Startup: Log effective feature switches
    - Shutdown: Wait for pending page view tracking, then close the shared
      Redis connection pool

    Args:
        app: FastAPI application instance.

    Yields:
        None during application lifetime.
    """
    get_logger().info(
        "application_started",
        environment=settings.environment.value,
        rate_limit_enabled=settings.rate_limit_enabled,
        response_cache_enabled=settings.response_cache_enabled,
        analytics_enabled=settings.analytics_enabled,
    )

    yield

    await drain_tasks(app.state.analytics_tasks)
    await close_redis_client()


def create_app() -> FastAPI:
    """Build the application with middleware, handlers and routers."""
    application = FastAPI(
        title=settings.app_name,
        description="Bookstore API with rate limiting, response caching and analytics",
        version=settings.app_version,
        docs_url="/docs",
        redoc_url="/redoc",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Starlette runs the last added middleware first
    application.add_middleware(RateLimitMiddleware)
    application.state.analytics_tasks = set()
    application.add_middleware(
        AnalyticsMiddleware, pending=application.state.analytics_tasks
    )

    # Register global exception handlers (RFC 7807 error responses)
    register_exception_handlers(application)

    application.include_router(system_router)
    application.include_router(v1_router)
    return application


app = create_app()
