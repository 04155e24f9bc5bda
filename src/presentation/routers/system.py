"""System router for non-versioned application endpoints.

Root, health and configuration endpoints. They are skipped by the rate
limiter and never cached.
"""

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.container import get_cache
from src.core.result import Success
from src.domain.protocols import CacheProtocol

system_router = APIRouter(tags=["System"])


@system_router.get("/")
async def root() -> dict[str, str]:
    """Root endpoint - basic status check.

    Returns:
        dict[str, str]: Service name, status and version.
    """
    return {
        "message": settings.app_name,
        "status": "operational",
        "version": settings.app_version,
    }


@system_router.get("/health")
async def health(cache: CacheProtocol = Depends(get_cache)) -> JSONResponse:
    """Health check endpoint for monitoring and load balancers.

    The service keeps serving without the store (every layer fails open),
    so an unreachable store reports "degraded" with HTTP 200.
    """
    ping = await cache.ping()
    store_ok = isinstance(ping, Success) and ping.value
    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content={
            "status": "healthy" if store_ok else "degraded",
            "store": "up" if store_ok else "down",
        },
    )


@system_router.get("/config")
async def get_config() -> JSONResponse:
    """Configuration debug endpoint (development only).

    Returns:
        JSONResponse: Configuration details (sanitized) or 403 in
            non-development environments.
    """
    if not settings.is_development:
        return JSONResponse(
            status_code=403,
            content={"detail": "Config endpoint only available in development"},
        )

    return JSONResponse(
        content={
            "environment": settings.environment.value,
            "debug": settings.debug,
            "api": {
                "name": settings.app_name,
                "version": settings.app_version,
                "base_url": settings.api_base_url,
                "v1_prefix": settings.api_v1_prefix,
            },
            "cache": {
                "url": "<redacted>",  # Never expose credentials
                "response_cache_enabled": settings.response_cache_enabled,
            },
            "rate_limit": {
                "enabled": settings.rate_limit_enabled,
                "trust_forwarded_headers": settings.trust_forwarded_headers,
            },
            "analytics": {
                "enabled": settings.analytics_enabled,
                "counter_ttl_days": settings.analytics_counter_ttl_days,
            },
        }
    )
