"""Analytics admin handlers.

Both routes sit behind the MODERATE tier (bound on the route prefix) and
the admin token.

Handlers:
    get_overview  - GET /analytics/overview?start_date&end_date
    get_realtime  - GET /analytics/realtime
"""

from datetime import UTC, date, datetime, timedelta

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from src.core.container import get_analytics, get_cache, get_logger
from src.core.result import Failure, Success
from src.domain.protocols import AnalyticsProtocol, CacheProtocol, LoggerProtocol
from src.infrastructure.cache.cache_keys import CacheKeys
from src.presentation.routers.api.middleware.admin_dependencies import (
    require_admin_token,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.analytics_schemas import (
    AnalyticsReportResponse,
    RealTimeAnalyticsResponse,
)

DEFAULT_RANGE_DAYS = 30
REPORT_CACHE_TTL = 3600

router = APIRouter(
    prefix="/analytics",
    tags=["Analytics"],
    dependencies=[Depends(require_admin_token)],
)


@router.get("/overview", summary="Analytics overview", response_model=None)
async def get_overview(
    request: Request,
    start_date: date | None = Query(None, description="First day (inclusive)"),
    end_date: date | None = Query(None, description="Last day (inclusive)"),
    analytics: AnalyticsProtocol = Depends(get_analytics),
    cache: CacheProtocol = Depends(get_cache),
    logger: LoggerProtocol = Depends(get_logger),
) -> AnalyticsReportResponse | JSONResponse:
    """Aggregated counters over a date range.

    GET /api/v1/analytics/overview → 200 OK

    Defaults to the last 30 days ending today (UTC). The report is cached
    for an hour under analytics:overview:{start}:{end}.

    Returns:
        AnalyticsReportResponse on success.
        JSONResponse with 400 for an invalid range, 503 when the store fails.
    """
    end = end_date or datetime.now(UTC).date()
    start = start_date or end - timedelta(days=DEFAULT_RANGE_DAYS - 1)
    key = CacheKeys().overview(start, end)

    cached = await cache.get_json(key)
    match cached:
        case Success(value=body) if body is not None:
            return AnalyticsReportResponse.model_validate(body)
        case Failure(error=error):
            logger.warning("analytics_overview_cache_read_failed", error_message=str(error))

    result = await analytics.get_analytics(start, end)
    match result:
        case Success(value=report):
            response = AnalyticsReportResponse.from_report(report)
            stored = await cache.set_json(
                key, response.model_dump(mode="json"), ttl=REPORT_CACHE_TTL
            )
            if isinstance(stored, Failure):
                logger.warning(
                    "analytics_overview_cache_write_failed",
                    error_message=str(stored.error),
                )
            return response
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)


@router.get("/realtime", summary="Real-time analytics")
async def get_realtime(
    analytics: AnalyticsProtocol = Depends(get_analytics),
) -> RealTimeAnalyticsResponse:
    """Recent activity from the last hour.

    GET /api/v1/analytics/realtime → 200 OK
    """
    snapshot = await analytics.get_real_time_analytics()
    return RealTimeAnalyticsResponse.from_snapshot(snapshot)
