"""Analytics middleware and tracking dependency.

Page views of `GET /api/...` requests that matched a route are recorded,
keyed by the route template, after the response is produced, in a
background task, so tracking never delays the response and never changes
its outcome. `track_action(name)` is a route dependency that
records a named user action the same way, through FastAPI BackgroundTasks.

Usage:
    # In main.py (outermost, so every request is observed)
    app.add_middleware(AnalyticsMiddleware)

    # On a route
    @router.post("/cart", dependencies=[Depends(track_action("add_to_cart"))])
"""

import asyncio
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Coroutine

from fastapi import BackgroundTasks, Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response
from starlette.types import ASGIApp

from src.core.config import settings
from src.domain.value_objects.analytics_event import PageView, UserAction
from src.presentation.routers.api.middleware.identity import describe_request

if TYPE_CHECKING:
    from src.domain.protocols.analytics_protocol import AnalyticsProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol

TRACKED_PREFIX = "/api/"


class AnalyticsMiddleware(BaseHTTPMiddleware):
    """Record page views without delaying responses.

    Tracking is scheduled with asyncio.create_task after the downstream
    response is ready. Failures are logged inside the task and never reach
    the client.

    Args:
        app: The ASGI application to wrap.
        analytics: Pipeline to use (lazy loaded from container when None).
        logger: Logger to use (lazy loaded from container when None).
        enabled: Override settings.analytics_enabled.
        pending: Set holding in-flight tracking tasks, shared with the
            application so shutdown can wait for them.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        analytics: "AnalyticsProtocol | None" = None,
        logger: "LoggerProtocol | None" = None,
        enabled: bool | None = None,
        pending: set[asyncio.Task[None]] | None = None,
    ) -> None:
        super().__init__(app)
        self._analytics = analytics
        self._logger = logger
        self._enabled = settings.analytics_enabled if enabled is None else enabled
        self._pending: set[asyncio.Task[None]] = set() if pending is None else pending

    def _get_analytics(self) -> "AnalyticsProtocol":
        if self._analytics is None:
            from src.core.container import get_analytics

            self._analytics = get_analytics()
        return self._analytics

    def _get_logger(self) -> "LoggerProtocol":
        if self._logger is None:
            from src.core.container import get_logger

            self._logger = get_logger()
        return self._logger

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ) -> Response:
        """Pass the request through, then schedule page view tracking."""
        arrived_at = datetime.now(UTC)
        response = await call_next(request)

        if self._enabled and self._should_track(request):
            try:
                descriptor = describe_request(
                    request, trust_forwarded=settings.trust_forwarded_headers
                )
                page_view = PageView(
                    page=request.scope["route"].path,
                    path=descriptor.path,
                    user_id=descriptor.principal_id,
                    session_id=descriptor.session_id,
                    user_agent=descriptor.user_agent,
                    referrer=descriptor.referrer,
                    client_address=descriptor.client_address,
                    timestamp=arrived_at,
                )
                self._schedule(self._get_analytics().track_page_view(page_view))
            except Exception as exc:
                self._get_logger().warning(
                    "analytics_schedule_failed",
                    path=request.url.path,
                    error_message=str(exc),
                )

        return response

    async def drain(self) -> None:
        """Wait for scheduled tracking tasks (shutdown and tests)."""
        await drain_tasks(self._pending)

    def _should_track(self, request: Request) -> bool:
        # Unmatched paths (404s, requests rejected before routing) have no route
        return (
            request.method == "GET"
            and request.url.path.startswith(TRACKED_PREFIX)
            and request.scope.get("route") is not None
        )

    def _schedule(self, tracking: Coroutine[Any, Any, None]) -> None:
        # The event loop keeps only weak references to tasks
        task = asyncio.create_task(self._run(tracking))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _run(self, tracking: Coroutine[Any, Any, None]) -> None:
        try:
            await tracking
        except Exception as exc:
            self._get_logger().warning("analytics_track_failed", error_message=str(exc))


async def drain_tasks(tasks: set[asyncio.Task[None]]) -> None:
    """Wait for in-flight tracking tasks; their failures are already logged."""
    if tasks:
        await asyncio.gather(*list(tasks), return_exceptions=True)


def track_action(action: str) -> Callable[[Request, BackgroundTasks], None]:
    """Dependency factory recording a named user action after the response.

    Args:
        action: Action name, e.g. "add_to_cart".

    Returns:
        FastAPI dependency scheduling the tracking in BackgroundTasks.

    Example:
        @router.post(
            "/events/{event_id}/registrations",
            dependencies=[Depends(track_action("event_registration"))],
        )
    """

    def dependency(request: Request, background_tasks: BackgroundTasks) -> None:
        if not settings.analytics_enabled:
            return
        descriptor = describe_request(request, trust_forwarded=settings.trust_forwarded_headers)
        user_action = UserAction(
            action=action,
            user_id=descriptor.principal_id,
            session_id=descriptor.session_id,
            metadata={"path": descriptor.path, "method": descriptor.method},
        )
        background_tasks.add_task(_track_user_action, user_action)

    return dependency


async def _track_user_action(user_action: UserAction) -> None:
    from src.core.container import get_analytics, get_logger

    try:
        await get_analytics().track_user_action(user_action)
    except Exception as exc:
        get_logger().warning(
            "analytics_track_failed",
            action=user_action.action,
            error_message=str(exc),
        )
