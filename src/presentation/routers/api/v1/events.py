"""Events resource handlers.

Handlers:
    list_events     - GET    /events
    list_upcoming   - GET    /events/upcoming
    get_event       - GET    /events/{event_id}
    create_event    - POST   /events
    update_event    - PATCH  /events/{event_id}
    delete_event    - DELETE /events/{event_id}
    register        - POST   /events/{event_id}/registrations
"""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.container import (
    get_analytics,
    get_cache_invalidator,
    get_document_repository,
)
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError, ValidationError
from src.domain.enums import ResourceType
from src.domain.protocols import AnalyticsProtocol, DocumentRepository
from src.domain.value_objects.analytics_event import BusinessEvent
from src.infrastructure.cache.invalidation import CacheInvalidator
from src.infrastructure.cache.response_cache import CacheNamespace, CacheTTL
from src.presentation.routers.api.middleware.analytics_middleware import track_action
from src.presentation.routers.api.middleware.response_cache import cached_response
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.catalog_schemas import (
    EventCreateRequest,
    EventRegistrationRequest,
    EventUpdateRequest,
)

COLLECTION = "events"

router = APIRouter(prefix="/events", tags=["Events"])


def event_not_found(request: Request, event_id: str) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(
        NotFoundError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"Event {event_id} not found",
            resource_type="event",
            resource_id=event_id,
        ),
        request,
    )


@router.get("", summary="List events")
@cached_response(CacheTTL.LIST, CacheNamespace.EVENT_LIST)
async def list_events(
    request: Request,
    repository: DocumentRepository = Depends(get_document_repository),
) -> list[dict[str, Any]]:
    return await repository.list(COLLECTION)


@router.get("/upcoming", summary="List upcoming events")
@cached_response(CacheTTL.DETAIL, CacheNamespace.EVENT_UPCOMING, vary_on_query=False)
async def list_upcoming(
    request: Request,
    repository: DocumentRepository = Depends(get_document_repository),
) -> list[dict[str, Any]]:
    """Events that have not started yet, soonest first.

    GET /api/v1/events/upcoming
    """
    now = datetime.now(UTC)
    events = await repository.list(COLLECTION)
    upcoming = [
        event for event in events if datetime.fromisoformat(event["starts_at"]) > now
    ]
    return sorted(upcoming, key=lambda event: event["starts_at"])


@router.get("/{event_id}", summary="Get event", response_model=None)
@cached_response(CacheTTL.DETAIL, CacheNamespace.EVENT_DETAIL)
async def get_event(
    request: Request,
    event_id: str,
    repository: DocumentRepository = Depends(get_document_repository),
) -> dict[str, Any] | JSONResponse:
    event = await repository.get(COLLECTION, event_id)
    if event is None:
        return event_not_found(request, event_id)
    return event


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create event")
async def create_event(
    data: EventCreateRequest,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> dict[str, Any]:
    document = data.model_dump(mode="json")
    document["registered"] = 0
    event = await repository.create(COLLECTION, document)
    await invalidator.invalidate(ResourceType.EVENT, event["id"])
    return event


@router.patch("/{event_id}", summary="Update event", response_model=None)
async def update_event(
    request: Request,
    event_id: str,
    data: EventUpdateRequest,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> dict[str, Any] | JSONResponse:
    event = await repository.update(COLLECTION, event_id, data.changes())
    if event is None:
        return event_not_found(request, event_id)
    await invalidator.invalidate(ResourceType.EVENT, event_id)
    return event


@router.delete(
    "/{event_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete event",
    response_model=None,
)
async def delete_event(
    request: Request,
    event_id: str,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> Response:
    if not await repository.delete(COLLECTION, event_id):
        return event_not_found(request, event_id)
    await invalidator.invalidate(ResourceType.EVENT, event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{event_id}/registrations",
    status_code=status.HTTP_201_CREATED,
    summary="Register for event",
    response_model=None,
    dependencies=[Depends(track_action("event_registration"))],
)
async def register(
    request: Request,
    event_id: str,
    data: EventRegistrationRequest,
    background_tasks: BackgroundTasks,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
    analytics: AnalyticsProtocol = Depends(get_analytics),
) -> dict[str, Any] | JSONResponse:
    """Reserve seats at an event.

    POST /api/v1/events/{event_id}/registrations → 201 Created

    Records an `event_registration` business event after the response.

    Returns:
        Registration receipt on success (201 Created).
        JSONResponse with error when the event is unknown (404) or full (400).
    """
    event = await repository.get(COLLECTION, event_id)
    if event is None:
        return event_not_found(request, event_id)

    registered = event.get("registered", 0) + data.seats
    if registered > event["capacity"]:
        return ErrorResponseBuilder.from_domain_error(
            ValidationError(
                code=ErrorCode.VALIDATION_FAILED,
                message="Not enough seats left",
                field="seats",
            ),
            request,
        )

    await repository.update(COLLECTION, event_id, {"registered": registered})
    await invalidator.invalidate(ResourceType.EVENT, event_id)

    if settings.analytics_enabled:
        background_tasks.add_task(
            analytics.track_business_event,
            BusinessEvent(
                event="event_registration",
                properties={"event_id": event_id, "seats": data.seats},
            ),
        )
    return {
        "event_id": event_id,
        "attendee_name": data.attendee_name,
        "seats": data.seats,
    }
