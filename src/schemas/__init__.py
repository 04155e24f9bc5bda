"""Request/response schemas for API endpoints.

All Pydantic models for HTTP request validation and response serialization.
Schemas are kept separate from domain value objects (HTTP-layer concerns only).

Usage:
    from src.schemas import BookCreateRequest, AnalyticsReportResponse
"""

from src.schemas.analytics_schemas import (
    AnalyticsReportResponse,
    RateLimitResetResponse,
    RealTimeAnalyticsResponse,
)
from src.schemas.catalog_schemas import (
    BookCreateRequest,
    BookUpdateRequest,
    EventCreateRequest,
    EventRegistrationRequest,
    EventUpdateRequest,
    UserProfileUpdateRequest,
)

__all__ = [
    # Catalog
    "BookCreateRequest",
    "BookUpdateRequest",
    "EventCreateRequest",
    "EventUpdateRequest",
    "EventRegistrationRequest",
    "UserProfileUpdateRequest",
    # Analytics / admin
    "AnalyticsReportResponse",
    "RealTimeAnalyticsResponse",
    "RateLimitResetResponse",
]
