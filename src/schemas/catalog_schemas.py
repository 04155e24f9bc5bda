"""Catalog, event and user request schemas.

The document routes store whatever fields pass validation; these models
only bound the shape of incoming writes.

RESTful Endpoints:
    POST   /api/v1/books                          - Create book
    PATCH  /api/v1/books/{book_id}                - Update book
    POST   /api/v1/events                         - Create event
    PATCH  /api/v1/events/{event_id}              - Update event
    POST   /api/v1/events/{event_id}/registrations - Register for event
    PATCH  /api/v1/users/{user_id}                - Update profile
"""

from datetime import datetime
from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _ChangeSet(BaseModel):
    """Partial update: only fields the client sent are applied."""

    def changes(self) -> dict[str, Any]:
        return self.model_dump(mode="json", exclude_unset=True)


# =============================================================================
# Books
# =============================================================================


class BookCreateRequest(BaseModel):
    """Request schema for book creation.

    POST /api/v1/books
    Returns: 201 Created
    """

    title: str = Field(..., min_length=1, max_length=300, description="Book title")
    author_id: str = Field(..., min_length=1, description="Author document id")
    category: str = Field(..., min_length=1, description="Category document id")
    price: Decimal = Field(..., ge=0, description="Retail price")
    featured: bool = Field(False, description="Shown on the featured shelf")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "The Dispossessed",
                "author_id": "le-guin",
                "category": "fiction",
                "price": "15.99",
                "featured": False,
            }
        }
    )


class BookUpdateRequest(_ChangeSet):
    """Request schema for partial book updates.

    PATCH /api/v1/books/{book_id}
    """

    title: str | None = Field(None, min_length=1, max_length=300)
    author_id: str | None = None
    category: str | None = None
    price: Decimal | None = Field(None, ge=0)
    featured: bool | None = None


# =============================================================================
# Events
# =============================================================================


class EventCreateRequest(BaseModel):
    """Request schema for event creation.

    POST /api/v1/events
    Returns: 201 Created
    """

    title: str = Field(..., min_length=1, max_length=300, description="Event title")
    starts_at: datetime = Field(..., description="Start time (timezone-aware)")
    capacity: int = Field(..., ge=1, description="Seats available")


class EventUpdateRequest(_ChangeSet):
    """Request schema for partial event updates.

    PATCH /api/v1/events/{event_id}
    """

    title: str | None = Field(None, min_length=1, max_length=300)
    starts_at: datetime | None = None
    capacity: int | None = Field(None, ge=1)


class EventRegistrationRequest(BaseModel):
    """Request schema for an event registration.

    POST /api/v1/events/{event_id}/registrations
    Returns: 201 Created
    """

    attendee_name: str = Field(..., min_length=1, max_length=200)
    seats: int = Field(1, ge=1, le=10)


# =============================================================================
# Users
# =============================================================================


class UserProfileUpdateRequest(_ChangeSet):
    """Request schema for profile updates.

    PATCH /api/v1/users/{user_id}
    """

    name: str | None = Field(None, min_length=1, max_length=200)
    favorite_category: str | None = None
