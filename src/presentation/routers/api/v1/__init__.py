"""API v1 routers.

Resources:
    /api/v1/books                  - Book catalog (cached reads)
    /api/v1/events                 - Store events and registrations
    /api/v1/users                  - User profiles
    /api/v1/categories             - Categories (reference data)
    /api/v1/authors                - Authors (reference data)

Admin Resources:
    /api/v1/analytics/overview     - Aggregated analytics report
    /api/v1/analytics/realtime     - Recent activity
    /api/v1/admin/rate-limits      - Rate limit counter resets
"""

from fastapi import APIRouter

from src.core.config import settings
from src.presentation.routers.api.v1 import (
    admin,
    analytics,
    books,
    catalog,
    events,
    users,
)

v1_router = APIRouter(prefix=settings.api_v1_prefix)
v1_router.include_router(books.router)
v1_router.include_router(events.router)
v1_router.include_router(users.router)
v1_router.include_router(catalog.router)
v1_router.include_router(analytics.router)
v1_router.include_router(admin.router)

__all__ = [
    "v1_router",
]
