"""Users resource handlers.

Handlers:
    get_profile     - GET   /users/{user_id}
    update_profile  - PATCH /users/{user_id}
"""

from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from src.core.container import get_cache_invalidator, get_document_repository
from src.core.enums import ErrorCode
from src.core.errors import NotFoundError
from src.domain.enums import ResourceType
from src.domain.protocols import DocumentRepository
from src.infrastructure.cache.invalidation import CacheInvalidator
from src.infrastructure.cache.response_cache import CacheNamespace, CacheTTL
from src.presentation.routers.api.middleware.response_cache import cached_response
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.catalog_schemas import UserProfileUpdateRequest

COLLECTION = "users"

router = APIRouter(prefix="/users", tags=["Users"])


def user_not_found(request: Request, user_id: str) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(
        NotFoundError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"User {user_id} not found",
            resource_type="user",
            resource_id=user_id,
        ),
        request,
    )


@router.get("/{user_id}", summary="Get user profile", response_model=None)
@cached_response(CacheTTL.DETAIL, CacheNamespace.USER_PROFILE)
async def get_profile(
    request: Request,
    user_id: str,
    repository: DocumentRepository = Depends(get_document_repository),
) -> dict[str, Any] | JSONResponse:
    user = await repository.get(COLLECTION, user_id)
    if user is None:
        return user_not_found(request, user_id)
    return user


@router.patch("/{user_id}", summary="Update user profile", response_model=None)
async def update_profile(
    request: Request,
    user_id: str,
    data: UserProfileUpdateRequest,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> dict[str, Any] | JSONResponse:
    """Update a profile and drop its cached reads.

    PATCH /api/v1/users/{user_id} → 200 OK
    """
    user = await repository.update(COLLECTION, user_id, data.changes())
    if user is None:
        return user_not_found(request, user_id)
    await invalidator.invalidate(ResourceType.USER, user_id)
    return user
