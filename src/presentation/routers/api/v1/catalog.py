"""Reference data handlers (categories and authors).

Near-static lists served from the response cache for two hours.

Handlers:
    list_categories - GET /categories
    list_authors    - GET /authors
"""

from typing import Any

from fastapi import APIRouter, Depends, Request

from src.core.container import get_document_repository
from src.domain.protocols import DocumentRepository
from src.infrastructure.cache.response_cache import CacheNamespace, CacheTTL
from src.presentation.routers.api.middleware.response_cache import cached_response

router = APIRouter(tags=["Catalog"])


@router.get("/categories", summary="List categories")
@cached_response(CacheTTL.REFERENCE, CacheNamespace.CATEGORY_LIST)
async def list_categories(
    request: Request,
    repository: DocumentRepository = Depends(get_document_repository),
) -> list[dict[str, Any]]:
    return await repository.list("categories")


@router.get("/authors", summary="List authors")
@cached_response(CacheTTL.REFERENCE, CacheNamespace.AUTHOR_LIST)
async def list_authors(
    request: Request,
    repository: DocumentRepository = Depends(get_document_repository),
) -> list[dict[str, Any]]:
    return await repository.list("authors")
