"""Books resource handlers.

Read routes are cached per namespace; every write drops the cached reads
that may include the changed book.

Handlers:
    list_books      - GET    /books
    list_featured   - GET    /books/featured
    get_book        - GET    /books/{book_id}
    create_book     - POST   /books
    update_book     - PATCH  /books/{book_id}
    delete_book     - DELETE /books/{book_id}
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
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
from src.schemas.catalog_schemas import BookCreateRequest, BookUpdateRequest

COLLECTION = "books"

router = APIRouter(prefix="/books", tags=["Books"])


def book_not_found(request: Request, book_id: str) -> JSONResponse:
    return ErrorResponseBuilder.from_domain_error(
        NotFoundError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message=f"Book {book_id} not found",
            resource_type="book",
            resource_id=book_id,
        ),
        request,
    )


@router.get("", summary="List books")
@cached_response(CacheTTL.LIST, CacheNamespace.BOOK_LIST)
async def list_books(
    request: Request,
    category: str | None = None,
    repository: DocumentRepository = Depends(get_document_repository),
) -> list[dict[str, Any]]:
    """List books, optionally filtered by category.

    GET /api/v1/books?category=fiction
    """
    filters = {"category": category} if category else {}
    return await repository.list(COLLECTION, **filters)


@router.get("/featured", summary="List featured books")
@cached_response(CacheTTL.DETAIL, CacheNamespace.BOOK_FEATURED, vary_on_query=False)
async def list_featured(
    request: Request,
    repository: DocumentRepository = Depends(get_document_repository),
) -> list[dict[str, Any]]:
    return await repository.list(COLLECTION, featured=True)


@router.get("/{book_id}", summary="Get book", response_model=None)
@cached_response(CacheTTL.DETAIL, CacheNamespace.BOOK_DETAIL)
async def get_book(
    request: Request,
    book_id: str,
    repository: DocumentRepository = Depends(get_document_repository),
) -> dict[str, Any] | JSONResponse:
    """Get one book.

    GET /api/v1/books/{book_id} → 200 OK, 404 when unknown (never cached).
    """
    book = await repository.get(COLLECTION, book_id)
    if book is None:
        return book_not_found(request, book_id)
    return book


@router.post("", status_code=status.HTTP_201_CREATED, summary="Create book")
async def create_book(
    data: BookCreateRequest,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> dict[str, Any]:
    """Create a book, then drop cached book lists and the featured shelf.

    POST /api/v1/books → 201 Created
    """
    book = await repository.create(COLLECTION, data.model_dump(mode="json"))
    await invalidator.invalidate(ResourceType.BOOK, book["id"])
    return book


@router.patch("/{book_id}", summary="Update book", response_model=None)
async def update_book(
    request: Request,
    book_id: str,
    data: BookUpdateRequest,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> dict[str, Any] | JSONResponse:
    book = await repository.update(COLLECTION, book_id, data.changes())
    if book is None:
        return book_not_found(request, book_id)
    await invalidator.invalidate(ResourceType.BOOK, book_id)
    return book


@router.delete(
    "/{book_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete book",
    response_model=None,
)
async def delete_book(
    request: Request,
    book_id: str,
    repository: DocumentRepository = Depends(get_document_repository),
    invalidator: CacheInvalidator = Depends(get_cache_invalidator),
) -> Response:
    if not await repository.delete(COLLECTION, book_id):
        return book_not_found(request, book_id)
    await invalidator.invalidate(ResourceType.BOOK, book_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
