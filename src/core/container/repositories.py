"""Repository dependency factories.

The catalog, event and user routes persist through a DocumentRepository.
The in-memory implementation is app-scoped so writes are visible to later
requests in the same process.
"""

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from src.domain.protocols.document_repository import DocumentRepository


@lru_cache()
def get_document_repository() -> "DocumentRepository":
    """Get document repository singleton (app-scoped).

    Usage:
        # Presentation Layer (FastAPI Depends)
        repo: DocumentRepository = Depends(get_document_repository)
    """
    from src.infrastructure.persistence.in_memory_repository import (
        InMemoryRepository,
        seed_catalog,
    )

    repository = InMemoryRepository()
    seed_catalog(repository)
    return repository
