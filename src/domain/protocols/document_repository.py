"""Document repository protocol.

The catalog, event and user routes persist through this port. The request
shaping layer never reads it; mutation routes call the cache invalidator
after a write through it succeeds.
"""

from __future__ import annotations

from typing import Any, Protocol


class DocumentRepository(Protocol):
    """Minimal document store keyed by collection and id."""

    async def list(self, collection: str, **filters: Any) -> list[dict[str, Any]]:
        """Return documents whose fields equal every filter value."""
        ...

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        """Return one document, or None when it does not exist."""
        ...

    async def create(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        """Store a new document and return it with its assigned id."""
        ...

    async def update(
        self, collection: str, document_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        """Apply changes to a document. Returns None when it does not exist."""
        ...

    async def delete(self, collection: str, document_id: str) -> bool:
        """Delete a document. Returns False when it did not exist."""
        ...
