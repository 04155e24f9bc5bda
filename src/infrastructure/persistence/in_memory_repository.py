"""In-memory document repository.

Implements DocumentRepository for the catalog, event and user routes.
Documents are plain dicts keyed by collection and id; copies are returned so
callers never mutate stored state.

Note: Does NOT inherit from DocumentRepository (uses structural typing).
"""

from __future__ import annotations

from copy import deepcopy
from typing import Any
from uuid import uuid4


class InMemoryRepository:
    """Process-local document store.

    Attributes:
        _collections: collection name -> document id -> document.
    """

    def __init__(self) -> None:
        self._collections: dict[str, dict[str, dict[str, Any]]] = {}

    async def list(self, collection: str, **filters: Any) -> list[dict[str, Any]]:
        """Return documents whose fields equal every filter, in insertion order."""
        documents = self._collections.get(collection, {}).values()
        return [
            deepcopy(document)
            for document in documents
            if all(document.get(field) == value for field, value in filters.items())
        ]

    async def get(self, collection: str, document_id: str) -> dict[str, Any] | None:
        document = self._collections.get(collection, {}).get(document_id)
        return deepcopy(document) if document is not None else None

    async def create(self, collection: str, document: dict[str, Any]) -> dict[str, Any]:
        """Store a document, assigning an id when it has none."""
        stored = deepcopy(document)
        stored.setdefault("id", uuid4().hex)
        self._collections.setdefault(collection, {})[stored["id"]] = stored
        return deepcopy(stored)

    async def update(
        self, collection: str, document_id: str, changes: dict[str, Any]
    ) -> dict[str, Any] | None:
        document = self._collections.get(collection, {}).get(document_id)
        if document is None:
            return None
        document.update({k: v for k, v in changes.items() if k != "id"})
        return deepcopy(document)

    async def delete(self, collection: str, document_id: str) -> bool:
        return self._collections.get(collection, {}).pop(document_id, None) is not None

    def insert(self, collection: str, document: dict[str, Any]) -> None:
        """Synchronously store a document with an explicit id (seeding)."""
        self._collections.setdefault(collection, {})[document["id"]] = deepcopy(document)


def seed_catalog(repository: InMemoryRepository) -> None:
    """Load a small catalog so the read routes have something to serve."""
    for category in (
        {"id": "fiction", "name": "Fiction"},
        {"id": "science", "name": "Science"},
        {"id": "history", "name": "History"},
    ):
        repository.insert("categories", category)

    for author in (
        {"id": "le-guin", "name": "Ursula K. Le Guin"},
        {"id": "sagan", "name": "Carl Sagan"},
        {"id": "beard", "name": "Mary Beard"},
    ):
        repository.insert("authors", author)

    for book in (
        {
            "id": "left-hand-of-darkness",
            "title": "The Left Hand of Darkness",
            "author_id": "le-guin",
            "category": "fiction",
            "price": "14.99",
            "featured": True,
        },
        {
            "id": "cosmos",
            "title": "Cosmos",
            "author_id": "sagan",
            "category": "science",
            "price": "18.50",
            "featured": True,
        },
        {
            "id": "spqr",
            "title": "SPQR",
            "author_id": "beard",
            "category": "history",
            "price": "21.00",
            "featured": False,
        },
    ):
        repository.insert("books", book)

    repository.insert(
        "events",
        {
            "id": "author-night",
            "title": "Author Night",
            "starts_at": "2030-05-01T18:00:00+00:00",
            "capacity": 40,
            "registered": 0,
        },
    )
    repository.insert(
        "users",
        {"id": "reader-1", "name": "Avid Reader", "favorite_category": "fiction"},
    )
