"""Persistence infrastructure.

Provides the in-memory DocumentRepository used by the catalog, event and
user routes.
"""

from src.infrastructure.persistence.in_memory_repository import (
    InMemoryRepository,
    seed_catalog,
)

__all__ = [
    "InMemoryRepository",
    "seed_catalog",
]
