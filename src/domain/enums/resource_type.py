"""Cached resource types.

Mutation endpoints name the resource they changed; the cache invalidator
maps each type to the cache namespaces that may now hold stale reads.
"""

from enum import Enum


class ResourceType(str, Enum):
    """Resource types whose reads are served from the response cache."""

    BOOK = "book"
    EVENT = "event"
    USER = "user"
    AUTHOR = "author"
    CATEGORY = "category"
