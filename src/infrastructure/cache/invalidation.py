"""Explicit cache invalidation hooks.

Mutation routes call `CacheInvalidator.invalidate()` after their write
succeeds. There is no dependency tracking: each resource type lists the
namespaces that may hold its reads, and every new mutation path must call
the invalidator for its resource type.

Per resource type:
    - list namespaces: every entry dropped (SCAN + DEL over "{namespace}:*")
    - singletons: the one canonical entry dropped with DEL
    - detail namespaces: every entry of the changed id dropped

Usage:
    from src.core.container import get_cache_invalidator

    invalidator = get_cache_invalidator()
    await invalidator.invalidate(ResourceType.BOOK, book_id)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from string import Formatter
from typing import TYPE_CHECKING

from src.core.result import Failure, Success
from src.domain.enums import ResourceType
from src.infrastructure.cache.cache_keys import CacheKeys
from src.infrastructure.cache.response_cache import CacheNamespace

if TYPE_CHECKING:
    from src.domain.protocols.cache_protocol import CacheProtocol
    from src.domain.protocols.logger_protocol import LoggerProtocol


@dataclass(frozen=True, slots=True, kw_only=True)
class InvalidationPlan:
    """Cache entries that may hold stale reads of one resource type.

    Attributes:
        list_namespaces: Namespaces dropped wholesale on any change.
        singletons: (namespace, path) pairs of single canonical entries.
        detail_namespaces: Namespace templates filled with the resource id.
    """

    list_namespaces: tuple[str, ...] = ()
    singletons: tuple[tuple[str, str], ...] = ()
    detail_namespaces: tuple[str, ...] = field(default=())


def fill_namespace(template: str, resource_id: str) -> str:
    """Substitute every placeholder of a namespace template with an id.

    Example:
        fill_namespace("books:detail:{book_id}", "42")  # "books:detail:42"
    """
    fields = {name for _, name, _, _ in Formatter().parse(template) if name}
    return template.format(**{name: resource_id for name in fields})


def glob_escape(value: str) -> str:
    """Escape Redis glob metacharacters so a value only matches itself.

    Example:
        glob_escape("a[1]")  # "a\\[1\\]"
    """
    return re.sub(r"([\\*?\[\]])", r"\\\1", value)


def default_invalidation_plans(api_prefix: str) -> dict[ResourceType, InvalidationPlan]:
    """Invalidation plans for the cached v1 read routes.

    Args:
        api_prefix: Versioned API prefix (e.g. "/api/v1"), used to build the
            canonical keys of singleton routes.
    """
    return {
        ResourceType.BOOK: InvalidationPlan(
            list_namespaces=(CacheNamespace.BOOK_LIST,),
            singletons=((CacheNamespace.BOOK_FEATURED, f"{api_prefix}/books/featured"),),
            detail_namespaces=(CacheNamespace.BOOK_DETAIL,),
        ),
        ResourceType.EVENT: InvalidationPlan(
            list_namespaces=(CacheNamespace.EVENT_LIST,),
            singletons=((CacheNamespace.EVENT_UPCOMING, f"{api_prefix}/events/upcoming"),),
            detail_namespaces=(CacheNamespace.EVENT_DETAIL,),
        ),
        ResourceType.USER: InvalidationPlan(
            detail_namespaces=(CacheNamespace.USER_PROFILE,),
        ),
        ResourceType.CATEGORY: InvalidationPlan(
            list_namespaces=(CacheNamespace.CATEGORY_LIST,),
        ),
        ResourceType.AUTHOR: InvalidationPlan(
            list_namespaces=(CacheNamespace.AUTHOR_LIST,),
        ),
    }


class CacheInvalidator:
    """Drops cached reads after a write.

    Store failures are logged and swallowed: a failed invalidation leaves
    entries to expire by TTL, it never fails the mutation that triggered it.

    Args:
        cache: Keyed store.
        logger: Structured logger.
        plans: Invalidation plan per resource type.
        keys: Key builder (defaults to the standard prefixes).
    """

    def __init__(
        self,
        *,
        cache: CacheProtocol,
        logger: LoggerProtocol,
        plans: dict[ResourceType, InvalidationPlan],
        keys: CacheKeys | None = None,
    ) -> None:
        self._cache = cache
        self._logger = logger
        self._plans = plans
        self._keys = keys or CacheKeys()

    async def invalidate(
        self,
        resource_type: ResourceType,
        resource_id: str | None = None,
    ) -> int:
        """Drop every cached read that may include the changed resource.

        Args:
            resource_type: Type of the resource that was written.
            resource_id: Id of the written resource. Detail entries are only
                dropped when given (creates have no cached detail yet).

        Returns:
            int: Number of keys removed. Zero matches is success.
        """
        plan = self._plans.get(resource_type)
        if plan is None:
            return 0

        removed = 0
        for namespace in plan.list_namespaces:
            removed += await self._delete_pattern(f"{glob_escape(namespace)}:*", resource_type)

        for namespace, path in plan.singletons:
            removed += await self._delete(self._keys.response(namespace, path, {}), resource_type)

        if resource_id is not None:
            for template in plan.detail_namespaces:
                namespace = fill_namespace(template, resource_id)
                pattern = f"{glob_escape(namespace)}:*"
                removed += await self._delete_pattern(pattern, resource_type)

        self._logger.debug(
            "cache_invalidated",
            resource_type=resource_type.value,
            resource_id=resource_id,
            keys_removed=removed,
        )
        return removed

    async def _delete_pattern(self, pattern: str, resource_type: ResourceType) -> int:
        result = await self._cache.delete_pattern(pattern)
        match result:
            case Success(value=count):
                return count
            case Failure(error=error):
                self._log_failure(resource_type, pattern, error)
                return 0
            case _:
                # Unreachable but needed for type checker
                return 0

    async def _delete(self, key: str, resource_type: ResourceType) -> int:
        result = await self._cache.delete(key)
        match result:
            case Success(value=existed):
                return 1 if existed else 0
            case Failure(error=error):
                self._log_failure(resource_type, key, error)
                return 0
            case _:
                # Unreachable but needed for type checker
                return 0

    def _log_failure(self, resource_type: ResourceType, target: str, error: object) -> None:
        self._logger.warning(
            "cache_invalidation_failed",
            resource_type=resource_type.value,
            target=target,
            error_message=str(error),
        )
