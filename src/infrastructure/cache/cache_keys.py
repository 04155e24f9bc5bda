"""Cache key construction utilities.

This module provides centralized key construction for every record kept in
the shared store, so namespaces never collide:

    rate_limit:{tier}:{ip|user}:{value}:{window_start}
    {namespace}:{path}:{canonical_query_json}
    analytics:...

Usage:
    from src.infrastructure.cache.cache_keys import CacheKeys

    keys = CacheKeys()
    key = keys.rate_limit("lax:ip:10.0.0.7", 1_700_000_100_000)
    page_key = keys.page_views(date(2024, 3, 1))
"""

import json
from dataclasses import dataclass
from datetime import date
from typing import Mapping


def canonical_query(query: Mapping[str, str | list[str]]) -> str:
    """Serialize query parameters to a stable JSON string.

    Keys are sorted so that `?a=1&b=2` and `?b=2&a=1` share one entry.
    Repeated parameters keep their order (`?tag=x&tag=y` stays a list).

    Args:
        query: Query parameters; repeated parameters hold a list.

    Returns:
        Compact JSON object, "{}" when there are no parameters.
    """
    return json.dumps(dict(query), sort_keys=True, separators=(",", ":"))


@dataclass(frozen=True)
class CacheKeys:
    """Centralized cache key construction utilities.

    Attributes:
        rate_limit_prefix: Prefix of fixed-window counters.
        analytics_prefix: Prefix of analytics counters and snapshots.

    Example:
        keys = CacheKeys()
        keys.response("books:list", "/api/v1/books", {"page": "2"})
        # 'books:list:/api/v1/books:{"page":"2"}'
    """

    rate_limit_prefix: str = "rate_limit"
    analytics_prefix: str = "analytics"

    # Rate limit

    def rate_limit(self, identity: str, window_start: int) -> str:
        """Fixed-window counter key.

        Pattern: rate_limit:{identity}:{window_start}

        Args:
            identity: Tier-prefixed identity ("auth:ip:10.0.0.7").
            window_start: Window start in epoch milliseconds.

        Returns:
            Cache key string.
        """
        return f"{self.rate_limit_prefix}:{identity}:{window_start}"

    # Response cache

    def response(
        self, namespace: str, path: str, query: Mapping[str, str | list[str]]
    ) -> str:
        """Cached response body key.

        Pattern: {namespace}:{path}:{canonical_query_json}
        """
        return f"{namespace}:{path}:{canonical_query(query)}"

    # Analytics counters (UTC dates, ISO format)

    def page_views(self, day: date) -> str:
        """Daily page view total. Pattern: analytics:pageviews:{date}"""
        return f"{self.analytics_prefix}:pageviews:{day.isoformat()}"

    def page_views_hourly(self, day: date, hour: int) -> str:
        """Hourly page view total. Pattern: analytics:pageviews:{date}:{hour}"""
        return f"{self.analytics_prefix}:pageviews:{day.isoformat()}:{hour}"

    def pages(self, day: date) -> str:
        """Per-page daily views, one sorted set per day.

        Pattern: analytics:pages:{date} (member: route template, score: views)
        """
        return f"{self.analytics_prefix}:pages:{day.isoformat()}"

    def actions(self, day: date) -> str:
        """Daily user action total. Pattern: analytics:actions:{date}"""
        return f"{self.analytics_prefix}:actions:{day.isoformat()}"

    def action(self, action: str, day: date) -> str:
        """Per-action daily count. Pattern: analytics:actions:{action}:{date}"""
        return f"{self.analytics_prefix}:actions:{action}:{day.isoformat()}"

    def user_actions(self, user_id: str, day: date) -> str:
        """Per-user daily action count.

        Pattern: analytics:users:{user_id}:actions:{date}
        """
        return f"{self.analytics_prefix}:users:{user_id}:actions:{day.isoformat()}"

    def events(self, day: date) -> str:
        """Daily business event total. Pattern: analytics:events:{date}"""
        return f"{self.analytics_prefix}:events:{day.isoformat()}"

    def event(self, event: str, day: date) -> str:
        """Per-event daily count. Pattern: analytics:events:{event}:{date}"""
        return f"{self.analytics_prefix}:events:{event}:{day.isoformat()}"

    # Analytics snapshots

    def recent_page_view(self, ts_ms: int, nonce: str) -> str:
        """Recent page view snapshot (short TTL)."""
        return f"{self.analytics_prefix}:recent:pageview:{ts_ms}:{nonce}"

    def recent_action(self, ts_ms: int, nonce: str) -> str:
        """Recent user action snapshot (short TTL)."""
        return f"{self.analytics_prefix}:recent:action:{ts_ms}:{nonce}"

    def recent_pattern(self) -> str:
        """Glob over every recent snapshot."""
        return f"{self.analytics_prefix}:recent:*"

    def event_snapshot(self, event: str, ts_ms: int, nonce: str) -> str:
        """Business event payload. Pattern: analytics:event:{event}:{ts_ms}:{nonce}"""
        return f"{self.analytics_prefix}:event:{event}:{ts_ms}:{nonce}"

    def overview(self, start: date, end: date) -> str:
        """Cached analytics overview report for a date range."""
        return f"{self.analytics_prefix}:overview:{start.isoformat()}:{end.isoformat()}"

    def namespace_from_key(self, key: str) -> str:
        """Extract the namespace segment from a key for logging.

        Example:
            keys.namespace_from_key("rate_limit:lax:ip:1.2.3.4:0")  # "rate_limit"
            keys.namespace_from_key("books:list:/api/v1/books:{}")  # "books"
        """
        return key.split(":", 1)[0] if key else "unknown"
