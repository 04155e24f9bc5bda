"""Analytics infrastructure adapters.

Exports:
    RedisAnalyticsAdapter: Counter pipeline implementing AnalyticsProtocol.
"""

from src.infrastructure.analytics.redis_analytics_adapter import RedisAnalyticsAdapter

__all__ = ["RedisAnalyticsAdapter"]
