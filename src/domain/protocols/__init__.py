"""Domain protocols (ports) package.

This package contains protocol definitions that the domain layer needs.
Infrastructure adapters implement these protocols without inheritance.

IMPORTANT: Re-exports are ONLY for protocols defined in this package.

Usage:
    from src.domain.protocols import CacheProtocol, RateLimitProtocol
"""

from src.domain.protocols.analytics_protocol import AnalyticsProtocol
from src.domain.protocols.cache_protocol import CacheProtocol
from src.domain.protocols.document_repository import DocumentRepository
from src.domain.protocols.logger_protocol import LoggerProtocol
from src.domain.protocols.rate_limit_protocol import RateLimitProtocol

__all__ = [
    "AnalyticsProtocol",
    "CacheProtocol",
    "DocumentRepository",
    "LoggerProtocol",
    "RateLimitProtocol",
]
