"""LoggerProtocol definition for structured logging.

This protocol standardizes structured logging across the request-shaping
layer while remaining backend-agnostic. Implementations MUST ensure logs are
structured (key-value context) and safe (no secrets).

Log Levels:
    - DEBUG: Cache hits/misses, counter values (dev only)
    - INFO: Startup, shutdown, admin resets
    - WARNING: Fail-open events (store unreachable, write skipped)
    - ERROR: Operation failed, request continues
    - CRITICAL: System-wide failure, immediate attention

Usage:
    from src.core.container import get_logger

    logger = get_logger()
    logger.warning("rate_limit_fail_open", tier="lax", error_code="cache_unavailable")

    request_logger = logger.bind(path=request.url.path)
    request_logger.debug("cache_hit", key=key)
"""

from __future__ import annotations

from typing import Any, Protocol


class LoggerProtocol(Protocol):
    """Protocol for structured logging adapters.

    All logging calls MUST be structured: message + key-value context.
    """

    def debug(self, message: str, /, **context: Any) -> None:
        """Log a debug-level message."""
        ...

    def info(self, message: str, /, **context: Any) -> None:
        """Log an info-level message."""
        ...

    def warning(self, message: str, /, **context: Any) -> None:
        """Log a warning-level message.

        Args:
            message: Event name (avoid f-strings; use context).
            **context: Structured key-value context fields.
        """
        ...

    def error(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log an error-level message with optional exception details.

        Args:
            message: Event name (avoid f-strings; use context).
            error: Optional exception instance; implementation may include
                error_type and error_message fields.
            **context: Structured key-value context fields.
        """
        ...

    def critical(
        self, message: str, /, *, error: Exception | None = None, **context: Any
    ) -> None:
        """Log a critical-level message for catastrophic failures."""
        ...

    def bind(self, **context: Any) -> "LoggerProtocol":
        """Return new logger with permanently bound context.

        Original logger instance remains unchanged (immutable pattern).

        Args:
            **context: Context to bind to all future logs.

        Returns:
            New logger instance with bound context.
        """
        ...
