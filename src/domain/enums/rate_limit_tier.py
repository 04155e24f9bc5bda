"""Rate limit tier names.

Each tier is one named fixed-window configuration (ceiling, window size,
identity strategy, success-skip flag). The configuration itself lives in the
tier registry (src/infrastructure/rate_limit/tiers.py); this enum is the
stable name used in keys, logs and admin routes.
"""

from enum import Enum


class RateLimitTier(str, Enum):
    """Named rate limit tiers.

    The tier value is part of every counter key so that stacked tiers with
    equal window sizes never share a counter.
    """

    LAX = "lax"
    """200 requests / 15 minutes. Default for general API traffic."""

    MODERATE = "moderate"
    """100 requests / 15 minutes. Administrative analytics routes."""

    STRICT = "strict"
    """50 requests / 15 minutes. Sensitive endpoints."""

    AUTH = "auth"
    """5 failed attempts / 5 minutes. Successful requests are not counted."""

    PAYMENT = "payment"
    """10 requests / 60 minutes. Payment initiation."""

    USER = "user"
    """300 requests / 15 minutes keyed on the authenticated principal."""
