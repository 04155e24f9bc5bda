"""Rate limit infrastructure adapters.

This package provides infrastructure implementations for rate limiting,
following the hexagonal architecture pattern where infrastructure implements
domain ports.

Exports:
    FixedWindowAdapter: Fixed window adapter implementing RateLimitProtocol.
    RATE_LIMIT_TIERS: Tier name to rule mapping.
    TIER_BINDINGS: Route prefix to tier bindings.
    TierBinding: Route prefix binding.
    get_rules_for_path: Stacked rules guarding a request.
"""

from src.infrastructure.rate_limit.fixed_window_adapter import FixedWindowAdapter
from src.infrastructure.rate_limit.tiers import (
    RATE_LIMIT_TIERS,
    TIER_BINDINGS,
    TierBinding,
    get_rules_for_path,
)

__all__ = [
    "FixedWindowAdapter",
    "RATE_LIMIT_TIERS",
    "TIER_BINDINGS",
    "TierBinding",
    "get_rules_for_path",
]
