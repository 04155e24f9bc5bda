"""Rate limit tier registry and route bindings.

Two-Tier Configuration Pattern:
    Tier 1 - Tier Definition (RATE_LIMIT_TIERS):
        The actual limits for each named tier.
        Example: "AUTH = 5 failed attempts per 5 minutes"

        To change: Update the RateLimitRule below
        Effect: Changes limits for ALL routes bound to that tier

    Tier 2 - Route Binding (TIER_BINDINGS):
        Assigns tiers to route prefixes, optionally per method.
        Example: "/api/v1/sessions uses AUTH"

        To change: Add or edit a TierBinding
        Effect: Changes which tiers guard ONE route prefix

Bindings are listed general -> specific. Every matching binding applies
(tiers stack): a request under /api/v1/sessions is counted against LAX and
against AUTH, and the first rejection wins.

Usage:
    from src.infrastructure.rate_limit.tiers import get_rules_for_path

    rules = get_rules_for_path("/api/v1/sessions", "POST")
    # [LAX rule, AUTH rule]
"""

from dataclasses import dataclass

from src.domain.enums import IdentityStrategy, RateLimitTier
from src.domain.value_objects.rate_limit_rule import RateLimitRule

MINUTE_MS = 60 * 1000

RATE_LIMIT_TIERS: dict[RateLimitTier, RateLimitRule] = {
    RateLimitTier.LAX: RateLimitRule(
        tier=RateLimitTier.LAX,
        max_requests=200,
        window_ms=15 * MINUTE_MS,
    ),
    RateLimitTier.MODERATE: RateLimitRule(
        tier=RateLimitTier.MODERATE,
        max_requests=100,
        window_ms=15 * MINUTE_MS,
    ),
    RateLimitTier.STRICT: RateLimitRule(
        tier=RateLimitTier.STRICT,
        max_requests=50,
        window_ms=15 * MINUTE_MS,
    ),
    RateLimitTier.AUTH: RateLimitRule(
        tier=RateLimitTier.AUTH,
        max_requests=5,
        window_ms=5 * MINUTE_MS,
        skip_successful_requests=True,
    ),
    RateLimitTier.PAYMENT: RateLimitRule(
        tier=RateLimitTier.PAYMENT,
        max_requests=10,
        window_ms=60 * MINUTE_MS,
    ),
    RateLimitTier.USER: RateLimitRule(
        tier=RateLimitTier.USER,
        max_requests=300,
        window_ms=15 * MINUTE_MS,
        identity=IdentityStrategy.USER,
    ),
}


@dataclass(frozen=True, slots=True, kw_only=True)
class TierBinding:
    """Route prefix guarded by a tier.

    Attributes:
        prefix: Path prefix; matches the prefix itself and anything below it.
        tier: Tier applied to matching requests.
        methods: Upper-case methods the binding applies to (None = all).
    """

    prefix: str
    tier: RateLimitTier
    methods: frozenset[str] | None = None

    def matches(self, path: str, method: str) -> bool:
        """Check whether a request falls under this binding.

        "/api/v1/books" matches "/api/v1/books" and "/api/v1/books/42" but
        not "/api/v1/bookshelf".
        """
        if self.methods is not None and method.upper() not in self.methods:
            return False
        prefix = self.prefix.rstrip("/")
        return path == prefix or path.startswith(prefix + "/")


TIER_BINDINGS: tuple[TierBinding, ...] = (
    TierBinding(prefix="/api", tier=RateLimitTier.LAX),
    TierBinding(prefix="/api/v1/sessions", tier=RateLimitTier.AUTH, methods=frozenset({"POST"})),
    TierBinding(prefix="/api/v1/payments", tier=RateLimitTier.PAYMENT, methods=frozenset({"POST"})),
    TierBinding(prefix="/api/v1/analytics", tier=RateLimitTier.MODERATE),
    TierBinding(prefix="/api/v1/admin", tier=RateLimitTier.STRICT),
    TierBinding(prefix="/api/v1/users", tier=RateLimitTier.USER),
)


def get_rules_for_path(
    path: str,
    method: str,
    *,
    bindings: tuple[TierBinding, ...] = TIER_BINDINGS,
    tiers: dict[RateLimitTier, RateLimitRule] = RATE_LIMIT_TIERS,
) -> list[RateLimitRule]:
    """Collect the rules guarding a request, general -> specific.

    Args:
        path: Request path (no query string).
        method: HTTP method.
        bindings: Route bindings to evaluate.
        tiers: Tier definitions to resolve bindings against.

    Returns:
        Enabled rules of every matching binding, in binding order.
        Empty when no binding matches.

    Example:
        >>> [r.tier for r in get_rules_for_path("/api/v1/admin/x", "DELETE")]
        [<RateLimitTier.LAX: 'lax'>, <RateLimitTier.STRICT: 'strict'>]
    """
    rules: list[RateLimitRule] = []
    for binding in bindings:
        if not binding.matches(path, method):
            continue
        rule = tiers[binding.tier]
        if rule.enabled:
            rules.append(rule)
    return rules
