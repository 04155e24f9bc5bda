"""Rate limit identity strategies.

Defines how a request is turned into the identity string a fixed-window
counter is keyed on. Each tier carries one of these tags; the presentation
layer maps the tag to a resolver function.

Usage:
    from src.domain.enums import IdentityStrategy

    rule = RateLimitRule(
        max_requests=5,
        window_ms=5 * 60 * 1000,
        identity=IdentityStrategy.IP,
    )
"""

from enum import Enum


class IdentityStrategy(str, Enum):
    """Identity strategies for rate limit rules.

    String Enum:
        Inherits from str for easy serialization and logging.

    Key Formats:
        IP: rate_limit:{tier}:ip:{address}:{window_start}
        USER: rate_limit:{tier}:user:{principal_id}:{window_start}
            (falls back to the IP form for anonymous requests)
    """

    IP = "ip"
    """Rate limit by client network address.

    Use for anonymous traffic and for endpoints where the caller's identity
    is exactly what is being guarded (login attempts, payment initiation).
    Honors X-Forwarded-For / X-Real-IP when the proxy is trusted.
    """

    USER = "user"
    """Rate limit by authenticated principal id.

    Falls back to the network address when the request carries no principal,
    so anonymous callers are still limited.
    """
