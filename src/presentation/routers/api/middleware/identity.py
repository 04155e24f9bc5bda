"""Request identity resolution.

Turns a Starlette request into the identity strings the rate limiter keys on
and into the framework-neutral RequestDescriptor. Identity strategies are a
function table keyed by IdentityStrategy, so each tier picks its resolver by
tag and new strategies are added without touching the middleware.

Identity format:
    {tier}:ip:{address}
    {tier}:user:{principal_id}
"""

import base64
import binascii
import json
from typing import Callable

from starlette.requests import Request

from src.domain.enums import IdentityStrategy
from src.domain.value_objects.rate_limit_rule import RateLimitRule
from src.domain.value_objects.request_descriptor import RequestDescriptor

IdentityResolver = Callable[[Request, bool], tuple[str, str]]


def get_client_ip(request: Request, trust_forwarded: bool = True) -> str:
    """Extract client IP address from request.

    Handles X-Forwarded-For from the reverse proxy, taking the first hop
    (the client; the rest are the proxy chain), then X-Real-IP, then the
    socket peer.

    Args:
        request: HTTP request.
        trust_forwarded: Honor proxy headers. Disable when the app is
            reachable without a proxy, since clients can forge them.

    Returns:
        Client IP address, "unknown" when none is available.
    """
    if trust_forwarded:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            first_hop = forwarded_for.split(",")[0].strip()
            if first_hop:
                return first_hop

        real_ip = request.headers.get("X-Real-IP")
        if real_ip and real_ip.strip():
            return real_ip.strip()

    if request.client:
        return request.client.host

    return "unknown"


def extract_principal_id(request: Request) -> str | None:
    """Authenticated principal id, when one is known.

    An auth layer may set request.state.principal_id. Otherwise the `sub`
    claim of a Bearer JWT is read without verification; this is only used
    to pick a rate limit bucket, full validation belongs to the auth layer.

    Args:
        request: HTTP request.

    Returns:
        Principal id if extractable, None otherwise.
    """
    principal = getattr(request.state, "principal_id", None)
    if principal:
        return str(principal)

    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        return None

    # Format: header.payload.signature
    parts = auth_header[7:].split(".")
    if len(parts) != 3:
        return None

    payload_b64 = parts[1] + "=" * (-len(parts[1]) % 4)
    try:
        payload = json.loads(base64.urlsafe_b64decode(payload_b64))
    except (binascii.Error, ValueError):
        # Undecodable token: fall back to the network address
        return None

    subject = payload.get("sub") if isinstance(payload, dict) else None
    return str(subject) if subject else None


def _resolve_ip(request: Request, trust_forwarded: bool) -> tuple[str, str]:
    return IdentityStrategy.IP.value, get_client_ip(request, trust_forwarded)


def _resolve_user(request: Request, trust_forwarded: bool) -> tuple[str, str]:
    principal = extract_principal_id(request)
    if principal:
        return IdentityStrategy.USER.value, principal
    return _resolve_ip(request, trust_forwarded)


IDENTITY_RESOLVERS: dict[IdentityStrategy, IdentityResolver] = {
    IdentityStrategy.IP: _resolve_ip,
    IdentityStrategy.USER: _resolve_user,
}


def resolve_identity(
    request: Request,
    rule: RateLimitRule,
    *,
    trust_forwarded: bool = True,
    resolvers: dict[IdentityStrategy, IdentityResolver] = IDENTITY_RESOLVERS,
) -> str:
    """Tier-prefixed identity for a rule.

    Example:
        resolve_identity(request, RATE_LIMIT_TIERS[RateLimitTier.USER])
        # "user:user:reader-1", or "user:ip:10.0.0.7" when anonymous
    """
    kind, value = resolvers[rule.identity](request, trust_forwarded)
    return f"{rule.tier.value}:{kind}:{value}"


def describe_request(request: Request, *, trust_forwarded: bool = True) -> RequestDescriptor:
    """Build the framework-neutral view of a request."""
    query: dict[str, str | list[str]] = {}
    for name in request.query_params.keys():
        values = request.query_params.getlist(name)
        query[name] = values[0] if len(values) == 1 else values

    return RequestDescriptor(
        method=request.method.upper(),
        path=request.url.path,
        query=query,
        client_address=get_client_ip(request, trust_forwarded),
        principal_id=extract_principal_id(request),
        session_id=request.headers.get("X-Session-Id"),
        user_agent=request.headers.get("User-Agent"),
        referrer=request.headers.get("Referer"),
    )
