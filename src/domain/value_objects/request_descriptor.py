"""Request descriptor value object.

Framework-neutral view of an incoming request: everything the rate limiter,
response cache and analytics pipeline need to know, nothing more.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True, kw_only=True)
class RequestDescriptor:
    """Minimal request view consumed by the request-shaping layer.

    Attributes:
        method: Upper-case HTTP method.
        path: URL path without query string.
        query: Query parameters; repeated parameters hold a list.
        client_address: Resolved client network address.
        principal_id: Authenticated principal id, when known.
        session_id: Client-supplied session id (X-Session-Id), when present.
        user_agent: User-Agent header, when present.
        referrer: Referer header, when present.
    """

    method: str
    path: str
    query: dict[str, str | list[str]] = field(default_factory=dict)
    client_address: str = "unknown"
    principal_id: str | None = None
    session_id: str | None = None
    user_agent: str | None = None
    referrer: str | None = None

    @property
    def is_read(self) -> bool:
        """Whether the request is a cacheable read (GET or HEAD)."""
        return self.method in ("GET", "HEAD")
