"""Admin access dependency.

Admin routes (analytics reports, rate limit resets) are guarded by a shared
token sent in the X-Admin-Token header and compared in constant time. When
settings.admin_api_token is unset every admin request is rejected.

Usage:
    @router.get("/overview", dependencies=[Depends(require_admin_token)])
    async def overview(...):
        ...
"""

import secrets

from fastapi import Header, HTTPException, status

from src.core.config import settings

ADMIN_TOKEN_HEADER = "X-Admin-Token"


async def require_admin_token(
    x_admin_token: str | None = Header(default=None, alias=ADMIN_TOKEN_HEADER),
) -> None:
    """Reject the request unless it carries the configured admin token.

    Raises:
        HTTPException 403: Token missing, wrong, or admin access disabled.
    """
    expected = settings.admin_api_token
    if (
        not expected
        or x_admin_token is None
        or not secrets.compare_digest(x_admin_token.encode(), expected.encode())
    ):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin token required",
        )
