"""Rate limit administration handlers.

Handlers:
    reset_rate_limit - DELETE /admin/rate-limits/{tier}/{identity}

Guarded by the STRICT tier (bound on the route prefix) and the admin token.
"""

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import JSONResponse

from src.core.container import get_rate_limit
from src.core.enums import ErrorCode
from src.core.errors import ValidationError
from src.core.result import Failure, Success
from src.domain.enums import RateLimitTier
from src.domain.protocols import RateLimitProtocol
from src.infrastructure.rate_limit.tiers import RATE_LIMIT_TIERS
from src.presentation.routers.api.middleware.admin_dependencies import (
    require_admin_token,
)
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder
from src.schemas.analytics_schemas import RateLimitResetResponse

router = APIRouter(
    prefix="/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin_token)],
)


@router.delete(
    "/rate-limits/{tier}/{identity}",
    summary="Reset a rate limit counter",
    response_model=None,
)
async def reset_rate_limit(
    request: Request,
    tier: str = Path(..., description="Tier name, e.g. auth"),
    identity: str = Path(..., description="Identity within the tier, e.g. ip:10.0.0.7"),
    rate_limit: RateLimitProtocol = Depends(get_rate_limit),
) -> RateLimitResetResponse | JSONResponse:
    """Delete the current window's counter for one identity.

    DELETE /api/v1/admin/rate-limits/{tier}/{identity} → 200 OK

    Returns:
        RateLimitResetResponse (reset=False when no counter existed).
        JSONResponse with 400 for an unknown tier, 503 when the store fails.
    """
    try:
        rule = RATE_LIMIT_TIERS[RateLimitTier(tier)]
    except ValueError:
        return ErrorResponseBuilder.from_domain_error(
            ValidationError(
                code=ErrorCode.VALIDATION_FAILED,
                message=f"Unknown rate limit tier: {tier}",
                field="tier",
            ),
            request,
        )

    result = await rate_limit.reset(f"{rule.tier.value}:{identity}", rule)
    match result:
        case Success(value=existed):
            return RateLimitResetResponse(tier=rule.tier.value, identity=identity, reset=existed)
        case Failure(error=error):
            return ErrorResponseBuilder.from_domain_error(error, request)
