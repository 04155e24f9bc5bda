"""Error response builder for RFC 7807 Problem Details.

Builds RFC 7807 compliant error responses from domain errors and rate limit
rejections.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 7807 responses
"""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from src.core.config import settings
from src.core.enums import ErrorCode
from src.core.errors import DomainError
from src.domain.value_objects.rate_limit_rule import RateLimitResult
from src.presentation.routers.api.v1.errors.problem_details import (
    ErrorDetail,
    ProblemDetails,
)

_ERROR_STATUS: dict[ErrorCode, int] = {
    ErrorCode.INVALID_DATE_RANGE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorCode.RESOURCE_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorCode.RATE_LIMIT_EXCEEDED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCode.RATE_LIMIT_RESET_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.CACHE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.ANALYTICS_QUERY_FAILED: status.HTTP_503_SERVICE_UNAVAILABLE,
}

_ERROR_TITLE: dict[ErrorCode, str] = {
    ErrorCode.INVALID_DATE_RANGE: "Invalid Date Range",
    ErrorCode.VALIDATION_FAILED: "Validation Failed",
    ErrorCode.RESOURCE_NOT_FOUND: "Resource Not Found",
    ErrorCode.PERMISSION_DENIED: "Access Denied",
    ErrorCode.RATE_LIMIT_EXCEEDED: "Rate Limit Exceeded",
    ErrorCode.RATE_LIMIT_RESET_FAILED: "Rate Limit Reset Failed",
    ErrorCode.CACHE_UNAVAILABLE: "Cache Unavailable",
    ErrorCode.ANALYTICS_QUERY_FAILED: "Analytics Unavailable",
}


class ErrorResponseBuilder:
    """Build RFC 7807 Problem Details error responses.

    Example:
        >>> error = AnalyticsError(
        ...     code=ErrorCode.INVALID_DATE_RANGE,
        ...     message="start_date must not be after end_date",
        ... )
        >>> response = ErrorResponseBuilder.from_domain_error(error, request)
        >>> # Returns 400 with ProblemDetails JSON
    """

    @staticmethod
    def from_domain_error(error: DomainError, request: Request) -> JSONResponse:
        """Convert a DomainError to an RFC 7807 JSON response.

        Args:
            error: Domain error carried in a Failure.
            request: FastAPI Request object (for instance URL).

        Returns:
            JSONResponse with RFC 7807 ProblemDetails content.
        """
        status_code = _ERROR_STATUS.get(error.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/{error.code.value}",
            title=_ERROR_TITLE.get(error.code, "Internal Server Error"),
            status=status_code,
            detail=error.message,
            instance=str(request.url.path),
        )

        field = getattr(error, "field", None)
        if field:
            problem.errors = [
                ErrorDetail(field=field, code=error.code.value, message=error.message)
            ]

        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
        )

    @staticmethod
    def rate_limited(
        request: Request,
        result: RateLimitResult,
        headers: dict[str, str],
    ) -> JSONResponse:
        """Build the HTTP 429 response for a rejected request.

        Args:
            request: Original request.
            result: Rejecting check result (retry_after_seconds source).
            headers: X-RateLimit-* headers of the rejecting tier.

        Returns:
            JSONResponse with 429 status, Retry-After and rate limit headers.
        """
        retry_after = result.retry_after_seconds
        problem = ProblemDetails(
            type=f"{settings.api_base_url}/errors/rate-limit-exceeded",
            title="Rate Limit Exceeded",
            status=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=f"Too many requests. Please try again in {retry_after} seconds.",
            instance=str(request.url.path),
            retry_after=retry_after,
        )
        return JSONResponse(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            content=problem.model_dump(exclude_none=True),
            headers={**headers, "Retry-After": str(retry_after)},
        )
