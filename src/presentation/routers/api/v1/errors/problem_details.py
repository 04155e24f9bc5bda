"""RFC 7807 Problem Details for HTTP APIs.

This module implements RFC 7807 (Problem Details for HTTP APIs) using Pydantic
models for structured error responses.

RFC 7807: https://tools.ietf.org/html/rfc7807

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 7807 compliant error response schema
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Individual field-specific error.

    Used for validation errors where multiple fields may have errors.

    Attributes:
        field: Name of the field with error
        code: Machine-readable error code
        message: Human-readable error message
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 7807 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional list of field-specific errors (for validation failures)
        retry_after: Seconds until the client may retry (rate limit rejections)

    Examples:
        >>> problem = ProblemDetails(
        ...     type="http://localhost:8000/errors/rate-limit-exceeded",
        ...     title="Rate Limit Exceeded",
        ...     status=429,
        ...     detail="Too many requests. Please try again in 298 seconds.",
        ...     instance="/api/v1/sessions",
        ...     retry_after=298,
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["http://localhost:8000/errors/rate-limit-exceeded"],
    )
    title: str = Field(
        ...,
        description="Short, human-readable summary",
        examples=["Rate Limit Exceeded"],
    )
    status: int = Field(
        ...,
        description="HTTP status code",
        examples=[429],
    )
    detail: str = Field(
        ...,
        description="Human-readable explanation",
        examples=["Too many requests. Please try again in 298 seconds."],
    )
    instance: str = Field(
        ...,
        description="URI reference identifying this occurrence",
        examples=["/api/v1/sessions"],
    )
    errors: list[ErrorDetail] | None = Field(
        None,
        description="List of field-specific errors",
    )
    retry_after: int | None = Field(
        None,
        description="Seconds until retry is allowed",
    )
