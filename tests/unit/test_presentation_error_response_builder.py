"""Unit tests for ErrorResponseBuilder utility."""

import json
from unittest.mock import MagicMock

import pytest
from fastapi import status

from src.core.enums import ErrorCode
from src.core.errors import NotFoundError, ValidationError
from src.domain.errors import AnalyticsError, RateLimitError
from src.domain.value_objects.rate_limit_rule import RateLimitResult
from src.presentation.routers.api.v1.errors import ErrorResponseBuilder


def _request(path: str) -> MagicMock:
    request = MagicMock()
    request.url.path = path
    return request


@pytest.mark.unit
class TestFromDomainError:
    """Domain errors map to RFC 7807 bodies with the right status."""

    def test_invalid_date_range(self) -> None:
        error = AnalyticsError(
            code=ErrorCode.INVALID_DATE_RANGE,
            message="start_date must not be after end_date",
        )

        response = ErrorResponseBuilder.from_domain_error(
            error, _request("/api/v1/analytics/overview")
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        body = json.loads(bytes(response.body))
        assert body["title"] == "Invalid Date Range"
        assert body["detail"] == "start_date must not be after end_date"
        assert body["instance"] == "/api/v1/analytics/overview"
        assert body["type"].endswith("/errors/invalid_date_range")
        assert "errors" not in body

    def test_not_found(self) -> None:
        error = NotFoundError(
            code=ErrorCode.RESOURCE_NOT_FOUND,
            message="Book dune not found",
            resource_type="book",
            resource_id="dune",
        )

        response = ErrorResponseBuilder.from_domain_error(error, _request("/api/v1/books/dune"))

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_validation_error_carries_field(self) -> None:
        error = ValidationError(
            code=ErrorCode.VALIDATION_FAILED,
            message="Not enough seats left",
            field="seats",
        )

        response = ErrorResponseBuilder.from_domain_error(error, _request("/x"))

        body = json.loads(bytes(response.body))
        assert body["errors"] == [
            {"field": "seats", "code": "validation_failed", "message": "Not enough seats left"}
        ]

    def test_reset_failure_is_unavailable(self) -> None:
        error = RateLimitError(code=ErrorCode.RATE_LIMIT_RESET_FAILED, message="Failed")

        response = ErrorResponseBuilder.from_domain_error(error, _request("/x"))

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE


@pytest.mark.unit
class TestRateLimited:
    """429 responses."""

    def test_rate_limited_response(self) -> None:
        result = RateLimitResult(
            allowed=False,
            total_hits=6,
            limit=5,
            remaining=0,
            reset_at_ms=1_700_000_100_000,
            retry_after_seconds=42,
        )
        headers = {
            "X-RateLimit-Limit": "5",
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": "1700000100000",
        }

        response = ErrorResponseBuilder.rate_limited(
            _request("/api/v1/sessions"), result, headers
        )

        assert response.status_code == status.HTTP_429_TOO_MANY_REQUESTS
        assert response.headers["Retry-After"] == "42"
        assert response.headers["X-RateLimit-Limit"] == "5"
        body = json.loads(bytes(response.body))
        assert body["retry_after"] == 42
        assert body["status"] == 429
        assert body["title"] == "Rate Limit Exceeded"
