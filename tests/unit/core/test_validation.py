"""Tests for validation utilities and HTTP error translation."""

from unittest.mock import MagicMock

import pytest
from googleapiclient.errors import HttpError

from core.errors import (
    APIError,
    AuthenticationError,
    PermissionDeniedError,
    RateLimitError,
    ResourceNotFoundError,
    TableConstructionError,
    ValidationError,
)
from core.utils import (
    format_api_error,
    handle_http_errors,
    validate_choice,
    validate_non_empty_string,
    validate_positive_int,
)


def _http_error(status: int, reason: str = "error") -> HttpError:
    resp = MagicMock()
    resp.status = status
    resp.reason = reason
    return HttpError(resp, b'{"error": {"message": "boom"}}')


class TestValidatePositiveInt:
    """Test positive integer validation."""

    def test_valid_positive_int(self):
        assert validate_positive_int(10, "count") == 10

    def test_zero_raises_error(self):
        with pytest.raises(ValidationError):
            validate_positive_int(0, "count")

    def test_negative_raises_error(self):
        with pytest.raises(ValidationError):
            validate_positive_int(-5, "count")

    def test_bool_is_rejected(self):
        with pytest.raises(ValidationError):
            validate_positive_int(True, "count")

    def test_exceeds_max_raises_error(self):
        with pytest.raises(ValidationError, match="cannot exceed 100"):
            validate_positive_int(101, "count", max_value=100)


class TestValidateChoice:
    """Test choice validation."""

    def test_normalizes_case_and_whitespace(self):
        assert validate_choice("  Multiple ", "output_format", ("single", "multiple")) == "multiple"

    def test_unknown_choice_raises_error(self):
        with pytest.raises(ValidationError, match="output_format must be one of"):
            validate_choice("double", "output_format", ("single", "multiple"))

    def test_non_string_raises_error(self):
        with pytest.raises(ValidationError):
            validate_choice(3, "output_format", ("single", "multiple"))


class TestValidateNonEmptyString:
    """Test required string validation."""

    def test_returns_value_unchanged(self):
        assert validate_non_empty_string(" doc ", "document_id") == " doc "

    def test_blank_raises_error(self):
        with pytest.raises(ValidationError, match="document_id is required"):
            validate_non_empty_string("   ", "document_id")


class TestFormatApiError:
    """Test API error message formatting."""

    def test_includes_status_and_hint(self):
        message = format_api_error("insert_markdown", 404, "not found")
        assert "insert_markdown" in message
        assert "Status: 404" in message
        assert "may not exist" in message

    def test_unknown_status(self):
        message = format_api_error("insert_markdown", None, "oops")
        assert "Status: Unknown" in message


class TestHandleHttpErrors:
    """Test the async HttpError translation decorator."""

    @pytest.mark.asyncio
    async def test_returns_result_on_success(self):
        @handle_http_errors("op")
        async def ok():
            return "done"

        assert await ok() == "done"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "status,error_cls",
        [
            (401, AuthenticationError),
            (403, PermissionDeniedError),
            (404, ResourceNotFoundError),
            (429, RateLimitError),
            (500, APIError),
        ],
    )
    async def test_http_error_maps_to_status_error(self, status, error_cls):
        @handle_http_errors("insert_markdown")
        async def failing():
            raise _http_error(status)

        with pytest.raises(error_cls) as exc_info:
            await failing()

        assert exc_info.value.status_code == status
        assert "insert_markdown" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_forbidden_carries_scope_hint(self):
        @handle_http_errors("create_doc_from_markdown")
        async def failing():
            raise _http_error(403)

        with pytest.raises(PermissionDeniedError, match="auth/documents"):
            await failing()

    @pytest.mark.asyncio
    async def test_library_errors_pass_through(self):
        @handle_http_errors("op")
        async def failing():
            raise TableConstructionError("bad grid")

        with pytest.raises(TableConstructionError):
            await failing()

    @pytest.mark.asyncio
    async def test_unexpected_error_becomes_api_error(self):
        @handle_http_errors("op")
        async def failing():
            raise RuntimeError("kaboom")

        with pytest.raises(APIError, match="kaboom") as exc_info:
            await failing()

        assert exc_info.value.status_code is None
