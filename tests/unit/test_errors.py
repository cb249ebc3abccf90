"""Tests for error module."""

import time

import pytest

from luzia_python.errors import (
    DEFAULT_RETRY_AFTER_SECONDS,
    ErrorCode,
    LuziaError,
    classify_status,
    error_from_response,
    extract_error_message,
    is_luzia_error,
    is_retryable,
    is_retryable_status,
    parse_rate_limit_headers,
    parse_retry_after,
)
from luzia_python.types import RateLimitInfo


class TestLuziaError:
    """Tests for LuziaError."""

    def test_code_defaults_to_unknown(self) -> None:
        """Test that an unset code becomes unknown."""
        error = LuziaError("boom")
        assert error.code == ErrorCode.UNKNOWN
        assert error.message == "boom"
        assert str(error) == "boom"

    def test_code_from_string(self) -> None:
        """Test that string codes are coerced to ErrorCode."""
        error = LuziaError("nope", code="auth", status=401)
        assert error.code is ErrorCode.AUTH
        assert error.status == 401

    def test_invalid_code_rejected(self) -> None:
        """Test that an unknown code string raises ValueError."""
        with pytest.raises(ValueError):
            LuziaError("x", code="teapot")

    def test_cause_is_chained(self) -> None:
        """Test that the cause is kept and chained."""
        cause = ConnectionError("reset")
        error = LuziaError("Network error", code=ErrorCode.NETWORK, cause=cause)
        assert error.cause is cause
        assert error.__cause__ is cause

    def test_repr(self) -> None:
        """Test repr includes code and status."""
        error = LuziaError("Not found", code=ErrorCode.NOT_FOUND, status=404)
        assert repr(error) == "LuziaError('Not found', code=not_found, status=404)"

    def test_is_retryable_property(self) -> None:
        """Test the is_retryable convenience property."""
        assert LuziaError("x", code=ErrorCode.SERVER).is_retryable
        assert not LuziaError("x", code=ErrorCode.AUTH).is_retryable


class TestIsLuziaError:
    """Tests for is_luzia_error."""

    def test_detects_luzia_error(self) -> None:
        assert is_luzia_error(LuziaError("x"))

    def test_rejects_other_values(self) -> None:
        assert not is_luzia_error(ValueError("x"))
        assert not is_luzia_error("error")
        assert not is_luzia_error(None)


class TestIsRetryable:
    """Tests for retryability classification."""

    @pytest.mark.parametrize(
        "code",
        [ErrorCode.RATE_LIMIT, ErrorCode.NETWORK, ErrorCode.TIMEOUT, ErrorCode.SERVER],
    )
    def test_retryable_codes(self, code: ErrorCode) -> None:
        """Test retryable error codes."""
        assert is_retryable(LuziaError("x", code=code))

    @pytest.mark.parametrize(
        "code",
        [ErrorCode.AUTH, ErrorCode.NOT_FOUND, ErrorCode.VALIDATION, ErrorCode.UNKNOWN],
    )
    def test_non_retryable_codes(self, code: ErrorCode) -> None:
        """Test non-retryable error codes."""
        assert not is_retryable(LuziaError("x", code=code))

    @pytest.mark.parametrize("status", [408, 429, 500, 502, 599])
    def test_unknown_code_falls_back_to_status(self, status: int) -> None:
        """Test that unknown errors with a retryable status are retryable."""
        assert is_retryable(LuziaError("x", status=status))

    @pytest.mark.parametrize("status", [400, 403, 409, 418])
    def test_unknown_code_with_client_status(self, status: int) -> None:
        assert not is_retryable(LuziaError("x", status=status))

    def test_specific_code_ignores_status(self) -> None:
        """Test that a non-retryable code wins over a 5xx status."""
        assert not is_retryable(LuziaError("x", code=ErrorCode.AUTH, status=500))

    def test_non_luzia_errors(self) -> None:
        """Test that arbitrary exceptions are never retried."""
        assert not is_retryable(RuntimeError("x"))
        assert not is_retryable(None)

    def test_retryable_status(self) -> None:
        """Test the status-only helper."""
        for status in (408, 429, 500, 502, 503, 504):
            assert is_retryable_status(status)
        for status in (200, 400, 401, 404, 501):
            assert not is_retryable_status(status)


class TestClassifyStatus:
    """Tests for HTTP status classification."""

    @pytest.mark.parametrize(
        ("status", "code"),
        [
            (400, ErrorCode.VALIDATION),
            (401, ErrorCode.AUTH),
            (404, ErrorCode.NOT_FOUND),
            (429, ErrorCode.RATE_LIMIT),
            (500, ErrorCode.SERVER),
            (503, ErrorCode.SERVER),
            (504, ErrorCode.SERVER),
            (403, ErrorCode.UNKNOWN),
            (418, ErrorCode.UNKNOWN),
        ],
    )
    def test_classify(self, status: int, code: ErrorCode) -> None:
        assert classify_status(status) == code


class TestParseRateLimitHeaders:
    """Tests for rate limit header parsing."""

    def test_full_headers(self) -> None:
        """Test parsing all headers including daily variants."""
        info = parse_rate_limit_headers(
            {
                "X-RateLimit-Limit": "100",
                "X-RateLimit-Remaining": "42",
                "X-RateLimit-Reset": "1700000000",
                "X-RateLimit-Daily-Limit": "5000",
                "X-RateLimit-Daily-Remaining": "4900",
                "X-RateLimit-Daily-Reset": "1700086400",
            }
        )
        assert info == RateLimitInfo(
            limit=100,
            remaining=42,
            reset=1700000000,
            daily_limit=5000,
            daily_remaining=4900,
            daily_reset=1700086400,
        )

    def test_headers_are_case_insensitive(self) -> None:
        info = parse_rate_limit_headers(
            {"x-ratelimit-limit": "10", "x-ratelimit-remaining": "9", "x-ratelimit-reset": "5"}
        )
        assert info is not None
        assert info.limit == 10
        assert info.daily_limit is None

    def test_missing_reset_yields_none(self) -> None:
        """Test all-or-nothing parsing of the main triplet."""
        info = parse_rate_limit_headers(
            {"X-RateLimit-Limit": "100", "X-RateLimit-Remaining": "99"}
        )
        assert info is None

    def test_non_numeric_yields_none(self) -> None:
        info = parse_rate_limit_headers(
            {
                "X-RateLimit-Limit": "lots",
                "X-RateLimit-Remaining": "99",
                "X-RateLimit-Reset": "1",
            }
        )
        assert info is None

    def test_empty_headers(self) -> None:
        assert parse_rate_limit_headers({}) is None
        assert parse_rate_limit_headers(None) is None

    def test_exhausted(self) -> None:
        info = RateLimitInfo(limit=10, remaining=0, reset=0)
        assert info.is_exhausted


class TestParseRetryAfter:
    """Tests for Retry-After parsing."""

    def test_seconds(self) -> None:
        assert parse_retry_after({"Retry-After": "20"}) == 20

    def test_fractional_seconds(self) -> None:
        assert parse_retry_after({"retry-after": "1.5"}) == 1.5

    @pytest.mark.parametrize("value", ["soon", "", "-3"])
    def test_invalid_uses_default(self, value: str) -> None:
        assert parse_retry_after({"Retry-After": value}) == DEFAULT_RETRY_AFTER_SECONDS

    def test_missing_uses_default(self) -> None:
        assert parse_retry_after({}) == 60


class TestExtractErrorMessage:
    """Tests for error message extraction."""

    def test_message_field(self) -> None:
        assert extract_error_message({"message": "Invalid symbol"}) == "Invalid symbol"

    def test_no_message(self) -> None:
        assert extract_error_message({"error": "x"}) is None
        assert extract_error_message("plain text") is None
        assert extract_error_message({"message": ""}) is None


class TestErrorFromResponse:
    """Tests for response to error mapping."""

    def test_validation_with_details(self) -> None:
        """Test 400 carries details from the body."""
        error = error_from_response(
            400,
            reason_phrase="Bad Request",
            body={
                "message": "Invalid limit",
                "details": {"limit": "must be <= 500"},
                "correlationId": "corr-1",
            },
        )
        assert error.code == ErrorCode.VALIDATION
        assert error.status == 400
        assert error.message == "Invalid limit"
        assert error.details == {"limit": "must be <= 500"}
        assert error.correlation_id == "corr-1"

    def test_auth(self) -> None:
        error = error_from_response(401, reason_phrase="Unauthorized", body=None)
        assert error.code == ErrorCode.AUTH
        assert error.message == "Unauthorized"

    def test_not_found_keeps_correlation_id(self) -> None:
        """Test correlation id is attached regardless of code."""
        error = error_from_response(
            404, body={"message": "Unknown exchange", "correlationId": "abc"}
        )
        assert error.code == ErrorCode.NOT_FOUND
        assert error.correlation_id == "abc"

    def test_server_errors(self) -> None:
        assert error_from_response(503).code == ErrorCode.SERVER
        assert error_from_response(502).code == ErrorCode.SERVER

    def test_unknown_status(self) -> None:
        error = error_from_response(418, reason_phrase="I'm a teapot")
        assert error.code == ErrorCode.UNKNOWN
        assert error.status == 418

    def test_generic_message_fallback(self) -> None:
        error = error_from_response(500)
        assert error.message == "Unknown error"

    def test_rate_limit_with_headers(self) -> None:
        """Test 429 uses Retry-After and rate limit headers."""
        headers = {
            "Retry-After": "20",
            "X-RateLimit-Limit": "100",
            "X-RateLimit-Remaining": "0",
            "X-RateLimit-Reset": "1700000000",
        }
        error = error_from_response(429, headers=headers, body={"message": "Slow down"})
        assert error.code == ErrorCode.RATE_LIMIT
        assert error.retry_after == 20
        assert error.rate_limit_info == RateLimitInfo(limit=100, remaining=0, reset=1700000000)

    def test_rate_limit_without_body(self) -> None:
        """Test 429 with only Retry-After still classifies."""
        error = error_from_response(
            429, reason_phrase="Too Many Requests", headers={"Retry-After": "60"}
        )
        assert error.code == ErrorCode.RATE_LIMIT
        assert error.retry_after == 60
        assert error.message == "Too Many Requests"

    def test_rate_limit_synthesized_info(self) -> None:
        """Test info is synthesized from the body when headers are absent."""
        before = int(time.time())
        error = error_from_response(429, body={"limit": 100, "message": "Daily quota"})
        info = error.rate_limit_info
        assert info is not None
        assert info.limit == 100
        assert info.remaining == 0
        assert before + 60 <= info.reset <= int(time.time()) + 60
        assert error.retry_after == 60

    def test_rate_limit_synthesized_without_limit(self) -> None:
        error = error_from_response(429, headers={"Retry-After": "5"})
        assert error.rate_limit_info is not None
        assert error.rate_limit_info.limit == 0

    def test_from_response_classmethod(self) -> None:
        """Test LuziaError.from_response delegates to the mapping."""
        error = LuziaError.from_response(404, reason_phrase="Not Found")
        assert error.code == ErrorCode.NOT_FOUND
        assert error.message == "Not Found"
