"""错误分类模块：将 HTTP 响应映射到错误类别并判断是否可重试。

Error classification for luzia-python.

Maps HTTP responses to LuziaError codes, parses rate limit headers and
decides which errors are retryable.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING, Any

from luzia_python.errors.base import ErrorCode, LuziaError
from luzia_python.types.rate_limit import RateLimitInfo

if TYPE_CHECKING:
    from collections.abc import Mapping

# Codes retried regardless of status
_RETRYABLE_CODES: frozenset[ErrorCode] = frozenset(
    {
        ErrorCode.RATE_LIMIT,
        ErrorCode.NETWORK,
        ErrorCode.TIMEOUT,
        ErrorCode.SERVER,
    }
)

_RETRYABLE_STATUSES: frozenset[int] = frozenset({408, 429, 500, 502, 503, 504})

# Retry-After fallback when the header is missing or unparseable
DEFAULT_RETRY_AFTER_SECONDS = 60

_STATUS_CODES: dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    429: ErrorCode.RATE_LIMIT,
    503: ErrorCode.SERVER,
}


def is_luzia_error(value: object) -> bool:
    """Check whether a value is a LuziaError."""
    return isinstance(value, LuziaError)


def is_retryable(error: object) -> bool:
    """Check if an error is retryable.

    Retryable codes are rate_limit, network, timeout and server. Errors
    without a specific code fall back to the HTTP status (408, 429, 5xx).

    Args:
        error: Any exception or value

    Returns:
        True if the retry engine should try again
    """
    if not isinstance(error, LuziaError):
        return False

    if error.code in _RETRYABLE_CODES:
        return True

    if error.code == ErrorCode.UNKNOWN and error.status is not None:
        return error.status in (408, 429) or error.status >= 500

    return False


def is_retryable_status(status: int) -> bool:
    """Check if an HTTP status code is retryable."""
    return status in _RETRYABLE_STATUSES


def classify_status(status_code: int) -> ErrorCode:
    """Map an HTTP status code to an error code."""
    if status_code in _STATUS_CODES:
        return _STATUS_CODES[status_code]
    if status_code >= 500:
        return ErrorCode.SERVER
    return ErrorCode.UNKNOWN


def _parse_int(value: str | None) -> int | None:
    """Parse a header value as an integer, tolerating '12.0'."""
    if value is None:
        return None
    value = value.strip()
    if not value:
        return None
    try:
        return int(value)
    except ValueError:
        pass
    try:
        return int(float(value))
    except ValueError:
        return None


def _lower_keys(headers: Mapping[str, str]) -> dict[str, str]:
    return {key.lower(): value for key, value in headers.items()}


def parse_rate_limit_headers(headers: Mapping[str, str] | None) -> RateLimitInfo | None:
    """Parse rate limit information from response headers.

    All of X-RateLimit-Limit, -Remaining and -Reset must be present and
    numeric, otherwise no info is returned. The daily variants are read
    independently when present.

    Args:
        headers: Response headers (any case)

    Returns:
        RateLimitInfo, or None if the headers are incomplete
    """
    if not headers:
        return None

    lowered = _lower_keys(headers)
    limit = _parse_int(lowered.get("x-ratelimit-limit"))
    remaining = _parse_int(lowered.get("x-ratelimit-remaining"))
    reset = _parse_int(lowered.get("x-ratelimit-reset"))

    if limit is None or remaining is None or reset is None:
        return None

    return RateLimitInfo(
        limit=limit,
        remaining=remaining,
        reset=reset,
        daily_limit=_parse_int(lowered.get("x-ratelimit-daily-limit")),
        daily_remaining=_parse_int(lowered.get("x-ratelimit-daily-remaining")),
        daily_reset=_parse_int(lowered.get("x-ratelimit-daily-reset")),
    )


def parse_retry_after(headers: Mapping[str, str] | None) -> float:
    """Read the Retry-After header in seconds (default 60)."""
    if not headers:
        return DEFAULT_RETRY_AFTER_SECONDS
    value = _lower_keys(headers).get("retry-after")
    if value is None:
        return DEFAULT_RETRY_AFTER_SECONDS
    try:
        seconds = float(value)
    except ValueError:
        return DEFAULT_RETRY_AFTER_SECONDS
    if seconds < 0 or seconds != seconds:  # negative or NaN
        return DEFAULT_RETRY_AFTER_SECONDS
    return seconds


def extract_error_message(body: Any) -> str | None:
    """Extract the error message from a response body.

    Args:
        body: Response body (parsed JSON)

    Returns:
        The ``message`` field if it is a non-empty string, None otherwise
    """
    if not isinstance(body, dict):
        return None
    message = body.get("message")
    if isinstance(message, str) and message:
        return message
    return None


def error_from_response(
    status_code: int,
    *,
    reason_phrase: str | None = None,
    headers: Mapping[str, str] | None = None,
    body: Any = None,
    rate_limit_info: RateLimitInfo | None = None,
) -> LuziaError:
    """Create a LuziaError from a failed HTTP response.

    Args:
        status_code: HTTP status code
        reason_phrase: Response status text
        headers: Response headers
        body: Parsed JSON body (None when absent or not JSON)
        rate_limit_info: Rate limit info already parsed from the headers

    Returns:
        LuziaError with code and code-specific fields populated
    """
    fields: dict[str, Any] = body if isinstance(body, dict) else {}
    message = extract_error_message(fields) or reason_phrase or "Unknown error"

    correlation_id = fields.get("correlationId")
    if not isinstance(correlation_id, str):
        correlation_id = None

    code = classify_status(status_code)

    if code == ErrorCode.VALIDATION:
        details = fields.get("details")
        return LuziaError(
            message,
            code=code,
            status=status_code,
            correlation_id=correlation_id,
            details=details if isinstance(details, dict) else None,
        )

    if code == ErrorCode.RATE_LIMIT:
        retry_after = parse_retry_after(headers)
        info = rate_limit_info or parse_rate_limit_headers(headers)
        if info is None:
            body_limit = fields.get("limit")
            info = RateLimitInfo(
                limit=body_limit if isinstance(body_limit, int) else 0,
                remaining=0,
                reset=int(time.time()) + int(retry_after),
            )
        return LuziaError(
            message,
            code=code,
            status=status_code,
            correlation_id=correlation_id,
            rate_limit_info=info,
            retry_after=retry_after,
        )

    return LuziaError(
        message,
        code=code,
        status=status_code,
        correlation_id=correlation_id,
    )
