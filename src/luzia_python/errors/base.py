"""错误基类：单一错误类型，通过 code 区分错误类别。

Base error class for luzia-python.

Every failure raised by the library is a LuziaError. Instead of a
subclass hierarchy the error carries a ``code`` discriminator:

- auth: Authentication failed (401)
- not_found: Resource not found (404)
- validation: Invalid request parameters (400)
- rate_limit: Rate limit exceeded (429)
- timeout: Request timed out
- network: Network/connection error
- server: Server error (5xx)
- unknown: Anything else
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Mapping

    from luzia_python.types.rate_limit import RateLimitInfo


class ErrorCode(str, Enum):
    """Error categories."""

    AUTH = "auth"
    NOT_FOUND = "not_found"
    VALIDATION = "validation"
    RATE_LIMIT = "rate_limit"
    TIMEOUT = "timeout"
    NETWORK = "network"
    SERVER = "server"
    UNKNOWN = "unknown"


class LuziaError(Exception):
    """Single error type for all luzia-python failures.

    Use the ``code`` attribute to distinguish error kinds.

    Example:
        >>> try:
        ...     await luzia.tickers.get("binance", "BTC/USDT")
        ... except LuziaError as e:
        ...     if e.code == ErrorCode.RATE_LIMIT:
        ...         print(f"Rate limited, retry after {e.retry_after}s")

    Attributes:
        message: Human-readable error message
        code: Error category (defaults to ``unknown``)
        status: HTTP status code, if the error came from a response
        correlation_id: Server request identifier for debugging
        rate_limit_info: Quota snapshot (rate_limit errors)
        retry_after: Seconds until the limit resets (rate_limit errors)
        details: Validation details from the response body (validation errors)
        timeout_ms: Configured timeout that expired (timeout errors)
        cause: Underlying exception, if any
    """

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode | str | None = None,
        status: int | None = None,
        correlation_id: str | None = None,
        rate_limit_info: RateLimitInfo | None = None,
        retry_after: float | None = None,
        details: dict[str, Any] | None = None,
        timeout_ms: float | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = ErrorCode(code) if code is not None else ErrorCode.UNKNOWN
        self.status = status
        self.correlation_id = correlation_id
        self.rate_limit_info = rate_limit_info
        self.retry_after = retry_after
        self.details = details
        self.timeout_ms = timeout_ms
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def __repr__(self) -> str:
        parts = [repr(self.message), f"code={self.code.value}"]
        if self.status is not None:
            parts.append(f"status={self.status}")
        if self.correlation_id:
            parts.append(f"correlation_id={self.correlation_id!r}")
        return f"LuziaError({', '.join(parts)})"

    @property
    def is_retryable(self) -> bool:
        """Whether the retry engine would retry this error."""
        from luzia_python.errors.classification import is_retryable

        return is_retryable(self)

    @classmethod
    def from_response(
        cls,
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
            body: Parsed JSON body, or None when the body was empty/invalid
            rate_limit_info: Rate limit info already parsed from the headers

        Returns:
            LuziaError classified by status code
        """
        from luzia_python.errors.classification import error_from_response

        return error_from_response(
            status_code,
            reason_phrase=reason_phrase,
            headers=headers,
            body=body,
            rate_limit_info=rate_limit_info,
        )
