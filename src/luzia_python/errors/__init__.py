"""错误体系：单一 LuziaError 类型加上错误分类工具。

Error handling for luzia-python.

Provides a single LuziaError type with a ``code`` discriminator and the
helpers that classify HTTP responses and retryability.
"""

from luzia_python.errors.base import ErrorCode, LuziaError
from luzia_python.errors.classification import (
    DEFAULT_RETRY_AFTER_SECONDS,
    classify_status,
    error_from_response,
    extract_error_message,
    is_luzia_error,
    is_retryable,
    is_retryable_status,
    parse_rate_limit_headers,
    parse_retry_after,
)

__all__ = [
    "DEFAULT_RETRY_AFTER_SECONDS",
    "ErrorCode",
    "LuziaError",
    "classify_status",
    "error_from_response",
    "extract_error_message",
    "is_luzia_error",
    "is_retryable",
    "is_retryable_status",
    "parse_rate_limit_headers",
    "parse_retry_after",
]
