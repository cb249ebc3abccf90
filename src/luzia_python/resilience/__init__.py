"""
Resilience layer - Retry with exponential backoff and jitter.

This module provides:
- RetryConfig: Resolved retry configuration
- RetryPolicy: Bounded retry loop honoring Retry-After hints
- with_retry: Functional wrapper around RetryPolicy
"""

from luzia_python.errors import is_retryable_status
from luzia_python.resilience.retry import (
    RATE_LIMIT_BUFFER_MS,
    RetryConfig,
    RetryContext,
    RetryOverrides,
    RetryPolicy,
    calculate_delay,
    resolve_retry_options,
    with_retry,
)

__all__ = [
    "RATE_LIMIT_BUFFER_MS",
    "RetryConfig",
    "RetryContext",
    "RetryOverrides",
    "RetryPolicy",
    "calculate_delay",
    "is_retryable_status",
    "resolve_retry_options",
    "with_retry",
]
