"""
Retry policy with exponential backoff and jitter.

A rate limit error carrying a Retry-After hint always takes precedence
over the exponential schedule.
"""

from __future__ import annotations

import asyncio
import dataclasses
import random
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar, Union

from luzia_python.errors import ErrorCode, LuziaError, is_retryable
from luzia_python.types.options import RetryOptions

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

T = TypeVar("T")

# Added to Retry-After so the window has fully reset when we come back
RATE_LIMIT_BUFFER_MS = 100


@dataclass(frozen=True)
class RetryConfig:
    """Resolved retry configuration.

    Attributes:
        max_retries: Maximum number of retries after the first attempt
        initial_delay_ms: Delay before the first retry in milliseconds
        max_delay_ms: Upper bound for any single delay in milliseconds
        backoff_multiplier: Growth factor per attempt
        jitter: Multiply delays by a random factor in [0.5, 1.5)
    """

    max_retries: int = 3
    initial_delay_ms: float = 1000
    max_delay_ms: float = 30000
    backoff_multiplier: float = 2.0
    jitter: bool = True

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")

    @classmethod
    def no_retry(cls) -> RetryConfig:
        """Create a config that disables retries."""
        return cls(max_retries=0)

    def merge(self, overrides: RetryOverrides) -> RetryConfig:
        """Return a copy with the given overrides applied.

        Keys whose value is None are ignored. Unknown keys raise TypeError.
        """
        if overrides is None:
            return self
        if isinstance(overrides, RetryConfig):
            return overrides
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)


RetryOverrides = Union[RetryConfig, RetryOptions, Mapping[str, Any], None]


def resolve_retry_options(*overrides: RetryOverrides) -> RetryConfig:
    """Merge retry overrides over the defaults, later arguments winning.

    Example:
        >>> resolve_retry_options({"max_retries": 5}, {"jitter": False})
        RetryConfig(max_retries=5, ..., jitter=False)
    """
    config = RetryConfig()
    for override in overrides:
        config = config.merge(override)
    return config


def calculate_delay(
    attempt: int,
    options: RetryConfig,
    last_error: BaseException | None = None,
) -> float:
    """Calculate the delay before a retry.

    Args:
        attempt: Attempt number, 0 for the delay after the first failure
        options: Resolved retry configuration
        last_error: Error that triggered the retry

    Returns:
        Delay in milliseconds
    """
    if (
        isinstance(last_error, LuziaError)
        and last_error.code == ErrorCode.RATE_LIMIT
        and last_error.retry_after is not None
    ):
        hinted = last_error.retry_after * 1000 + RATE_LIMIT_BUFFER_MS
        return min(hinted, options.max_delay_ms)

    delay = options.initial_delay_ms * options.backoff_multiplier**attempt

    if options.jitter:
        delay *= 0.5 + random.random()

    return min(delay, options.max_delay_ms)


@dataclass(frozen=True)
class RetryContext:
    """Passed to the on_retry callback before each wait.

    Attributes:
        attempt: Attempt that just failed (0-based)
        max_retries: Total number of retries allowed
        error: The error that caused the retry
        delay_ms: Delay about to be waited
    """

    attempt: int
    max_retries: int
    error: BaseException
    delay_ms: float = 0.0


class RetryPolicy:
    """Bounded retry loop around an async operation.

    The operation is never run concurrently with itself; the only
    suspension point between attempts is the backoff sleep.

    Example:
        >>> policy = RetryPolicy(RetryConfig(max_retries=3))
        >>> value = await policy.execute(fetch_ticker)
    """

    def __init__(self, config: RetryConfig | None = None) -> None:
        self._config = config or RetryConfig()

    @property
    def config(self) -> RetryConfig:
        return self._config

    def calculate_delay(self, attempt: int, error: BaseException | None = None) -> float:
        """Delay in milliseconds before retrying after ``attempt``."""
        return calculate_delay(attempt, self._config, error)

    def should_retry(self, error: BaseException, attempt: int) -> bool:
        """Check if an error should trigger a retry.

        Args:
            error: The exception that occurred
            attempt: Attempt that failed (0-based)

        Returns:
            True if should retry
        """
        if not is_retryable(error):
            return False
        return attempt < self._config.max_retries

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        on_retry: Callable[[RetryContext], None] | None = None,
    ) -> T:
        """Run the operation, retrying retryable failures.

        Args:
            operation: Async operation to execute
            on_retry: Optional callback invoked before each wait

        Returns:
            Operation result

        Raises:
            The first non-retryable error, or the last error once retries
            are exhausted.
        """
        attempt = 0
        while True:
            try:
                return await operation()
            except Exception as e:
                if not self.should_retry(e, attempt):
                    raise

                delay = self.calculate_delay(attempt, e)

                if on_retry:
                    on_retry(
                        RetryContext(
                            attempt=attempt,
                            max_retries=self._config.max_retries,
                            error=e,
                            delay_ms=delay,
                        )
                    )

                await asyncio.sleep(delay / 1000.0)
                attempt += 1


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    options: RetryOverrides = None,
    on_retry: Callable[[RetryContext], None] | None = None,
) -> T:
    """Execute an operation with retry, raising on failure.

    Args:
        operation: Async operation to execute
        options: Retry overrides merged over the defaults
        on_retry: Optional callback invoked before each retry

    Returns:
        Operation result

    Raises:
        The last exception if all retries fail
    """
    policy = RetryPolicy(resolve_retry_options(options))
    return await policy.execute(operation, on_retry)
