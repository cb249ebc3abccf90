"""Tests for resilience module."""

from unittest.mock import patch

import pytest

from luzia_python.errors import ErrorCode, LuziaError
from luzia_python.resilience import (
    RATE_LIMIT_BUFFER_MS,
    RetryConfig,
    RetryContext,
    RetryPolicy,
    calculate_delay,
    resolve_retry_options,
    with_retry,
)

NO_JITTER = RetryConfig(jitter=False)
FAST = {"initial_delay_ms": 1, "max_delay_ms": 5, "jitter": False}


class TestRetryConfig:
    """Tests for RetryConfig."""

    def test_default_config(self) -> None:
        """Test default retry configuration."""
        config = RetryConfig()
        assert config.max_retries == 3
        assert config.initial_delay_ms == 1000
        assert config.max_delay_ms == 30000
        assert config.backoff_multiplier == 2
        assert config.jitter is True

    def test_no_retry_config(self) -> None:
        """Test no-retry configuration."""
        assert RetryConfig.no_retry().max_retries == 0

    def test_negative_retries_rejected(self) -> None:
        with pytest.raises(ValueError):
            RetryConfig(max_retries=-1)

    def test_merge_mapping(self) -> None:
        """Test right-biased merge of a partial mapping."""
        merged = RetryConfig().merge({"max_retries": 5, "jitter": False})
        assert merged.max_retries == 5
        assert merged.jitter is False
        assert merged.initial_delay_ms == 1000

    def test_merge_ignores_none(self) -> None:
        merged = RetryConfig(max_retries=2).merge({"max_retries": None})
        assert merged.max_retries == 2

    def test_merge_unknown_key(self) -> None:
        with pytest.raises(TypeError):
            RetryConfig().merge({"retries": 2})

    def test_resolve_later_wins(self) -> None:
        """Test resolve_retry_options applies overrides in order."""
        config = resolve_retry_options(
            {"max_retries": 1, "max_delay_ms": 500},
            None,
            {"max_retries": 4},
        )
        assert config.max_retries == 4
        assert config.max_delay_ms == 500

    def test_resolve_defaults(self) -> None:
        assert resolve_retry_options() == RetryConfig()


class TestCalculateDelay:
    """Tests for backoff delay calculation."""

    @pytest.mark.parametrize("attempt", range(8))
    def test_exponential_without_jitter(self, attempt: int) -> None:
        """Test exponential growth capped at max_delay_ms."""
        assert calculate_delay(attempt, NO_JITTER) == min(1000 * 2**attempt, 30000)

    def test_jitter_range(self) -> None:
        """Test jitter multiplies by a factor in [0.5, 1.5)."""
        config = RetryConfig(max_delay_ms=100_000)
        with patch("luzia_python.resilience.retry.random.random", return_value=0.0):
            assert calculate_delay(1, config) == 1000
        with patch("luzia_python.resilience.retry.random.random", return_value=0.999):
            assert calculate_delay(1, config) == pytest.approx(2998)

    def test_jitter_clamped(self) -> None:
        config = RetryConfig(max_delay_ms=1200)
        with patch("luzia_python.resilience.retry.random.random", return_value=0.9):
            assert calculate_delay(0, config) == 1200

    @pytest.mark.parametrize("attempt", [0, 1, 5])
    def test_retry_after_takes_priority(self, attempt: int) -> None:
        """Test that a rate limit hint overrides exponential backoff."""
        error = LuziaError("slow down", code=ErrorCode.RATE_LIMIT, retry_after=20)
        assert calculate_delay(attempt, RetryConfig(), error) == 20000 + RATE_LIMIT_BUFFER_MS

    def test_retry_after_clamped(self) -> None:
        error = LuziaError("slow down", code=ErrorCode.RATE_LIMIT, retry_after=120)
        assert calculate_delay(0, RetryConfig(), error) == 30000

    def test_rate_limit_without_hint_uses_backoff(self) -> None:
        error = LuziaError("slow down", code=ErrorCode.RATE_LIMIT)
        assert calculate_delay(2, NO_JITTER, error) == 4000

    def test_retry_after_ignored_for_other_codes(self) -> None:
        error = LuziaError("down", code=ErrorCode.SERVER, retry_after=20)
        assert calculate_delay(0, NO_JITTER, error) == 1000


class TestWithRetry:
    """Tests for the retry loop."""

    @pytest.mark.asyncio
    async def test_success_first_try(self) -> None:
        calls = 0

        async def operation() -> str:
            nonlocal calls
            calls += 1
            return "ok"

        assert await with_retry(operation, FAST) == "ok"
        assert calls == 1

    @pytest.mark.asyncio
    async def test_retries_until_success(self) -> None:
        """Test that retryable failures are retried."""
        calls = 0

        async def operation() -> str:
            nonlocal calls
            calls += 1
            if calls < 3:
                raise LuziaError("unavailable", code=ErrorCode.SERVER, status=503)
            return "ok"

        assert await with_retry(operation, FAST) == "ok"
        assert calls == 3

    @pytest.mark.asyncio
    async def test_exhaustion_raises_last_error(self) -> None:
        """Test maxRetries + 1 total attempts when every attempt fails."""
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise LuziaError(f"timeout {calls}", code=ErrorCode.TIMEOUT)

        with pytest.raises(LuziaError) as exc_info:
            await with_retry(operation, {**FAST, "max_retries": 2})

        assert calls == 3
        assert exc_info.value.message == "timeout 3"

    @pytest.mark.asyncio
    async def test_non_retryable_fails_immediately(self) -> None:
        """Test a non-retryable error is raised on the first attempt."""
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise LuziaError("bad key", code=ErrorCode.AUTH, status=401)

        with patch("luzia_python.resilience.retry.asyncio.sleep") as sleep:
            with pytest.raises(LuziaError):
                await with_retry(operation, FAST)
            sleep.assert_not_called()

        assert calls == 1

    @pytest.mark.asyncio
    async def test_plain_exceptions_not_retried(self) -> None:
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise KeyError("missing")

        with pytest.raises(KeyError):
            await with_retry(operation, FAST)
        assert calls == 1

    @pytest.mark.asyncio
    async def test_zero_retries(self) -> None:
        calls = 0

        async def operation() -> None:
            nonlocal calls
            calls += 1
            raise LuziaError("down", code=ErrorCode.SERVER)

        with pytest.raises(LuziaError):
            await with_retry(operation, {"max_retries": 0})
        assert calls == 1

    @pytest.mark.asyncio
    async def test_on_retry_called_before_each_wait(self) -> None:
        """Test on_retry receives attempt, max_retries, error and delay."""
        contexts: list[RetryContext] = []
        errors = [
            LuziaError("a", code=ErrorCode.NETWORK),
            LuziaError("b", code=ErrorCode.NETWORK),
        ]

        async def operation() -> str:
            if errors:
                raise errors.pop(0)
            return "done"

        result = await with_retry(operation, FAST, contexts.append)

        assert result == "done"
        assert [ctx.attempt for ctx in contexts] == [0, 1]
        assert all(ctx.max_retries == 3 for ctx in contexts)
        assert [ctx.error.message for ctx in contexts] == ["a", "b"]
        assert [ctx.delay_ms for ctx in contexts] == [1, 2]

    @pytest.mark.asyncio
    async def test_waits_for_retry_after(self) -> None:
        """Test the sleep honours the Retry-After hint."""
        attempts = 0

        async def operation() -> str:
            nonlocal attempts
            attempts += 1
            if attempts == 1:
                raise LuziaError("slow", code=ErrorCode.RATE_LIMIT, retry_after=2)
            return "ok"

        with patch("luzia_python.resilience.retry.asyncio.sleep") as sleep:
            assert await with_retry(operation, {"jitter": False}) == "ok"
            sleep.assert_awaited_once_with(2.1)


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_should_retry(self) -> None:
        policy = RetryPolicy(RetryConfig(max_retries=2))
        error = LuziaError("down", code=ErrorCode.SERVER)
        assert policy.should_retry(error, 0)
        assert policy.should_retry(error, 1)
        assert not policy.should_retry(error, 2)

    def test_should_not_retry_auth(self) -> None:
        policy = RetryPolicy()
        assert not policy.should_retry(LuziaError("x", code=ErrorCode.AUTH), 0)

    def test_calculate_delay_uses_config(self) -> None:
        policy = RetryPolicy(RetryConfig(initial_delay_ms=200, jitter=False))
        assert policy.calculate_delay(3) == 1600
