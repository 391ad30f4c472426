# ruff: noqa: S101
"""Tests for the bounded retry executor."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from banksync.utils.retry import RetryExecutor, RetryPolicy


class FlakyOperation:
    """Fails a fixed number of times, then returns a value."""

    def __init__(self, failures: int, value: str = "done"):
        self.failures = failures
        self.value = value
        self.attempts = 0

    async def __call__(self) -> str:
        self.attempts += 1
        if self.attempts <= self.failures:
            raise ConnectionError(f"failure {self.attempts}")
        return self.value


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: list[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class TestRetryPolicy:
    def test_defaults(self) -> None:
        policy = RetryPolicy()
        assert policy.max_attempts == 3
        assert policy.delay == 2.0

    @pytest.mark.parametrize("attempts", [0, -1])
    def test_non_positive_attempts_rejected(self, attempts: int) -> None:
        """Invalid attempt counts fail fast at construction."""
        with pytest.raises(ValidationError):
            RetryPolicy(max_attempts=attempts)

    def test_negative_delay_rejected(self) -> None:
        with pytest.raises(ValidationError):
            RetryPolicy(delay=-0.5)


class TestRetryExecutor:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_succeeds_after_k_failures(self) -> None:
        """k failures then success takes k+1 attempts and k delays."""
        sleep = RecordingSleep()
        executor = RetryExecutor(RetryPolicy(max_attempts=5, delay=1.5), sleep=sleep)
        operation = FlakyOperation(failures=2)

        result = await executor.execute(operation, label="flaky")

        assert result == "done"
        assert operation.attempts == 3
        assert sleep.delays == [1.5, 1.5]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_first_attempt_success_does_not_sleep(self) -> None:
        sleep = RecordingSleep()
        executor = RetryExecutor(RetryPolicy(max_attempts=3, delay=1), sleep=sleep)
        operation = FlakyOperation(failures=0)

        assert await executor.execute(operation) == "done"
        assert operation.attempts == 1
        assert sleep.delays == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_exhaustion_raises_last_error(self) -> None:
        """Always-failing operation runs exactly m times and raises the m-th error."""
        sleep = RecordingSleep()
        executor = RetryExecutor(RetryPolicy(max_attempts=4, delay=0.1), sleep=sleep)
        operation = FlakyOperation(failures=100)

        with pytest.raises(ConnectionError, match="failure 4"):
            await executor.execute(operation, label="doomed")

        assert operation.attempts == 4
        # No pause after the final attempt
        assert sleep.delays == [0.1, 0.1, 0.1]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_single_attempt_policy(self) -> None:
        sleep = RecordingSleep()
        executor = RetryExecutor(RetryPolicy(max_attempts=1, delay=5), sleep=sleep)
        operation = FlakyOperation(failures=1)

        with pytest.raises(ConnectionError, match="failure 1"):
            await executor.execute(operation)

        assert operation.attempts == 1
        assert sleep.delays == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_per_call_policy_overrides_default(self) -> None:
        sleep = RecordingSleep()
        executor = RetryExecutor(RetryPolicy(max_attempts=1, delay=0), sleep=sleep)
        operation = FlakyOperation(failures=2)

        result = await executor.execute(
            operation, policy=RetryPolicy(max_attempts=3, delay=0.25)
        )

        assert result == "done"
        assert operation.attempts == 3
        assert sleep.delays == [0.25, 0.25]

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_logs_exhaustion(self, caplog: pytest.LogCaptureFixture) -> None:
        executor = RetryExecutor(RetryPolicy(max_attempts=2, delay=0))

        with pytest.raises(ConnectionError):
            await executor.execute(FlakyOperation(failures=5), label="fetch nonce")

        assert "fetch nonce failed on attempt 1" in caplog.text
        assert "fetch nonce failed after 2 attempts" in caplog.text
