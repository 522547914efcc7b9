"""Unit tests for the retry executor."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from video_digest.application.services.retry import RetryPolicy, execute_with_retry
from video_digest.commons.settings.models import RetrySettings
from video_digest.domain.exceptions import (
    CollaboratorError,
    SummarizationError,
    TranscriptionError,
)


NO_JITTER = RetryPolicy(max_jitter=0.0)


@pytest.fixture
def sleep():
    """Records requested waits without sleeping."""
    return AsyncMock()


# =============================================================================
# Policy
# =============================================================================


class TestRetryPolicy:
    """Tests for RetryPolicy."""

    def test_defaults(self):
        policy = RetryPolicy()
        assert policy.max_attempts == 5
        assert policy.initial_delay == 1.0
        assert policy.max_jitter == 0.5
        assert policy.retryable_status_codes == frozenset({503, 429, 408})

    def test_rejects_zero_attempts(self):
        with pytest.raises(ValueError):
            RetryPolicy(max_attempts=0)

    def test_from_settings(self):
        policy = RetryPolicy.from_settings(
            RetrySettings(
                max_attempts=3,
                initial_delay_seconds=0.2,
                max_jitter_seconds=0.0,
                retryable_status_codes=[503],
            )
        )
        assert policy.max_attempts == 3
        assert policy.initial_delay == 0.2
        assert policy.retryable_status_codes == frozenset({503})

    def test_is_retryable(self):
        policy = RetryPolicy()
        assert policy.is_retryable(SummarizationError("x", status_code=503))
        assert policy.is_retryable(TranscriptionError("x", status_code=408))
        assert not policy.is_retryable(SummarizationError("x", status_code=400))
        assert not policy.is_retryable(SummarizationError("x"))
        assert not policy.is_retryable(RuntimeError("503"))

    def test_default_codes_are_transient_codes(self):
        assert RetryPolicy().retryable_status_codes == (
            CollaboratorError.TRANSIENT_STATUS_CODES
        )

    def test_delays_double(self):
        wait = NO_JITTER.wait_strategy()
        delays = [wait(MagicMock(attempt_number=n)) for n in range(1, 5)]
        assert delays == [1.0, 2.0, 4.0, 8.0]

    def test_jitter_is_bounded_by_policy(self):
        wait = RetryPolicy(max_jitter=0.5).wait_strategy()
        for _ in range(20):
            assert 1.0 <= wait(MagicMock(attempt_number=1)) <= 1.5


# =============================================================================
# Executor
# =============================================================================


class TestExecuteWithRetry:
    """Tests for execute_with_retry."""

    async def test_first_attempt_succeeds(self, sleep):
        operation = AsyncMock(return_value="summary")

        result = await execute_with_retry(
            operation, "Summarize Text", NO_JITTER, sleep=sleep
        )

        assert result == "summary"
        operation.assert_awaited_once()
        sleep.assert_not_awaited()

    async def test_transient_failures_then_success(self, sleep):
        operation = AsyncMock(
            side_effect=[
                SummarizationError("unavailable", status_code=503),
                SummarizationError("unavailable", status_code=503),
                SummarizationError("unavailable", status_code=503),
                SummarizationError("unavailable", status_code=503),
                "summary",
            ]
        )

        result = await execute_with_retry(
            operation, "Summarize Text", NO_JITTER, sleep=sleep
        )

        assert result == "summary"
        assert operation.await_count == 5
        waits = [call.args[0] for call in sleep.await_args_list]
        assert waits == [1.0, 2.0, 4.0, 8.0]

    async def test_waits_strictly_increase_with_jitter(self, sleep):
        operation = AsyncMock(
            side_effect=[SummarizationError("busy", status_code=429)] * 4 + ["ok"]
        )

        await execute_with_retry(operation, "Summarize Video", sleep=sleep)

        waits = [call.args[0] for call in sleep.await_args_list]
        assert len(waits) == 4
        assert all(later > earlier for earlier, later in zip(waits, waits[1:]))
        for attempt, wait in enumerate(waits, start=1):
            base = 2 ** (attempt - 1)
            assert base <= wait <= base + 0.5

    async def test_fatal_error_reraised_immediately(self, sleep):
        error = SummarizationError("bad request", status_code=400)
        operation = AsyncMock(side_effect=error)

        with pytest.raises(SummarizationError) as exc_info:
            await execute_with_retry(operation, "Summarize Text", sleep=sleep)

        assert exc_info.value is error
        operation.assert_awaited_once()
        sleep.assert_not_awaited()

    async def test_unclassified_error_is_fatal(self, sleep):
        operation = AsyncMock(side_effect=RuntimeError("boom"))

        with pytest.raises(RuntimeError):
            await execute_with_retry(operation, "Summarize Text", sleep=sleep)

        operation.assert_awaited_once()

    async def test_exhausted_attempts_raise_last_error(self, sleep):
        errors = [CollaboratorError(f"try {n}", status_code=503) for n in range(5)]
        operation = AsyncMock(side_effect=errors)

        with pytest.raises(CollaboratorError) as exc_info:
            await execute_with_retry(
                operation, "Summarize Text", NO_JITTER, sleep=sleep
            )

        assert exc_info.value is errors[-1]
        assert operation.await_count == 5
        assert sleep.await_count == 4

    async def test_custom_policy(self, sleep):
        policy = RetryPolicy(max_attempts=2, initial_delay=0.1, max_jitter=0.0)
        operation = AsyncMock(
            side_effect=SummarizationError("timeout", status_code=408)
        )

        with pytest.raises(SummarizationError):
            await execute_with_retry(
                operation, "Summarize Text", policy, sleep=sleep
            )

        assert operation.await_count == 2
        assert [call.args[0] for call in sleep.await_args_list] == [0.1]
