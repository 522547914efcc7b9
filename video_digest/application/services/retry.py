"""Bounded exponential-backoff retry for unreliable collaborator calls."""

import asyncio
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Self, TypeVar

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)
from tenacity.wait import wait_base

from video_digest.commons.settings.models import RetrySettings
from video_digest.commons.telemetry import get_logger
from video_digest.domain.exceptions import CollaboratorError

T = TypeVar("T")

SleepFn = Callable[[float], Awaitable[None]]

logger = get_logger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to try an operation and how long to wait in between.

    Attributes:
        max_attempts: Total attempts, the first one included.
        initial_delay: Wait in seconds before the second attempt, doubled
            for every attempt after that.
        max_jitter: Upper bound of the uniform random delay added to each wait.
        retryable_status_codes: Upstream status codes that mark a transient
            failure worth retrying.
    """

    max_attempts: int = 5
    initial_delay: float = 1.0
    max_jitter: float = 0.5
    retryable_status_codes: frozenset[int] = field(
        default_factory=lambda: CollaboratorError.TRANSIENT_STATUS_CODES
    )

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> Self:
        """Build a policy from the ``retry`` settings section."""
        return cls(
            max_attempts=settings.max_attempts,
            initial_delay=settings.initial_delay_seconds,
            max_jitter=settings.max_jitter_seconds,
            retryable_status_codes=frozenset(settings.retryable_status_codes),
        )

    def is_retryable(self, error: BaseException) -> bool:
        """Whether ``error`` reports a transient upstream condition."""
        return (
            isinstance(error, CollaboratorError)
            and error.status_code in self.retryable_status_codes
        )

    def wait_strategy(self) -> wait_base:
        """Wait before retry ``n``: ``initial_delay * 2**(n-1)`` plus jitter."""
        return wait_exponential(
            multiplier=self.initial_delay, exp_base=2
        ) + wait_random(0, self.max_jitter)


def _log_retry(label: str, policy: RetryPolicy) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        delay = retry_state.next_action.sleep if retry_state.next_action else 0.0
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            f"{label}: retry {retry_state.attempt_number + 1}/{policy.max_attempts} "
            f"after {delay:.2f}s",
            extra={
                "operation": label,
                "attempt": retry_state.attempt_number + 1,
                "wait_seconds": round(delay, 3),
                "waited_seconds": round(retry_state.idle_for, 3),
                "error": str(error),
            },
        )

    return before_sleep


async def execute_with_retry(
    operation: Callable[[], Awaitable[T]],
    label: str,
    policy: RetryPolicy | None = None,
    *,
    sleep: SleepFn = asyncio.sleep,
) -> T:
    """Run ``operation`` until it succeeds, fails fatally or runs out of attempts.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt.
        label: Operation name used in log lines.
        policy: Retry policy; defaults to 5 attempts starting at 1 second.
        sleep: Awaitable sleep, injectable for tests.

    Returns:
        Whatever the first successful attempt returned.

    Raises:
        Exception: The first non-retryable error, or the last retryable one
            once every attempt has been used.
    """
    policy = policy or RetryPolicy()
    retrying = AsyncRetrying(
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait_strategy(),
        retry=retry_if_exception(policy.is_retryable),
        before_sleep=_log_retry(label, policy),
        reraise=True,
        sleep=sleep,
    )

    try:
        return await retrying(operation)
    except Exception as e:
        if policy.is_retryable(e):
            logger.error(
                f"{label}: exceeded {policy.max_attempts} attempts",
                extra={"operation": label, "error": str(e)},
            )
        else:
            logger.error(
                f"{label}: non-retryable error",
                extra={"operation": label, "error": str(e)},
            )
        raise
