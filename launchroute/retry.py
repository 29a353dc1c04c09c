"""Retry helper for on-chain reads.

Only transport-shaped failures (network, timeout, rate limit) are retried;
contract reverts and ABI mismatches fail fast because repeating the call
returns the same answer.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import TypeVar

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from launchroute.errors import classify_error, is_retryable

logger = structlog.get_logger()

T = TypeVar("T")


def is_transient_error(error: BaseException) -> bool:
    """True when another attempt has a chance of succeeding."""
    return is_retryable(classify_error(error))


def _log_retry(operation: str) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        error = retry_state.outcome.exception() if retry_state.outcome else None
        logger.warning(
            "retrying_operation",
            operation=operation,
            attempt=retry_state.attempt_number,
            delay=retry_state.next_action.sleep if retry_state.next_action else 0,
            error=str(error),
        )

    return before_sleep


async def retry_async(
    fn: Callable[[], Awaitable[T]],
    *,
    operation: str = "operation",
    max_attempts: int = 2,
    base_delay: float = 1.5,
    max_delay: float = 10.0,
) -> T:
    """Run an async callable with exponential backoff on transient errors.

    Args:
        fn: Zero-argument callable returning an awaitable (a lambda works)
        operation: Name used in log events
        max_attempts: Total attempts, first try included
        base_delay: Delay before the second attempt; doubles afterwards
        max_delay: Upper bound for a single delay

    Returns:
        The callable's result

    Raises:
        The last exception raised by `fn` once attempts are exhausted or the
        error is not transient.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=base_delay, max=max_delay),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry(operation),
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            result = await fn()
    return result


__all__ = ["retry_async", "is_transient_error"]
