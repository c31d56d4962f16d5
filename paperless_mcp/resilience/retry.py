"""Retry with exponential backoff, decoupled from the operation it retries.

Both the HTTP transport and the upload pipeline run their attempts through
``retry_async``; each supplies its own ``is_retryable`` classification.

Backoff schedule for the default ``exponential_backoff``: 2s, 4s, 8s
(``2 ** attempt`` with attempt numbered from 1).
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhaustedError(Exception):
    """Every allowed attempt failed with a retryable error."""

    def __init__(self, attempts: int, last_error: BaseException) -> None:
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(f"Failed after {attempts} attempts: {last_error}")


def exponential_backoff(attempt: int) -> float:
    """Delay in seconds after the given 1-based attempt."""
    return float(2**attempt)


async def retry_async(
    operation: Callable[[int], Awaitable[T]],
    *,
    is_retryable: Callable[[BaseException], bool],
    max_attempts: int,
    backoff: Callable[[int], float] = exponential_backoff,
    sleep: Callable[[float], Awaitable[object]] | None = None,
    on_retry: Callable[[int, BaseException, float], None] | None = None,
) -> T:
    """Run ``operation`` until it succeeds or attempts run out.

    Parameters
    ----------
    operation:
        Coroutine factory called with the 1-based attempt number.
    is_retryable:
        Classifies a raised exception. Non-retryable exceptions propagate
        immediately without further attempts.
    max_attempts:
        Total attempts allowed (at least 1).
    backoff:
        Maps an attempt number to the delay before the next attempt.
    sleep:
        Awaitable delay function; ``asyncio.sleep`` when omitted.
    on_retry:
        Called with ``(attempt, error, delay)`` before each backoff.

    Raises
    ------
    RetryExhaustedError
        When the last allowed attempt failed with a retryable error.
    """
    max_attempts = max(1, max_attempts)
    delay_fn = sleep or asyncio.sleep

    for attempt in range(1, max_attempts + 1):
        try:
            return await operation(attempt)
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            if not is_retryable(exc):
                raise
            if attempt >= max_attempts:
                logger.warning("Giving up after %d/%d attempts: %s", attempt, max_attempts, exc)
                raise RetryExhaustedError(attempt, exc) from exc

            delay = backoff(attempt)
            if on_retry is not None:
                on_retry(attempt, exc, delay)
            await delay_fn(delay)

    # Unreachable: the loop either returns or raises.
    raise AssertionError("retry loop exited without a result")
