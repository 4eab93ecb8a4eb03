"""
Retry with exponential backoff and jitter for asynchronous operations.

The helper knows nothing about HTTP or providers: callers pass an async
thunk and a predicate deciding which errors are worth another attempt.

Example:
    options = RetryOptions(
        retries=3,
        initial_delay_ms=500,
        should_retry=lambda err: getattr(err, "status_code", None) == 429,
    )
    text = await retry_with_backoff(lambda: client.fetch(), options)
"""

import asyncio
import random
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TypeVar

T = TypeVar("T")

JITTER_MIN = 0.8
JITTER_MAX = 1.2


@dataclass(frozen=True)
class RetryOptions:
    """
    Configuration for :func:`retry_with_backoff`.

    Attributes:
        retries: Retry budget, i.e. additional attempts after the first one.
            ``retries=3`` allows up to four calls in total.
        initial_delay_ms: Delay before the first retry, in milliseconds.
            Each later retry doubles it.
        should_retry: Predicate called with the raised exception. Returning
            False re-raises immediately.
    """

    retries: int
    initial_delay_ms: int
    should_retry: Callable[[BaseException], bool]

    def __post_init__(self) -> None:
        if self.retries < 0:
            raise ValueError("retries must be non-negative")
        if self.initial_delay_ms <= 0:
            raise ValueError("initial_delay_ms must be positive")


def calculate_delay(attempt: int, initial_delay_ms: int) -> float:
    """
    Return the delay in seconds to wait after a failed ``attempt`` (0-indexed).

    ``initial_delay_ms * 2**attempt`` scaled by a uniform factor in [0.8, 1.2]:
        attempt 0: ~0.5s, attempt 1: ~1.0s, attempt 2: ~2.0s  (500ms initial)
    """
    base_delay_ms = initial_delay_ms * (2**attempt)
    return base_delay_ms * random.uniform(JITTER_MIN, JITTER_MAX) / 1000


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    options: RetryOptions,
) -> T:
    """
    Await ``operation()`` until it succeeds or the retry budget runs out.

    Raises:
        Exception: The error from the last attempt, unchanged, once
            ``options.retries`` is exhausted or ``options.should_retry``
            rejects it.
    """
    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as error:
            if attempt >= options.retries or not options.should_retry(error):
                raise
            await asyncio.sleep(calculate_delay(attempt, options.initial_delay_ms))
            attempt += 1
