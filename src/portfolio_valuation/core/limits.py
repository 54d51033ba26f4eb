"""
Admission control and retry policy for upstream calls.

Every call to the market data provider passes through
``RateLimitedRequester.request``: a slot in the concurrency limiter is taken
first, then the operation is retried with exponential backoff inside that
single slot.
"""

import asyncio
import logging
import random
from collections import deque
from typing import Awaitable, Callable, Optional, TypeVar

from portfolio_valuation.core.exceptions import LimiterQueueFullError, OperationCancelledError

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[], Awaitable[T]]
Sleep = Callable[[float], Awaitable[None]]

DEFAULT_MAX_CONCURRENCY = 5
DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_BASE_DELAY = 0.25
DEFAULT_MAX_DELAY = 5.0
JITTER_RATIO = 0.1


class CancellationToken:
    """Lets a caller withdraw interest in an operation that has not started yet."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled


class ConcurrencyLimiter:
    """
    Caps the number of concurrently running operations.

    Submissions beyond the ceiling wait in a FIFO queue. When a running
    operation finishes (successfully or not) its slot is handed directly to
    the longest-waiting submission, so newcomers can never jump the queue.
    """

    def __init__(
        self,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        max_queue_depth: Optional[int] = None,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._max_concurrency = max_concurrency
        self._max_queue_depth = max_queue_depth
        self._running = 0
        self._waiters: deque[asyncio.Future] = deque()

    @property
    def max_concurrency(self) -> int:
        return self._max_concurrency

    @property
    def running(self) -> int:
        """Number of operations currently holding a slot."""
        return self._running

    @property
    def pending(self) -> int:
        """Number of submissions waiting for a slot."""
        return len(self._waiters)

    async def run(self, operation: Operation[T], token: Optional[CancellationToken] = None) -> T:
        """
        Run operation once a slot is available and return its result.

        Raises:
            LimiterQueueFullError: the queue is at ``max_queue_depth``.
            OperationCancelledError: token was cancelled before the operation started.
        """
        if token is not None and token.cancelled:
            raise OperationCancelledError()

        await self._acquire()
        try:
            if token is not None and token.cancelled:
                raise OperationCancelledError()
            return await operation()
        finally:
            self._release()

    async def _acquire(self) -> None:
        if self._running < self._max_concurrency and not self._waiters:
            self._running += 1
            return

        if self._max_queue_depth is not None and len(self._waiters) >= self._max_queue_depth:
            logger.warning("Limiter queue full, rejecting submission (%d waiting)", len(self._waiters))
            raise LimiterQueueFullError(len(self._waiters))

        waiter = asyncio.get_running_loop().create_future()
        self._waiters.append(waiter)
        try:
            await waiter
        except asyncio.CancelledError:
            if waiter.cancelled():
                if waiter in self._waiters:
                    self._waiters.remove(waiter)
            else:
                # The slot was handed over just before the cancellation landed
                self._release()
            raise

    def _release(self) -> None:
        # Hand the slot to the next live waiter; the running count is unchanged
        while self._waiters:
            waiter = self._waiters.popleft()
            if not waiter.done():
                waiter.set_result(None)
                return
        self._running -= 1


def backoff_delay(
    attempt: int,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
) -> float:
    """
    Delay in seconds before retrying after the given 0-based attempt.

    ``min(base_delay * 2**attempt, max_delay)`` plus up to 10% random jitter
    on top of the capped value.
    """
    delay = min(base_delay * (2 ** attempt), max_delay)
    return delay + random.random() * JITTER_RATIO * delay


def is_retryable(error: BaseException) -> bool:
    """Retry everything except failures explicitly tagged as permanent."""
    return getattr(error, "retryable", True)


async def retry_with_backoff(
    operation: Operation[T],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    base_delay: float = DEFAULT_BASE_DELAY,
    max_delay: float = DEFAULT_MAX_DELAY,
    should_retry: Callable[[Exception], bool] = is_retryable,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """
    Invoke operation, retrying failures with jittered exponential backoff.

    After ``max_attempts`` failures, or on a failure ``should_retry`` rejects,
    the last exception propagates to the caller.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    for attempt in range(max_attempts):
        try:
            return await operation()
        except Exception as exc:
            if attempt == max_attempts - 1 or not should_retry(exc):
                raise
            delay = backoff_delay(attempt, base_delay, max_delay)
            logger.warning(
                "Attempt %d/%d failed (%s), retrying in %.3fs",
                attempt + 1,
                max_attempts,
                exc,
                delay,
            )
            await sleep(delay)

    raise AssertionError("unreachable")


class RateLimitedRequester:
    """Single chokepoint for upstream calls: one limiter slot, retries inside it."""

    def __init__(
        self,
        limiter: ConcurrencyLimiter,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        base_delay: float = DEFAULT_BASE_DELAY,
        max_delay: float = DEFAULT_MAX_DELAY,
        sleep: Sleep = asyncio.sleep,
    ):
        self._limiter = limiter
        self._max_attempts = max_attempts
        self._base_delay = base_delay
        self._max_delay = max_delay
        self._sleep = sleep

    @property
    def limiter(self) -> ConcurrencyLimiter:
        return self._limiter

    async def request(self, operation: Operation[T], token: Optional[CancellationToken] = None) -> T:
        return await self._limiter.run(
            lambda: retry_with_backoff(
                operation,
                max_attempts=self._max_attempts,
                base_delay=self._base_delay,
                max_delay=self._max_delay,
                sleep=self._sleep,
            ),
            token=token,
        )


async def respectful_delay(min_delay: float = 0.2, max_delay: float = 0.4, sleep: Sleep = asyncio.sleep) -> None:
    """Pause for a random interval before hitting the provider."""
    if max_delay <= 0:
        return
    await sleep(random.uniform(min_delay, max_delay))
