"""
Polling policy shared by the file processing wait and the job completion wait
"""

import asyncio
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from finetune_studio.utils.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class RetryOutcome(Generic[T]):
    """Result of running a retry policy"""

    succeeded: bool
    attempts: int
    last_result: Optional[T] = None
    last_error: Optional[BaseException] = None


class RetryPolicy:
    """
    Call an async attempt until its result satisfies a predicate

    Exceptions raised by the attempt count as failed attempts. The policy sleeps
    between attempts, never after the last one.
    """

    def __init__(
        self,
        max_attempts: int,
        delay_ms: int,
        backoff: float = 1.0,
        max_delay_ms: Optional[int] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Args:
            max_attempts: Maximum number of calls to the attempt
            delay_ms: Delay before the second attempt, in milliseconds
            backoff: Multiplier applied to the delay after each attempt (1.0 keeps it fixed)
            max_delay_ms: Upper bound for the delay when backing off
            sleep: Coroutine used to wait, takes seconds
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if delay_ms < 0:
            raise ValueError("delay_ms must not be negative")
        if backoff < 1.0:
            raise ValueError("backoff must be >= 1.0")

        self.max_attempts = max_attempts
        self.delay_ms = delay_ms
        self.backoff = backoff
        self.max_delay_ms = max_delay_ms
        self._sleep = sleep

    @classmethod
    def fixed(cls, max_attempts: int, delay_ms: int, **kwargs) -> "RetryPolicy":
        return cls(max_attempts=max_attempts, delay_ms=delay_ms, backoff=1.0, **kwargs)

    def delay_for(self, attempt: int) -> float:
        """
        Delay in seconds to wait after ``attempt`` (1-based) failed

        Args:
            attempt: Number of the attempt that just failed

        Returns:
            Seconds to sleep
        """
        delay = self.delay_ms * (self.backoff ** (attempt - 1))
        if self.max_delay_ms is not None:
            delay = min(delay, self.max_delay_ms)
        return delay / 1000.0

    async def run(
        self,
        attempt: Callable[[], Awaitable[T]],
        predicate: Callable[[T], bool],
        description: str = "operation",
    ) -> RetryOutcome[T]:
        """
        Run ``attempt`` until ``predicate`` accepts its result or attempts run out

        Args:
            attempt: Zero-argument coroutine function performing one try
            predicate: Returns True when a result means we are done
            description: Short label used in log messages

        Returns:
            RetryOutcome describing the last attempt
        """
        outcome: RetryOutcome[T] = RetryOutcome(succeeded=False, attempts=0)

        for number in range(1, self.max_attempts + 1):
            outcome.attempts = number
            try:
                result = await attempt()
            except Exception as e:
                outcome.last_error = e
                logger.error(f"Error during {description} (attempt {number}/{self.max_attempts}): {e}")
            else:
                outcome.last_result = result
                outcome.last_error = None
                if predicate(result):
                    outcome.succeeded = True
                    return outcome

            if number < self.max_attempts:
                delay = self.delay_for(number)
                logger.info(
                    f"{description} not done yet (attempt {number}/{self.max_attempts}). "
                    f"Waiting {delay * 1000:.0f}ms..."
                )
                await self._sleep(delay)

        return outcome
