import asyncio
import logging
import random
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)


class RetryPolicy:
    """Exponential backoff with jitter for single-shot producer calls.

    Streaming calls are never retried: once a fragment has been written
    to a client, replaying the sequence would duplicate text.
    """

    def __init__(self, max_attempts: int = 3, base_delay: float = 1.0, max_delay: float = 40.0):
        self.max_attempts = max_attempts
        self.base_delay = base_delay
        self.max_delay = max_delay

    def calculate_backoff_time(self, attempt: int) -> float:
        return min(
            self.max_delay, self.base_delay * (2**attempt) + random.uniform(0, self.base_delay)
        )

    async def execute_with_retry(
        self,
        func: Callable[..., Awaitable[Any]],
        *args: Any,
        retry_if: Callable[[Exception], bool] | None = None,
    ) -> Any:
        """Await ``func(*args)`` until it succeeds or attempts run out.

        ``retry_if`` decides whether a failure is worth another attempt;
        a failure it rejects is raised at once.
        """
        label = getattr(func, "__qualname__", repr(func))
        for attempt in range(1, self.max_attempts + 1):
            try:
                return await func(*args)
            except Exception as exc:
                if retry_if is not None and not retry_if(exc):
                    logger.warning("%s failed with a non-retryable error: %s", label, exc)
                    raise
                if attempt == self.max_attempts:
                    logger.error("%s failed after %d attempt(s): %s", label, attempt, exc)
                    raise
                backoff_time = self.calculate_backoff_time(attempt)
                logger.warning(
                    "%s attempt %d/%d failed (%s); retrying in %.2fs",
                    label,
                    attempt,
                    self.max_attempts,
                    exc,
                    backoff_time,
                )
                await asyncio.sleep(backoff_time)
