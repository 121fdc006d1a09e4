"""
Retry with exponential backoff for package downloads.
"""

import logging
import random
import time
from typing import Callable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ExponentialBackoff:
    """Delays between download attempts, doubling each time with jitter."""

    def __init__(self, base_delay: float = 1.0, max_delay: float = 30.0, max_retries: int = 3):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_retries = max_retries

    def calculate_delay(self, attempt: int) -> float:
        delay = min(self.base_delay * (2**attempt), self.max_delay)
        # ±25% jitter
        jitter = delay * 0.25 * (random.random() * 2 - 1)
        return max(0, delay + jitter)

    def should_retry(self, attempt: int) -> bool:
        return attempt < self.max_retries


def retry(
    operation: Callable[[], T],
    backoff: ExponentialBackoff,
    retry_on: tuple[type[BaseException], ...],
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``operation`` until it succeeds or the backoff gives up.

    Only exceptions in ``retry_on`` are retried; the last one is re-raised.
    """
    attempt = 0
    while True:
        try:
            return operation()
        except retry_on as e:
            if not backoff.should_retry(attempt):
                logger.debug(f"Giving up after {attempt + 1} attempts: {e}")
                raise
            delay = backoff.calculate_delay(attempt)
            logger.debug(f"Attempt failed ({type(e).__name__}), retry {attempt + 1} after {delay:.1f}s")
            sleep(delay)
            attempt += 1
