import logging
import random
import time
from dataclasses import dataclass
from typing import Callable, Tuple, Type, TypeVar

from workout_engine.config import DB_RETRY_ATTEMPTS, DB_RETRY_BASE_DELAY_MS

logger = logging.getLogger(__name__)

T = TypeVar("T")


def execute_with_retry(
    operation: Callable[[], T],
    max_attempts: int = 3,
    base_delay: float = 0.1,
    retry_on: Tuple[Type[BaseException], ...] = (Exception,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run a persistence operation with bounded retries and exponential backoff.

    Delay before attempt n+1 is ``base_delay * 2**(n-1)`` seconds plus up to
    100ms of jitter. The last error is re-raised once attempts are exhausted.
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be at least 1")

    attempt = 0
    while True:
        attempt += 1
        try:
            return operation()
        except retry_on as e:
            if attempt >= max_attempts:
                logger.error(f"Operation failed after {attempt} attempts: {e}")
                raise
            delay = base_delay * (2 ** (attempt - 1))
            if base_delay > 0:
                delay += random.uniform(0, 0.1)
            logger.warning(f"Attempt {attempt}/{max_attempts} failed ({e}). Retrying in {delay:.2f}s")
            sleep(delay)


@dataclass(frozen=True)
class RetryPolicy:
    """Retry settings shared by the persistence-facing components."""
    max_attempts: int = DB_RETRY_ATTEMPTS
    base_delay: float = DB_RETRY_BASE_DELAY_MS / 1000

    def run(self, operation: Callable[[], T]) -> T:
        return execute_with_retry(operation, max_attempts=self.max_attempts, base_delay=self.base_delay)
