"""Token-bucket pacing for embedding provider calls."""

import logging
import threading
import time
from collections.abc import Callable

logger = logging.getLogger(__name__)


class RateLimiter:
    """Token bucket allowing ``rate`` calls per ``period`` seconds.

    The bucket starts full, so short bursts up to ``rate`` calls go through
    immediately; after that callers block until a token refills.
    """

    def __init__(
        self,
        rate: int,
        period: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate <= 0 or period <= 0:
            raise ValueError(f"rate and period must be positive, got {rate}/{period}")
        self.capacity = float(rate)
        self.refill_per_second = rate / period
        self._clock = clock
        self._sleep = sleep
        self._tokens = self.capacity
        self._updated = clock()
        self._lock = threading.Lock()

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._updated)
        self._tokens = min(self.capacity, self._tokens + elapsed * self.refill_per_second)
        self._updated = now

    def acquire(self) -> float:
        """Take one token, sleeping until one is available.

        Returns:
            float: Seconds spent waiting
        """
        waited = 0.0
        with self._lock:
            self._refill()
            while self._tokens < 1.0:
                delay = (1.0 - self._tokens) / self.refill_per_second
                logger.debug(f"Rate limit reached, waiting {delay:.2f}s")
                self._sleep(delay)
                waited += delay
                self._refill()
            self._tokens -= 1.0
        return waited
