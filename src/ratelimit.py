"""Limits for the concurrent detail-call fan-out."""

import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

from metrics import RATE_LIMIT_WAIT_SECONDS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FanOutLimits:
    """Bounds for one invocation's fan-out.

    max_concurrent sizes the worker pool; requests_per_second paces the
    calls across all workers (0 disables pacing).
    """

    max_concurrent: int = 10
    requests_per_second: float = 20.0

    @classmethod
    def from_env(cls) -> "FanOutLimits":
        """Read AWS_MAX_CONCURRENT_CALLS and AWS_REQUESTS_PER_SECOND.

        A concurrency below 1 would leave the pool without workers, so it is
        raised to 1.
        """
        max_concurrent = int(os.environ.get("AWS_MAX_CONCURRENT_CALLS", "10"))
        requests_per_second = float(os.environ.get("AWS_REQUESTS_PER_SECOND", "20"))
        if max_concurrent < 1:
            logger.warning(
                "AWS_MAX_CONCURRENT_CALLS=%d is not a usable worker count, using 1",
                max_concurrent,
            )
            max_concurrent = 1
        return cls(
            max_concurrent=max_concurrent,
            requests_per_second=max(requests_per_second, 0.0),
        )


class RateLimiter:
    """Hands out evenly spaced start times to calls from several threads.

    Each wait() reserves the next free slot under a lock and sleeps outside
    it, so workers queue up behind each other without holding the lock.
    """

    def __init__(
        self,
        requests_per_second: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.requests_per_second = requests_per_second
        self._interval = 1.0 / requests_per_second if requests_per_second > 0 else 0.0
        self._next_slot = 0.0
        self._lock = threading.Lock()
        self._clock = clock
        self._sleep = sleep

    def wait(self) -> float:
        """Block until this call may start; return the time waited."""
        if not self._interval:
            return 0.0
        with self._lock:
            now = self._clock()
            slot = max(now, self._next_slot)
            self._next_slot = slot + self._interval
        delay = slot - now
        if delay > 0:
            RATE_LIMIT_WAIT_SECONDS.observe(delay)
            self._sleep(delay)
        return delay

    def __repr__(self) -> str:
        return f"RateLimiter(requests_per_second={self.requests_per_second})"
