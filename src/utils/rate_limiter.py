"""
Write throttling utility for progress saves
"""
import time
from typing import Callable, Optional
import logging

logger = logging.getLogger(__name__)


class WriteThrottle:
    """
    Last-write-timestamp guard: at most one write per `min_interval` seconds.

    A caller asks `try_acquire()` before writing; a False answer means the write
    should be skipped, not queued.
    """

    def __init__(self, min_interval: float = 5.0, clock: Callable[[], float] = time.monotonic):
        """
        Initialize write throttle

        Args:
            min_interval: Minimum number of seconds between two accepted writes
            clock: Monotonic time source, injectable for tests
        """
        if min_interval < 0:
            raise ValueError("min_interval must be non-negative")
        self.min_interval = min_interval
        self._clock = clock
        self.last_write_time: Optional[float] = None

    def seconds_until_ready(self) -> float:
        if self.last_write_time is None:
            return 0.0
        elapsed = self._clock() - self.last_write_time
        return max(0.0, self.min_interval - elapsed)

    def try_acquire(self) -> bool:
        """Record a write and return True if the interval has passed, else return False."""
        wait = self.seconds_until_ready()
        if wait > 0:
            logger.debug(f"Write throttled. Next write allowed in {wait:.2f} seconds")
            return False
        self.last_write_time = self._clock()
        return True

    def reset(self) -> None:
        self.last_write_time = None

    def get_stats(self) -> dict:
        """Get current throttle statistics"""
        return {
            'min_interval': self.min_interval,
            'last_write_time': self.last_write_time,
            'seconds_until_ready': self.seconds_until_ready(),
        }
