from typing import Any, Callable
import logging
import time

from ttl_queue.storage_backend import StorageBackend
from ttl_queue.ttl_queue import TtlQueue

logger = logging.getLogger("FrequencyMeter")


class FrequencyMeter:
    """
    Counts events (frames, messages, requests...) seen during the last
    `window` seconds.
    """

    def __init__(
        self,
        window: float = 1.0,                                 # counting window in seconds
        *,
        clock: Callable[[], float] = time.monotonic,
        backend: StorageBackend | None = None,
    ):
        self._events: TtlQueue[None] = TtlQueue(window, clock=clock, backend=backend)

    @property
    def window(self) -> float:
        """Counting window in seconds, fixed for the life of the meter."""
        return self._events.ttl

    def tick(self) -> int:
        """
        Registers one event.

        Returns:
            Number of events observed within the window, this one included
        """
        return self._events.refresh_and_push_back(None)

    def count(self) -> int:
        return self._events.refresh()

    def rate_hz(self) -> float:
        """Events per second over the window."""
        count = self.count()
        if self.window == 0:
            return 0.0
        return count / self.window

    def mean_interval(self) -> float | None:
        """Mean time between the events still in the window, in seconds."""
        self._events.refresh()
        return self._events.avg_delta()

    def frequency_hz(self) -> float | None:
        """
        Instantaneous frequency estimated from the mean interval.
        None until two events are in the window, or if they share a timestamp.
        """
        interval = self.mean_interval()
        if not interval:
            return None
        return 1.0 / interval

    def snapshot(self) -> dict[str, Any]:
        """Current readings, suitable for logging."""
        count = self.count()
        interval = self._events.avg_delta()
        return {
            "count": count,
            "rate_hz": count / self.window if self.window else 0.0,
            "mean_interval": interval,
            "frequency_hz": 1.0 / interval if interval else None,
            "window": self.window,
        }

    def reset(self) -> None:
        logger.debug("Resetting frequency meter")
        self._events.clear()
