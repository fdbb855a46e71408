from datetime import timedelta
from typing import Callable, Generic, Iterator, TypeVar
import logging
import math
import time

from ttl_queue.storage_backend import DequeBackend, Entry, StorageBackend

logger = logging.getLogger("TtlQueue")

T = TypeVar("T")


class TtlQueue(Generic[T]):
    """
    A queue that drops its content after a given amount of time.

    Entries are stamped with the clock on push and kept in insertion order,
    which is also timestamp order. Nothing is evicted in the background:
    stale entries are only removed by refresh() and refresh_and_push_back().

    A frames-per-second counter looks like this:

        fps_counter = TtlQueue(1.0)
        while running:
            fps = fps_counter.refresh_and_push_back(frame)
    """

    def __init__(
        self,
        ttl: float | timedelta,                              # max entry age in seconds
        *,
        clock: Callable[[], float] = time.monotonic,         # source of "now" in seconds
        backend: StorageBackend | None = None,
    ):
        if isinstance(ttl, timedelta):
            ttl = ttl.total_seconds()
        if isinstance(ttl, bool) or not isinstance(ttl, (int, float)):
            raise TypeError(f"ttl must be a number of seconds or a timedelta, got {type(ttl).__name__}")
        ttl = float(ttl)
        if not math.isfinite(ttl) or ttl < 0:
            raise ValueError(f"ttl must be a finite non-negative duration, got {ttl}")

        if backend is not None and len(backend) > 0:
            raise ValueError("backend must be empty when handed to a TtlQueue")

        self._ttl = ttl
        self._clock = clock
        self._entries: StorageBackend = backend if backend is not None else DequeBackend()

    @property
    def ttl(self) -> float:
        return self._ttl

    def _now(self) -> float:
        """
        Reads the clock, never going back past the newest stored timestamp.
        Keeps entries sorted even if the clock misbehaves.
        """
        now = self._clock()
        newest = self._entries.back()
        if newest is not None and now < newest.timestamp:
            logger.warning(f"Clock went backwards ({now} < {newest.timestamp}), clamping")
            return newest.timestamp
        return now

    def push_back(self, value: T) -> None:
        """Pushes an element to the end of the queue."""
        self._entries.append(Entry(self._now(), value))

    def refresh(self) -> int:
        """
        Evicts expired entries from the front and returns how many remain.

        An entry is expired when its age is strictly greater than the ttl, so
        one aged exactly ttl is still counted. Scanning stops at the first
        live entry.
        """
        now = self._clock()
        evicted = 0

        while (front := self._entries.front()) is not None:
            if now - front.timestamp <= self._ttl:
                break
            self._entries.pop_front()
            evicted += 1

        if evicted:
            logger.debug(f"Evicted {evicted} expired entries, {len(self._entries)} left")

        return len(self._entries)

    def refresh_and_push_back(self, value: T) -> int:
        """
        Refreshes, then pushes the element and returns the number of entries
        now in the queue. The new element is never evicted by this call.
        """
        count = self.refresh()
        self.push_back(value)
        return count + 1

    def peek_front(self) -> Entry[T] | None:
        """Returns the oldest entry with its timestamp, without removing it."""
        return self._entries.front()

    def pop_front(self) -> Entry[T] | None:
        """Removes and returns the oldest entry with its timestamp, if any."""
        return self._entries.pop_front()

    def clear(self) -> None:
        self._entries.clear()

    def len(self) -> int:
        """
        Number of entries currently held, including potentially expired ones.
        Call refresh() for an accurate count.
        """
        return len(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def is_empty(self) -> bool:
        return len(self._entries) == 0

    def iter(self) -> Iterator[T]:
        """Yields values from oldest to newest without evicting or consuming."""
        for entry in self._entries:
            yield entry.value

    def __iter__(self) -> Iterator[T]:
        return self.iter()

    def entries(self) -> Iterator[Entry[T]]:
        """Same as iter() but yields (timestamp, value) entries."""
        return iter(self._entries)

    def drain(self) -> "Drain[T]":
        """Returns a one-shot iterator that empties the queue as it goes."""
        return Drain(self)

    def avg_delta(self) -> float | None:
        """
        Average gap between consecutive timestamps of the stored entries.

        Does not evict first. Returns None with fewer than two entries.
        """
        count = len(self._entries)
        if count < 2:
            return None

        # gaps telescope, so the mean only needs the two ends
        first = self._entries.front()
        last = self._entries.back()
        return (last.timestamp - first.timestamp) / (count - 1)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(ttl={self._ttl}, len={len(self._entries)})"


class Drain(Generic[T]):
    """Consuming iterator over a TtlQueue, front to back."""

    def __init__(self, queue: TtlQueue[T]):
        self._queue = queue
        self._exhausted = False

    def __iter__(self) -> "Drain[T]":
        return self

    def __next__(self) -> T:
        if self._exhausted:
            raise StopIteration

        entry = self._queue.pop_front()
        if entry is None:
            # stays exhausted even if the queue is refilled later
            self._exhausted = True
            raise StopIteration
        return entry.value
