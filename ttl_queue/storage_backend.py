from abc import ABC, abstractmethod
from collections import deque
from itertools import chain
from typing import Generic, Iterator, NamedTuple, Optional, TypeVar
import logging

logger = logging.getLogger("StorageBackend")

T = TypeVar("T")


class Entry(NamedTuple, Generic[T]):
    """A value together with the instant it was pushed."""
    timestamp: float
    value: T


class StorageBackend(ABC):
    """Base strategy for holding queue entries in front-to-back order"""

    @abstractmethod
    def append(self, entry: Entry) -> None:
        """Add an entry at the back."""
        raise NotImplementedError

    @abstractmethod
    def front(self) -> Optional[Entry]:
        """
        Peek at the oldest entry.

        Returns:
            The front entry, or None when the backend is empty
        """
        raise NotImplementedError

    @abstractmethod
    def back(self) -> Optional[Entry]:
        """
        Peek at the newest entry.

        Returns:
            The back entry, or None when the backend is empty
        """
        raise NotImplementedError

    @abstractmethod
    def pop_front(self) -> Optional[Entry]:
        """
        Remove the oldest entry.

        Returns:
            The removed entry, or None when the backend is empty
        """
        raise NotImplementedError

    @abstractmethod
    def clear(self) -> None:
        raise NotImplementedError

    @abstractmethod
    def __len__(self) -> int:
        raise NotImplementedError

    @abstractmethod
    def __iter__(self) -> Iterator[Entry]:
        """
        Yield entries from oldest to newest.

        Raises RuntimeError if the backend is mutated while iterating.
        """
        raise NotImplementedError


class DequeBackend(StorageBackend):
    """Entries in a single deque - O(1) at both ends"""

    def __init__(self):
        self._data: deque[Entry] = deque()

    def append(self, entry: Entry) -> None:
        self._data.append(entry)

    def front(self) -> Optional[Entry]:
        return self._data[0] if self._data else None

    def back(self) -> Optional[Entry]:
        return self._data[-1] if self._data else None

    def pop_front(self) -> Optional[Entry]:
        return self._data.popleft() if self._data else None

    def clear(self) -> None:
        self._data.clear()

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[Entry]:
        # deque raises RuntimeError on its own when mutated mid-iteration
        return iter(self._data)


class DoubleStackBackend(StorageBackend):
    """
    Entries split across two lists used as stacks.

    New entries go on the inbox. The outbox holds older entries in reverse
    order so its last element is the front of the queue. When the outbox runs
    dry the whole inbox is moved over, which makes pop_front amortized O(1).
    """

    def __init__(self):
        self._inbox: list[Entry] = []
        self._outbox: list[Entry] = []
        self._version = 0

    def _fill_outbox(self) -> None:
        # builds new lists so a live iterator keeps walking the old ones
        if not self._outbox and self._inbox:
            self._outbox = self._inbox[::-1]
            self._inbox = []

    def append(self, entry: Entry) -> None:
        self._inbox.append(entry)
        self._version += 1

    def front(self) -> Optional[Entry]:
        self._fill_outbox()
        return self._outbox[-1] if self._outbox else None

    def back(self) -> Optional[Entry]:
        if self._inbox:
            return self._inbox[-1]
        # everything lives in the outbox, newest at index 0
        return self._outbox[0] if self._outbox else None

    def pop_front(self) -> Optional[Entry]:
        self._fill_outbox()
        if not self._outbox:
            return None
        self._version += 1
        return self._outbox.pop()

    def clear(self) -> None:
        self._inbox = []
        self._outbox = []
        self._version += 1

    def __len__(self) -> int:
        return len(self._inbox) + len(self._outbox)

    def __iter__(self) -> Iterator[Entry]:
        version = self._version
        inbox, outbox = self._inbox, self._outbox
        for entry in chain(reversed(outbox), inbox):
            if self._version != version:
                raise RuntimeError("DoubleStackBackend mutated during iteration")
            yield entry
        # a change after the last entry was handed out still counts
        if self._version != version:
            raise RuntimeError("DoubleStackBackend mutated during iteration")


# Map backend name to backend class
BACKEND_MAP: dict[str, type[StorageBackend]] = {
    "DEQUE": DequeBackend,
    "DOUBLE_STACK": DoubleStackBackend,
}


def backend_from_name(name: str) -> StorageBackend:
    """
    Build a fresh backend from its configuration name.

    Unknown names fall back to DequeBackend.
    """
    backend_cls = BACKEND_MAP.get(name.strip().upper())
    if backend_cls is None:
        logger.warning(f"Unknown storage backend '{name}', using {DequeBackend.__name__}")
        backend_cls = DequeBackend
    return backend_cls()
