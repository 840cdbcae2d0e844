"""Thread-safe FIFO queues used as task stores by the thread pools."""

from __future__ import annotations

import threading
from collections import deque
from typing import Any, Deque, Generic, List, Optional, TypeVar

T = TypeVar("T")


class QueueEmpty(Exception):
    """Raised when an item is requested from an empty queue."""


class LinkedQueue(Generic[T]):
    """Unbounded FIFO queue that takes no lock.

    It relies on the atomic ``append`` and ``popleft`` of :class:`collections.deque`,
    so any number of producers and consumers may use it at once.
    """

    def __init__(self) -> None:
        self._items: Deque[T] = deque()

    def push(self, item: T) -> bool:
        """Append ``item`` at the back. The queue is unbounded, so this always succeeds."""
        self._items.append(item)
        return True

    def pop(self) -> T:
        """Remove and return the front item, or raise :class:`QueueEmpty`."""
        try:
            return self._items.popleft()
        except IndexError:
            raise QueueEmpty("queue is empty") from None

    def empty(self) -> bool:
        """Return True when the queue holds no items."""
        return not self._items

    def __len__(self) -> int:
        return len(self._items)


class MutexQueue(Generic[T]):
    """Unbounded FIFO queue guarded by a single lock."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._lock = threading.Lock()

    def push(self, item: T) -> bool:
        """Append ``item`` at the back. Always succeeds."""
        with self._lock:
            self._items.append(item)
        return True

    def pop(self) -> T:
        """Remove and return the front item, or raise :class:`QueueEmpty`."""
        with self._lock:
            if not self._items:
                raise QueueEmpty("queue is empty")
            return self._items.popleft()

    def front(self) -> T:
        """Return the front item without removing it, or raise :class:`QueueEmpty`."""
        with self._lock:
            if not self._items:
                raise QueueEmpty("queue is empty")
            return self._items[0]

    def empty(self) -> bool:
        """Return True when the queue holds no items."""
        with self._lock:
            return not self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)


class RingBufferQueue(Generic[T]):
    """Bounded FIFO queue over a fixed circular buffer.

    One slot is always left free to tell a full buffer from an empty one, so a
    buffer of ``capacity`` slots holds at most ``capacity - 1`` items.
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be at least 1, got {capacity}")
        self._buffer: List[Optional[Any]] = [None] * capacity
        self._capacity = capacity
        self._head = 0
        self._tail = 0
        self._lock = threading.Lock()

    def _increment(self, index: int) -> int:
        return (index + 1) % self._capacity

    def push(self, item: T) -> bool:
        """Store ``item`` at the back; return False, storing nothing, when the buffer is full."""
        with self._lock:
            next_tail = self._increment(self._tail)
            if next_tail == self._head:
                return False
            self._buffer[self._tail] = item
            self._tail = next_tail
            return True

    def pop(self) -> T:
        """Remove and return the front item, or raise :class:`QueueEmpty`."""
        with self._lock:
            if self._head == self._tail:
                raise QueueEmpty("queue is empty")
            item = self._buffer[self._head]
            self._buffer[self._head] = None
            self._head = self._increment(self._head)
            return item  # type: ignore[return-value]

    def empty(self) -> bool:
        """Return True when the buffer holds no items."""
        with self._lock:
            return self._head == self._tail

    def __len__(self) -> int:
        with self._lock:
            return (self._tail - self._head) % self._capacity