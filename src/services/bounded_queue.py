"""
Bounded FIFO queue connecting the pipeline producer to its consumer.

Fixed capacity, blocking put/get and an explicit close-for-writes signal.
A capacity of 0 makes every put a rendezvous: the producer is released
only once a consumer has taken the item.
"""

import logging
import threading
from collections import deque
from typing import Any, Deque, Iterator

logger = logging.getLogger(__name__)


class QueueClosed(Exception):
    """Raised on put after close, and on get once the queue is closed and drained."""
    pass


class BoundedQueue:
    """
    Thread-safe bounded FIFO queue with close semantics.

    Items put before close() are still delivered to consumers; get() only
    reports QueueClosed once nothing is left to read.
    """

    def __init__(self, capacity: int):
        if capacity < 0:
            raise ValueError(f"Queue capacity must be >= 0, got: {capacity}")

        self._capacity = capacity
        self._items: Deque[Any] = deque()
        self._closed = False
        self._cond = threading.Condition()
        # Counters used by rendezvous puts to know when their item was taken
        self._put_count = 0
        self._taken_count = 0

    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def put(self, item: Any) -> None:
        """
        Append an item, blocking while the queue is full.

        Args:
            item: Value to enqueue

        Raises:
            QueueClosed: If the queue was closed before the item was accepted
        """
        with self._cond:
            if self._capacity > 0:
                while len(self._items) >= self._capacity and not self._closed:
                    self._cond.wait()
                if self._closed:
                    raise QueueClosed("put on closed queue")
                self._items.append(item)
                self._put_count += 1
                self._cond.notify_all()
                return

            if self._closed:
                raise QueueClosed("put on closed queue")

            self._items.append(item)
            self._put_count += 1
            ticket = self._put_count
            self._cond.notify_all()

            # Unbuffered: wait for a consumer to take this item
            while self._taken_count < ticket:
                self._cond.wait()

    def get(self) -> Any:
        """
        Remove and return the oldest item, blocking while the queue is empty.

        Returns:
            The oldest enqueued item

        Raises:
            QueueClosed: If the queue is closed and fully drained
        """
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if not self._items:
                raise QueueClosed("queue closed and drained")

            item = self._items.popleft()
            self._taken_count += 1
            self._cond.notify_all()
            return item

    def close(self) -> None:
        """Stop accepting new items and wake every waiter. Safe to call twice."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        logger.debug("Queue closed")

    def __iter__(self) -> Iterator[Any]:
        while True:
            try:
                yield self.get()
            except QueueClosed:
                return
