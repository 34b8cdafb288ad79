"""
Stage queue: unbounded FIFO of tiles between a producer side and a worker pool.

Consumers block in pop() until a tile is available or the queue has been
closed for production and drained, in which case pop() returns NO_MORE_WORK.
"""
import logging
import threading
from collections import deque

from errors import QueueClosedError

logger = logging.getLogger(__name__)


class _NoMoreWork:
    def __repr__(self):
        return "NO_MORE_WORK"


NO_MORE_WORK = _NoMoreWork()


class StageQueue:
    def __init__(self, name: str = "stage"):
        self.name = name
        self._items = deque()
        self._closed = False
        self._pushed = 0
        self._cond = threading.Condition(threading.Lock())

    def push(self, tile) -> None:
        """Append a tile and wake one waiting consumer. Never blocks on capacity."""
        with self._cond:
            if self._closed:
                raise QueueClosedError(f"push on closed queue {self.name!r}")
            self._items.append(tile)
            self._pushed += 1
            self._cond.notify()

    def pop(self):
        """Oldest tile, blocking while empty and open; NO_MORE_WORK once closed and drained."""
        with self._cond:
            while not self._items and not self._closed:
                self._cond.wait()
            if self._items:
                return self._items.popleft()
            return NO_MORE_WORK

    def close(self) -> None:
        """Mark closed for production and wake every parked consumer. Idempotent."""
        with self._cond:
            if self._closed:
                return
            self._closed = True
            self._cond.notify_all()
        logger.debug("queue %s closed after %d tiles", self.name, self._pushed)

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def pushed(self) -> int:
        """Total number of tiles ever accepted."""
        with self._cond:
            return self._pushed

    def __len__(self):
        with self._cond:
            return len(self._items)

    def __repr__(self):
        return f"StageQueue({self.name!r}, pending={len(self)}, closed={self.closed})"
