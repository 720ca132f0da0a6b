from __future__ import annotations

from collections import deque
from typing import Deque, Generic, Iterator, List, Tuple, TypeVar

T = TypeVar("T")


class RequestQueue(Generic[T]):
    """FIFO queue that only supports appending and draining from the front."""

    def __init__(self) -> None:
        self._items: Deque[T] = deque()

    def enqueue(self, item: T) -> None:
        self._items.append(item)

    def drain(self, limit: int) -> List[T]:
        """Remove and return up to ``limit`` items from the front."""
        drained: List[T] = []
        while self._items and len(drained) < limit:
            drained.append(self._items.popleft())
        return drained

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> Tuple[T, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[T]:
        return iter(self.snapshot())


class DirectionalQueues(Generic[T]):
    """Pair of FIFO queues split by travel direction."""

    def __init__(self) -> None:
        self.up: RequestQueue[T] = RequestQueue()
        self.down: RequestQueue[T] = RequestQueue()

    def enqueue(self, item: T, going_up: bool) -> None:
        queue = self.up if going_up else self.down
        queue.enqueue(item)

    def clear(self) -> None:
        self.up.clear()
        self.down.clear()
