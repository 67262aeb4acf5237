"""Min-priority queue with first-in first-out ordering among equal priorities."""

import heapq
from itertools import count
from typing import Generic, List, Optional, Tuple, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """
    Binary-heap priority queue.

    Entries are ``(priority, sequence, item)`` triples. The sequence number
    grows with every insert, so an item inserted with a priority equal to
    existing items is served after all of them. Items are never compared
    with each other, and the same item may be queued several times.
    """

    def __init__(self):
        self._heap: List[Tuple[float, int, T]] = []
        self._sequence = count()

    def insert(self, item: T, priority: float) -> None:
        """Queue ``item`` with the given priority."""
        heapq.heappush(self._heap, (priority, next(self._sequence), item))

    def dequeue(self) -> Optional[T]:
        """Remove and return the lowest-priority item, or None if empty."""
        if not self._heap:
            return None
        return heapq.heappop(self._heap)[2]

    def peek(self) -> Optional[T]:
        """Return the lowest-priority item without removing it, or None if empty."""
        if not self._heap:
            return None
        return self._heap[0][2]

    @property
    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
