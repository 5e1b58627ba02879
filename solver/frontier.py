from __future__ import annotations

import heapq
from typing import Generic, TypeVar

T = TypeVar("T")


class PriorityQueue(Generic[T]):
    """Max-priority queue on top of heapq. Order among equal priorities is unspecified."""

    def __init__(self) -> None:
        self._heap: list[tuple[float, int, T]] = []
        self._counter = 0

    def enqueue(self, item: T, priority: float) -> None:
        self._counter += 1
        heapq.heappush(self._heap, (-priority, self._counter, item))

    def dequeue(self) -> T:
        if not self._heap:
            raise IndexError("dequeue from empty priority queue")
        _, _, item = heapq.heappop(self._heap)
        return item

    def peek_priority(self) -> float:
        if not self._heap:
            raise IndexError("peek into empty priority queue")
        return -self._heap[0][0]

    def size(self) -> int:
        return len(self._heap)

    def __len__(self) -> int:
        return len(self._heap)

    def __bool__(self) -> bool:
        return bool(self._heap)
