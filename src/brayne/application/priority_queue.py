"""
Indexed binary min-heap keyed by (priority, item).

Unlike `heapq`, every item keeps a slot index so its priority can be changed
or the item removed in O(log n). Ties on priority are broken by the item
itself, which keeps iteration order deterministic.
"""

from collections.abc import Hashable, Iterator
from typing import Any, Generic, TypeVar

T = TypeVar("T", bound=Hashable)


class IndexedPriorityQueue(Generic[T]):
    def __init__(self) -> None:
        self._heap: list[tuple[Any, T]] = []
        self._index: dict[T, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, item: object) -> bool:
        return item in self._index

    def __iter__(self) -> Iterator[tuple[T, Any]]:
        """Yield (item, priority) pairs in priority order without consuming the queue."""
        for priority, item in sorted(self._heap):
            yield item, priority

    def priority(self, item: T) -> Any:
        return self._heap[self._index[item]][0]

    def peek(self) -> tuple[T, Any] | None:
        if not self._heap:
            return None
        priority, item = self._heap[0]
        return item, priority

    def push(self, item: T, priority: Any) -> None:
        if item in self._index:
            raise KeyError(f"{item!r} is already queued")
        self._heap.append((priority, item))
        self._index[item] = len(self._heap) - 1
        self._sift_up(len(self._heap) - 1)

    def update(self, item: T, priority: Any) -> None:
        """Change the priority of a queued item, in either direction."""
        pos = self._index[item]
        self._heap[pos] = (priority, item)
        self._sift_up(pos)
        self._sift_down(self._index[item])

    def remove(self, item: T) -> Any:
        """Remove `item` and return its priority. Raises KeyError if absent."""
        pos = self._index.pop(item)
        priority = self._heap[pos][0]
        last = self._heap.pop()
        if pos < len(self._heap):
            self._heap[pos] = last
            self._index[last[1]] = pos
            self._sift_up(pos)
            self._sift_down(self._index[last[1]])
        return priority

    def pop(self) -> tuple[T, Any]:
        if not self._heap:
            raise IndexError("pop from an empty priority queue")
        priority, item = self._heap[0]
        self.remove(item)
        return item, priority

    # ---------- Heap maintenance ----------

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._index[heap[i][1]] = i
        self._index[heap[j][1]] = j

    def _sift_up(self, pos: int) -> None:
        while pos > 0:
            parent = (pos - 1) // 2
            if self._heap[pos] < self._heap[parent]:
                self._swap(pos, parent)
                pos = parent
            else:
                break

    def _sift_down(self, pos: int) -> None:
        size = len(self._heap)
        while True:
            smallest = pos
            for child in (2 * pos + 1, 2 * pos + 2):
                if child < size and self._heap[child] < self._heap[smallest]:
                    smallest = child
            if smallest == pos:
                return
            self._swap(pos, smallest)
            pos = smallest
