"""
Indexed max-heap over (name, key) pairs.

Key ideas:
- Array-backed binary heap plus a name → slot map, so upsert and remove
  locate an entry in O(1) and repair the heap in O(log n).
- Entries with equal keys are ordered by name (ascending), which makes
  top-k output deterministic.
- top_k never touches the heap: it walks it best-first with a small
  frontier heap of candidate slots, O(k log k).
"""
from __future__ import annotations
import heapq
import logging
from typing import Generic, Optional, TypeVar

from .errors import InvalidArgument, KExceedsSize

logger = logging.getLogger(__name__)

K = TypeVar("K")


class _Inverted:
    """Wraps a key so heapq's min-heap pops the largest key first."""
    __slots__ = ("key", "name")

    def __init__(self, key, name: str) -> None:
        self.key = key
        self.name = name

    def __lt__(self, other: "_Inverted") -> bool:
        if self.key != other.key:
            return self.key > other.key
        return self.name < other.name


class RankIndex(Generic[K]):
    """
    Usage:
        index: RankIndex[int] = RankIndex("versions")
        index.upsert("a.txt", 3)
        index.upsert("b.txt", 5)
        index.top_k(2)    # [("b.txt", 5), ("a.txt", 3)]
    """

    def __init__(self, label: str = "rank") -> None:
        self.label = label
        self._heap: list[tuple[K, str]] = []
        self._slot: dict[str, int] = {}

    def __len__(self) -> int:
        return len(self._heap)

    def __contains__(self, name: str) -> bool:
        return name in self._slot

    def get(self, name: str) -> Optional[K]:
        slot = self._slot.get(name)
        return None if slot is None else self._heap[slot][0]

    # ── Public API ───────────────────────────────────────────────────

    def upsert(self, name: str, key: K) -> None:
        """Insert ``name`` with ``key``, or move it to ``key`` if present."""
        slot = self._slot.get(name)
        if slot is None:
            self._heap.append((key, name))
            self._slot[name] = len(self._heap) - 1
            self._sift_up(len(self._heap) - 1)
        else:
            self._heap[slot] = (key, name)
            self._repair(slot)
        logger.debug("%s: %s -> %r", self.label, name, key)

    def remove(self, name: str) -> None:
        """Delete ``name``; a missing name is ignored."""
        slot = self._slot.pop(name, None)
        if slot is None:
            return
        last = self._heap.pop()
        if slot < len(self._heap):
            self._heap[slot] = last
            self._slot[last[1]] = slot
            self._repair(slot)

    def top_k(self, k: Optional[int] = None) -> list[tuple[str, K]]:
        """
        The ``k`` entries with the largest keys, in descending order.
        ``k=None`` means every entry. Raises KExceedsSize if ``k`` is larger
        than the number of entries; it is not clamped.
        """
        size = len(self._heap)
        if k is None:
            k = size
        if k < 0:
            raise InvalidArgument(f"k must be non-negative, got {k}")
        if k > size:
            raise KExceedsSize(f"Requested {k} entries but only {size} exist")

        result: list[tuple[str, K]] = []
        frontier: list[tuple[_Inverted, int]] = []
        if size:
            frontier.append(self._candidate(0))
        while len(result) < k:
            _, slot = heapq.heappop(frontier)
            key, name = self._heap[slot]
            result.append((name, key))
            for child in (2 * slot + 1, 2 * slot + 2):
                if child < size:
                    heapq.heappush(frontier, self._candidate(child))
        return result

    # ── Heap internals ───────────────────────────────────────────────

    def _candidate(self, slot: int) -> tuple[_Inverted, int]:
        key, name = self._heap[slot]
        return _Inverted(key, name), slot

    def _outranks(self, i: int, j: int) -> bool:
        ki, ni = self._heap[i]
        kj, nj = self._heap[j]
        if ki != kj:
            return ki > kj
        return ni < nj

    def _swap(self, i: int, j: int) -> None:
        heap = self._heap
        heap[i], heap[j] = heap[j], heap[i]
        self._slot[heap[i][1]] = i
        self._slot[heap[j][1]] = j

    def _sift_up(self, i: int) -> int:
        while i > 0:
            parent = (i - 1) // 2
            if not self._outranks(i, parent):
                break
            self._swap(i, parent)
            i = parent
        return i

    def _sift_down(self, i: int) -> None:
        size = len(self._heap)
        while True:
            best = i
            for child in (2 * i + 1, 2 * i + 2):
                if child < size and self._outranks(child, best):
                    best = child
            if best == i:
                return
            self._swap(i, best)
            i = best

    def _repair(self, slot: int) -> None:
        if self._sift_up(slot) == slot:
            self._sift_down(slot)
