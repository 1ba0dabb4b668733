"""
Bounded Top-N Accumulator

Fixed-capacity best-of-N collection over (key, score) pairs, used to build
top-k neighborhoods and by the dithering reranker.

Lifecycle:
    created -> insert()* -> finalize() -> read-only (to_sequence / iteration)

Admission Rule:
    - Fewer than N entries kept: always admitted
    - Full: admitted only if score > current minimum, which is evicted
    - NaN scores are never admitted

Tie Rule:
    - Among entries tied at the minimum score the oldest-inserted is
      evicted first (FIFO); a newcomer equal to the minimum is rejected
    - finalize() orders by score descending, ties by insertion order

Algorithmic Complexity:
    - insert: O(log N) (heap push / replace on a min-heap of size N)
    - finalize: O(N log N)
    - Memory: O(N)

Thread Safety:
    - Not thread-safe; one instance per query
"""

from __future__ import annotations

import heapq
from typing import Generic, Iterator, List, Optional, Tuple, TypeVar

from fastrec.core.errors import InvalidStateError

K = TypeVar("K")


class BoundedTopN(Generic[K]):
    """
    Best-of-N accumulator.

    Heap entries are ``(score, sequence, key)``; the insertion sequence number
    makes entries totally ordered without ever comparing keys, and puts the
    oldest of several equal minimum scores at the heap root.

    Example:
        >>> top = BoundedTopN(2)
        >>> for key, score in [("a", 1.0), ("b", 3.0), ("c", 2.0), ("d", 5.0)]:
        ...     top.insert(key, score)
        >>> top.finalize()
        >>> top.to_sequence()
        [('d', 5.0), ('b', 3.0)]
    """

    __slots__ = ("_capacity", "_heap", "_sequence", "_sorted")

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError(f"capacity must be >= 0, got {capacity}")
        self._capacity = capacity
        self._heap: List[Tuple[float, int, K]] = []
        self._sequence = 0
        self._sorted: Optional[List[Tuple[K, float]]] = None

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------
    @property
    def capacity(self) -> int:
        return self._capacity

    @property
    def is_finalized(self) -> bool:
        return self._sorted is not None

    @property
    def is_full(self) -> bool:
        return len(self._heap) >= self._capacity

    @property
    def min_score(self) -> Optional[float]:
        """Lowest kept score, or None when empty."""
        return self._heap[0][0] if self._heap else None

    def __len__(self) -> int:
        return len(self._heap)

    # -------------------------------------------------------------------------
    # Accumulation
    # -------------------------------------------------------------------------
    def insert(self, key: K, score: float) -> bool:
        """
        Offer a pair. Returns True if it was kept.

        Raises:
            InvalidStateError: after finalize()
        """
        if self._sorted is not None:
            raise InvalidStateError.finalized("insert")
        if score != score or self._capacity == 0:
            return False

        heap = self._heap
        if len(heap) < self._capacity:
            heapq.heappush(heap, (score, self._sequence, key))
        elif score > heap[0][0]:
            heapq.heapreplace(heap, (score, self._sequence, key))
        else:
            return False
        self._sequence += 1
        return True

    def finalize(self) -> None:
        """Freeze and sort descending by score. Calling twice is a no-op."""
        if self._sorted is not None:
            return
        ordered = sorted(self._heap, key=lambda entry: (-entry[0], entry[1]))
        self._sorted = [(key, score) for score, _, key in ordered]

    # -------------------------------------------------------------------------
    # Reading
    # -------------------------------------------------------------------------
    def to_sequence(self) -> List[Tuple[K, float]]:
        """
        Kept pairs, highest score first.

        Raises:
            InvalidStateError: before finalize()
        """
        if self._sorted is None:
            raise InvalidStateError.not_finalized("read")
        return list(self._sorted)

    def keys(self) -> List[K]:
        return [key for key, _ in self.to_sequence()]

    def __iter__(self) -> Iterator[Tuple[K, float]]:
        return iter(self.to_sequence())

    def __repr__(self) -> str:
        state = "finalized" if self._sorted is not None else "open"
        return f"BoundedTopN(capacity={self._capacity}, size={len(self._heap)}, {state})"


__all__ = ["BoundedTopN"]
