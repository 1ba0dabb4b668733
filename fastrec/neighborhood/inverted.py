"""
Inverted Neighborhood Index

Transposes an existing neighborhood source: if origin ``o`` lists target
``t`` with score ``s``, the inverted index lists ``o`` with score ``s`` for
``t``. Used to answer "who has me as a neighbor" without rescanning.

Build Pipeline:
    1. Allocate an empty accumulator for every index accepted by the filter;
       rejected indices get no storage
    2. Compute ``source.neighbors(origin)`` for every origin in [0, n) on a
       worker pool
    3. A single consumer, the building thread, takes the results in origin
       order and appends ``(origin, score)`` to each accepted target's
       accumulator
    4. Compile accumulators into contiguous numpy arrays

Invariants:
    - ``(o, s)`` in inverted(t)  <=>  ``(t, s)`` in source(o), for accepted t
    - Each target's list is sorted by origin ascending, whatever the
      worker scheduling
    - Rejected or out-of-range targets emitted by the source are dropped

Algorithmic Complexity:
    - Build: O(n) allocation + O(total relations) accumulation, plus
      whatever the source costs per origin (spread over the workers)
    - Query: O(1) lookup, O(|list|) iteration

Thread Safety:
    - The source must tolerate concurrent ``neighbors`` calls
    - Accumulators are touched only by the building thread
    - The built index is immutable and safe for concurrent reads
"""

from __future__ import annotations

from typing import Callable, Iterator, List, Optional, Tuple

from fastrec.core.errors import QueryError
from fastrec.core.protocols import NeighborhoodSource
from fastrec.core.types import Adjacency, IdxScore, MutableAdjacency
from fastrec.neighborhood.parallel import ordered_parallel_map
from fastrec.observability.logging import get_logger

logger = get_logger(__name__)

IndexFilter = Callable[[int], bool]


def _materialize(source: NeighborhoodSource) -> Callable[[int], List[Tuple[int, float]]]:
    def compute(origin: int) -> List[Tuple[int, float]]:
        return [(nb.idx, nb.score) for nb in source.neighbors(origin)]

    return compute


class InvertedNeighborhood:
    """
    Reverse view of a neighborhood source over the index range [0, n).

    Example:
        >>> inv = InvertedNeighborhood.build(store.num_users, similarity)
        >>> [(nb.idx, nb.score) for nb in inv.neighbors(2)]
        [(0, 0.5), (1, 0.25)]
    """

    __slots__ = ("_lists", "_num_relations")

    def __init__(self, lists: List[Optional[Adjacency]], num_relations: int) -> None:
        self._lists = lists
        self._num_relations = num_relations

    @classmethod
    def build(
        cls,
        n: int,
        source: NeighborhoodSource,
        filter: Optional[IndexFilter] = None,
        max_workers: Optional[int] = None,
        window: int = 4,
    ) -> InvertedNeighborhood:
        """
        Invert ``source`` over the origins [0, n).

        Args:
            n: Size of the index range
            source: Forward neighborhood; queried once per origin
            filter: Targets to keep (None keeps all)
            max_workers: Worker threads (None = executor default, 1 = inline)
            window: In-flight origins per worker

        Raises:
            ValueError: negative n, or invalid worker settings
        """
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")
        with logger.timed("Built inverted neighborhood", size=n) as summary:
            accumulators: List[Optional[MutableAdjacency]] = [None] * n
            for idx in range(n):
                if filter is None or filter(idx):
                    accumulators[idx] = MutableAdjacency()

            num_relations = 0
            results = ordered_parallel_map(
                _materialize(source), range(n), max_workers=max_workers, window=window
            )
            for origin, relations in results:
                for target, score in relations:
                    if not 0 <= target < n:
                        continue
                    acc = accumulators[target]
                    if acc is not None:
                        acc.append(origin, score)
                        num_relations += 1

            lists = [acc.build() if acc is not None else None for acc in accumulators]
            summary.update(
                indexed=sum(1 for lst in lists if lst is not None),
                relations=num_relations,
            )
        return cls(lists, num_relations)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------
    @property
    def size(self) -> int:
        return len(self._lists)

    @property
    def num_relations(self) -> int:
        return self._num_relations

    def is_indexed(self, idx: int) -> bool:
        return 0 <= idx < len(self._lists) and self._lists[idx] is not None

    def _list(self, idx: int) -> Adjacency:
        if not 0 <= idx < len(self._lists):
            raise QueryError.out_of_range(idx, len(self._lists))
        lst = self._lists[idx]
        if lst is None:
            raise QueryError.not_indexed(idx)
        return lst

    def neighbors(self, idx: int) -> Iterator[IdxScore]:
        """
        Origins that list ``idx`` among their neighbors, ascending by origin.

        Raises:
            QueryError: idx outside [0, n) or rejected by the build filter
        """
        lst = self._list(idx)
        return (IdxScore(origin, score) for origin, score in lst.pairs())

    def neighbor_count(self, idx: int) -> int:
        return len(self._list(idx))

    def __repr__(self) -> str:
        return f"InvertedNeighborhood(size={self.size}, relations={self._num_relations})"


__all__ = ["InvertedNeighborhood", "IndexFilter"]
