"""
Neighborhood Sources: Composable Wrappers

Every source answers ``neighbors(idx) -> Iterator[IdxScore]``. The raw
similarity engine emits all co-occurring candidates unordered; these wrappers
shape that stream into what scoring code usually wants.

Provides:
    - TopKNeighborhood: k best candidates, highest score first
    - ThresholdNeighborhood: candidates scoring strictly above a threshold
    - CachedNeighborhood: precomputed lists for a whole index range
    - from_config: threshold then top-k, per NeighborhoodConfig
"""

from __future__ import annotations

from typing import Iterator, List, Optional

from fastrec.core.config import NeighborhoodConfig, ensure_valid
from fastrec.core.errors import QueryError
from fastrec.core.protocols import NeighborhoodSource
from fastrec.core.types import EMPTY_ADJACENCY, Adjacency, IdxScore
from fastrec.neighborhood.parallel import ordered_parallel_map
from fastrec.observability.logging import get_logger
from fastrec.topn import BoundedTopN

logger = get_logger(__name__)


# =============================================================================
# TOP-K
# =============================================================================
class TopKNeighborhood:
    """
    k-nearest neighbors of an underlying source.

    Ties at the cut-off follow the BoundedTopN admission rule.
    """

    __slots__ = ("_source", "_k")

    def __init__(self, source: NeighborhoodSource, k: int) -> None:
        if k < 0:
            raise ValueError(f"k must be >= 0, got {k}")
        self._source = source
        self._k = k

    @property
    def k(self) -> int:
        return self._k

    def neighbors(self, idx: int) -> Iterator[IdxScore]:
        top: BoundedTopN[int] = BoundedTopN(self._k)
        for nb in self._source.neighbors(idx):
            top.insert(nb.idx, nb.score)
        top.finalize()
        return (IdxScore(key, score) for key, score in top)


# =============================================================================
# THRESHOLD
# =============================================================================
class ThresholdNeighborhood:
    """Candidates with score > threshold, in source order. NaN never passes."""

    __slots__ = ("_source", "_threshold")

    def __init__(self, source: NeighborhoodSource, threshold: float) -> None:
        self._source = source
        self._threshold = threshold

    @property
    def threshold(self) -> float:
        return self._threshold

    def neighbors(self, idx: int) -> Iterator[IdxScore]:
        threshold = self._threshold
        return (nb for nb in self._source.neighbors(idx) if nb.score > threshold)


# =============================================================================
# CACHED
# =============================================================================
class CachedNeighborhood:
    """
    Materialized neighborhood over [0, n).

    Lists are computed once on a worker pool and stored as compiled arrays,
    preserving each source list's order. Useful in front of TopKNeighborhood
    when the same neighborhoods are read many times.
    """

    __slots__ = ("_lists",)

    def __init__(self, lists: List[Adjacency]) -> None:
        self._lists = lists

    @classmethod
    def build(
        cls,
        n: int,
        source: NeighborhoodSource,
        max_workers: Optional[int] = None,
        window: int = 4,
    ) -> CachedNeighborhood:
        if n < 0:
            raise ValueError(f"n must be >= 0, got {n}")

        def compute(origin: int) -> Adjacency:
            idxs: List[int] = []
            scores: List[float] = []
            for nb in source.neighbors(origin):
                idxs.append(nb.idx)
                scores.append(nb.score)
            if not idxs:
                return EMPTY_ADJACENCY
            return Adjacency.from_lists(idxs, scores)

        with logger.timed("Built cached neighborhood", size=n) as summary:
            lists = [
                lst for _, lst in ordered_parallel_map(
                    compute, range(n), max_workers=max_workers, window=window
                )
            ]
            summary["relations"] = sum(len(lst) for lst in lists)
        return cls(lists)

    @property
    def size(self) -> int:
        return len(self._lists)

    def neighbors(self, idx: int) -> Iterator[IdxScore]:
        if not 0 <= idx < len(self._lists):
            raise QueryError.out_of_range(idx, len(self._lists))
        return (IdxScore(i, s) for i, s in self._lists[idx].pairs())


# =============================================================================
# FACTORY
# =============================================================================
def from_config(source: NeighborhoodSource, config: NeighborhoodConfig) -> NeighborhoodSource:
    """Apply the configured threshold, then the top-k cut (k=0 keeps all)."""
    ensure_valid(config)
    shaped: NeighborhoodSource = source
    if config.threshold is not None:
        shaped = ThresholdNeighborhood(shaped, config.threshold)
    if config.k > 0:
        shaped = TopKNeighborhood(shaped, config.k)
    return shaped


__all__ = [
    "TopKNeighborhood",
    "ThresholdNeighborhood",
    "CachedNeighborhood",
    "from_config",
]
