"""
Co-Occurrence Set Similarity Engine

Similarity between two elements (users, or items in ITEM orientation) is a
function of their profile sizes and the size of the profiles' intersection:

    sim(|A ∩ B|, |A|, |B|)

Neighbor Computation ("co-occurrence counting"):
    1. Iterate the queried element's profile
    2. For each object in it, walk back through the dual index to every
       element that also references that object, incrementing its counter
    3. Drop the queried element itself, apply the metric to each counter

Counter Strategies (chosen explicitly, no heuristic):
    - DENSE:  full-length counter array over the element universe.
              O(|universe|) memory per query, fastest at high candidate density
    - SPARSE: dict from candidate to count.
              O(|candidates|) memory per query, preferred for large sparse data

Walk Variants:
    - naive (vectorized=False): walks IdxPref objects produced by the store
    - vectorized (vectorized=True): concatenates the compiled index arrays and
      counts with numpy (bincount for DENSE, unique for SPARSE), no per-pair
      objects

All four combinations yield the same (candidate, score) set.

Algorithmic Complexity:
    - neighbors(idx): O(sum of popularity over idx's profile objects)
      plus O(|universe|) for DENSE
    - Blow-up from very popular objects is the caller's to control
      (profile truncation, metric thresholds), not this component's

Thread Safety:
    - Queries are side-effect free; concurrent queries on different (or the
      same) indices are safe
"""

from __future__ import annotations

from typing import Callable, Dict, Iterator, List, Optional

import numpy as np

from fastrec.core.config import SimilarityConfig, ensure_valid
from fastrec.core.protocols import SimilarityMetric
from fastrec.core.types import CounterStrategy, IdxScore, Orientation
from fastrec.preference.store import PreferenceStore
from fastrec.similarity.metrics import get_metric


class SetSimilarity:
    """
    Pluggable co-occurrence similarity over a PreferenceStore.

    Implements ``NeighborhoodSource``: ``neighbors(idx)`` yields every other
    element sharing at least one object with ``idx``, scored by ``metric``.

    Example:
        >>> sim = SetSimilarity(store, jaccard, CounterStrategy.DENSE)
        >>> sorted(sim.neighbors(0), key=lambda n: n.idx)
        [IdxScore(idx=1, score=0.3333333333333333)]
    """

    __slots__ = (
        "_data", "_metric", "_strategy", "_vectorized",
        "_orientation", "_sizes",
    )

    def __init__(
        self,
        store: PreferenceStore,
        metric: SimilarityMetric,
        strategy: CounterStrategy = CounterStrategy.SPARSE,
        vectorized: bool = False,
        orientation: Orientation = Orientation.USER,
    ) -> None:
        """
        Args:
            store: Preference store to compare over
            metric: ``(intersection, size_a, size_b) -> float``
            strategy: DENSE or SPARSE counter accumulation
            vectorized: Use the numpy walk over compiled index arrays
            orientation: USER compares users, ITEM compares items
        """
        # Item orientation walks the transposed view: items play "users"
        self._data = store if orientation is Orientation.USER else store.transpose()
        self._metric = metric
        self._strategy = strategy
        self._vectorized = vectorized
        self._orientation = orientation
        self._sizes: Optional[List[int]] = None
        if vectorized:
            self._sizes = [
                self._data.user_profile_size(i) for i in range(self._data.num_users)
            ]

    @classmethod
    def from_config(cls, store: PreferenceStore, config: SimilarityConfig) -> SetSimilarity:
        ensure_valid(config)
        return cls(
            store,
            get_metric(config.metric, config.alpha),
            strategy=config.strategy,
            vectorized=config.vectorized,
            orientation=config.orientation,
        )

    # -------------------------------------------------------------------------
    # Properties
    # -------------------------------------------------------------------------
    @property
    def num_elements(self) -> int:
        """Size of the compared universe (users, or items in ITEM orientation)."""
        return self._data.num_users

    @property
    def strategy(self) -> CounterStrategy:
        return self._strategy

    @property
    def vectorized(self) -> bool:
        return self._vectorized

    @property
    def orientation(self) -> Orientation:
        return self._orientation

    def profile_size(self, idx: int) -> int:
        if self._sizes is not None and 0 <= idx < len(self._sizes):
            return self._sizes[idx]
        return self._data.user_profile_size(idx)

    # -------------------------------------------------------------------------
    # Intersection Counting
    # -------------------------------------------------------------------------
    def _naive_map(self, idx: int) -> Dict[int, int]:
        counts: Dict[int, int] = {}
        data = self._data
        for pref in data.user_preferences(idx):
            for other in data.item_preferences(pref.idx):
                counts[other.idx] = counts.get(other.idx, 0) + 1
        counts.pop(idx, None)
        return counts

    def _naive_array(self, idx: int) -> List[int]:
        data = self._data
        counts = [0] * data.num_users
        for pref in data.user_preferences(idx):
            for other in data.item_preferences(pref.idx):
                counts[other.idx] += 1
        counts[idx] = 0
        return counts

    def _walk(self, idx: int) -> np.ndarray:
        """Every element reached in one hop, with multiplicity."""
        data = self._data
        objects = data.user_profile(idx).idxs
        if len(objects) == 0:
            return np.empty(0, dtype=np.int64)
        return np.concatenate([data.item_profile(o).idxs for o in objects.tolist()])

    def _vectorized_map(self, idx: int) -> Dict[int, int]:
        candidates, counts = np.unique(self._walk(idx), return_counts=True)
        keep = candidates != idx
        return dict(zip(candidates[keep].tolist(), counts[keep].tolist()))

    def _vectorized_array(self, idx: int) -> np.ndarray:
        counts = np.bincount(self._walk(idx), minlength=self._data.num_users)
        counts[idx] = 0
        return counts

    def intersection_counts(self, idx: int) -> Dict[int, int]:
        """Candidate -> |profile(idx) ∩ profile(candidate)|, self excluded."""
        if self._strategy is CounterStrategy.DENSE:
            if self._vectorized:
                counts = self._vectorized_array(idx)
                nonzero = np.flatnonzero(counts)
                return dict(zip(nonzero.tolist(), counts[nonzero].tolist()))
            return {i: c for i, c in enumerate(self._naive_array(idx)) if c != 0}
        if self._vectorized:
            return self._vectorized_map(idx)
        return self._naive_map(idx)

    # -------------------------------------------------------------------------
    # Neighborhood Source
    # -------------------------------------------------------------------------
    def neighbors(self, idx: int) -> Iterator[IdxScore]:
        """
        Scored neighbors of ``idx``, unordered, never containing ``idx``.

        Counting happens eagerly at call time; scoring is lazy. An empty
        profile yields an empty iterator.
        """
        size_a = self.profile_size(idx)
        if size_a == 0:
            return iter(())
        counts = self.intersection_counts(idx)
        metric = self._metric
        size_of = self.profile_size
        return (
            IdxScore(other, metric(coo, size_a, size_of(other)))
            for other, coo in counts.items()
        )

    similar_elements = neighbors

    def similarity(self, idx1: int) -> Callable[[int], float]:
        """
        Pairwise similarity closure for ``idx1``.

        ``similarity(a)(b)`` equals the score ``neighbors(a)`` reports for
        ``b`` whenever the two profiles intersect. Unlike ``neighbors`` it can
        be evaluated for any ``b``, including ``a`` itself.
        """
        profile = self._data.user_profile(idx1).idxs
        multiplicity: Dict[int, int] = {}
        for obj in profile.tolist():
            multiplicity[obj] = multiplicity.get(obj, 0) + 1
        size_a = len(profile)
        metric = self._metric
        data = self._data

        def sim(idx2: int) -> float:
            objects = data.user_profile(idx2).idxs.tolist()
            coo = sum(multiplicity.get(obj, 0) for obj in objects)
            return metric(coo, size_a, len(objects))

        return sim

    def __repr__(self) -> str:
        return (
            f"SetSimilarity(orientation={self._orientation.value}, "
            f"strategy={self._strategy.value}, vectorized={self._vectorized})"
        )


__all__ = ["SetSimilarity"]
