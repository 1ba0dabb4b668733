"""
Dithering Reranker

Reorders a ranked list by a log-rank score perturbed with Gaussian noise, so
repeated calls on the same list surface different items.

For original rank i (0-based) of M items:

    score(i) = log(i + 1) + N(0, sqrt(variance))

Each (M - i, score) pair goes through a BoundedTopN sized to the target
length; the finalized keys k map back to original positions M - k, in
descending perturbed-score order.

Randomness:
    Noise comes from a ``numpy.random.Generator``. Pass ``seed`` or an explicit
    ``rng`` for reproducible output; otherwise every call differs.

Thread Safety:
    - A Generator is not thread-safe; give each thread its own reranker
"""

from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from fastrec.core.types import RankedList
from fastrec.reranking.permutation import PermutationReranker, base_permutation, target_length
from fastrec.topn import BoundedTopN


class DitheringReranker(PermutationReranker):
    """
    Example:
        >>> DitheringReranker(0.0).rerank([(7, 0.9), (3, 0.5), (9, 0.1)], 2)
        [0, 1]
    """

    __slots__ = ("_variance", "_rng")

    def __init__(
        self,
        variance: float,
        rng: Optional[np.random.Generator] = None,
        seed: Optional[int] = None,
    ) -> None:
        if not variance >= 0.0:
            raise ValueError(f"variance must be >= 0, got {variance}")
        self._variance = variance
        self._rng = rng if rng is not None else np.random.default_rng(seed)

    @property
    def variance(self) -> float:
        return self._variance

    def rerank(self, ranked_list: RankedList, max_length: int = 0) -> List[int]:
        m = len(ranked_list)
        n = target_length(m, max_length)
        if self._variance == 0.0:
            return base_permutation(n)

        noise = self._rng.normal(0.0, math.sqrt(self._variance), size=m)
        top: BoundedTopN[int] = BoundedTopN(n)
        for i in range(m):
            top.insert(m - i, math.log(i + 1) + float(noise[i]))
        top.finalize()
        return [m - key for key in top.keys()]

    def __repr__(self) -> str:
        return f"DitheringReranker(variance={self._variance})"


__all__ = ["DitheringReranker"]
