"""
Set Similarity Metrics

Pure functions ``(intersection, size_a, size_b) -> float`` over profile sets.
These are example instantiations; any callable with the same signature can be
plugged into ``SetSimilarity``. Degenerate inputs (zero-size profiles) are not
guarded here and may produce NaN or raise ZeroDivisionError for callers that
invoke a metric outside the co-occurrence walk.
"""

from __future__ import annotations

import math
from typing import Dict, Final

from fastrec.core.errors import ConfigError
from fastrec.core.protocols import SimilarityMetric


def jaccard(intersection: int, size_a: int, size_b: int) -> float:
    """|A ∩ B| / |A ∪ B|"""
    return intersection / (size_a + size_b - intersection)


def cosine(intersection: int, size_a: int, size_b: int) -> float:
    """|A ∩ B| / sqrt(|A| |B|)"""
    return intersection / math.sqrt(size_a * size_b)


def asymmetric_cosine(alpha: float = 0.5) -> SimilarityMetric:
    """
    |A ∩ B| / (|A|^alpha |B|^(1 - alpha))

    alpha = 0.5 is the set cosine; alpha = 1.0 is the conditional
    probability P(B | A).
    """
    if not 0.0 <= alpha <= 1.0:
        raise ConfigError.invalid("alpha", alpha, "must be in [0, 1]")

    def metric(intersection: int, size_a: int, size_b: int) -> float:
        return intersection / (size_a ** alpha * size_b ** (1.0 - alpha))

    return metric


def overlap(intersection: int, size_a: int, size_b: int) -> float:
    """Raw co-occurrence count."""
    return float(intersection)


METRICS: Final[Dict[str, SimilarityMetric]] = {
    "jaccard": jaccard,
    "cosine": cosine,
    "overlap": overlap,
}


def get_metric(name: str, alpha: float = 0.5) -> SimilarityMetric:
    """Resolve a metric by name; ``asymmetric_cosine`` takes ``alpha``."""
    if name == "asymmetric_cosine":
        return asymmetric_cosine(alpha)
    try:
        return METRICS[name]
    except KeyError as exc:
        known = sorted([*METRICS, "asymmetric_cosine"])
        raise ConfigError.invalid("metric", name, f"unknown metric, expected one of {known}") from exc


__all__ = [
    "jaccard",
    "cosine",
    "asymmetric_cosine",
    "overlap",
    "METRICS",
    "get_metric",
]
