"""
Similarity Module: Co-Occurrence Set Similarity

Provides:
    - SetSimilarity: dense/sparse co-occurrence counting engine
    - Metrics: jaccard, cosine, asymmetric_cosine, overlap
"""

from fastrec.similarity.metrics import (
    METRICS,
    asymmetric_cosine,
    cosine,
    get_metric,
    jaccard,
    overlap,
)
from fastrec.similarity.set_similarity import SetSimilarity

__all__ = [
    "SetSimilarity",
    "METRICS",
    "asymmetric_cosine",
    "cosine",
    "get_metric",
    "jaccard",
    "overlap",
]
