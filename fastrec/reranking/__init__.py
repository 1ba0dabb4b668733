"""
Reranking Module: Permutation-Based List Rerankers
"""

from fastrec.reranking.dithering import DitheringReranker
from fastrec.reranking.permutation import (
    PermutationReranker,
    base_permutation,
    target_length,
)

__all__ = [
    "PermutationReranker",
    "DitheringReranker",
    "base_permutation",
    "target_length",
]
