"""
Permutation Rerankers

A permutation reranker decides a new order for a ranked list without touching
its scores. It returns positions into the original list; the caller applies
them (``rerank_list`` does so for plain (item, score) lists).

Output Contract:
    - Length min(max_length, |list|), or |list| when max_length == 0
    - Every entry is a valid original position, none repeated
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import List, Tuple

from fastrec.core.types import RankedList


def base_permutation(n: int) -> List[int]:
    """Identity permutation [0, 1, ..., n-1]."""
    return list(range(n))


def target_length(list_length: int, max_length: int) -> int:
    """Number of positions a reranker returns for the given arguments."""
    if max_length < 0:
        raise ValueError(f"max_length must be >= 0, got {max_length}")
    if max_length == 0:
        return list_length
    return min(max_length, list_length)


class PermutationReranker(ABC):
    """Base class for rerankers expressed as a permutation of positions."""

    @abstractmethod
    def rerank(self, ranked_list: RankedList, max_length: int = 0) -> List[int]:
        """
        Permutation of original positions defining the new order.

        Args:
            ranked_list: (item, score) pairs, best first
            max_length: Positions to return (0 = whole list)

        Raises:
            ValueError: negative max_length
        """

    def rerank_list(
        self, ranked_list: RankedList, max_length: int = 0
    ) -> List[Tuple[int, float]]:
        """Apply ``rerank`` and return the reordered (item, score) pairs."""
        return [tuple(ranked_list[pos]) for pos in self.rerank(ranked_list, max_length)]


__all__ = ["PermutationReranker", "base_permutation", "target_length"]
