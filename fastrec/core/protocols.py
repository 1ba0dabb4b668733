"""
Protocol Definitions: Structural Subtyping for Pluggable Collaborators

Defines the seams of the core:
    - IndexProtocol: raw identifier <-> dense index mapping (external)
    - NeighborhoodSource: per-index stream of scored neighbors
    - SimilarityMetric: set-similarity function over intersection sizes
    - Parser: raw token -> typed value
"""

from __future__ import annotations

from abc import abstractmethod
from typing import (
    TYPE_CHECKING,
    Any,
    Hashable,
    Iterator,
    Optional,
    Protocol,
    TypeVar,
    runtime_checkable,
)

if TYPE_CHECKING:
    from fastrec.core.types import IdxScore


T_co = TypeVar("T_co", covariant=True)


# =============================================================================
# INDEX PROTOCOL
# =============================================================================
@runtime_checkable
class IndexProtocol(Protocol):
    """
    Mapping between raw identifiers and indices in ``[0, count)``.

    The core reads these; it never constructs or mutates them.

    Implementations:
        - SimpleIndex: in-memory dict + list (fastrec.data.index)
    """

    @property
    def count(self) -> int:
        """Number of indexed identifiers."""
        ...

    @abstractmethod
    def get_index(self, raw_id: Hashable) -> int:
        """Index of ``raw_id``, or -1 if unknown."""
        ...

    @abstractmethod
    def get_id(self, idx: int) -> Any:
        """Raw identifier stored at ``idx``."""
        ...

    def contains(self, raw_id: Hashable) -> bool:
        """Whether ``raw_id`` has an index."""
        ...

    def indices(self) -> Iterator[int]:
        """All indices, ascending."""
        ...


# =============================================================================
# NEIGHBORHOOD SOURCE PROTOCOL
# =============================================================================
@runtime_checkable
class NeighborhoodSource(Protocol):
    """
    Producer of scored neighbors for an index.

    Contract:
        - Finite stream, unordered
        - Never yields the queried index itself

    Implementations:
        - SetSimilarity: co-occurrence counting over a preference store
        - InvertedNeighborhood: materialized transpose of another source
        - TopKNeighborhood / ThresholdNeighborhood / CachedNeighborhood
    """

    @abstractmethod
    def neighbors(self, idx: int) -> Iterator["IdxScore"]:
        """Scored neighbors of ``idx``."""
        ...


# =============================================================================
# SIMILARITY METRIC PROTOCOL
# =============================================================================
class SimilarityMetric(Protocol):
    """Pure function ``(intersection, size_a, size_b) -> similarity``."""

    def __call__(self, intersection: int, size_a: int, size_b: int) -> float:
        ...


# =============================================================================
# PARSER PROTOCOL
# =============================================================================
class Parser(Protocol[T_co]):
    """Token parser. ``None`` means the field was absent from the record."""

    def __call__(self, token: Optional[Any]) -> T_co:
        ...


__all__ = [
    "IndexProtocol",
    "NeighborhoodSource",
    "SimilarityMetric",
    "Parser",
]
