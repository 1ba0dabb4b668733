"""
Core Type Definitions: Index-Based Recommendation Primitives

Users and items are addressed by dense integer indices in ``[0, count)``.
Index assignment belongs to an external collaborator (see
``fastrec.core.protocols.IndexProtocol``); everything in this package works
on indices only.

Memory Layout Optimization:
    - __slots__ for minimal per-pair footprint
    - Compiled adjacency lists as two parallel numpy arrays
      (int32 indices + float64 values), no per-pair objects at rest
    - One shared empty sentinel for absent profiles

Thread Safety:
    - All types here are immutable after construction and safe to share
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Final, Iterator, Sequence, Tuple, TypeAlias

import numpy as np


# =============================================================================
# CONSTANTS
# =============================================================================
INDEX_DTYPE: Final = np.int32
VALUE_DTYPE: Final = np.float64

# Sentinel returned by index collaborators for unknown identifiers
UNKNOWN_INDEX: Final[int] = -1


# =============================================================================
# STRATEGY ENUMS
# =============================================================================
class CounterStrategy(Enum):
    """
    Co-occurrence counter accumulation strategy.

    DENSE:  full-length counter array, O(|universe|) memory per query
    SPARSE: hash map counter, O(|candidates|) memory per query
    """
    DENSE = "dense"
    SPARSE = "sparse"


class Orientation(Enum):
    """Which side of the preference store a similarity compares."""
    USER = "user"
    ITEM = "item"


# =============================================================================
# INDEX-VALUE PAIRS
# =============================================================================
@dataclass(frozen=True, slots=True)
class IdxPref:
    """Counterpart index and weight of a single observed preference."""
    idx: int
    weight: float

    def __iter__(self) -> Iterator:
        yield self.idx
        yield self.weight


@dataclass(frozen=True, slots=True)
class IdxScore:
    """
    Scored neighbor: (index, score).

    Iterable so that ``idx, score = neighbor`` and ``tuple(neighbor)`` work.
    """
    idx: int
    score: float

    def __iter__(self) -> Iterator:
        yield self.idx
        yield self.score


# Upstream recommendation: ordered (item_index, score) pairs
RankedList: TypeAlias = Sequence[Tuple[int, float]]


# =============================================================================
# ADJACENCY: COMPILED PER-INDEX SEQUENCE
# =============================================================================
@dataclass(frozen=True, slots=True, eq=False)
class Adjacency:
    """
    Immutable ordered sequence of (index, value) pairs.

    Invariants:
        - len(idxs) == len(values)
        - Order is insertion order of the build that produced it

    Memory: 12 bytes per pair (4 byte index + 8 byte value)
    """
    idxs: np.ndarray    # dtype=INDEX_DTYPE
    values: np.ndarray  # dtype=VALUE_DTYPE

    @classmethod
    def from_lists(cls, idxs: Sequence[int], values: Sequence[float]) -> "Adjacency":
        """Compile builder lists into arrays. Complexity: O(k)."""
        idx_arr = np.array(idxs, dtype=INDEX_DTYPE)
        val_arr = np.array(values, dtype=VALUE_DTYPE)
        idx_arr.flags.writeable = False
        val_arr.flags.writeable = False
        return cls(idxs=idx_arr, values=val_arr)

    def __len__(self) -> int:
        return len(self.idxs)

    @property
    def is_empty(self) -> bool:
        return len(self.idxs) == 0

    def pairs(self) -> Iterator[Tuple[int, float]]:
        """Iterate (index, value) as plain Python scalars."""
        return zip(self.idxs.tolist(), self.values.tolist())


def _empty_adjacency() -> Adjacency:
    return Adjacency.from_lists([], [])


# Shared sentinel for "no profile": lookups of empty slots return this object
EMPTY_ADJACENCY: Final[Adjacency] = _empty_adjacency()


# =============================================================================
# MUTABLE ADJACENCY (For Building)
# =============================================================================
class MutableAdjacency:
    """
    Append-only (index, value) list used while building.

    Compiled into an immutable Adjacency once the build pass is complete.
    """

    __slots__ = ("_idxs", "_values")

    def __init__(self) -> None:
        self._idxs: list[int] = []
        self._values: list[float] = []

    def append(self, idx: int, value: float) -> None:
        self._idxs.append(idx)
        self._values.append(value)

    def __len__(self) -> int:
        return len(self._idxs)

    def build(self) -> Adjacency:
        """Compile; an empty builder compiles to the shared EMPTY_ADJACENCY."""
        if not self._idxs:
            return EMPTY_ADJACENCY
        return Adjacency.from_lists(self._idxs, self._values)


# =============================================================================
# EXPORTS
# =============================================================================
__all__ = [
    "INDEX_DTYPE",
    "VALUE_DTYPE",
    "UNKNOWN_INDEX",
    "CounterStrategy",
    "Orientation",
    "IdxPref",
    "IdxScore",
    "RankedList",
    "Adjacency",
    "EMPTY_ADJACENCY",
    "MutableAdjacency",
]
