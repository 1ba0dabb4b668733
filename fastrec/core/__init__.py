"""
Core Module: Types, Errors, Protocols and Configuration

Self-contained module with no dependencies beyond numpy.
Provides the foundational abstractions for the whole engine.
"""

from fastrec.core.types import (
    Adjacency,
    CounterStrategy,
    EMPTY_ADJACENCY,
    IdxPref,
    IdxScore,
    MutableAdjacency,
    Orientation,
    RankedList,
    UNKNOWN_INDEX,
)
from fastrec.core.errors import (
    ConfigError,
    ErrorCode,
    FastRecError,
    InvalidStateError,
    ParseError,
    QueryError,
)
from fastrec.core.config import (
    LoggingConfig,
    NeighborhoodConfig,
    SimilarityConfig,
)
from fastrec.core.protocols import (
    IndexProtocol,
    NeighborhoodSource,
    Parser,
    SimilarityMetric,
)

__all__ = [
    # Types
    "Adjacency",
    "CounterStrategy",
    "EMPTY_ADJACENCY",
    "IdxPref",
    "IdxScore",
    "MutableAdjacency",
    "Orientation",
    "RankedList",
    "UNKNOWN_INDEX",
    # Errors
    "ConfigError",
    "ErrorCode",
    "FastRecError",
    "InvalidStateError",
    "ParseError",
    "QueryError",
    # Config
    "LoggingConfig",
    "NeighborhoodConfig",
    "SimilarityConfig",
    # Protocols
    "IndexProtocol",
    "NeighborhoodSource",
    "Parser",
    "SimilarityMetric",
]
