"""
FastRec: Neighborhood-Based Collaborative Filtering Core

In-memory engine for user-user and item-item neighborhoods over implicit or
weighted preference data:
- Preference Store: dual-indexed (by user / by item) compiled numpy arrays
- Set Similarity: co-occurrence counting with dense or sparse counters
- Neighborhoods: top-k, threshold, cached and inverted (parallel build)
- Reranking: permutation rerankers, including Gaussian dithering

Performance Notes:
- Similarity queries are read-only over an immutable store and can be
  issued from any number of threads
- Inverted neighborhoods compute per-origin lists on a thread pool and merge
  them through one ordered writer
"""

__version__ = "1.0.0"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================
from fastrec.core.types import (
    Adjacency,
    CounterStrategy,
    IdxPref,
    IdxScore,
    Orientation,
    RankedList,
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
from fastrec.core.protocols import IndexProtocol, NeighborhoodSource
from fastrec.data import SimpleIndex
from fastrec.preference import PreferenceStore
from fastrec.similarity import SetSimilarity, get_metric
from fastrec.neighborhood import (
    CachedNeighborhood,
    InvertedNeighborhood,
    ThresholdNeighborhood,
    TopKNeighborhood,
)
from fastrec.topn import BoundedTopN
from fastrec.reranking import DitheringReranker, PermutationReranker

__all__ = [
    "__version__",
    # Types
    "Adjacency",
    "CounterStrategy",
    "IdxPref",
    "IdxScore",
    "Orientation",
    "RankedList",
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
    # Components
    "SimpleIndex",
    "PreferenceStore",
    "SetSimilarity",
    "get_metric",
    "TopKNeighborhood",
    "ThresholdNeighborhood",
    "CachedNeighborhood",
    "InvertedNeighborhood",
    "BoundedTopN",
    "PermutationReranker",
    "DitheringReranker",
]
