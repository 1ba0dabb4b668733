"""
Neighborhood Module: Neighborhood Sources and the Inverted Index

Provides:
    - InvertedNeighborhood: parallel-built reverse neighbor lists
    - TopKNeighborhood / ThresholdNeighborhood / CachedNeighborhood
    - ordered_parallel_map: thread-pool map with in-order, single-consumer results
"""

from fastrec.neighborhood.inverted import IndexFilter, InvertedNeighborhood
from fastrec.neighborhood.parallel import default_workers, ordered_parallel_map
from fastrec.neighborhood.sources import (
    CachedNeighborhood,
    ThresholdNeighborhood,
    TopKNeighborhood,
    from_config,
)

__all__ = [
    "InvertedNeighborhood",
    "IndexFilter",
    "TopKNeighborhood",
    "ThresholdNeighborhood",
    "CachedNeighborhood",
    "from_config",
    "default_workers",
    "ordered_parallel_map",
]
