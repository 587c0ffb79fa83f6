"""BOM explosion: edge adjacency and the canonical depth-first order."""

from .edge_index import (
    EdgeIndex,
    build_edges,
    build_adjacency,
    find_roots,
    edge_sort_key,
)
from .linearizer import (
    explode,
    linearize,
    Explosion,
    ExplosionEntry,
)

__all__ = [
    # Adjacency
    "EdgeIndex",
    "build_edges",
    "build_adjacency",
    "find_roots",
    "edge_sort_key",
    # Depth-first order
    "explode",
    "linearize",
    "Explosion",
    "ExplosionEntry",
]
