"""
Parent -> children adjacency built from BOM records.

Children of one parent are ordered by (sequence ascending, child id
ascending). A missing or unparsable sequence sorts after every numbered
one, and equal keys keep record order.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from ..exceptions import NoRootFoundError
from ..models import Edge, Record
from ..schema import BomColumns, PARENT, CHILD, SEQUENCE
from ..values import clean_id, parse_sequence

logger = logging.getLogger(__name__)


def edge_sort_key(edge: Edge) -> Tuple[int, int, str]:
    if edge.sequence is None:
        return (1, 0, edge.child)
    return (0, edge.sequence, edge.child)


def build_edges(
    records: Iterable[Record],
    parent_column: str,
    child_column: str,
    sequence_column: Optional[str]
) -> List[Edge]:
    """Derive edges from records, skipping any record without a parent or child id."""
    edges = []
    for record in records:
        parent = clean_id(record.get(parent_column))
        child = clean_id(record.get(child_column))
        if not parent or not child:
            continue
        edges.append(Edge(
            parent=parent,
            child=child,
            sequence=parse_sequence(record.get(sequence_column)),
            position=record.position,
        ))
    return edges


def build_adjacency(edges: Iterable[Edge]) -> Dict[str, Tuple[Edge, ...]]:
    """Group edges by parent id, each group in child order."""
    grouped: Dict[str, List[Edge]] = defaultdict(list)
    for edge in edges:
        grouped[edge.parent].append(edge)
    return {parent: tuple(sorted(group, key=edge_sort_key)) for parent, group in grouped.items()}


def find_roots(edges: Iterable[Edge]) -> List[str]:
    """Return the parent ids that never appear as a child id, sorted ascending.

    Raises:
        NoRootFoundError: If there is no such parent
    """
    parents = set()
    children = set()
    for edge in edges:
        parents.add(edge.parent)
        children.add(edge.child)

    if not parents:
        raise NoRootFoundError("No root found: the BOM has no parent -> child rows", parent_count=0)

    roots = sorted(parents - children)
    if not roots:
        raise NoRootFoundError(
            "No root found: every parent id also appears as a child id",
            parent_count=len(parents),
        )
    return roots


class EdgeIndex:
    """Read-only adjacency lookup over one set of BOM edges."""

    def __init__(self, edges: Iterable[Edge]):
        self.edges: Tuple[Edge, ...] = tuple(edges)
        self._adjacency = build_adjacency(self.edges)

    @classmethod
    def from_records(
        cls,
        records: Iterable[Record],
        column_map: Dict[str, str],
    ) -> "EdgeIndex":
        """Build an index from records using resolved column names.

        Args:
            records: Ingested BOM records
            column_map: Well-known key -> header (see ColumnResolver)
        """
        defaults = BomColumns()
        records = list(records)
        edges = build_edges(
            records,
            column_map.get(PARENT, defaults.parent),
            column_map.get(CHILD, defaults.child),
            column_map.get(SEQUENCE),
        )
        skipped = len(records) - len(edges)
        if skipped:
            logger.debug("Skipped %d record(s) without a parent or child id", skipped)
        return cls(edges)

    def children_of(self, parent_id: str) -> Tuple[Edge, ...]:
        return self._adjacency.get(parent_id, ())

    def has_children(self, node_id: str) -> bool:
        return bool(self._adjacency.get(node_id))

    def roots(self) -> List[str]:
        return find_roots(self.edges)

    def __len__(self) -> int:
        return len(self.edges)
