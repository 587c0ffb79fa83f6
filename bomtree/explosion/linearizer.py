"""
Canonical depth-first explosion of a BOM.

Roots are walked in ascending id order. From each node the outgoing edges
are taken in adjacency order: the edge's record position is emitted and its
child is walked before the next sibling. A child that is already on the
active path (its own ancestor) is skipped without emitting anything; the
path is per branch, so a shared sub-assembly is exploded again under every
parent that uses it.

The walk keeps its own stack instead of recursing, so deep or malformed
hierarchies cannot hit the interpreter's recursion limit. Emission order is
the same as the plain recursive preorder.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterator, List, Tuple

from .edge_index import EdgeIndex
from ..models import Edge

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExplosionEntry:
    """One emitted row: the edge's record position and its depth (1 = below a root)."""
    position: int
    depth: int
    edge: Edge


@dataclass(frozen=True)
class Explosion:
    """
    Result of one explosion.

    - entries: emitted rows in canonical order
    - roots: root ids in walk order
    - truncated: edges skipped by the cycle guard, in encounter order
    """
    entries: Tuple[ExplosionEntry, ...]
    roots: Tuple[str, ...]
    truncated: Tuple[Edge, ...] = field(default_factory=tuple)

    @property
    def positions(self) -> List[int]:
        return [entry.position for entry in self.entries]

    def __len__(self) -> int:
        return len(self.entries)


def _walk(index: EdgeIndex, root: str, truncated: List[Edge]) -> Iterator[ExplosionEntry]:
    path = {root}
    stack: List[Tuple[str, Iterator[Edge]]] = [(root, iter(index.children_of(root)))]

    while stack:
        node, children = stack[-1]
        edge = next(children, None)
        if edge is None:
            stack.pop()
            path.discard(node)
            continue

        if edge.child in path:
            truncated.append(edge)
            logger.debug(
                "Cycle truncated at %s -> %s (record %d)",
                edge.parent, edge.child, edge.position,
            )
            continue

        yield ExplosionEntry(position=edge.position, depth=len(stack), edge=edge)
        path.add(edge.child)
        stack.append((edge.child, iter(index.children_of(edge.child))))


def explode(index: EdgeIndex) -> Explosion:
    """Explode every root of the index.

    Raises:
        NoRootFoundError: If the index has no root
    """
    roots = index.roots()
    truncated: List[Edge] = []
    entries = []
    for root in roots:
        entries.extend(_walk(index, root, truncated))

    if truncated:
        logger.debug("%d edge(s) truncated by the cycle guard", len(truncated))
    return Explosion(entries=tuple(entries), roots=tuple(roots), truncated=tuple(truncated))


def linearize(index: EdgeIndex) -> List[int]:
    """Return the canonical sequence of record positions."""
    return explode(index).positions
