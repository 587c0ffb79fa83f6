"""
Incrementally materialized tree view over one BOM session.

The visible row list is the only mutable state. It is always a valid
frontier of the explosion: an expanded BOM row is followed by its routing
steps and then its direct BOM children; a collapsed row has no descendant
rows after it.

- reset / expand_all / collapse_all rebuild the list from the canonical
  sequence
- expand / collapse / toggle splice rows in or out right after one row

Single-row operations never raise. A stale row (no longer visible), a
routing row, a leaf, or a row already in the requested state is left alone
and the call returns False.
"""

import logging
from typing import Iterator, List, Optional, Set

from .nodes import NodeKind, TreeNode
from ..models import Record
from ..schema import CHILD, LEVEL, DEFAULT_TARGET_LEVEL
from ..values import cell_text, clean_id, level_depth, parse_level

logger = logging.getLogger(__name__)


class TreeViewState:
    """Visible rows of one BomSession and the operations that change them."""

    def __init__(self, session):
        """Initialize an empty view.

        Args:
            session: The BomSession whose index, routing overlay and
                canonical sequence this view reads
        """
        self.session = session
        self._child_column = session.column_map[CHILD]
        self._level_column = session.column_map[LEVEL]
        self._rows: List[TreeNode] = []
        self._visible: Set[TreeNode] = set()

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def rows(self) -> List[TreeNode]:
        return list(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __iter__(self) -> Iterator[TreeNode]:
        return iter(list(self._rows))

    def node_at(self, index: int) -> TreeNode:
        return self._rows[index]

    def is_visible(self, node: TreeNode) -> bool:
        return node in self._visible

    def index_of(self, node: TreeNode) -> Optional[int]:
        """Return the row index of a visible node, or None.

        Visibility is a set lookup; finding the index scans the visible rows,
        so single-row expand/collapse cost grows with the visible list.
        """
        if node not in self._visible:
            return None
        for index, candidate in enumerate(self._rows):
            if candidate is node:
                return index
        return None

    # ------------------------------------------------------------------
    # Node construction
    # ------------------------------------------------------------------

    def _has_children(self, component_id: str) -> bool:
        return (
            self.session.index.has_children(component_id)
            or self.session.routing.has_steps(component_id)
        )

    def _bom_node(self, record: Record, parent: Optional[TreeNode]) -> TreeNode:
        component_id = clean_id(record.get(self._child_column))
        return TreeNode(
            kind=NodeKind.BOM,
            source=record,
            component_id=component_id,
            level_label=cell_text(record.get(self._level_column)).strip(),
            parent=parent,
            has_children=self._has_children(component_id),
        )

    def _replace(self, rows: List[TreeNode]) -> None:
        self._rows = rows
        self._visible = set(rows)

    # ------------------------------------------------------------------
    # Whole-view operations
    # ------------------------------------------------------------------

    def reset(self, target_level: int = DEFAULT_TARGET_LEVEL) -> None:
        """Show only the BOM rows whose level equals target_level, all collapsed."""
        rows = [
            self._bom_node(record, None)
            for record in self.session.canonical_records()
            if parse_level(record.get(self._level_column)) == target_level
        ]
        self._replace(rows)
        logger.debug("View reset to level %s: %d row(s)", target_level, len(rows))

    def collapse_all(self) -> None:
        self.reset(DEFAULT_TARGET_LEVEL)

    def expand_all(self) -> None:
        """Show the whole explosion, routing steps included, every parent expanded."""
        rows: List[TreeNode] = []
        ancestors: List[TreeNode] = []

        for entry in self.session.explosion.entries:
            del ancestors[entry.depth - 1:]
            parent = ancestors[-1] if ancestors else None

            node = self._bom_node(self.session.record_at(entry.position), parent)
            node.expanded = node.has_children
            rows.append(node)
            self.session.routing.insert(rows, len(rows), node)
            ancestors.append(node)

        self._replace(rows)
        logger.debug("View fully expanded: %d row(s)", len(rows))

    # ------------------------------------------------------------------
    # Single-row operations
    # ------------------------------------------------------------------

    def expand(self, row: TreeNode) -> bool:
        """Insert a row's routing steps and direct BOM children right after it.

        Returns:
            True if the row was expanded, False if the call was a no-op
        """
        if row not in self._visible:
            logger.debug("Ignoring expand of a row that is not visible")
            return False
        if row.kind is NodeKind.ROUTING or row.expanded:
            return False

        children = self.session.index.children_of(row.component_id)
        if not children and not self.session.routing.has_steps(row.component_id):
            return False

        start = self.index_of(row) + 1
        cursor = self.session.routing.insert(self._rows, start, row)

        pending = []
        for edge in children:
            record = self.session.record_at(edge.position)
            if (
                not pending
                and cursor < len(self._rows)
                and self._rows[cursor].parent is row
                and self._rows[cursor].source is record
            ):
                cursor += 1
                continue
            pending.append(self._bom_node(record, row))

        self._rows[cursor:cursor] = pending
        self._visible.update(self._rows[start:cursor + len(pending)])

        row.expanded = True
        return True

    def collapse(self, row: TreeNode) -> bool:
        """Remove every row below an expanded row, up to the next row at its level or above.

        Routing rows in the range are always removed; BOM rows are removed
        while their level is strictly deeper than the row's.

        Returns:
            True if the row was collapsed, False if the call was a no-op
        """
        if row not in self._visible:
            logger.debug("Ignoring collapse of a row that is not visible")
            return False
        if not row.expanded:
            return False

        start = self.index_of(row) + 1
        depth = level_depth(row.level_label)

        end = start
        while end < len(self._rows):
            node = self._rows[end]
            if node.kind is not NodeKind.ROUTING and level_depth(node.level_label) <= depth:
                break
            end += 1

        removed = self._rows[start:end]
        del self._rows[start:end]
        self._visible.difference_update(removed)

        row.expanded = False
        row.has_children = self._has_children(row.component_id)
        return True

    def toggle(self, row: TreeNode) -> bool:
        if row.expanded:
            return self.collapse(row)
        return self.expand(row)
