"""
Routing overlay: the ordered process steps of each component.

Routing is not part of the BOM hierarchy. Steps are grouped by owning
component id and shown directly beneath an expanded BOM row, before its
BOM children. Steps of one component are ordered by (operation sequence
ascending, record order ascending); a missing sequence sorts last.
"""

import logging
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Tuple

from .ingest import ingest_routing
from .models import RoutingStep, Table
from .schema import RoutingColumns, ROUTING_LEVEL_SUFFIX
from .view.nodes import NodeKind, TreeNode

logger = logging.getLogger(__name__)


def step_sort_key(step: RoutingStep) -> Tuple[int, int, int]:
    if step.operation_sequence is None:
        return (1, 0, step.position)
    return (0, step.operation_sequence, step.position)


class RoutingOverlay:
    """Read-only component id -> ordered routing steps lookup."""

    def __init__(self, steps: Iterable[RoutingStep] = ()):
        grouped: Dict[str, List[RoutingStep]] = defaultdict(list)
        for step in steps:
            grouped[step.component_id].append(step)
        self._steps = {
            component: tuple(sorted(group, key=step_sort_key))
            for component, group in grouped.items()
        }

    @classmethod
    def build(cls, steps: Iterable[RoutingStep]) -> "RoutingOverlay":
        return cls(steps)

    @classmethod
    def empty(cls) -> "RoutingOverlay":
        return cls(())

    @classmethod
    def from_table(
        cls,
        table: Table,
        columns: Optional[RoutingColumns] = None,
        drop_expired: bool = False
    ) -> "RoutingOverlay":
        """Ingest a raw routing table and build the overlay from its steps."""
        return cls(ingest_routing(table, columns, drop_expired=drop_expired).steps)

    def steps_for(self, component_id: str) -> Tuple[RoutingStep, ...]:
        return self._steps.get(component_id, ())

    def has_steps(self, component_id: str) -> bool:
        return bool(self._steps.get(component_id))

    def components(self) -> List[str]:
        return sorted(self._steps)

    def __len__(self) -> int:
        return sum(len(steps) for steps in self._steps.values())

    def insert(self, rows: List[TreeNode], position: int, owner: TreeNode) -> int:
        """Insert the owner's routing steps into a visible row list.

        Steps already materialized under this owner, starting at
        `position`, are left in place; the rest are inserted after them.

        Args:
            rows: Visible row list (modified in place)
            position: Index right after the owner's row
            owner: The BOM node the steps belong to

        Returns:
            The index right after the last routing row of the owner
        """
        cursor = position
        pending = []
        for step in self.steps_for(owner.component_id):
            if (
                not pending
                and cursor < len(rows)
                and rows[cursor].parent is owner
                and rows[cursor].source is step
            ):
                cursor += 1
                continue
            pending.append(TreeNode(
                kind=NodeKind.ROUTING,
                source=step,
                component_id=step.component_id,
                level_label=owner.level_label + ROUTING_LEVEL_SUFFIX,
                parent=owner,
            ))

        rows[cursor:cursor] = pending
        return cursor + len(pending)
