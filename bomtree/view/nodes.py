from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from ..models import Record, RoutingStep


class NodeKind(Enum):
    """Kind of a visible row."""
    BOM = "bom"
    ROUTING = "routing"


@dataclass(eq=False)
class TreeNode:
    """
    One visible row of the tree view.

    The node points at (does not own) an immutable Record or RoutingStep.
    Nodes compare and hash by identity: the same record opened under two
    different parents is two independent nodes.
    """
    kind: NodeKind
    source: Union[Record, RoutingStep]
    component_id: str
    level_label: str
    parent: Optional["TreeNode"] = field(default=None, repr=False)
    expanded: bool = False
    has_children: bool = False

    @property
    def record(self) -> Record:
        if isinstance(self.source, RoutingStep):
            return self.source.record
        return self.source

    @property
    def is_routing(self) -> bool:
        return self.kind is NodeKind.ROUTING

    @property
    def indicator(self) -> str:
        """Expansion marker: "-" expanded, "+" collapsed with children, "" leaf."""
        if self.expanded:
            return "-"
        return "+" if self.has_children else ""
