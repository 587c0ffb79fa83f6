"""Interactive tree view over an exploded BOM."""

from .nodes import NodeKind, TreeNode
from .tree_view import TreeViewState

__all__ = ["NodeKind", "TreeNode", "TreeViewState"]
