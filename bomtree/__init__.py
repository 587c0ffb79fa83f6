from .parser import BomParser
from .normalizer import ColumnResolver
from .explosion import EdgeIndex, explode, linearize
from .routing import RoutingOverlay
from .view import TreeViewState, TreeNode, NodeKind
from .session import BomSession, BomWorkspace, build_session
from .exporter import BomExporter
from .schema import BomColumns, RoutingColumns, COLUMN_MAPPINGS
from .exceptions import BomTreeError, MissingColumnError, NoRootFoundError, UnsupportedFileError

__all__ = [
    "BomParser", "ColumnResolver", "EdgeIndex", "explode", "linearize", "RoutingOverlay",
    "TreeViewState", "TreeNode", "NodeKind", "BomSession", "BomWorkspace", "build_session",
    "BomExporter", "BomColumns", "RoutingColumns", "COLUMN_MAPPINGS",
    "BomTreeError", "MissingColumnError", "NoRootFoundError", "UnsupportedFileError",
]
