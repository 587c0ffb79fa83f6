"""
BOM sessions and the workspace that publishes them.

A BomSession bundles everything derived from one successful ingestion: the
records, the edge index, the explosion, the routing overlay and the session
metadata. It is built completely before anyone can see it and never changes
afterwards. Loading new files builds a new session and swaps it in together
with a fresh view; a failed load leaves the previous session active.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .exceptions import BomTreeError
from .exporter import BomExporter
from .explosion import EdgeIndex, Explosion, explode
from .ingest import ingest_bom, ingest_routing, SessionMetadata
from .models import Record, Table
from .parser import BomParser
from .routing import RoutingOverlay
from .schema import BomColumns, RoutingColumns
from .view import TreeViewState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BomSession:
    """Immutable context of one ingestion."""
    records: Tuple[Record, ...]
    headers: Tuple[str, ...]
    column_map: Dict[str, str]
    columns: BomColumns
    index: EdgeIndex
    explosion: Explosion
    routing: RoutingOverlay
    metadata: SessionMetadata = field(default_factory=SessionMetadata)
    routing_headers: Tuple[str, ...] = ()
    dropped_expired: int = 0

    @property
    def canonical(self) -> Tuple[int, ...]:
        """Record positions in canonical (fully exploded) order."""
        return tuple(self.explosion.positions)

    @property
    def feature_code(self) -> str:
        return self.metadata.feature_code

    @property
    def root_id(self) -> str:
        return self.metadata.root_id

    def record_at(self, position: int) -> Record:
        return self.records[position]

    def canonical_records(self) -> List[Record]:
        return [self.records[entry.position] for entry in self.explosion.entries]

    def column(self, key: str) -> Optional[str]:
        """Actual header of a well-known column key, or None."""
        return self.column_map.get(key)


def build_session(
    bom_table: Table,
    routing_table: Optional[Table] = None,
    columns: Optional[BomColumns] = None,
    routing_columns: Optional[RoutingColumns] = None,
    drop_expired_routing: bool = False
) -> BomSession:
    """
    Build a complete session from raw tables.

    Args:
        bom_table: Raw BOM table
        routing_table: Raw routing table (optional)
        columns: BOM header configuration
        routing_columns: Routing header configuration
        drop_expired_routing: Apply the expiry filter to routing rows

    Returns:
        BomSession

    Raises:
        MissingColumnError: If a required column is absent
        NoRootFoundError: If the BOM has no root
    """
    columns = columns or BomColumns()
    bom = ingest_bom(bom_table, columns)

    routing_headers: Tuple[str, ...] = ()
    if routing_table is not None:
        routing_result = ingest_routing(routing_table, routing_columns, drop_expired=drop_expired_routing)
        routing = RoutingOverlay.build(routing_result.steps)
        routing_headers = tuple(routing_result.headers)
    else:
        routing = RoutingOverlay.empty()

    index = EdgeIndex.from_records(bom.records, bom.column_map)
    explosion = explode(index)

    return BomSession(
        records=tuple(bom.records),
        headers=tuple(bom.headers),
        column_map=dict(bom.column_map),
        columns=columns,
        index=index,
        explosion=explosion,
        routing=routing,
        metadata=bom.metadata,
        routing_headers=routing_headers,
        dropped_expired=bom.dropped_expired,
    )


class BomWorkspace:
    """Owns the current session and its tree view."""

    def __init__(
        self,
        parser: Optional[BomParser] = None,
        columns: Optional[BomColumns] = None,
        routing_columns: Optional[RoutingColumns] = None,
        drop_expired_routing: bool = False
    ):
        self.parser = parser or BomParser.with_default_adapters()
        self.columns = columns or BomColumns()
        self.routing_columns = routing_columns or RoutingColumns()
        self.drop_expired_routing = drop_expired_routing
        self._lock = threading.Lock()
        self._state: Optional[Tuple[BomSession, TreeViewState]] = None

    @property
    def session(self) -> Optional[BomSession]:
        state = self._state
        return state[0] if state else None

    @property
    def view(self) -> Optional[TreeViewState]:
        state = self._state
        return state[1] if state else None

    @property
    def loaded(self) -> bool:
        return self._state is not None

    def load(self, bom_path: str, routing_path: Optional[str] = None) -> BomSession:
        """Read BOM (and routing) files and publish a new session.

        Raises:
            MissingColumnError, NoRootFoundError, UnsupportedFileError,
            FileNotFoundError: The previous session stays active
        """
        try:
            bom_table = self.parser.read(bom_path)
            routing_table = self.parser.read(routing_path) if routing_path else None
        except Exception:
            logger.exception("Failed to read %s", routing_path or bom_path)
            raise
        return self.load_tables(bom_table, routing_table)

    def load_tables(self, bom_table: Table, routing_table: Optional[Table] = None) -> BomSession:
        """Build a session from raw tables and publish it with a view reset to level 1."""
        try:
            session = build_session(
                bom_table,
                routing_table,
                columns=self.columns,
                routing_columns=self.routing_columns,
                drop_expired_routing=self.drop_expired_routing,
            )
        except BomTreeError:
            logger.exception("Failed to build BOM session from %s", bom_table.source or "<rows>")
            raise

        view = TreeViewState(session)
        view.collapse_all()

        with self._lock:
            self._state = (session, view)

        logger.info(
            "Loaded BOM: %d record(s), %d exploded row(s), %d routing step(s)",
            len(session.records), len(session.explosion), len(session.routing),
        )
        return session

    def export(self, output_path: str, format: Optional[str] = None) -> str:
        """Export the canonical sequence of the current session.

        Raises:
            BomTreeError: If nothing has been loaded
        """
        session = self.session
        if session is None:
            raise BomTreeError("No BOM loaded; nothing to export")

        return BomExporter().export(session, output_path, format=format)
