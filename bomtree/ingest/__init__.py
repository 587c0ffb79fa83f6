"""BOM and routing record ingestion."""

from .records import (
    ingest_bom,
    ingest_routing,
    BomIngestResult,
    RoutingIngestResult,
    SessionMetadata,
)

__all__ = [
    "ingest_bom",
    "ingest_routing",
    "BomIngestResult",
    "RoutingIngestResult",
    "SessionMetadata",
]
