"""
Record ingestion for BOM and routing tables.

Turns raw rows (from a file adapter or any other caller) into immutable
records:
- Required columns are resolved first; a missing one fails the whole call
- Session metadata (feature code, root id) is captured from the raw rows
- Expired BOM rows are dropped before any position is assigned
- Every other column passes through verbatim, in source order

Nothing here touches the explosion or the view; a failed call leaves no
trace behind.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple

from ..exceptions import MissingColumnError
from ..models import Record, RoutingStep, Table
from ..normalizer import ColumnResolver
from ..schema import (
    BomColumns,
    RoutingColumns,
    FEATURE_CODE,
    ROOT_ID,
    EXPIRY,
    COMPONENT,
    OPERATION_SEQUENCE,
)
from ..values import clean_id, is_blank, parse_sequence

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionMetadata:
    """Read-only values captured once per BOM ingestion."""
    feature_code: str = ""
    root_id: str = ""


@dataclass
class BomIngestResult:
    """
    Output of one BOM ingestion.

    - records: surviving rows, position == index in this list
    - headers: column names in source order
    - column_map: well-known key -> actual header
    - metadata: feature code / root id
    - dropped_expired: number of rows removed by the expiry filter
    """
    records: List[Record]
    headers: List[str]
    column_map: Dict[str, str]
    metadata: SessionMetadata = field(default_factory=SessionMetadata)
    dropped_expired: int = 0


@dataclass
class RoutingIngestResult:
    """Output of one routing ingestion."""
    records: List[Record]
    steps: List[RoutingStep]
    headers: List[str]
    column_map: Dict[str, str]
    dropped_expired: int = 0


def _resolve_columns(
    table: Table,
    configured: Dict[str, str],
    required: List[str],
    table_name: str
) -> Dict[str, str]:
    resolver = ColumnResolver(configured)
    column_map = resolver.resolve(table.headers)
    missing = [key for key in required if key not in column_map]
    if missing:
        names = [configured[key] for key in missing]
        raise MissingColumnError(
            f"{table_name} table is missing required column(s): {', '.join(names)}",
            columns=names,
            table=table_name,
        )
    return column_map


def _first_non_blank(rows: List[Dict[str, Any]], column: Optional[str]) -> str:
    if column is None:
        return ""
    for row in rows:
        value = row.get(column)
        if not is_blank(value):
            return clean_id(value)
    return ""


def _split_expired(
    rows: List[Dict[str, Any]],
    expiry_column: Optional[str]
) -> Tuple[List[Dict[str, Any]], int]:
    if expiry_column is None:
        return list(rows), 0
    kept = [row for row in rows if is_blank(row.get(expiry_column))]
    return kept, len(rows) - len(kept)


def _to_records(rows: List[Dict[str, Any]], headers: List[str]) -> List[Record]:
    records = []
    for position, row in enumerate(rows):
        values = {header: row.get(header) for header in headers}
        records.append(Record(position=position, values=values))
    return records


def ingest_bom(table: Table, columns: Optional[BomColumns] = None) -> BomIngestResult:
    """
    Convert a raw BOM table into records.

    The feature code and root id are the first non-blank values of their
    columns, scanning every row in table order (expired rows included).

    Args:
        table: Raw table (headers in source order, one dict per row)
        columns: Header configuration (default: BomColumns())

    Returns:
        BomIngestResult

    Raises:
        MissingColumnError: If parent, child, sequence or level is absent
    """
    columns = columns or BomColumns()
    column_map = _resolve_columns(table, columns.as_dict(), columns.required_keys(), "bom")

    metadata = SessionMetadata(
        feature_code=_first_non_blank(table.rows, column_map.get(FEATURE_CODE)),
        root_id=_first_non_blank(table.rows, column_map.get(ROOT_ID)),
    )

    kept, dropped = _split_expired(table.rows, column_map.get(EXPIRY))
    records = _to_records(kept, table.headers)

    logger.info(
        "Ingested %d BOM record(s) from %s (%d expired row(s) dropped)",
        len(records), table.source or "<rows>", dropped,
    )
    return BomIngestResult(
        records=records,
        headers=list(table.headers),
        column_map=column_map,
        metadata=metadata,
        dropped_expired=dropped,
    )


def ingest_routing(
    table: Table,
    columns: Optional[RoutingColumns] = None,
    drop_expired: bool = False
) -> RoutingIngestResult:
    """
    Convert a raw routing table into records and routing steps.

    Rows without a component id are kept as records but own no step.

    Args:
        table: Raw table
        columns: Header configuration (default: RoutingColumns())
        drop_expired: Apply the BOM expiry filter to routing rows too

    Returns:
        RoutingIngestResult

    Raises:
        MissingColumnError: If component id or operation sequence is absent
    """
    columns = columns or RoutingColumns()
    column_map = _resolve_columns(table, columns.as_dict(), columns.required_keys(), "routing")

    if drop_expired:
        kept, dropped = _split_expired(table.rows, column_map.get(EXPIRY))
    else:
        kept, dropped = list(table.rows), 0
    records = _to_records(kept, table.headers)

    steps = []
    for record in records:
        component_id = clean_id(record.get(column_map[COMPONENT]))
        if not component_id:
            continue
        steps.append(RoutingStep(
            component_id=component_id,
            operation_sequence=parse_sequence(record.get(column_map[OPERATION_SEQUENCE])),
            position=record.position,
            record=record,
        ))

    logger.info(
        "Ingested %d routing step(s) from %s",
        len(steps), table.source or "<rows>",
    )
    return RoutingIngestResult(
        records=records,
        steps=steps,
        headers=list(table.headers),
        column_map=column_map,
        dropped_expired=dropped,
    )
