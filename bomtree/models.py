from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional


@dataclass
class Table:
    """Raw rows read from a file, with the headers in source order."""
    headers: List[str]
    rows: List[Dict[str, Any]] = field(default_factory=list)
    source: Optional[str] = None

    def __len__(self) -> int:
        return len(self.rows)

    @classmethod
    def from_rows(cls, rows: List[Dict[str, Any]], source: Optional[str] = None) -> "Table":
        """Build a table from dict rows; headers are the union of keys in first-seen order."""
        headers: List[str] = []
        seen = set()
        for row in rows:
            for key in row:
                if key not in seen:
                    seen.add(key)
                    headers.append(key)
        return cls(headers=headers, rows=[dict(row) for row in rows], source=source)


@dataclass(frozen=True, eq=False)
class Record:
    """
    One ingested row.

    Values keep the source column names and order; the mapping is read-only
    once the record exists. `position` is the row's index among the records
    that survived ingestion filtering, and is what the explosion emits.
    Records compare by identity.
    """
    position: int
    values: Mapping[str, Any]

    def __post_init__(self):
        if not isinstance(self.values, MappingProxyType):
            object.__setattr__(self, "values", MappingProxyType(dict(self.values)))

    def get(self, column: Optional[str], default: Any = None) -> Any:
        if column is None:
            return default
        return self.values.get(column, default)

    def __getitem__(self, column: str) -> Any:
        return self.values[column]

    def columns(self) -> List[str]:
        return list(self.values.keys())


@dataclass(frozen=True)
class Edge:
    """Parent -> child link derived from a BOM record."""
    parent: str
    child: str
    sequence: Optional[int]
    position: int


@dataclass(frozen=True, eq=False)
class RoutingStep:
    """One process step owned by a component, derived from a routing record."""
    component_id: str
    operation_sequence: Optional[int]
    position: int
    record: Record
