from .adapters import CsvAdapter, ExcelAdapter
from .exceptions import UnsupportedFileError
from .ingest import ingest_bom, ingest_routing, BomIngestResult, RoutingIngestResult
from .models import Table
from .normalizer import ColumnResolver
from .schema import BomColumns, RoutingColumns
from typing import List, Dict, Any, Optional
from pathlib import Path
import logging

logger = logging.getLogger(__name__)


class BomParser:
    """Reads BOM and routing files through registered file adapters."""

    def __init__(self):
        self.adapters = []

    @classmethod
    def with_default_adapters(cls) -> "BomParser":
        """Create a parser with the CSV and Excel adapters registered."""
        parser = cls()
        parser.register_adapter(CsvAdapter())
        parser.register_adapter(ExcelAdapter())
        return parser

    def register_adapter(self, adapter):
        """Register a file adapter for parsing.

        Args:
            adapter: Adapter instance with can_handle() and read() methods
        """
        self.adapters.append(adapter)

    def _adapter_for(self, file_path: str):
        for adapter in self.adapters:
            if adapter.can_handle(file_path):
                return adapter
        raise UnsupportedFileError(f"No adapter found for {file_path}", path=str(file_path))

    def read(self, file_path: str) -> Table:
        """Read a file into a raw table.

        Args:
            file_path: Path to a CSV, TSV or Excel file

        Returns:
            Table with headers in source order

        Raises:
            UnsupportedFileError: If no adapter is found for the file
            FileNotFoundError: If the file doesn't exist
        """
        adapter = self._adapter_for(str(file_path))
        table = adapter.read(str(file_path))
        logger.debug("Read %d row(s) from %s", len(table), file_path)
        return table

    def parse_bom(self, file_path: str, columns: Optional[BomColumns] = None) -> BomIngestResult:
        """Read a BOM file and ingest it into records.

        Args:
            file_path: Path to the BOM file
            columns: Header configuration (default: BomColumns())

        Returns:
            BomIngestResult

        Raises:
            MissingColumnError: If a required BOM column is absent
        """
        return ingest_bom(self.read(file_path), columns)

    def parse_routing(
        self,
        file_path: str,
        columns: Optional[RoutingColumns] = None,
        drop_expired: bool = False
    ) -> RoutingIngestResult:
        """Read a routing file and ingest it into routing steps.

        Args:
            file_path: Path to the routing file
            columns: Header configuration (default: RoutingColumns())
            drop_expired: Drop rows whose expiry column is filled

        Returns:
            RoutingIngestResult
        """
        return ingest_routing(self.read(file_path), columns, drop_expired=drop_expired)

    def get_mapping_report(self, file_path: str, columns: Optional[BomColumns] = None) -> Dict[str, Any]:
        """Get a report of how the columns of a BOM file resolve to well-known keys.

        Args:
            file_path: Path to the BOM file
            columns: Header configuration (default: BomColumns())

        Returns:
            Dictionary with mapped keys, pass-through headers and unresolved keys
        """
        columns = columns or BomColumns()
        table = self.read(file_path)
        return ColumnResolver(columns.as_dict()).get_mapping_report(table.headers)
