from .exceptions import UnsupportedFileError
from .schema import EXPORT_EXCLUDED_KEYS
from .values import cell_text
from typing import List, Dict, Optional
from pathlib import Path
import csv
import json
import logging
import openpyxl
from openpyxl.utils import get_column_letter

logger = logging.getLogger(__name__)


class BomExporter:
    """Writes the canonical explosion of a session to a file.

    The export always reads the full canonical sequence, never the rows
    that happen to be visible in a view.
    """

    SHEET_TITLE = "BOM_DFS"

    def export_columns(self, session) -> List[str]:
        """Session headers in source order, helper columns removed.

        A header is a helper column when it is the resolved header of an
        excluded key or matches the configured name of one
        (case-insensitively).
        """
        configured = session.columns.as_dict()
        excluded = set()
        for key in EXPORT_EXCLUDED_KEYS:
            for name in (session.column_map.get(key), configured.get(key)):
                if name:
                    excluded.add(str(name).strip().lower())

        return [h for h in session.headers if str(h).strip().lower() not in excluded]

    def export_rows(self, session) -> List[Dict[str, str]]:
        """One dict per canonical-sequence entry, values rendered as text."""
        headers = self.export_columns(session)
        return [
            {header: cell_text(record.get(header)) for header in headers}
            for record in session.canonical_records()
        ]

    def export(self, session, output_path: str, format: Optional[str] = None) -> str:
        """Export the canonical sequence of a session.

        Args:
            session: BomSession to export
            output_path: Path where the file should be saved
            format: Output format ('csv', 'excel', 'json', or None for auto-detect from extension)

        Returns:
            Path to the exported file

        Raises:
            UnsupportedFileError: If format is not supported
        """
        output_path = Path(output_path)

        # Auto-detect format from extension if not provided
        if format is None:
            suffix = output_path.suffix.lower()
            if suffix in ['.csv', '.tsv']:
                format = 'csv'
            elif suffix in ['.xlsx', '.xlsm']:
                format = 'excel'
            elif suffix == '.json':
                format = 'json'
            else:
                # Default to CSV if extension is not recognized
                format = 'csv'
                output_path = output_path.with_suffix('.csv')

        format = format.lower()
        headers = self.export_columns(session)
        rows = self.export_rows(session)

        if format == 'csv':
            self._export_csv(rows, output_path, headers)
        elif format == 'excel':
            self._export_excel(rows, output_path, headers)
        elif format == 'json':
            self._export_json(rows, output_path)
        else:
            raise UnsupportedFileError(
                f"Unsupported export format: {format}. Supported formats: csv, excel, json",
                path=str(output_path),
            )

        logger.info("Exported %d row(s) to %s", len(rows), output_path)
        return str(output_path)

    def _export_csv(self, rows: List[Dict[str, str]], output_path: Path, headers: List[str]) -> None:
        """Export rows to a CSV (or TSV) file."""
        delimiter = '\t' if output_path.suffix.lower() == '.tsv' else ','
        with open(output_path, 'w', newline='', encoding='utf-8') as f:
            writer = csv.DictWriter(f, fieldnames=headers, delimiter=delimiter, extrasaction='ignore')
            writer.writeheader()
            writer.writerows(rows)

    def _export_excel(self, rows: List[Dict[str, str]], output_path: Path, headers: List[str]) -> None:
        """Export rows to an Excel workbook with fitted column widths."""
        wb = openpyxl.Workbook()
        ws = wb.active
        ws.title = self.SHEET_TITLE

        widths = [len(str(header)) for header in headers]
        for col_idx, header in enumerate(headers, start=1):
            ws.cell(row=1, column=col_idx, value=str(header)).data_type = 's'

        for row_idx, row_data in enumerate(rows, start=2):
            for col_idx, header in enumerate(headers, start=1):
                value = row_data.get(header, '')
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                # text starting with "=" would otherwise be stored as a formula
                cell.data_type = 's'
                widths[col_idx - 1] = max(widths[col_idx - 1], len(value))

        for col_idx, width in enumerate(widths, start=1):
            ws.column_dimensions[get_column_letter(col_idx)].width = min(width + 2, 80)

        wb.save(output_path)

    def _export_json(self, rows: List[Dict[str, str]], output_path: Path) -> None:
        """Export rows to a JSON file."""
        with open(output_path, 'w', encoding='utf-8') as f:
            json.dump(rows, f, indent=2, ensure_ascii=False)
