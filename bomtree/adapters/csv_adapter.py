import csv
import io
import chardet
from pathlib import Path
from typing import List

from ..models import Table


class CsvAdapter:
    """CSV adapter for reading CSV and TSV BOM exports.

    Handles:
    - Multiple encodings (UTF-8, UTF-8-BOM, Big5, GBK, Windows-1252, etc.)
    - Different delimiters (comma, semicolon, tab)
    - Header-only files (returns the headers with no rows)
    """

    FALLBACK_ENCODINGS = ['cp950', 'gbk', 'cp1252', 'latin-1']

    def can_handle(self, file_path: str) -> bool:
        """Check if this adapter can handle the given file."""
        return Path(file_path).suffix.lower() in [".csv", ".tsv"]

    def _decode(self, raw_data: bytes, file_path: str) -> str:
        """Decode file contents, detecting the encoding with chardet."""
        # Check for BOM first
        if raw_data.startswith(b'\xef\xbb\xbf'):
            return raw_data.decode('utf-8-sig')

        try:
            return raw_data.decode('utf-8')
        except UnicodeDecodeError:
            pass

        detected = chardet.detect(raw_data[:100000]).get('encoding')
        candidates = [detected] if detected else []
        candidates.extend(self.FALLBACK_ENCODINGS)

        for encoding in candidates:
            try:
                return raw_data.decode(encoding)
            except (UnicodeDecodeError, LookupError):
                continue

        raise ValueError(f"Could not decode file {file_path}")

    def _detect_delimiter(self, sample: str, suffix: str) -> str:
        """Detect the delimiter from a sample of the file."""
        if suffix == '.tsv':
            return '\t'

        try:
            return csv.Sniffer().sniff(sample, delimiters=',;\t').delimiter
        except csv.Error:
            pass

        first_line = sample.splitlines()[0] if sample else ''
        comma_count = first_line.count(',')
        semicolon_count = first_line.count(';')
        tab_count = first_line.count('\t')

        if tab_count > comma_count and tab_count > semicolon_count:
            return '\t'
        elif semicolon_count > comma_count:
            return ';'
        return ','

    def read(self, file_path: str) -> Table:
        """Read a CSV file.

        Args:
            file_path: Path to the CSV/TSV file

        Returns:
            Table with trimmed headers and one dict per non-empty data row.
            Cell values are kept as strings; empty cells become None.

        Raises:
            FileNotFoundError: If file doesn't exist
            ValueError: If the file cannot be decoded or parsed
        """
        path = Path(file_path)

        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        raw_data = path.read_bytes()
        if not raw_data:
            return Table(headers=[], rows=[], source=str(path))

        text = self._decode(raw_data, str(file_path))
        delimiter = self._detect_delimiter(text[:4096], path.suffix.lower())

        try:
            raw_rows = list(csv.reader(io.StringIO(text, newline=''), delimiter=delimiter))
        except csv.Error as e:
            raise ValueError(f"Error parsing CSV file {file_path}: {e}")

        if not raw_rows:
            return Table(headers=[], rows=[], source=str(path))

        headers = [h.strip() for h in raw_rows[0]]
        rows = []
        for raw in raw_rows[1:]:
            if not any(cell.strip() for cell in raw):
                continue
            rows.append(self._to_row(headers, raw))

        return Table(headers=headers, rows=rows, source=str(path))

    @staticmethod
    def _to_row(headers: List[str], raw: List[str]) -> dict:
        row = {}
        for index, header in enumerate(headers):
            value = raw[index] if index < len(raw) else ''
            row[header] = value if value != '' else None
        return row
