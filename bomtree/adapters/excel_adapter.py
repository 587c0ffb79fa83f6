import openpyxl
from pathlib import Path

from ..models import Table


class ExcelAdapter:
    def __init__(self, sheet=None):
        # worksheet name; the first worksheet when None
        self.sheet = sheet

    def can_handle(self, file_path):
        return Path(file_path).suffix.lower() in [".xlsx", ".xlsm"]

    def read(self, file_path):
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"File not found: {file_path}")

        wb = openpyxl.load_workbook(path, data_only=True, read_only=True)
        try:
            ws = wb[self.sheet] if self.sheet else wb.worksheets[0]

            rows_iter = ws.iter_rows(values_only=True)
            header_row = next(rows_iter, None)
            if header_row is None:
                return Table(headers=[], rows=[], source=str(path))

            # trailing empty header cells are not columns
            header_cells = list(header_row)
            while header_cells and (header_cells[-1] is None or str(header_cells[-1]).strip() == ""):
                header_cells.pop()
            headers = [str(h).strip() if h is not None else "" for h in header_cells]

            rows = []
            for row in rows_iter:
                values = list(row[:len(headers)])
                if all(v is None or (isinstance(v, str) and not v.strip()) for v in values):
                    continue
                values.extend([None] * (len(headers) - len(values)))
                rows.append(dict(zip(headers, values)))
        finally:
            wb.close()

        return Table(headers=headers, rows=rows, source=str(path))
