import os

import pandas as pd

SPREADSHEET_EXTENSIONS = {'.xlsx'}
CSV_EXTENSIONS = {'.csv'}


class ImportFileError(Exception):
    """The uploaded sheet could not be read."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ImportReport:
    """Per-row outcome of one import step."""

    def __init__(self):
        self.processed = 0
        self.inserted = 0
        self.updated = 0
        self.skipped = 0
        self.errors = []

    def error(self, row, message):
        self.skipped += 1
        self.errors.append({'row': row, 'message': str(message)})

    def to_dict(self):
        return {
            'processed': self.processed,
            'inserted': self.inserted,
            'updated': self.updated,
            'skipped': self.skipped,
            'errors': self.errors,
        }


def read_import_rows(req):
    """
    Read import rows from an uploaded ``file`` (CSV or Excel) or a JSON ``{rows: [...]}`` body.

    Every cell is read as text so slugs and codes like ``00123`` survive.

    Returns:
        list[dict]: one dict per data row
    """
    file = req.files.get('file')
    if file and file.filename:
        ext = os.path.splitext(file.filename)[1].lower()
        try:
            if ext in CSV_EXTENSIONS:
                frame = pd.read_csv(file.stream, dtype=str, keep_default_na=False)
            elif ext in SPREADSHEET_EXTENSIONS:
                frame = pd.read_excel(file.stream, dtype=str, keep_default_na=False)
            else:
                raise ImportFileError("Unsupported file type. Upload a .csv or .xlsx file.")
        except ImportFileError:
            raise
        except Exception as e:
            raise ImportFileError(f"Could not read file: {e}")
        frame.columns = [str(c).strip().lower() for c in frame.columns]
        return frame.to_dict(orient='records')

    body = req.get_json(silent=True)
    rows = body.get('rows') if isinstance(body, dict) else None
    if rows is None:
        raise ImportFileError("Upload a file or send a JSON body with rows")
    if not isinstance(rows, list) or not all(isinstance(r, dict) for r in rows):
        raise ImportFileError("rows must be a list of objects")
    return rows
