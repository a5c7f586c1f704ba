"""
Spreadsheet reading and writing for product import/export.

Rows are returned as ordered ``{header: value}`` dicts taken from the first
row of the sheet. Blank cells come back as ``""`` so every row carries every
header, and fully blank rows are skipped.
"""
import csv
import io
import zipfile
from typing import Any, Iterable, Optional

import openpyxl
from openpyxl.utils.exceptions import InvalidFileException

from catalog_backend.utils.logger import get_logger

logger = get_logger(__name__)

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"
EXCEL_EXTENSIONS = ("xlsx", "xlsm")
CSV_EXTENSIONS = ("csv", "txt")


class SpreadsheetError(ValueError):
    """The uploaded file could not be read as a spreadsheet."""


def _file_extension(filename: Optional[str]) -> str:
    if not filename or "." not in filename:
        return ""
    return filename.rsplit(".", 1)[-1].lower()


def _unique_headers(raw_headers: Iterable[Any]) -> list[Optional[str]]:
    """Stringify header cells; repeated names get a _1, _2... suffix."""
    headers: list[Optional[str]] = []
    seen: dict[str, int] = {}
    for cell in raw_headers:
        if cell is None or str(cell).strip() == "":
            headers.append(None)
            continue
        name = str(cell).strip()
        if name in seen:
            seen[name] += 1
            name = f"{name}_{seen[name]}"
        else:
            seen[name] = 0
        headers.append(name)
    return headers


def _rows_from_table(table: Iterable[Iterable[Any]]) -> list[dict]:
    rows_iter = iter(table)
    try:
        headers = _unique_headers(next(rows_iter))
    except StopIteration:
        return []

    rows: list[dict] = []
    for values in rows_iter:
        values = list(values)
        if all(v is None or (isinstance(v, str) and v.strip() == "") for v in values):
            continue
        row = {}
        for idx, header in enumerate(headers):
            if header is None:
                continue
            value = values[idx] if idx < len(values) else None
            row[header] = "" if value is None else value
        rows.append(row)
    return rows


def read_xlsx_rows(content: bytes, sheet_name: Optional[str] = None) -> list[dict]:
    """Read one worksheet (the first unless sheet_name names another)."""
    try:
        wb = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    except (InvalidFileException, zipfile.BadZipFile, KeyError, OSError, ValueError) as e:
        raise SpreadsheetError(f"Cannot read Excel file: {e}") from e

    try:
        if sheet_name and sheet_name in wb.sheetnames:
            ws = wb[sheet_name]
        else:
            if sheet_name:
                logger.info(f"Sheet '{sheet_name}' not found, using '{wb.sheetnames[0]}'")
            ws = wb[wb.sheetnames[0]]
        return _rows_from_table(ws.iter_rows(values_only=True))
    finally:
        wb.close()


def read_csv_rows(content: bytes) -> list[dict]:
    """Parse CSV bytes (UTF-8 or latin-1) into row dicts."""
    for encoding in ("utf-8-sig", "cp1252", "latin-1"):
        try:
            text = content.decode(encoding)
            break
        except (UnicodeDecodeError, ValueError):
            continue
    else:
        raise SpreadsheetError("Cannot decode file - try UTF-8 encoding")

    sample = text[:2048]
    try:
        dialect = csv.Sniffer().sniff(sample, delimiters=",;\t")
    except csv.Error:
        dialect = csv.excel
    return _rows_from_table(csv.reader(io.StringIO(text), dialect))


def parse_spreadsheet(content: bytes, filename: Optional[str], sheet_name: Optional[str] = None) -> list[dict]:
    """Dispatch on file extension. Unknown extensions are tried as Excel."""
    if not content:
        raise SpreadsheetError("File is empty")

    ext = _file_extension(filename)
    if ext in CSV_EXTENSIONS:
        return read_csv_rows(content)
    return read_xlsx_rows(content, sheet_name)


def write_xlsx(rows: list[dict], columns: list[str], sheet_title: str = "Productos") -> bytes:
    """Write rows to a single-sheet workbook and return the file bytes."""
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = sheet_title
    ws.append(columns)
    for row in rows:
        ws.append([row.get(col) for col in columns])

    buffer = io.BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
