from __future__ import annotations

import csv
import io
from collections.abc import Iterable, Sequence
from pathlib import Path, PurePath
from typing import Any

import pandas as pd

from ..models.config_models import DEFAULT_ALLOWED_EXTENSIONS
from ..models.sheet import Record, Sheet, Workbook
from ..models.uploaded_file import UploadedFile
from ..services.progress import ProgressTracker

"""Spreadsheet reader: ingestion and normalization.

Ingestion: extension allow-list check, full byte read, pandas decode into raw
header-less DataFrames (one per sheet, cells as formatted text). CSV text is
tokenized with the csv module (utf-8, then cp1252/latin-1) so ragged rows and
interior blank lines survive.
Normalization: 1行目をヘッダ行として扱い、2行目以降をデータ行 (header-keyed records).
"""

__all__ = [
    "EmptyDataError",
    "ExtractionError",
    "InvalidFileType",
    "ParseError",
    "ReadError",
    "build_workbook",
    "load_workbook",
    "normalize_rows",
    "normalize_sheet",
    "read_upload",
    "read_workbook",
    "validate_file_type",
]

CSV_EXTENSION = ".csv"
# Excel 由来の CSV は cp1252 が多い; latin-1 は必ず成功する最終手段
CSV_ENCODINGS = ("utf-8-sig", "cp1252", "latin-1")


class ExtractionError(Exception):
    """Base for every error surfaced to the user as title + detail."""

    title = "Extraction failed"

    def __init__(self, detail: str, *, title: str | None = None) -> None:
        super().__init__(detail)
        self.detail = detail
        if title is not None:
            self.title = title

    @property
    def error_type(self) -> str:
        return type(self).__name__


class InvalidFileType(ExtractionError):
    """Raised when the filename's extension is not in the allow-list."""

    title = "Invalid file format"


class ReadError(ExtractionError):
    """Raised when the file bytes cannot be read."""

    title = "Could not read file"


class ParseError(ExtractionError):
    """Raised when the decoder rejects the file content."""

    title = "Could not parse file"


class EmptyDataError(ExtractionError):
    """Raised when decoding succeeds but yields no usable sheets or rows."""

    title = "No data found"


def validate_file_type(filename: str, allowed: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS) -> str:
    """Check ``filename`` against the extension allow-list.

    Returns the matched extension (lower-cased). Raises InvalidFileType with
    the allowed list in its detail otherwise.
    """
    allowed = tuple(allowed)
    lowered = filename.lower()
    for ext in allowed:
        if lowered.endswith(ext.lower()):
            return ext.lower()
    raise InvalidFileType(
        f"'{PurePath(filename).name}' is not supported; choose one of: {', '.join(allowed)}"
    )


def read_upload(path: Path) -> UploadedFile:
    """Read the whole file into memory (no streaming)."""
    try:
        content = path.read_bytes()
    except OSError as e:
        raise ReadError(f"failed to read {path.name}: {e.strerror or e}") from e
    return UploadedFile(name=path.name, content=content)


def _decode_text(content: bytes) -> str:
    for encoding in CSV_ENCODINGS[:-1]:
        try:
            return content.decode(encoding)
        except UnicodeDecodeError:
            continue
    return content.decode(CSV_ENCODINGS[-1])


def _read_csv_rows(content: bytes) -> pd.DataFrame:
    """Decode CSV bytes into a header-less DataFrame.

    Rows may be ragged: the frame is as wide as the longest row and short
    rows (header included) are padded with None. Blank lines inside the file
    stay as empty rows; trailing blank lines are dropped.
    """
    rows = list(csv.reader(io.StringIO(_decode_text(content), newline="")))
    while rows and not any(rows[-1]):
        rows.pop()
    if not rows:
        # 空 CSV はシート 1 枚 (0 行) として扱う
        return pd.DataFrame()
    width = max(len(r) for r in rows)
    return pd.DataFrame([r + [None] * (width - len(r)) for r in rows], dtype=object)


def read_workbook(upload: UploadedFile, csv_sheet_name: str = "Sheet1") -> dict[str, pd.DataFrame]:
    """Decode uploaded bytes into raw DataFrames keyed by sheet name.

    Every sheet is read header-less and without NA conversion, so the header
    row arrives as ordinary data and blank cells arrive as "".
    Sheet order follows the file.
    """
    try:
        if upload.extension == CSV_EXTENSION:
            return {csv_sheet_name: _read_csv_rows(upload.content)}

        dfs: dict[str, pd.DataFrame] = {}
        with pd.ExcelFile(io.BytesIO(upload.content)) as xls:
            for name in xls.sheet_names:
                dfs[str(name)] = xls.parse(
                    name, header=None, dtype=str, keep_default_na=False, na_filter=False
                )
        return dfs
    except Exception as e:
        raise ParseError(f"{upload.name}: {e}") from e


def _cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and pd.isna(value):
        return ""
    return str(value)


def _header_labels(header_row: Sequence[Any]) -> tuple[str, ...]:
    labels = []
    for index, cell in enumerate(header_row, start=1):
        text = _cell_text(cell).strip()
        labels.append(text or f"Column {index}")
    return tuple(labels)


def normalize_rows(name: str, rows: Sequence[Sequence[Any]]) -> Sheet:
    """Build a Sheet from row-major raw rows.

    Steps:
    1. No rows -> empty Sheet (not an error)
    2. First row -> headers (trimmed text, blank -> "Column <n>")
    3. Remaining rows -> records; cells missing from short rows become ""
    4. Duplicate headers: the right-most column's value is kept
    """
    if not rows:
        return Sheet(name=name)
    headers = _header_labels(rows[0])
    records: list[Record] = []
    for raw in rows[1:]:
        record: Record = {}
        for index, header in enumerate(headers):
            record[header] = _cell_text(raw[index]) if index < len(raw) else ""
        records.append(record)
    return Sheet(name=name, headers=headers, records=tuple(records))


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> Sheet:
    """Normalize a raw header-less DataFrame."""
    if df.shape[0] == 0:
        return Sheet(name=sheet_name)
    return normalize_rows(sheet_name, df.values.tolist())


def build_workbook(raw_sheets: dict[str, pd.DataFrame]) -> Workbook:
    """Normalize every decoded sheet into a Workbook.

    Raises EmptyDataError when there are no sheets, or when no sheet holds a
    single data row.
    """
    if not raw_sheets:
        raise EmptyDataError("the file contains no sheets")
    sheets: list[Sheet] = []
    with ProgressTracker(len(raw_sheets), description="Reading sheets", unit="sheet") as progress:
        for name, df in raw_sheets.items():
            progress.start_item(name)
            sheets.append(normalize_sheet(df, name))
            progress.finish_item()
    if all(s.is_empty for s in sheets):
        raise EmptyDataError("the file contains no readable data rows")
    return Workbook(sheets=tuple(sheets))


def load_workbook(
    upload: UploadedFile,
    allowed_extensions: Iterable[str] = DEFAULT_ALLOWED_EXTENSIONS,
    csv_sheet_name: str = "Sheet1",
) -> Workbook:
    """Validate, decode and normalize an uploaded file."""
    validate_file_type(upload.name, allowed_extensions)
    raw = read_workbook(upload, csv_sheet_name=csv_sheet_name)
    return build_workbook(raw)
