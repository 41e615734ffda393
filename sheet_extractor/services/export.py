from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path

import pandas as pd

from ..models.sheet import Sheet
from ..models.ui_state import UIState
from .state import current_sheet

"""Export serializers (JSON / CSV) for the active sheet.

Exports always cover the sheet's full, unfiltered record sequence in header
order. Files are written to a temporary sibling first and renamed into place,
so a failed export never leaves a partial file behind.
"""

__all__ = [
    "EXPORT_FORMATS",
    "ExportError",
    "export_active_sheet",
    "export_sheet",
    "to_csv_text",
    "to_json_text",
]

logger = logging.getLogger(__name__)

EXPORT_FORMATS = ("json", "csv")
# ファイル名に使えない文字 (パス区切り)
_UNSAFE_NAME_CHARS = ("/", "\\", "\0")


class ExportError(Exception):
    """Raised when a sheet cannot be serialized or written."""
    pass


def to_json_text(sheet: Sheet, indent: int = 2) -> str:
    """Pretty JSON array of every record (keys in header order)."""
    columns = sheet.field_names
    rows = [{c: r.get(c, "") for c in columns} for r in sheet.records]
    return json.dumps(rows, indent=indent, ensure_ascii=False)


def to_csv_text(sheet: Sheet) -> str:
    """CSV text: header row + all records, minimal quoting, "\\n" line ends."""
    columns = sheet.field_names
    if not columns:
        return ""
    df = pd.DataFrame([[r.get(c, "") for c in columns] for r in sheet.records], columns=columns)
    return df.to_csv(index=False, lineterminator="\n")


def _file_stem(sheet_name: str) -> str:
    """Sheet name usable as a file name inside the output directory."""
    stem = sheet_name
    for ch in _UNSAFE_NAME_CHARS:
        stem = stem.replace(ch, "_")
    return stem.strip() or "sheet"


def _write_atomic(target: Path, text: str) -> None:
    fd, tmp_name = tempfile.mkstemp(prefix=f".{target.name}.", suffix=".tmp", dir=target.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        os.replace(tmp, target)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


def export_sheet(sheet: Sheet, fmt: str, output_dir: Path, *, json_indent: int = 2) -> Path:
    """Write ``<sheet name>.<fmt>`` into ``output_dir`` and return its path.

    Path separators in the sheet name are replaced with "_", so the file
    always lands directly inside ``output_dir``.
    """
    if fmt not in EXPORT_FORMATS:
        raise ExportError(f"unsupported export format: {fmt!r} (expected one of {', '.join(EXPORT_FORMATS)})")
    target = output_dir / f"{_file_stem(sheet.name)}.{fmt}"
    try:
        text = to_json_text(sheet, indent=json_indent) if fmt == "json" else to_csv_text(sheet)
        output_dir.mkdir(parents=True, exist_ok=True)
        _write_atomic(target, text)
    except (OSError, ValueError, TypeError) as e:
        raise ExportError(f"failed to export sheet '{sheet.name}' as {fmt}: {e}") from e
    logger.info(f"exported sheet={sheet.name} format={fmt} rows={sheet.row_count} path={target}")
    return target


def export_active_sheet(state: UIState, fmt: str, output_dir: Path, *, json_indent: int = 2) -> Path | None:
    """Export the active sheet; no-op (None) when nothing is loaded."""
    sheet = current_sheet(state)
    if sheet is None:
        logger.debug("export skipped: no sheet loaded")
        return None
    return export_sheet(sheet, fmt, output_dir, json_indent=json_indent)
