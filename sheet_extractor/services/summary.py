from __future__ import annotations

from ..models.ui_state import UIState
from .state import current_sheet, preview_rows

"""Summary line rendering service.

Format:
SUMMARY file={name} sheets={n} active={sheet} rows={rows} columns={cols}
preview_rows={shown} elapsed_sec={elapsed}
"""

__all__ = [
    "format_elapsed",
    "render_summary_line",
]


def format_elapsed(elapsed_seconds: float) -> str:
    """Render seconds without scientific notation or needless decimals."""
    if elapsed_seconds == 0:
        return "0"
    if elapsed_seconds == int(elapsed_seconds):
        return str(int(elapsed_seconds))
    if elapsed_seconds < 0.01:
        return f"{elapsed_seconds:.6f}".rstrip("0").rstrip(".")
    return f"{elapsed_seconds:.3f}".rstrip("0").rstrip(".")


def render_summary_line(state: UIState, elapsed_seconds: float, max_rows: int) -> str:
    """Render the SUMMARY line for the loaded workbook.

    Examples:
        >>> from sheet_extractor.models import Sheet, UIState, Workbook
        >>> sheet = Sheet(name="People", headers=("Name",), records=({"Name": "Asha"},))
        >>> state = UIState(workbook=Workbook(sheets=(sheet,)), file_name="people.xlsx")
        >>> render_summary_line(state, 0.5, 200)
        'SUMMARY file=people.xlsx sheets=1 active=People rows=1 columns=1 preview_rows=1 elapsed_sec=0.5'
    """
    sheet = current_sheet(state)
    sheets = len(state.workbook) if state.workbook is not None else 0
    return (
        f"SUMMARY file={state.file_name or '-'} "
        f"sheets={sheets} "
        f"active={sheet.name if sheet is not None else '-'} "
        f"rows={sheet.row_count if sheet is not None else 0} "
        f"columns={sheet.column_count if sheet is not None else 0} "
        f"preview_rows={len(preview_rows(state, max_rows))} "
        f"elapsed_sec={format_elapsed(elapsed_seconds)}"
    )
