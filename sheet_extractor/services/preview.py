from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from ..models.config_models import DEFAULT_MAX_PREVIEW_ROWS
from ..models.sheet import Record, Sheet

"""Preview filter for the active sheet.

The preview is the capped, optionally filtered subset of records shown on
screen. It is derived on demand and never feeds the exporters.
"""

__all__ = [
    "filter_records",
    "matches",
    "preview_frame",
]


def matches(record: Record, term: str) -> bool:
    """True when any field's text contains ``term`` (already lower-cased)."""
    for value in record.values():
        if value is None:
            continue
        if term in str(value).lower():
            return True
    return False


def filter_records(
    records: Sequence[Record],
    search_term: str = "",
    max_rows: int = DEFAULT_MAX_PREVIEW_ROWS,
) -> list[Record]:
    """Return the preview rows for ``records``.

    Empty ``search_term`` -> first ``max_rows`` records in original order.
    Otherwise records with at least one case-insensitive substring match,
    original order kept, truncated to ``max_rows``. The input is not modified.
    """
    if max_rows <= 0:
        return []
    if not search_term:
        return list(records[:max_rows])
    term = search_term.lower()
    result: list[Record] = []
    for record in records:
        if matches(record, term):
            result.append(record)
            if len(result) >= max_rows:
                break
    return result


def preview_frame(sheet: Sheet, rows: Sequence[Record]) -> pd.DataFrame:
    """Tabular view of ``rows`` in the sheet's column order (for display)."""
    columns = sheet.field_names
    return pd.DataFrame([[r.get(c, "") for c in columns] for r in rows], columns=columns)
