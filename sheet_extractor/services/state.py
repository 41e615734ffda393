from __future__ import annotations

import logging
from dataclasses import replace

from ..models.config_models import DEFAULT_MAX_PREVIEW_ROWS
from ..models.sheet import Record, Sheet, Workbook
from ..models.ui_state import UIState, UploadError
from .preview import filter_records

"""Pure state updates, one per user action.

Every function takes the current UIState and returns a new one; nothing is
mutated in place. Uploads are tagged with a generation number handed out by
``begin_upload``; a result or error carrying an older generation than the
state's current one is discarded.
"""

__all__ = [
    "apply_error",
    "apply_workbook",
    "begin_upload",
    "current_sheet",
    "preview_rows",
    "select_sheet",
    "set_search_term",
]

logger = logging.getLogger(__name__)


def begin_upload(state: UIState) -> tuple[UIState, int]:
    """Start a new upload; returns the new state and its generation."""
    generation = state.generation + 1
    return replace(state, generation=generation), generation


def _is_stale(state: UIState, generation: int) -> bool:
    if generation != state.generation:
        logger.debug(f"discarding stale upload result generation={generation} current={state.generation}")
        return True
    return False


def apply_workbook(
    state: UIState,
    generation: int,
    workbook: Workbook,
    *,
    file_name: str | None = None,
    file_size: int = 0,
) -> UIState:
    """Install a freshly parsed workbook (active sheet 0, error cleared)."""
    if _is_stale(state, generation):
        return state
    return replace(
        state,
        workbook=workbook,
        active_index=0,
        error=None,
        file_name=file_name,
        file_size=file_size,
    )


def apply_error(state: UIState, generation: int, error: UploadError) -> UIState:
    """Record an upload error and drop any loaded workbook."""
    if _is_stale(state, generation):
        return state
    return replace(
        state,
        workbook=None,
        active_index=0,
        error=error,
        file_name=None,
        file_size=0,
    )


def select_sheet(state: UIState, index: int) -> UIState:
    """Activate sheet ``index``; out-of-range indexes leave the state as is."""
    if state.workbook is None or not 0 <= index < len(state.workbook):
        logger.debug(f"ignoring sheet selection index={index}")
        return state
    return replace(state, active_index=index)


def set_search_term(state: UIState, term: str) -> UIState:
    return replace(state, search_term=term)


def current_sheet(state: UIState) -> Sheet | None:
    if state.workbook is None or not state.workbook.sheets:
        return None
    return state.workbook.sheet(state.active_index)


def preview_rows(state: UIState, max_rows: int = DEFAULT_MAX_PREVIEW_ROWS) -> list[Record]:
    sheet = current_sheet(state)
    if sheet is None:
        return []
    return filter_records(sheet.records, state.search_term, max_rows)
