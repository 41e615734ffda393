from __future__ import annotations

from dataclasses import dataclass

from .sheet import Workbook

"""UI state record for the spreadsheet extractor.

UIState is the single state record of a viewing session. It is immutable;
``sheet_extractor.services.state`` holds the pure functions that derive a new
state for every user action.
"""

__all__ = [
    "UIState",
    "UploadError",
]


@dataclass(frozen=True)
class UploadError:
    """User-visible error (title + detail)."""
    title: str
    detail: str
    error_type: str = "ExtractionError"


@dataclass(frozen=True)
class UIState:
    """State of one viewing session.

    Invariants:
    - ``error`` is set only while ``workbook`` is None
    - ``0 <= active_index < len(workbook)`` whenever a workbook is loaded
    - ``generation`` increases by one for every upload started
    """
    workbook: Workbook | None = None
    active_index: int = 0
    search_term: str = ""
    error: UploadError | None = None
    file_name: str | None = None
    file_size: int = 0
    generation: int = 0

    @property
    def has_data(self) -> bool:
        return self.workbook is not None and len(self.workbook) > 0
