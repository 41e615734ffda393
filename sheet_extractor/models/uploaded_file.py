from __future__ import annotations

from dataclasses import dataclass
from pathlib import PurePath

"""UploadedFile model for the spreadsheet extractor.

An UploadedFile is the raw input of one extraction: the chosen file's name
and its full byte content. It lives only until the next upload or error.
"""

__all__ = [
    "MEDIA_TYPES",
    "UploadedFile",
]

# Extension -> media type accepted by the file chooser
MEDIA_TYPES: dict[str, str] = {
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".xls": "application/vnd.ms-excel",
    ".csv": "text/csv",
    ".ods": "application/vnd.oasis.opendocument.spreadsheet",
}


@dataclass(frozen=True)
class UploadedFile:
    """Raw bytes + filename of a spreadsheet chosen by the user."""
    name: str  # ファイル名 (パスなし)
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def extension(self) -> str:
        """Lower-cased suffix including the dot ("" if none)."""
        return PurePath(self.name).suffix.lower()

    @property
    def media_type(self) -> str:
        return MEDIA_TYPES.get(self.extension, "application/octet-stream")
