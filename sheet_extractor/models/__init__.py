"""Domain models for the spreadsheet preview/export tool."""

from .config_models import ExtractorConfig
from .error_record import ErrorRecord
from .sheet import Record, Sheet, Workbook
from .ui_state import UIState, UploadError
from .uploaded_file import MEDIA_TYPES, UploadedFile

__all__ = [
    # Configuration models
    "ExtractorConfig",
    # Data models
    "MEDIA_TYPES",
    "Record",
    "Sheet",
    "UploadedFile",
    "Workbook",
    # State models
    "ErrorRecord",
    "UIState",
    "UploadError",
]
