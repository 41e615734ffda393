from __future__ import annotations

import logging
from pathlib import Path

from ..excel.reader import (
    ExtractionError,
    build_workbook,
    read_upload,
    read_workbook,
    validate_file_type,
)
from ..logging.error_log import ErrorLogBuffer, ErrorRecord
from ..models.config_models import ExtractorConfig
from ..models.ui_state import UIState, UploadError
from ..models.uploaded_file import UploadedFile
from .state import apply_error, apply_workbook, begin_upload

"""Upload pipeline: file -> Workbook -> UIState.

Coordinates ingestion and normalization for one upload and folds the outcome
into the UI state. Extraction errors never leave this module: they become the
state's ``error`` (with the workbook cleared), an ERROR log line and, when a
buffer is given, an ErrorRecord.
"""

__all__ = [
    "process_upload",
    "process_uploaded_file",
]

logger = logging.getLogger(__name__)


def _fail(
    state: UIState,
    generation: int,
    file_name: str,
    error: ExtractionError,
    error_log: ErrorLogBuffer | None,
) -> UIState:
    logger.error(f"{error.title}: {error.detail}")
    if error_log is not None:
        error_log.append(ErrorRecord.create(file_name, error.error_type, error.title, error.detail))
    upload_error = UploadError(title=error.title, detail=error.detail, error_type=error.error_type)
    return apply_error(state, generation, upload_error)


def _decode(state: UIState, generation: int, upload: UploadedFile, config: ExtractorConfig) -> UIState:
    raw = read_workbook(upload, csv_sheet_name=config.csv_sheet_name)
    workbook = build_workbook(raw)
    logger.info(
        f"loaded file={upload.name} size_kb={upload.size / 1024:.1f} media_type={upload.media_type} "
        f"sheets={len(workbook)} rows={workbook.total_rows}"
    )
    return apply_workbook(state, generation, workbook, file_name=upload.name, file_size=upload.size)


def process_uploaded_file(
    state: UIState,
    upload: UploadedFile,
    config: ExtractorConfig,
    error_log: ErrorLogBuffer | None = None,
) -> UIState:
    """Process bytes that are already in memory."""
    state, generation = begin_upload(state)
    try:
        validate_file_type(upload.name, config.allowed_extensions)
        return _decode(state, generation, upload, config)
    except ExtractionError as e:
        return _fail(state, generation, upload.name, e, error_log)


def process_upload(
    state: UIState,
    path: Path,
    config: ExtractorConfig,
    error_log: ErrorLogBuffer | None = None,
) -> UIState:
    """Process the file at ``path``.

    The extension is checked before the file is read, so an unsupported file
    is never opened.
    """
    state, generation = begin_upload(state)
    logger.debug(f"upload generation={generation} path={path}")
    try:
        validate_file_type(path.name, config.allowed_extensions)
        upload = read_upload(path)
        return _decode(state, generation, upload, config)
    except ExtractionError as e:
        return _fail(state, generation, path.name, e, error_log)
