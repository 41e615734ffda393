from __future__ import annotations

import json
from dataclasses import asdict, dataclass
from datetime import UTC, datetime

"""ErrorRecord model for error logging.

Each failed upload produces one ErrorRecord, written as a JSON Lines entry by
``sheet_extractor.logging.error_log.ErrorLogBuffer``. The keys are fixed by
``sheet_extractor/config/error_log_schema.json``; no extra keys are allowed.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """Structured error record for JSON Lines logging.

    Attributes:
        timestamp: ISO8601 UTC timestamp with 'Z' suffix
        file: Name of the uploaded file ("" when unknown)
        error_type: Error class name (InvalidFileType, ParseError, ...)
        title: User-visible error title
        detail: User-visible error detail
    """
    timestamp: str  # ISO8601 UTC
    file: str
    error_type: str
    title: str
    detail: str

    @staticmethod
    def create(file: str, error_type: str, title: str, detail: str) -> ErrorRecord:
        """Create a new ErrorRecord stamped with the current UTC time."""
        ts = datetime.now(UTC).isoformat().replace("+00:00", "Z")
        return ErrorRecord(
            timestamp=ts,
            file=file,
            error_type=error_type,
            title=title,
            detail=detail,
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (contract keys only)."""
        return json.dumps(asdict(self), ensure_ascii=False)
