from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclass for the spreadsheet extractor.

Populated by ``sheet_extractor.config.loader.load_config``; every field has a
default so that running without a config file behaves like the stock tool.
"""

__all__ = [
    "DEFAULT_ALLOWED_EXTENSIONS",
    "DEFAULT_MAX_PREVIEW_ROWS",
    "ExtractorConfig",
]

DEFAULT_ALLOWED_EXTENSIONS: tuple[str, ...] = (".xlsx", ".xls", ".csv", ".ods")
DEFAULT_MAX_PREVIEW_ROWS = 200


@dataclass(frozen=True)
class ExtractorConfig:
    """Root configuration object."""
    allowed_extensions: tuple[str, ...] = field(default=DEFAULT_ALLOWED_EXTENSIONS)
    max_preview_rows: int = DEFAULT_MAX_PREVIEW_ROWS  # プレビュー上限
    output_directory: str = "./exports"  # JSON/CSV 出力先
    json_indent: int = 2
    csv_sheet_name: str = "Sheet1"  # CSV 入力時のシート名
    error_log_directory: str = "./logs"
