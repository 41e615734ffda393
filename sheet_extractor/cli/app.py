from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path

from dotenv import load_dotenv

from sheet_extractor.config.loader import (
    DEFAULT_CONFIG_PATH,
    ConfigError,
    apply_env_overrides,
    load_config,
)
from sheet_extractor.logging.error_log import ErrorLogBuffer
from sheet_extractor.logging.init import enable_debug, log_summary, setup_logging
from sheet_extractor.models.config_models import ExtractorConfig
from sheet_extractor.models.ui_state import UIState
from sheet_extractor.services.export import EXPORT_FORMATS, ExportError, export_active_sheet
from sheet_extractor.services.pipeline import process_upload
from sheet_extractor.services.preview import preview_frame
from sheet_extractor.services.state import current_sheet, preview_rows, select_sheet, set_search_term
from sheet_extractor.services.summary import render_summary_line

"""CLI entrypoint.

Flow:
- Load .env and the optional YAML config
- Load one spreadsheet file into the UI state
- Optionally pick a sheet and a search term, print the preview table
- Optionally export the active sheet as JSON and/or CSV
- Print the SUMMARY line
"""

EXIT_SUCCESS = 0
EXIT_FATAL = 1
EXIT_EXPORT_FAILURE = 2


def _parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(
        prog="sheet-extractor",
        description="Preview spreadsheet sheets and export them as JSON or CSV",
    )
    p.add_argument("file", type=Path, help="Spreadsheet file (.xlsx, .xls, .csv, .ods)")
    p.add_argument("--sheet", help="Sheet to activate (name or 0-based index)")
    p.add_argument("--search", default="", help="Case-insensitive filter for the preview")
    p.add_argument("--max-rows", type=int, default=None, help="Preview row limit")
    p.add_argument(
        "--export",
        action="append",
        choices=EXPORT_FORMATS,
        default=[],
        help="Export the active sheet (repeatable)",
    )
    p.add_argument("--output-dir", type=Path, default=None, help="Directory for exported files")
    p.add_argument("--list-sheets", action="store_true", help="List sheets and exit")
    p.add_argument("--config", type=Path, default=None, help=f"YAML config (default: {DEFAULT_CONFIG_PATH})")
    p.add_argument("--debug", action="store_true", help="Enable debug logging")
    return p.parse_args(argv)


def _load_config(path: Path | None) -> ExtractorConfig:
    if path is not None:
        cfg = load_config(path)
    elif DEFAULT_CONFIG_PATH.exists():
        cfg = load_config(DEFAULT_CONFIG_PATH)
    else:
        cfg = ExtractorConfig()
    return apply_env_overrides(cfg)


def _resolve_sheet(state: UIState, selector: str) -> int | None:
    if state.workbook is None:
        return None
    if selector in state.workbook.sheet_names:
        return state.workbook.index_of(selector)
    if selector.isdigit() and int(selector) < len(state.workbook):
        return int(selector)
    return None


def _print_sheets(state: UIState) -> None:
    if state.workbook is None:
        print("  (no data loaded)")
        return
    for index, sheet in enumerate(state.workbook.sheets):
        marker = "*" if index == state.active_index else " "
        print(f"{marker} [{index}] {sheet.name}: {sheet.row_count} rows, {sheet.column_count} columns")


def _print_preview(state: UIState, max_rows: int) -> int:
    sheet = current_sheet(state)
    if sheet is None:
        print("  (no data loaded)")
        return 0
    rows = preview_rows(state, max_rows)
    print(
        f"SHEET: {sheet.name} total_rows={sheet.row_count} columns={sheet.column_count} "
        f"showing={len(rows)}"
    )
    if not rows:
        print("  (no matching rows)")
    else:
        print(preview_frame(sheet, rows).to_string(index=False))
    return len(rows)


def main(argv: list[str] | None = None) -> int:
    logger = setup_logging()

    # NOTE: cli_main([]) のように空リストが渡された場合に sys.argv が混入しないよう None のときのみ参照
    if argv is None:
        argv = sys.argv[1:]
    args = _parse_args(argv)
    load_dotenv(dotenv_path=Path(".env"), override=False)

    if args.debug:
        enable_debug()

    try:
        cfg = _load_config(args.config)
    except ConfigError as e:
        logger.error(f"config: {e}")
        return EXIT_FATAL

    max_rows = args.max_rows if args.max_rows is not None else cfg.max_preview_rows
    if max_rows < 1:
        logger.error(f"--max-rows must be >= 1: {max_rows}")
        return EXIT_FATAL

    error_log = ErrorLogBuffer(Path(cfg.error_log_directory))
    started = time.perf_counter()
    state = process_upload(UIState(), args.file, cfg, error_log=error_log)
    if state.error is not None:
        log_path = error_log.flush()
        if log_path is not None:
            logger.info(f"error log written: {log_path}")
        return EXIT_FATAL

    if args.list_sheets:
        _print_sheets(state)
        return EXIT_SUCCESS

    if args.sheet is not None:
        index = _resolve_sheet(state, args.sheet)
        if index is None:
            logger.error(f"sheet not found: {args.sheet} (available: {', '.join(state.workbook.sheet_names)})")
            return EXIT_FATAL
        state = select_sheet(state, index)

    if args.search:
        state = set_search_term(state, args.search)

    _print_preview(state, max_rows)

    output_dir = args.output_dir if args.output_dir is not None else Path(cfg.output_directory)
    for fmt in dict.fromkeys(args.export):
        try:
            export_active_sheet(state, fmt, output_dir, json_indent=cfg.json_indent)
        except ExportError as e:
            logger.error(f"export: {e}")
            return EXIT_EXPORT_FAILURE

    elapsed = time.perf_counter() - started
    # log_summary が "SUMMARY " を付与するため先頭ラベルを除去
    summary_line = render_summary_line(state, elapsed, max_rows)
    log_summary(summary_line[len("SUMMARY "):])
    return EXIT_SUCCESS
