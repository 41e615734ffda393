from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from sheet_extractor.logging.error_log import ErrorLogBuffer
from sheet_extractor.models.config_models import ExtractorConfig
from sheet_extractor.models.ui_state import UIState
from sheet_extractor.models.uploaded_file import UploadedFile
from sheet_extractor.services.pipeline import process_upload, process_uploaded_file


def test_process_upload_success(people_xlsx: Path):
    state = process_upload(UIState(), people_xlsx, ExtractorConfig())
    assert state.error is None
    assert state.has_data
    assert state.workbook.sheet_names == ["People", "Orders"]
    assert state.active_index == 0
    assert state.file_name == "people.xlsx"
    assert state.file_size == people_xlsx.stat().st_size
    assert state.generation == 1


def test_invalid_extension_rejected_before_read(temp_workdir: Path):
    path = temp_workdir / "report.pdf"
    path.write_bytes(b"%PDF-1.4")
    log = ErrorLogBuffer(temp_workdir / "logs")
    with patch("sheet_extractor.services.pipeline.read_upload") as reader:
        state = process_upload(UIState(), path, ExtractorConfig(), error_log=log)
    reader.assert_not_called()
    assert state.workbook is None
    assert state.error is not None
    assert state.error.error_type == "InvalidFileType"
    assert ".xlsx, .xls, .csv, .ods" in state.error.detail
    assert [r.error_type for r in log.records] == ["InvalidFileType"]


def test_error_clears_previous_workbook(people_xlsx: Path, temp_workdir: Path):
    state = process_upload(UIState(), people_xlsx, ExtractorConfig())
    assert state.has_data
    empty = temp_workdir / "data" / "empty.csv"
    empty.write_bytes(b"")
    state = process_upload(state, empty, ExtractorConfig())
    assert state.workbook is None
    assert state.file_name is None
    assert state.active_index == 0
    assert state.error.error_type == "EmptyDataError"
    assert state.generation == 2


def test_missing_file_is_read_error(temp_workdir: Path):
    state = process_upload(UIState(), temp_workdir / "gone.xlsx", ExtractorConfig())
    assert state.error.error_type == "ReadError"
    assert state.error.title == "Could not read file"


def test_corrupt_file_is_parse_error(temp_workdir: Path):
    path = temp_workdir / "data" / "corrupt.xlsx"
    path.write_bytes(b"PK\x03\x04 definitely not a workbook")
    state = process_upload(UIState(), path, ExtractorConfig())
    assert state.error.error_type == "ParseError"
    assert "corrupt.xlsx" in state.error.detail


def test_success_after_error_clears_error(people_xlsx: Path, temp_workdir: Path):
    bad = temp_workdir / "notes.txt"
    bad.write_text("x", encoding="utf-8")
    state = process_upload(UIState(), bad, ExtractorConfig())
    assert state.error is not None
    state = process_upload(state, people_xlsx, ExtractorConfig())
    assert state.error is None
    assert state.has_data


def test_process_uploaded_file_in_memory_csv():
    cfg = ExtractorConfig(csv_sheet_name="Cities")
    upload = UploadedFile(name="cities.CSV", content=b"city\nDelhi\n")
    state = process_uploaded_file(UIState(), upload, cfg)
    assert state.workbook.sheet_names == ["Cities"]
    assert state.file_size == len(b"city\nDelhi\n")


def test_configured_allow_list_is_honoured():
    cfg = ExtractorConfig(allowed_extensions=(".xlsx",))
    upload = UploadedFile(name="cities.csv", content=b"city\nDelhi\n")
    state = process_uploaded_file(UIState(), upload, cfg)
    assert state.error.error_type == "InvalidFileType"
    assert state.error.detail.endswith(".xlsx")


def test_errors_are_logged(temp_workdir: Path, capsys):
    from sheet_extractor.logging.init import setup_logging

    setup_logging()
    process_upload(UIState(), temp_workdir / "report.pdf", ExtractorConfig())
    assert "ERROR Invalid file format:" in capsys.readouterr().out


def test_ragged_csv_loads_instead_of_failing():
    upload = UploadedFile(name="ragged.csv", content=b"a,b\n1,2\n3,4,5\n")
    state = process_uploaded_file(UIState(), upload, ExtractorConfig())
    assert state.error is None
    assert state.workbook.sheet(0).headers == ("a", "b", "Column 3")


def test_loaded_file_logged_with_media_type(capsys):
    from sheet_extractor.logging.init import setup_logging

    setup_logging()
    upload = UploadedFile(name="cities.csv", content=b"city\nDelhi\n")
    process_uploaded_file(UIState(), upload, ExtractorConfig())
    out = capsys.readouterr().out
    assert "INFO loaded file=cities.csv size_kb=0.0 media_type=text/csv sheets=1 rows=1" in out
