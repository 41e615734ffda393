from __future__ import annotations

import json
from pathlib import Path

from sheet_extractor.cli import main as cli_main

"""CLI failure paths: every extraction error is reported and logged, nothing exported."""


def _error_log_lines(workdir: Path) -> list[dict]:
    logs = list((workdir / "logs").glob("errors-*.log"))
    assert len(logs) == 1
    return [json.loads(line) for line in logs[0].read_text(encoding="utf-8").splitlines()]


def test_invalid_extension(temp_workdir: Path, capsys):
    (temp_workdir / "report.pdf").write_bytes(b"%PDF-1.4")
    code = cli_main(["report.pdf", "--export", "json", "--output-dir", "out"])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR Invalid file format:" in out
    assert ".xlsx, .xls, .csv, .ods" in out
    assert not (temp_workdir / "out").exists()
    assert _error_log_lines(temp_workdir)[0]["error_type"] == "InvalidFileType"


def test_empty_workbook(temp_workdir: Path, capsys):
    (temp_workdir / "empty.csv").write_bytes(b"")
    assert cli_main(["empty.csv"]) == 1
    assert "ERROR No data found:" in capsys.readouterr().out
    assert _error_log_lines(temp_workdir)[0]["error_type"] == "EmptyDataError"


def test_missing_file(temp_workdir: Path, capsys):
    assert cli_main(["missing.xlsx"]) == 1
    assert "ERROR Could not read file:" in capsys.readouterr().out


def test_corrupt_workbook(temp_workdir: Path, capsys):
    (temp_workdir / "bad.ods").write_bytes(b"not an ods")
    assert cli_main(["bad.ods"]) == 1
    assert "ERROR Could not parse file:" in capsys.readouterr().out


def test_invalid_max_rows(people_xlsx: Path, capsys):
    assert cli_main([str(people_xlsx), "--max-rows", "0"]) == 1
    assert "ERROR --max-rows must be >= 1" in capsys.readouterr().out
