# Shared pytest fixtures
from __future__ import annotations

import tempfile
from collections.abc import Callable
from pathlib import Path

import pandas as pd
import pytest

from sheet_extractor.logging.init import reset_logging


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        # .env 由来の上書きがテストに混入しないように
        monkeypatch.delenv("SHEET_EXTRACTOR_OUTPUT_DIR", raising=False)
        monkeypatch.delenv("SHEET_EXTRACTOR_MAX_PREVIEW_ROWS", raising=False)
        yield p


@pytest.fixture(autouse=True)
def _fresh_logging():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def sample_config_yaml() -> str:
    return """allowed_extensions: [".xlsx", ".csv", ".ods"]
max_preview_rows: 50
output_directory: ./out
json_indent: 4
csv_sheet_name: Data
error_log_directory: ./logs
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "extractor.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


def _write_workbook(path: Path, sheets: dict[str, list[list[object]]], engine: str | None = None) -> Path:
    with pd.ExcelWriter(path, engine=engine) as writer:
        for sheet, rows in sheets.items():
            df = pd.DataFrame(rows)
            df.to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def make_excel(temp_workdir: Path) -> Callable[..., Path]:
    """Factory writing an .xlsx (or .ods) file into data/."""
    def _make(name: str, sheets: dict[str, list[list[object]]]) -> Path:
        engine = "odf" if name.endswith(".ods") else "openpyxl"
        return _write_workbook(temp_workdir / "data" / name, sheets, engine=engine)
    return _make


@pytest.fixture()
def people_xlsx(make_excel) -> Path:
    return make_excel(
        "people.xlsx",
        {
            "People": [
                ["Name", None, "City"],
                ["Asha", 31, "Delhi"],
                ["Ravi", 45, "Mumbai"],
                ["Meera", 28, "New Delhi"],
            ],
            "Orders": [
                ["order_id", "amount"],
                [1, 250],
                [2, 400],
            ],
        },
    )
