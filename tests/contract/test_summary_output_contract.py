from __future__ import annotations

import re
from pathlib import Path

from sheet_extractor.cli import main as cli_main

SUMMARY_RE = re.compile(
    r"^SUMMARY file=\S+ sheets=\d+ active=\S+ rows=\d+ columns=\d+ preview_rows=\d+ elapsed_sec=[0-9.]+$"
)


def test_cli_prints_single_summary_line(people_xlsx: Path, capsys):
    assert cli_main([str(people_xlsx)]) == 0
    lines = [line for line in capsys.readouterr().out.splitlines() if line.startswith("SUMMARY")]
    assert len(lines) == 1
    assert SUMMARY_RE.match(lines[0])
