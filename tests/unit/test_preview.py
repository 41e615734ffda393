from __future__ import annotations

import copy

from sheet_extractor.models.sheet import Sheet
from sheet_extractor.services.preview import filter_records, preview_frame


def _records(n: int) -> list[dict[str, str]]:
    return [{"id": str(i), "city": "Delhi" if i % 2 else "Pune"} for i in range(n)]


def test_empty_term_returns_first_rows_in_order():
    records = _records(500)
    out = filter_records(records, "", 200)
    assert len(out) == 200
    assert out == records[:200]


def test_case_insensitive_match():
    records = [{"city": "Delhi"}, {"city": "Mumbai"}]
    assert filter_records(records, "delhi") == [{"city": "Delhi"}]
    assert filter_records(records, "DELHI") == [{"city": "Delhi"}]


def test_match_on_any_field_keeps_relative_order():
    records = [
        {"name": "Asha", "city": "Pune"},
        {"name": "Ravi", "city": "Delhi"},
        {"name": "Delhiwala", "city": "Agra"},
    ]
    out = filter_records(records, "delhi")
    assert [r["name"] for r in out] == ["Ravi", "Delhiwala"]


def test_matches_are_truncated():
    records = _records(1000)
    out = filter_records(records, "delhi", 200)
    assert len(out) == 200
    assert all(r["city"] == "Delhi" for r in out)
    assert out[0]["id"] == "1"


def test_no_match_returns_empty():
    assert filter_records(_records(10), "zzz") == []


def test_filter_is_idempotent_and_does_not_mutate_input():
    records = _records(50)
    snapshot = copy.deepcopy(records)
    first = filter_records(records, "pune", 200)
    second = filter_records(records, "pune", 200)
    assert first == second
    assert records == snapshot


def test_non_string_values_are_stringified():
    records = [{"year": 2024, "note": None}, {"year": 1999, "note": None}]
    assert filter_records(records, "2024") == [{"year": 2024, "note": None}]


def test_zero_limit_returns_nothing():
    assert filter_records(_records(5), "", 0) == []


def test_preview_frame_uses_header_order():
    sheet = Sheet(name="S", headers=("b", "a"), records=({"b": "2", "a": "1"},))
    df = preview_frame(sheet, list(sheet.records))
    assert list(df.columns) == ["b", "a"]
    assert df.iloc[0].tolist() == ["2", "1"]
