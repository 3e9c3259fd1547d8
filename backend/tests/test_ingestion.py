"""
Tests for decoding uploaded CSV, Excel and JSON files into rows.
"""

import io

import pandas as pd
import pytest

from autodash.core.exceptions import InvalidPayloadError, UnsupportedFileError
from autodash.services.ingestion import (
    flatten_object,
    parse_upload,
    records_from_csv,
    records_from_json,
)


# ─── CSV ─────────────────────────────────────────────────────────────


def test_csv_cells_stay_text():
    """Test that CSV cells are handed over as raw text, separators intact."""
    content = b'name,amount\nA,"1,200"\nB,300\nC,\n'
    rows = records_from_csv(content)
    assert rows == [
        {"name": "A", "amount": "1,200"},
        {"name": "B", "amount": "300"},
        {"name": "C", "amount": ""},
    ]


def test_csv_semicolon_delimiter():
    content = b"city;sales\nParis;10\nLyon;20\nNice;30\n"
    rows = parse_upload("cities.csv", content)
    assert rows[0] == {"city": "Paris", "sales": "10"}
    assert len(rows) == 3


def test_csv_strips_utf8_bom():
    content = "\ufeffa,b\n1,2\n3,4\n".encode("utf-8")
    rows = records_from_csv(content)
    assert list(rows[0]) == ["a", "b"]


def test_csv_latin1_fallback():
    content = "name,n\nCafé,1\nThé,2\n".encode("latin-1")
    rows = records_from_csv(content)
    assert rows[0]["name"] == "Café"


def test_csv_empty_content():
    assert records_from_csv(b"") == []
    assert records_from_csv(b"   \n") == []


# ─── Excel ───────────────────────────────────────────────────────────


def test_excel_first_sheet():
    """Test that the first worksheet is read and blank rows are dropped."""
    buffer = io.BytesIO()
    df = pd.DataFrame({"region": ["North", None, "South"], "sales": [10, None, 20.5]})
    df.to_excel(buffer, index=False, engine="openpyxl")

    rows = parse_upload("book.xlsx", buffer.getvalue())

    assert rows == [
        {"region": "North", "sales": 10},
        {"region": "South", "sales": 20.5},
    ]


def test_excel_garbage_is_invalid():
    with pytest.raises(InvalidPayloadError):
        parse_upload("broken.xlsx", b"definitely not a workbook")


# ─── JSON ────────────────────────────────────────────────────────────


def test_json_top_level_array_is_flattened():
    rows = records_from_json('[{"a": 1, "b": {"c": 2, "d": [1, 2]}}]')
    assert rows == [{"a": 1, "b.c": 2, "b.d": [1, 2]}]


def test_json_finds_nested_record_array():
    text = '{"meta": {"count": 2}, "data": {"items": [{"x": 1}, {"x": 2}]}}'
    assert records_from_json(text) == [{"x": 1}, {"x": 2}]


def test_json_lines():
    text = '{"a": 1}\n\n{"a": 2, "b": "x"}\n'
    assert records_from_json(text) == [{"a": 1}, {"a": 2, "b": "x"}]


def test_json_scalar_items_are_wrapped():
    assert records_from_json("[1, 2]") == [{"value": 1}, {"value": 2}]


def test_json_invalid():
    with pytest.raises(InvalidPayloadError) as exc_info:
        records_from_json("this is not json")
    assert exc_info.value.message == "Invalid JSON payload"


def test_json_without_array():
    with pytest.raises(InvalidPayloadError) as exc_info:
        records_from_json('{"a": 1}')
    assert exc_info.value.message == "No tabular array found in JSON"


def test_flatten_stops_at_max_depth():
    flat = flatten_object({"a": {"b": {"c": {"d": {"e": 1}}}}})
    assert flat == {"a.b.c.d": {"e": 1}}


# ─── Dispatch ────────────────────────────────────────────────────────


@pytest.mark.parametrize("filename", ["notes.txt", "archive.zip", "noext", ""])
def test_unsupported_extension(filename):
    with pytest.raises(UnsupportedFileError) as exc_info:
        parse_upload(filename, b"a,b\n1,2\n")
    assert exc_info.value.error == "unsupported_file"


def test_extension_match_is_case_insensitive():
    rows = parse_upload("DATA.JSON", b'[{"k": "v"}]')
    assert rows == [{"k": "v"}]


def test_legacy_xls_is_unsupported():
    """Test that BIFF .xls workbooks are rejected up front instead of failing in the reader."""
    with pytest.raises(UnsupportedFileError) as exc_info:
        parse_upload("legacy.xls", b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1")
    assert ".xlsx" in exc_info.value.message
