"""
Tests for column-name sanitization and value coercion.
"""

import copy
import math

import pytest

from autodash.services.normalizer import (
    coerce_value,
    normalize,
    sanitize_column_names,
)


def test_sanitize_keeps_trimmed_names():
    """Test that ordinary headers are only trimmed."""
    assert sanitize_column_names(["  Region ", "Sales"]) == ["Region", "Sales"]


@pytest.mark.parametrize("placeholder", ["", "   ", "_1", "__12", "__EMPTY", "__EMPTY_3", "_empty", "Unnamed: 4"])
def test_sanitize_replaces_placeholder_headers(placeholder):
    """Test that blank and spreadsheet-default headers get generated names."""
    assert sanitize_column_names([placeholder]) == ["Column_1"]


def test_sanitize_numbers_generated_names_in_order():
    """Test that each placeholder consumes the next generated number."""
    names = sanitize_column_names(["", "Name", "__EMPTY", "_7"])
    assert names == ["Column_1", "Name", "Column_2", "Column_3"]


def test_sanitize_suffixes_duplicates():
    """Test that duplicate names get _1, _2 suffixes."""
    names = sanitize_column_names(["amount", " amount", "amount "])
    assert names == ["amount", "amount_1", "amount_2"]


def test_sanitize_checks_suffix_against_all_assigned_names():
    """Test that a suffixed name never collides with a name assigned earlier."""
    names = sanitize_column_names(["a_1", "a", "a"])
    assert names == ["a_1", "a", "a_2"]


def test_sanitize_generated_name_collides_with_real_header():
    """Test that a generated name is deduplicated against existing headers."""
    names = sanitize_column_names(["Column_1", ""])
    assert names == ["Column_1", "Column_1_1"]


def test_sanitize_is_idempotent():
    """Test that sanitizing already-sanitized unique names changes nothing."""
    first = sanitize_column_names(["", "x", "x", "__EMPTY", "Unnamed: 2"])
    assert sanitize_column_names(first) == first
    assert len(set(first)) == len(first)


def test_sanitize_stringifies_non_string_headers():
    """Test that numeric headers (e.g. from Excel) become strings."""
    assert sanitize_column_names([2020, None]) == ["2020", "Column_1"]


@pytest.mark.parametrize("raw,expected", [
    ("1,234", 1234),
    ("1 234 567", 1234567),
    ("-1,234.50", -1234.5),
    ("42", 42),
    ("+7", 7),
    ("3.14", 3.14),
    ("  12  ", 12),
    ("007", 7),
])
def test_coerce_numeric_strings(raw, expected):
    """Test that numeric-looking strings become numbers."""
    assert coerce_value(raw) == expected


def test_coerce_keeps_int_and_float_kinds():
    """Test that integers stay int and decimals become float."""
    assert isinstance(coerce_value("1,000"), int)
    assert isinstance(coerce_value("1.0"), float)


@pytest.mark.parametrize("raw,expected", [
    ("  hello ", "hello"),
    ("12,34", "12,34"),
    ("1.2.3", "1.2.3"),
    ("1e5", "1e5"),
    ("2024-01-05", "2024-01-05"),
])
def test_coerce_non_numeric_strings_are_trimmed(raw, expected):
    """Test that strings not matching a numeric pattern are kept, trimmed."""
    assert coerce_value(raw) == expected


@pytest.mark.parametrize("raw", [None, "", float("nan")])
def test_coerce_missing_becomes_empty_string(raw):
    """Test that missing values become the "" sentinel."""
    assert coerce_value(raw) == ""


def test_coerce_passes_through_numbers_and_booleans():
    """Test that already-typed values are left alone."""
    assert coerce_value(5) == 5
    assert coerce_value(2.5) == 2.5
    assert coerce_value(True) is True


def test_coerce_serializes_nested_values():
    """Test that lists and dicts are turned into JSON text."""
    assert coerce_value([1, 2]) == "[1, 2]"
    assert coerce_value({"a": 1}) == '{"a": 1}'


def test_normalize_builds_rows_with_sanitized_keys():
    """Test that every cleaned row has exactly the sanitized column set."""
    raw = [
        {" name ": "Ann", "": "x", "score": "1,500"},
        {" name ": "Bob", "": None, "score": "20"},
    ]
    rows, columns = normalize(raw)

    assert columns == ["name", "Column_1", "score"]
    assert rows == [
        {"name": "Ann", "Column_1": "x", "score": 1500},
        {"name": "Bob", "Column_1": "", "score": 20},
    ]


def test_normalize_drops_columns_empty_in_every_row():
    """Test that all-empty columns vanish from rows and column list."""
    raw = [{"a": 1, "b": None}, {"a": 2, "b": ""}, {"a": 3}]
    rows, columns = normalize(raw)

    assert columns == ["a"]
    assert all(set(r) == {"a"} for r in rows)


def test_normalize_unions_keys_in_first_seen_order():
    """Test that keys missing from the first row are still picked up."""
    raw = [{"a": 1}, {"b": "x", "a": 2}]
    rows, columns = normalize(raw)

    assert columns == ["a", "b"]
    assert rows[0] == {"a": 1, "b": ""}


def test_normalize_does_not_mutate_input():
    """Test that the raw rows are left untouched."""
    raw = [{" a ": " 1,000 ", "b": None}]
    snapshot = copy.deepcopy(raw)
    normalize(raw)
    assert raw == snapshot


def test_normalize_treats_nan_as_missing():
    """Test that pandas-style NaN cells count as empty."""
    rows, columns = normalize([{"a": float("nan"), "b": 1}])
    assert columns == ["b"]
    assert not any(isinstance(v, float) and math.isnan(v) for v in rows[0].values())
