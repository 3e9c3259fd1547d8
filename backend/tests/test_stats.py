"""
Tests for descriptive column statistics.
"""

from autodash.models import ColumnStats
from autodash.services.stats import describe


def test_describe_basic():
    """Test count, mean, upper median, population std, min and max."""
    rows = [{"x": 4}, {"x": 1}, {"x": 3}, {"x": 2}]
    stats = describe(rows, "x")

    assert stats.count == 4
    assert stats.mean == 2.5
    assert stats.median == 3
    assert stats.std == 1.12
    assert stats.min == 1
    assert stats.max == 4


def test_describe_odd_count_median():
    """Test that odd counts use the middle element."""
    rows = [{"x": v} for v in (9, 1, 5)]
    assert describe(rows, "x").median == 5


def test_describe_skips_non_numeric_cells():
    """Test that blanks, text and booleans are ignored."""
    rows = [{"x": 10}, {"x": ""}, {"x": "n/a"}, {"x": True}, {"x": "20"}]
    stats = describe(rows, "x")
    assert stats.count == 2
    assert stats.mean == 15


def test_describe_rounds_half_up():
    """Test two-decimal rounding of the mean."""
    rows = [{"x": 0.125}, {"x": 0.125}]
    assert describe(rows, "x").mean == 0.13


def test_describe_no_numbers_is_all_zero():
    """Test that a column without numbers reports zeroed stats."""
    stats = describe([{"x": "a"}, {"x": ""}], "x")
    assert stats == ColumnStats()
    assert stats.to_dict() == {"count": 0, "mean": 0, "median": 0, "std": 0, "min": 0, "max": 0}


def test_describe_unknown_column():
    """Test that a missing column is treated as having no numbers."""
    assert describe([{"x": 1}], "y").count == 0


def test_describe_single_value():
    """Test a single value has zero spread."""
    stats = describe([{"x": 7.5}], "x")
    assert stats.count == 1
    assert stats.std == 0
    assert stats.median == 7.5


def test_describe_min_max_keep_cell_values():
    """Test that min/max are the cells themselves, so integer columns report integers."""
    stats = describe([{"x": 4}, {"x": 1}, {"x": 2.5}], "x")
    assert stats.min == 1 and isinstance(stats.min, int)
    assert stats.max == 4 and isinstance(stats.max, int)


def test_describe_min_max_from_text_cells():
    stats = describe([{"x": "7.5"}, {"x": 3}], "x")
    assert stats.min == 3
    assert stats.max == 7.5
