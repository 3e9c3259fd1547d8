"""
Dataset Profiler: Typed Column Profiles From Raw Rows

Runs the normalizer and type inference over every column and assembles the
DatasetProfile consumed by filters, stats and analytics.

Runs entirely locally and in memory; the dataset is assumed to fit in RAM.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from ..core.exceptions import EmptyDatasetError
from ..models import Column, ColumnType, DatasetProfile, DatasetSummary
from .normalizer import normalize
from .type_inference import infer_type
from .values import is_missing, parse_date, parse_float, to_iso

logger = logging.getLogger("autodash.profiler")

SAMPLE_ROW_COUNT = 10
SAMPLE_VALUE_COUNT = 5

_EXTENSION = re.compile(r"\.[^/.]+$")


def build_profile(raw_rows: Optional[Sequence[Dict[str, Any]]], dataset_name: str) -> DatasetProfile:
    """
    Build a typed profile for a dataset.

    Args:
        raw_rows: Decoded rows, column name -> cell value.
        dataset_name: Source file name; its extension is stripped.

    Raises:
        EmptyDatasetError: If ``raw_rows`` is empty or None.
    """
    if not raw_rows:
        raise EmptyDatasetError("Dataset is empty or invalid")

    logger.info("build_profile: %d raw rows from '%s'", len(raw_rows), dataset_name)
    rows, names = normalize(raw_rows)

    columns: List[Column] = []
    for name in names:
        values = [row[name] for row in rows if not is_missing(row[name])]
        column = _profile_column(name, values)
        logger.debug("  profiled '%s' -> type=%s, unique=%d", name, column.type.value, column.unique_values)
        columns.append(column)

    profile = DatasetProfile(
        dataset_name=strip_extension(dataset_name),
        columns=columns,
        sample_rows=rows[:SAMPLE_ROW_COUNT],
        rows=rows,
        total_rows=len(rows),
    )
    logger.info("build_profile: done, %d columns, %d rows", len(columns), profile.total_rows)
    return profile


def build_dataset_summary(profile: DatasetProfile) -> DatasetSummary:
    """Build a dataset-level summary from the column profiles."""
    type_counts: Dict[str, int] = {}
    for column in profile.columns:
        type_counts[column.type.value] = type_counts.get(column.type.value, 0) + 1

    return DatasetSummary(
        dataset_name=profile.dataset_name,
        total_rows=profile.total_rows,
        column_count=len(profile.columns),
        type_breakdown=type_counts,
    )


def strip_extension(name: str) -> str:
    return _EXTENSION.sub("", name)


# ─── Internal helpers ────────────────────────────────────────────────────


def _distinct(values: Sequence[Any]) -> List[Any]:
    """Distinct values in encounter order; True and 1 stay distinct."""
    seen: Dict[Any, Any] = {}
    for v in values:
        seen.setdefault((isinstance(v, bool), v), v)
    return list(seen.values())


def _profile_column(name: str, values: List[Any]) -> Column:
    """Create the profile for a single column from its non-empty values."""
    if not values:
        return Column(name=name, type=ColumnType.STRING, unique_values=0)

    column_type = infer_type(values)
    distinct = _distinct(values)

    low = high = None
    if column_type.is_numeric:
        low, high = _numeric_range(values)
    elif column_type is ColumnType.DATE:
        low, high = _date_range(values)

    return Column(
        name=name,
        type=column_type,
        unique_values=len(distinct),
        min=low,
        max=high,
        sample_values=distinct[:SAMPLE_VALUE_COUNT],
    )


def _numeric_range(values: Sequence[Any]):
    numbers = [n for n in (parse_float(v) for v in values) if n is not None]
    if not numbers:
        return None, None
    return min(numbers), max(numbers)


def _date_range(values: Sequence[Any]):
    dates = [d for d in (parse_date(v) for v in values) if d is not None]
    if not dates:
        return None, None
    return to_iso(min(dates)), to_iso(max(dates))
