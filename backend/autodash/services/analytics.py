"""
Local Analytics: Quick Insights Without an LLM

Derives a handful of human-readable observations from a profile and a row
set (usually the currently filtered rows):

1. Year-over-year change of the first numeric column that is not the date column
2. Top category contributions to the first numeric column
3. Outlier count (|z| > 2.5) in the first numeric column
4. Strongly correlated numeric column pairs (|r| >= 0.6)

Each insight is emitted only when its source columns exist and the data
supports it.
"""

import logging
import re
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..models import Column, ColumnType, DatasetProfile, Row
from .values import format_number, parse_date, parse_float, round_half_up, to_text

logger = logging.getLogger("autodash.analytics")

DATE_LIKE_NAME = re.compile(r"year|date|time|occurrence", re.IGNORECASE)
YEAR_PATTERN = re.compile(r"(19|20)\d{2}")
YEAR_RANGE = (1900, 2099)
# Abbreviated year headers ("y", "yr", "FY"); only these qualify by value range
YEAR_ABBREVIATION = re.compile(r"^(y|yr|yrs|yy|yyyy|fy)$", re.IGNORECASE)

TOP_CATEGORY_COUNT = 3
OUTLIER_MIN_VALUES = 5
OUTLIER_Z_THRESHOLD = 2.5
CORRELATION_MIN_SAMPLES = 5
CORRELATION_THRESHOLD = 0.6
MAX_REPORTED_CORRELATIONS = 3


def compute_insights(profile: DatasetProfile, rows: Sequence[Row]) -> List[str]:
    """Return insight lines in a fixed order: YoY, top categories, outliers, correlations."""
    if not rows:
        return []

    numeric_cols = [c.name for c in profile.columns_of(ColumnType.INTEGER, ColumnType.FLOAT)]
    cat_cols = [c.name for c in profile.columns_of(ColumnType.STRING)]
    date_cols = [c.name for c in profile.columns if is_date_like(c)]

    lines: List[str] = []
    if date_cols:
        measures = [n for n in numeric_cols if n != date_cols[0]]
        if measures:
            _append(lines, year_over_year(rows, date_cols[0], measures[0]))
    if cat_cols and numeric_cols:
        _append(lines, top_categories(rows, cat_cols[0], numeric_cols[0]))
    if numeric_cols:
        _append(lines, outlier_summary(rows, numeric_cols[0]))
    if len(numeric_cols) >= 2:
        _append(lines, strong_correlations(rows, numeric_cols))

    logger.info("compute_insights: %d insight(s) from %d rows", len(lines), len(rows))
    return lines


def is_date_like(column: Column) -> bool:
    """Date-typed, date/year-named, or a "y"/"yr"-style integer column of 19xx/20xx years."""
    if column.type is ColumnType.DATE or DATE_LIKE_NAME.search(column.name):
        return True
    return (
        column.type is ColumnType.INTEGER
        and YEAR_ABBREVIATION.match(column.name.strip()) is not None
        and isinstance(column.min, (int, float))
        and isinstance(column.max, (int, float))
        and YEAR_RANGE[0] <= column.min
        and column.max <= YEAR_RANGE[1]
    )


def _append(lines: List[str], line: Optional[str]) -> None:
    if line:
        lines.append(line)


def parse_year(value: Any) -> Optional[int]:
    """First 19xx/20xx in the text, else the year of the parsed date."""
    if value is None:
        return None
    match = YEAR_PATTERN.search(to_text(value))
    if match:
        return int(match.group(0))
    ts = parse_date(value)
    return ts.year if ts is not None else None


def year_over_year(rows: Sequence[Row], date_col: str, value_col: str) -> Optional[str]:
    per_year: Dict[int, float] = {}
    for row in rows:
        year = parse_year(row.get(date_col))
        value = parse_float(row.get(value_col))
        if year is not None and value is not None:
            per_year[year] = per_year.get(year, 0.0) + value

    years = sorted(per_year)
    if len(years) < 2:
        return None
    prev, latest = years[-2], years[-1]
    prev_total = per_year[prev]
    if prev_total == 0:
        return None

    change = (per_year[latest] - prev_total) / abs(prev_total) * 100
    sign = "+" if change >= 0 else ""
    pct = format_number(round_half_up(change, 1))
    return f"YoY change of {value_col} from {prev} to {latest}: {sign}{pct}%"


def top_categories(rows: Sequence[Row], cat_col: str, value_col: str) -> Optional[str]:
    totals: Dict[str, float] = {}
    grand = 0.0
    for row in rows:
        raw = row.get(cat_col)
        key = to_text(raw if raw is not None else "").strip()
        value = parse_float(row.get(value_col))
        if key and value is not None:
            totals[key] = totals.get(key, 0.0) + value
            grand += value

    top = sorted(totals.items(), key=lambda kv: kv[1], reverse=True)[:TOP_CATEGORY_COUNT]
    if grand <= 0 or not top:
        return None
    parts = [f"{k} ({format_number(round_half_up(v / grand * 100))}%)" for k, v in top]
    return f"Top {cat_col} by {value_col}: {', '.join(parts)}"


def outlier_summary(rows: Sequence[Row], column: str) -> Optional[str]:
    vals = np.asarray(
        [n for n in (parse_float(row.get(column)) for row in rows) if n is not None],
        dtype=float,
    )
    if len(vals) <= OUTLIER_MIN_VALUES:
        return None
    sd = float(np.std(vals))
    if sd <= 0:
        return None

    outliers = int(np.sum(np.abs((vals - np.mean(vals)) / sd) > OUTLIER_Z_THRESHOLD))
    if outliers > 0:
        return f"Detected {outliers} potential outliers in {column} (|z| > {OUTLIER_Z_THRESHOLD})."
    return f"No strong outliers in {column} (stable distribution)."


def strong_correlations(rows: Sequence[Row], columns: Sequence[str]) -> Optional[str]:
    found = []
    for i, a_key in enumerate(columns):
        for b_key in columns[i + 1:]:
            xs, ys = [], []
            for row in rows:
                a, b = parse_float(row.get(a_key)), parse_float(row.get(b_key))
                if a is not None and b is not None:
                    xs.append(a)
                    ys.append(b)
            if len(xs) < CORRELATION_MIN_SAMPLES:
                continue
            r = pearson(xs, ys)
            if abs(r) >= CORRELATION_THRESHOLD:
                found.append((a_key, b_key, r))

    if not found:
        return None
    found.sort(key=lambda item: abs(item[2]), reverse=True)
    pairs = [
        f"{a} vs {b} (r={format_number(round_half_up(r, 2))})"
        for a, b, r in found[:MAX_REPORTED_CORRELATIONS]
    ]
    return f"Strong correlations: {'; '.join(pairs)}"


def pearson(x: Sequence[float], y: Sequence[float]) -> float:
    """Pearson correlation coefficient; 0 when undefined."""
    n = min(len(x), len(y))
    if n == 0:
        return 0.0
    xs = np.asarray(x[:n], dtype=float)
    ys = np.asarray(y[:n], dtype=float)
    dx = xs - xs.mean()
    dy = ys - ys.mean()
    den = np.sqrt(np.sum(dx * dx)) * np.sqrt(np.sum(dy * dy))
    if den == 0:
        return 0.0
    return float(np.sum(dx * dy) / den)
