"""
Row Normalizer

Sanitizes column names and coerces locale-formatted numeric strings into
numbers. Produces a fresh row set with one stable key per column; the input
rows are never mutated.
"""

import json
import logging
import re
from functools import reduce
from typing import Any, Dict, Iterable, List, NamedTuple, Sequence, Tuple

from .values import (
    MISSING,
    SIMPLE_NUMERIC_PATTERN,
    THOUSANDS_PATTERN,
    is_missing,
)

logger = logging.getLogger("autodash.normalizer")

GENERATED_COLUMN_PREFIX = "Column_"

# Headers that carry no name: blank, "_1"-style auto numbering, SheetJS
# "__EMPTY" placeholders and pandas "Unnamed: 3" placeholders.
_PLACEHOLDER_HEADERS = (
    re.compile(r"^_+\d+$"),
    re.compile(r"^__?EMPTY.*$", re.IGNORECASE),
    re.compile(r"^Unnamed: \d+$"),
)


# ─── Column names ────────────────────────────────────────────────────


class _NamingState(NamedTuple):
    assigned: Tuple[str, ...]
    generated: int


def is_placeholder_header(name: str) -> bool:
    return name == "" or any(p.match(name) for p in _PLACEHOLDER_HEADERS)


def _dedupe(candidate: str, taken: Iterable[str]) -> str:
    taken = set(taken)
    if candidate not in taken:
        return candidate
    suffix = 1
    while f"{candidate}_{suffix}" in taken:
        suffix += 1
    return f"{candidate}_{suffix}"


def _assign_name(state: _NamingState, raw: Any) -> _NamingState:
    trimmed = str(raw if raw is not None else "").strip()
    generated = state.generated
    if is_placeholder_header(trimmed):
        generated += 1
        trimmed = f"{GENERATED_COLUMN_PREFIX}{generated}"
    name = _dedupe(trimmed, state.assigned)
    return _NamingState(state.assigned + (name,), generated)


def sanitize_column_names(raw_names: Sequence[Any]) -> List[str]:
    """
    Map raw headers to unique, non-empty names, position by position.

    Placeholder headers become ``Column_<n>``; a name that is already taken
    gets ``_1``, ``_2``... appended until it is unique.
    """
    final = reduce(_assign_name, raw_names, _NamingState((), 0))
    return list(final.assigned)


# ─── Values ──────────────────────────────────────────────────────────


def _parse_number(text: str) -> Any:
    try:
        return float(text) if "." in text else int(text)
    except ValueError:
        return None


def coerce_value(value: Any) -> Any:
    """
    Normalize a single cell.

    None/NaN become the "" sentinel, numeric-looking strings (including
    ``1,234.5`` and ``1 234``) become numbers, other strings are trimmed.
    """
    if is_missing(value):
        return MISSING
    if isinstance(value, (dict, list)):
        return json.dumps(value, default=str)
    if not isinstance(value, str):
        return value

    trimmed = value.strip()
    if THOUSANDS_PATTERN.match(trimmed):
        parsed = _parse_number(re.sub(r"[,\s]", "", trimmed))
    elif SIMPLE_NUMERIC_PATTERN.match(trimmed):
        parsed = _parse_number(trimmed)
    else:
        return trimmed

    if parsed is None:
        logger.debug("coerce_value: keeping unparseable numeric text %r", trimmed)
        return trimmed
    return parsed


# ─── Rows ────────────────────────────────────────────────────────────


def collect_raw_columns(raw_rows: Sequence[Dict[str, Any]]) -> List[Any]:
    """Union of keys over all rows, in first-seen order."""
    seen: Dict[Any, None] = {}
    for row in raw_rows:
        for key in row.keys():
            seen.setdefault(key, None)
    return list(seen)


def normalize(
    raw_rows: Sequence[Dict[str, Any]],
) -> Tuple[List[Dict[str, Any]], List[str]]:
    """
    Build cleaned rows with sanitized keys.

    Columns whose value is missing in every row are dropped from the result.

    Returns:
        (cleaned_rows, column_names)
    """
    raw_columns = collect_raw_columns(raw_rows)
    names = sanitize_column_names(raw_columns)
    mapping = list(zip(raw_columns, names))

    cleaned = [
        {name: coerce_value(row.get(raw)) for raw, name in mapping}
        for row in raw_rows
    ]

    kept = [
        name for name in names
        if any(row[name] != MISSING for row in cleaned)
    ]
    dropped = len(names) - len(kept)
    if dropped:
        logger.info("normalize: dropped %d empty column(s)", dropped)
        cleaned = [{name: row[name] for name in kept} for row in cleaned]

    logger.debug("normalize: %d rows, columns=%s", len(cleaned), kept)
    return cleaned, kept
