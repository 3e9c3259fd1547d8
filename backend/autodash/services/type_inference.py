"""
Column Type Inference

Classifies a column by heuristic voting: every value is put into at most one
bucket (boolean, numeric, date), and a bucket wins when it holds at least
TYPE_VOTE_THRESHOLD of the values. Buckets are checked per value in the
order boolean -> numeric -> date, so short numeric strings are never read
as dates; the column verdict is checked in the order boolean -> date ->
numeric, so "1"/"0" columns only become boolean when those tokens dominate.
"""

import enum
import logging
from collections import Counter
from typing import Any, Optional, Sequence

from ..models import ColumnType
from .values import parse_date, parse_numeric_text, to_text

logger = logging.getLogger("autodash.type_inference")

TYPE_VOTE_THRESHOLD = 0.8
INTEGER_SHARE_THRESHOLD = 0.9
BOOLEAN_TOKENS = frozenset({"true", "false", "1", "0", "yes", "no"})
# Bare years and small integers ("2020", "12") are not dates
MIN_DATE_LENGTH = 4


class ValueBucket(str, enum.Enum):
    BOOLEAN = "boolean"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"


def _looks_like_date(text: str) -> bool:
    if len(text) <= MIN_DATE_LENGTH:
        return False
    # Weekday and month names alone parse as dates; require a digit
    if not any(ch.isdigit() for ch in text):
        return False
    return parse_date(text) is not None


def classify_value(value: Any) -> Optional[ValueBucket]:
    """Return the first bucket a value falls into, or None if unclassified."""
    raw = to_text(value).strip()
    text = raw.lower()

    if text in BOOLEAN_TOKENS:
        return ValueBucket.BOOLEAN

    number = parse_numeric_text(text)
    if number is not None:
        return ValueBucket.INTEGER if number.is_integer() else ValueBucket.FLOAT

    # Case is kept for the date parser ("T"/"Z" in ISO timestamps)
    if _looks_like_date(raw):
        return ValueBucket.DATE

    return None


def infer_type(values: Sequence[Any]) -> ColumnType:
    """
    Infer the semantic type of a column from its non-empty values.

    Args:
        values: Non-empty cell values of one column.

    Returns:
        One of the ColumnType tags; STRING when nothing reaches the threshold.
    """
    total = len(values)
    if total == 0:
        return ColumnType.STRING

    votes = Counter(classify_value(v) for v in values)
    numeric = votes[ValueBucket.INTEGER] + votes[ValueBucket.FLOAT]

    if votes[ValueBucket.BOOLEAN] / total >= TYPE_VOTE_THRESHOLD:
        return ColumnType.BOOLEAN
    if votes[ValueBucket.DATE] / total >= TYPE_VOTE_THRESHOLD:
        return ColumnType.DATE
    if numeric / total >= TYPE_VOTE_THRESHOLD:
        if votes[ValueBucket.INTEGER] / numeric >= INTEGER_SHARE_THRESHOLD:
            return ColumnType.INTEGER
        return ColumnType.FLOAT

    logger.debug("infer_type: no bucket reached %.0f%% (%s)", TYPE_VOTE_THRESHOLD * 100, dict(votes))
    return ColumnType.STRING
