"""
Scalar value helpers shared by the profiler, filters, stats and analytics.

Cells arrive from CSV, Excel and JSON decoders, so a single column can hold
ints, floats, booleans, strings and the "" missing sentinel side by side.
These helpers give every component the same answer for "is this missing",
"is this a number" and "is this a date".
"""

import math
import re
import warnings
from datetime import datetime
from typing import Any, Optional

import numpy as np
import pandas as pd
from dateutil import parser as date_parser

MISSING = ""

THOUSANDS_PATTERN = re.compile(r"^[+-]?\d{1,3}(?:[ ,]\d{3})+(?:\.\d+)?$")
SIMPLE_NUMERIC_PATTERN = re.compile(r"^[+-]?\d+(?:\.\d+)?$")
_SEPARATORS = re.compile(r"[,\s]")

# A standalone four-digit run; "08:15", "10-20" and "1.2.3" carry no year
_YEAR_TOKEN = re.compile(r"(?<!\d)\d{4}(?!\d)")
# Two defaults that differ in every date field
_DEFAULT_DATES = (datetime(2000, 1, 1), datetime(2001, 2, 2))


def is_missing(value: Any) -> bool:
    """True for None, the "" sentinel and float NaN."""
    if value is None:
        return True
    if isinstance(value, str):
        return value == MISSING
    if isinstance(value, float):
        return math.isnan(value)
    return False


def to_text(value: Any) -> str:
    """Stringify a cell the way the dashboard renders it (``1.0`` -> ``"1"``)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return str(int(value))
    return str(value)


def parse_numeric_text(text: str) -> Optional[float]:
    """
    Parse text matching the thousands or plain numeric pattern.

    Separators (comma or space) are removed before parsing. Returns None when
    neither pattern matches or the result is not finite.
    """
    if not (THOUSANDS_PATTERN.match(text) or SIMPLE_NUMERIC_PATTERN.match(text)):
        return None
    try:
        number = float(_SEPARATORS.sub("", text))
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def parse_float(value: Any) -> Optional[float]:
    """Strictly parse a cell as a finite float, or return None."""
    if isinstance(value, bool) or is_missing(value):
        return None
    if isinstance(value, (int, float, np.integer, np.floating)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def parse_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a cell as a timestamp.

    Text must spell out its own year and month (see ``has_date_part``);
    a bare time never borrows today's date. Timezone-aware results are
    converted to UTC and returned naive so that any two parsed dates are
    comparable.
    """
    if is_missing(value) or isinstance(value, bool):
        return None
    if isinstance(value, pd.Timestamp):
        ts = value
    else:
        text = to_text(value).strip()
        if not has_date_part(text):
            return None
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            try:
                ts = pd.to_datetime(text, errors="coerce")
            except (ValueError, TypeError, OverflowError):
                return None
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert("UTC").tz_localize(None)
    return ts


def has_date_part(text: str) -> bool:
    """
    True when the text itself names a four-digit year and a month.

    The text is parsed against two different default dates; if year or month
    changes with the default, it was filled in rather than read.
    """
    if not text or not _YEAR_TOKEN.search(text):
        return False
    try:
        first = date_parser.parse(text, default=_DEFAULT_DATES[0])
        second = date_parser.parse(text, default=_DEFAULT_DATES[1])
    except (ValueError, OverflowError, TypeError):
        return False
    return first.year == second.year and first.month == second.month


def to_epoch_millis(ts: pd.Timestamp) -> float:
    return ts.value / 1_000_000


def to_iso(ts: pd.Timestamp) -> str:
    """Render as ``YYYY-MM-DDTHH:MM:SS.mmmZ``."""
    return ts.strftime("%Y-%m-%dT%H:%M:%S.") + f"{ts.microsecond // 1000:03d}Z"


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with .5 going towards +infinity (dashboard rounding)."""
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def format_number(value: float) -> str:
    """Render integral values without a decimal part (``50.0`` -> ``"50"``)."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)
