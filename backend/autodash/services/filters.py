"""
Filter Engine

Evaluates dashboard filters against cleaned rows. Filters combine with AND;
a filter that cannot be evaluated for a row (range bounds that are neither
numeric nor dates) lets the row through rather than excluding it.
"""

import logging
from typing import Any, Callable, Iterable, List, Optional, Sequence, Tuple

from ..models import Bound, FilterSpec, Row
from .values import is_missing, parse_date, parse_float, to_epoch_millis

logger = logging.getLogger("autodash.filters")


def apply_filters(rows: Sequence[Row], filters: Iterable[FilterSpec]) -> List[Row]:
    """Return the rows matching every filter, in their original order."""
    predicates = [_compile(f) for f in filters]
    if not predicates:
        return list(rows)
    return [row for row in rows if all(p(row) for p in predicates)]


def unique_values(rows: Sequence[Row], column: str) -> List[Any]:
    """Sorted distinct non-missing values of a column, for filter option lists."""
    seen = {}
    for row in rows:
        value = row.get(column)
        if not is_missing(value):
            seen.setdefault((isinstance(value, bool), value), value)
    return sorted(seen.values(), key=_sort_key)


def _sort_key(value: Any):
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (0, value, "")
    return (1, 0, str(value))


def _compile(spec: FilterSpec) -> Callable[[Row], bool]:
    """Turn a filter into a row predicate; range bounds are resolved here, once."""
    if spec.is_discrete:
        return lambda row: any(_same_value(row.get(spec.column), c) for c in spec.values)

    if spec.is_range:
        numeric = (parse_float(spec.min), parse_float(spec.max))
        if None in numeric:
            numeric = None
        dates = (_bound_millis(spec.min), _bound_millis(spec.max))
        if None in dates:
            dates = None
        return lambda row: _in_range(spec, row.get(spec.column), numeric, dates)

    return lambda row: True


def _in_range(spec: FilterSpec, raw: Any,
              numeric: Optional[Tuple[float, float]],
              dates: Optional[Tuple[float, float]]) -> bool:
    if numeric is not None:
        value = parse_float(raw)
        if value is not None:
            return numeric[0] <= value <= numeric[1]
    if dates is not None:
        ts = parse_date(raw)
        if ts is not None:
            return dates[0] <= to_epoch_millis(ts) <= dates[1]
    logger.debug("filter on '%s': %r not comparable with [%r, %r], passing row",
                 spec.column, raw, spec.min, spec.max)
    return True


def _same_value(a: Any, b: Any) -> bool:
    """Equality without cross-type coercion (``True`` is not ``1``)."""
    if isinstance(a, bool) != isinstance(b, bool):
        return False
    if isinstance(a, str) != isinstance(b, str):
        return False
    return a == b


def _bound_millis(bound: Bound) -> Optional[float]:
    if isinstance(bound, str):
        ts = parse_date(bound)
        return to_epoch_millis(ts) if ts is not None else None
    return parse_float(bound)
