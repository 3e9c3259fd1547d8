"""
Descriptive statistics for a numeric column over a row set.
"""

import logging
from typing import Any, Sequence

import numpy as np

from ..models import ColumnStats, Row
from .values import parse_float, round_half_up

logger = logging.getLogger("autodash.stats")


def _exact(cell: Any, number: float):
    """The cell itself when it is already a number, else its parsed float."""
    if isinstance(cell, (int, float)) and not isinstance(cell, bool):
        return cell
    return number


def describe(rows: Sequence[Row], column: str) -> ColumnStats:
    """
    Compute count, mean, median, std, min and max of a column.

    Cells that do not parse as finite numbers are skipped. ``median`` is the
    element at index ``n // 2`` of the ascending values, i.e. the upper of
    the two middle elements for even counts. ``std`` is the population
    standard deviation. mean/median/std are rounded to 2 decimals; min/max
    are the cell values themselves (integers stay integers).
    """
    parsed = []
    for row in rows:
        cell = row.get(column)
        number = parse_float(cell)
        if number is not None:
            parsed.append((number, _exact(cell, number)))
    if not parsed:
        logger.debug("describe: no numeric values in '%s'", column)
        return ColumnStats()

    vals = np.sort(np.asarray([n for n, _ in parsed], dtype=float))
    return ColumnStats(
        count=len(vals),
        mean=round_half_up(float(np.mean(vals)), 2),
        median=round_half_up(float(vals[len(vals) // 2]), 2),
        std=round_half_up(float(np.std(vals)), 2),
        min=min(parsed, key=lambda p: p[0])[1],
        max=max(parsed, key=lambda p: p[0])[1],
    )
