from .profile import (
    Bound,
    Column,
    ColumnStats,
    ColumnType,
    DatasetProfile,
    DatasetSummary,
    FilterSpec,
    Row,
)

__all__ = [
    "Bound",
    "Column",
    "ColumnStats",
    "ColumnType",
    "DatasetProfile",
    "DatasetSummary",
    "FilterSpec",
    "Row",
]
