"""
Dataset profile data model.

A profile is built once per ingestion and never mutated afterwards;
re-ingesting produces a new profile that replaces the old one.
"""

import enum
from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Optional, Union

# Rows map sanitized column name -> number, string, or the "" missing sentinel
Row = Dict[str, Any]
Bound = Union[int, float, str]


class ColumnType(str, enum.Enum):
    """Semantic column types produced by type inference."""
    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    DATE = "date"
    BOOLEAN = "boolean"

    @property
    def is_numeric(self) -> bool:
        return self in (ColumnType.INTEGER, ColumnType.FLOAT)


@dataclass(frozen=True)
class Column:
    """A profiled column."""
    name: str
    type: ColumnType
    unique_values: int
    min: Optional[Bound] = None
    max: Optional[Bound] = None
    sample_values: Optional[List[Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "unique_values": self.unique_values,
        }
        if self.min is not None:
            out["min"] = self.min
        if self.max is not None:
            out["max"] = self.max
        if self.sample_values is not None:
            out["sample_values"] = list(self.sample_values)
        return out


@dataclass(frozen=True)
class DatasetProfile:
    """Typed description of an ingested dataset."""
    dataset_name: str
    columns: List[Column]
    sample_rows: List[Row]
    rows: List[Row]
    total_rows: int

    @property
    def column_names(self) -> List[str]:
        return [c.name for c in self.columns]

    def get_column(self, name: str) -> Optional[Column]:
        return next((c for c in self.columns if c.name == name), None)

    def columns_of(self, *types: ColumnType) -> List[Column]:
        return [c for c in self.columns if c.type in types]

    def to_dict(self, include_rows: bool = False) -> Dict[str, Any]:
        out: Dict[str, Any] = {
            "dataset_name": self.dataset_name,
            "columns": [c.to_dict() for c in self.columns],
            "sample_rows": self.sample_rows,
            "total_rows": self.total_rows,
        }
        if include_rows:
            out["rows"] = self.rows
        return out


@dataclass
class FilterSpec:
    """
    A single filter predicate.

    Either ``values`` (discrete inclusion set) or both ``min`` and ``max``
    (inclusive range) restrict rows. A filter with neither matches every row.
    """
    column: str
    values: List[Any] = field(default_factory=list)
    min: Optional[Bound] = None
    max: Optional[Bound] = None

    @property
    def is_discrete(self) -> bool:
        return len(self.values) > 0

    @property
    def is_range(self) -> bool:
        return self.min is not None and self.max is not None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FilterSpec":
        """Build from a dashboard filter config (``type``/``selected`` are ignored)."""
        return cls(
            column=data["column"],
            values=list(data.get("values") or []),
            min=data.get("min"),
            max=data.get("max"),
        )


@dataclass
class ColumnStats:
    """Descriptive statistics for one numeric column."""
    count: int = 0
    mean: float = 0
    median: float = 0
    std: float = 0
    min: float = 0
    max: float = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class DatasetSummary:
    """Dataset-level overview built from a profile."""
    dataset_name: str
    total_rows: int
    column_count: int
    type_breakdown: Dict[str, int] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
