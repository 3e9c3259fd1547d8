"""Profiling core: normalization, type inference, profiles, filters, stats, insights."""

from .analytics import compute_insights, pearson
from .dataset_store import DatasetStore, dataset_store
from .filters import apply_filters, unique_values
from .ingestion import parse_upload, records_from_json
from .normalizer import normalize, sanitize_column_names
from .profiler import build_dataset_summary, build_profile
from .stats import describe
from .type_inference import classify_value, infer_type

__all__ = [
    "apply_filters",
    "build_dataset_summary",
    "build_profile",
    "classify_value",
    "compute_insights",
    "DatasetStore",
    "dataset_store",
    "describe",
    "infer_type",
    "normalize",
    "parse_upload",
    "pearson",
    "records_from_json",
    "sanitize_column_names",
    "unique_values",
]
