"""
Datasets API Endpoints

Handles dataset ingestion, profile retrieval, filtering, column statistics
and local insights.
"""

from fastapi import APIRouter, HTTPException, UploadFile, File, Query
from typing import List, Optional, Dict, Any, Union
from pydantic import BaseModel, Field

from ..core.config import settings
from ..core.exceptions import DatasetError
from ..models import DatasetProfile, FilterSpec
from ..services.analytics import compute_insights
from ..services.dataset_store import dataset_store
from ..services.filters import apply_filters, unique_values
from ..services.ingestion import parse_upload
from ..services.profiler import build_dataset_summary, build_profile
from ..services.stats import describe


router = APIRouter(prefix="/datasets", tags=["Datasets"])


# Pydantic models for API
class FilterModel(BaseModel):
    column: str
    values: Optional[List[Any]] = None
    min: Optional[Union[float, str]] = None
    max: Optional[Union[float, str]] = None

    def to_spec(self) -> FilterSpec:
        return FilterSpec.from_dict(self.model_dump())


class RecordsIngest(BaseModel):
    name: str = Field(..., description="Dataset name, usually the source file name")
    rows: List[Dict[str, Any]]


class FilterRequest(BaseModel):
    filters: List[FilterModel] = []
    limit: Optional[int] = Field(default=None, ge=1)
    offset: int = Field(default=0, ge=0)


class StatsRequest(BaseModel):
    column: str
    filters: List[FilterModel] = []


class InsightsRequest(BaseModel):
    filters: List[FilterModel] = []


class DatasetResponse(BaseModel):
    id: str
    created_at: str
    summary: Dict[str, Any]
    profile: Dict[str, Any]


# ─── Helpers ──────────────────────────────────────────────────────────


def _load_profile(dataset_id: str) -> DatasetProfile:
    profile = dataset_store.get_profile(dataset_id)
    if profile is None:
        raise HTTPException(status_code=404, detail="Dataset not found")
    return profile


def _filtered_rows(profile: DatasetProfile, filters: List[FilterModel]) -> List[Dict[str, Any]]:
    return apply_filters(profile.rows, [f.to_spec() for f in filters])


def _store(rows: List[Dict[str, Any]], name: str) -> DatasetResponse:
    try:
        profile = build_profile(rows, name)
    except DatasetError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    entry = dataset_store.put(profile)
    return DatasetResponse(
        id=entry["id"],
        created_at=entry["created_at"],
        summary=build_dataset_summary(profile).to_dict(),
        profile=profile.to_dict(),
    )


# ─── Endpoints ────────────────────────────────────────────────────────


@router.post("/upload", response_model=DatasetResponse, status_code=201)
async def upload_dataset(file: UploadFile = File(...)):
    """
    Ingest a CSV, Excel or JSON file and profile it.

    The response carries the column profiles and sample rows; the full row
    set stays on the server and is reached through the filter endpoint.
    """
    content = await file.read()
    max_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
    if len(content) > max_bytes:
        raise HTTPException(status_code=413, detail=f"File exceeds {settings.MAX_UPLOAD_SIZE_MB}MB limit")

    try:
        rows = parse_upload(file.filename, content)
    except DatasetError as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    return _store(rows, file.filename or "upload")


@router.post("", response_model=DatasetResponse, status_code=201)
async def ingest_records(payload: RecordsIngest):
    """Profile rows already decoded by the client (e.g. from a JSON API)."""
    return _store(payload.rows, payload.name)


@router.get("")
async def list_datasets():
    """List stored datasets with their summaries."""
    return [
        {
            "id": entry["id"],
            "created_at": entry["created_at"],
            **build_dataset_summary(entry["profile"]).to_dict(),
        }
        for entry in dataset_store.list()
    ]


@router.get("/{dataset_id}")
async def get_dataset(dataset_id: str):
    """Get the profile of a dataset (without the full row set)."""
    profile = _load_profile(dataset_id)
    return {"id": dataset_id, **profile.to_dict()}


@router.delete("/{dataset_id}")
async def delete_dataset(dataset_id: str):
    """Drop a dataset from the store."""
    if not dataset_store.delete(dataset_id):
        raise HTTPException(status_code=404, detail="Dataset not found")

    return {"status": "deleted", "dataset_id": dataset_id}


@router.post("/{dataset_id}/filter")
async def filter_rows(dataset_id: str, request: FilterRequest):
    """Apply filters and return a page of matching rows."""
    profile = _load_profile(dataset_id)
    rows = _filtered_rows(profile, request.filters)

    limit = request.limit or settings.DEFAULT_PAGE_SIZE
    page = rows[request.offset:request.offset + limit]
    return {
        "dataset_id": dataset_id,
        "total_rows": profile.total_rows,
        "matched_rows": len(rows),
        "rows": page,
        "count": len(page),
        "limit": limit,
        "offset": request.offset,
    }


@router.post("/{dataset_id}/stats")
async def column_stats(dataset_id: str, request: StatsRequest):
    """Descriptive statistics of one column over the filtered rows."""
    profile = _load_profile(dataset_id)
    if profile.get_column(request.column) is None:
        raise HTTPException(status_code=404, detail=f"Column '{request.column}' not found")

    rows = _filtered_rows(profile, request.filters)
    return {
        "dataset_id": dataset_id,
        "column": request.column,
        **describe(rows, request.column).to_dict(),
    }


@router.post("/{dataset_id}/insights")
async def dataset_insights(dataset_id: str, request: InsightsRequest):
    """Local insights (YoY, top categories, outliers, correlations) over the filtered rows."""
    profile = _load_profile(dataset_id)
    rows = _filtered_rows(profile, request.filters)
    return {
        "dataset_id": dataset_id,
        "row_count": len(rows),
        "insights": compute_insights(profile, rows),
    }


@router.get("/{dataset_id}/columns/{column}/values")
async def column_values(
    dataset_id: str,
    column: str,
    limit: int = Query(default=1000, ge=1, le=100_000),
):
    """Distinct values of a column, for filter option lists."""
    profile = _load_profile(dataset_id)
    if profile.get_column(column) is None:
        raise HTTPException(status_code=404, detail=f"Column '{column}' not found")

    values = unique_values(profile.rows, column)
    return {
        "dataset_id": dataset_id,
        "column": column,
        "values": values[:limit],
        "count": len(values),
    }
