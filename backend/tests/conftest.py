"""
Shared pytest fixtures for the autodash test suite.
"""

import pytest
from typing import AsyncGenerator, Dict, Any, List

from httpx import AsyncClient, ASGITransport
from autodash.main import app
from autodash.services.dataset_store import DatasetStore, dataset_store
from autodash.services.profiler import build_profile


@pytest.fixture
def sales_rows() -> List[Dict[str, Any]]:
    """Provide raw rows as a CSV decoder would hand them over."""
    return [
        {"Region": "North", "Year": "2021", "Sales": "1,200", "Units": "12", "Active": "yes", "Notes": None},
        {"Region": "South", "Year": "2021", "Sales": "800", "Units": "9", "Active": "no", "Notes": ""},
        {"Region": "North", "Year": "2022", "Sales": "1,500", "Units": "15", "Active": "yes", "Notes": None},
        {"Region": "East", "Year": "2022", "Sales": "600.5", "Units": "7", "Active": "yes", "Notes": ""},
        {"Region": "South", "Year": "2022", "Sales": "900", "Units": "10", "Active": "no", "Notes": None},
    ]


@pytest.fixture
def sales_profile(sales_rows):
    """Provide a profile built from the sales rows."""
    return build_profile(sales_rows, "sales.csv")


@pytest.fixture
def category_rows() -> List[Dict[str, Any]]:
    """Provide cleaned rows with a categorical and a numeric column."""
    return [
        {"cat": "A", "v": 10},
        {"cat": "A", "v": 10},
        {"cat": "B", "v": 5},
    ]


@pytest.fixture
def store() -> DatasetStore:
    """Provide an empty, small dataset store."""
    return DatasetStore(max_datasets=3)


@pytest.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """Provide an async HTTP client for testing FastAPI endpoints."""
    dataset_store.clear()
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
    dataset_store.clear()
