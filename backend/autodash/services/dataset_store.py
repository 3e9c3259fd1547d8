"""
Dataset Store

In-memory registry of the latest profile per dataset id. Nothing is
persisted; a restart starts from an empty store.

Storing a profile under an existing id swaps the whole profile at once, so
readers see either the previous dataset or the new one, never a mix.
"""

import logging
import threading
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Any, Dict, List, Optional

from ..core.config import settings
from ..models import DatasetProfile

logger = logging.getLogger("autodash.dataset_store")


class DatasetStore:
    """
    Thread-safe in-memory store for dataset profiles.

    Holds at most ``max_datasets`` entries; the least recently stored one is
    evicted first.
    """

    def __init__(self, max_datasets: Optional[int] = None):
        self.max_datasets = max_datasets or settings.MAX_DATASETS
        self._lock = threading.RLock()
        self._entries: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()

    def put(self, profile: DatasetProfile, dataset_id: Optional[str] = None) -> Dict[str, Any]:
        """Store a profile, replacing any previous one with the same id."""
        dataset_id = dataset_id or str(uuid.uuid4())
        entry = {
            "id": dataset_id,
            "profile": profile,
            "created_at": datetime.utcnow().isoformat(),
        }
        with self._lock:
            self._entries.pop(dataset_id, None)
            self._entries[dataset_id] = entry
            while len(self._entries) > self.max_datasets:
                evicted, _ = self._entries.popitem(last=False)
                logger.info("DatasetStore: evicted dataset %s (capacity %d)", evicted, self.max_datasets)
        logger.info("DatasetStore: stored '%s' as %s (%d rows)",
                    profile.dataset_name, dataset_id, profile.total_rows)
        return entry

    def get(self, dataset_id: str) -> Optional[Dict[str, Any]]:
        with self._lock:
            return self._entries.get(dataset_id)

    def get_profile(self, dataset_id: str) -> Optional[DatasetProfile]:
        entry = self.get(dataset_id)
        return entry["profile"] if entry else None

    def list(self) -> List[Dict[str, Any]]:
        """All entries, oldest first."""
        with self._lock:
            return list(self._entries.values())

    def delete(self, dataset_id: str) -> bool:
        with self._lock:
            return self._entries.pop(dataset_id, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


# Global instance
dataset_store = DatasetStore()
