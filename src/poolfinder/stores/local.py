"""Local JSON-file facility store used as the always-available fallback."""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from ..models.base import FacilityRecord, VersionSnapshot
from .base import FacilityStore

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_LIMIT = 100


def _creation_key(record: FacilityRecord) -> float:
    return record.created_at.timestamp() if record.created_at else float("-inf")


class LocalFacilityStore(FacilityStore):
    """
    Keeps facilities and their history in a single JSON document.

    Without a path the document lives in memory only. The snapshot log is
    capped globally at history_limit entries, oldest evicted first.
    """

    name = "local"

    def __init__(self, path: Optional[str | Path] = None, history_limit: Optional[int] = DEFAULT_HISTORY_LIMIT):
        self.path = Path(path) if path else None
        self.history_limit = history_limit
        self._facilities: List[Dict[str, Any]] = []
        self._history: List[Dict[str, Any]] = []
        self._loaded = False
        self._lock = asyncio.Lock()

    def _read_file(self) -> Dict[str, Any]:
        if self.path is None or not self.path.exists():
            return {}
        with open(self.path, encoding="utf-8") as f:
            return json.load(f)

    def _write_file(self, document: Dict[str, Any]):
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(document, f, indent=2, ensure_ascii=False, default=str)
        tmp_path.replace(self.path)

    async def _load(self):
        if self._loaded:
            return
        document = await asyncio.to_thread(self._read_file)
        self._facilities = list(document.get("facilities", []))
        self._history = list(document.get("history", []))
        self._loaded = True
        logger.debug(
            f"Loaded {len(self._facilities)} facilities and "
            f"{len(self._history)} snapshots from {self.path or 'memory'}"
        )

    async def _flush(self):
        if self.path is None:
            return
        document = {"facilities": self._facilities, "history": self._history}
        await asyncio.to_thread(self._write_file, document)

    async def read_all(self) -> List[FacilityRecord]:
        async with self._lock:
            await self._load()
            records = [FacilityRecord.model_validate(item) for item in self._facilities]
        # Same order as the primary store: newest created first, undated last
        return sorted(records, key=_creation_key, reverse=True)

    async def write(self, record: FacilityRecord) -> None:
        async with self._lock:
            await self._load()
            others = [item for item in self._facilities if item.get("id") != record.id]
            self._facilities = [record.model_dump(mode="json"), *others]
            await self._flush()

    async def delete(self, facility_id: str) -> bool:
        async with self._lock:
            await self._load()
            remaining = [item for item in self._facilities if item.get("id") != facility_id]
            removed = len(remaining) != len(self._facilities)
            self._facilities = remaining
            if removed:
                await self._flush()
            return removed

    async def append_snapshot(self, snapshot: VersionSnapshot) -> None:
        async with self._lock:
            await self._load()
            self._history.insert(0, snapshot.model_dump(mode="json"))
            if self.history_limit is not None and len(self._history) > self.history_limit:
                evicted = len(self._history) - self.history_limit
                del self._history[self.history_limit:]
                logger.debug(f"Evicted {evicted} oldest snapshots")
            await self._flush()

    async def list_snapshots(self, facility_id: str) -> List[VersionSnapshot]:
        async with self._lock:
            await self._load()
            return [
                VersionSnapshot.model_validate(item)
                for item in self._history
                if item.get("facility_id") == facility_id
            ]

    @property
    def snapshot_count(self) -> int:
        """Number of snapshots held, across all facilities."""
        return len(self._history)
