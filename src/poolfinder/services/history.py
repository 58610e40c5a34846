"""Append-only version history of facility records."""

import asyncio
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional
from uuid import uuid4

from ..models.base import FacilityRecord, VersionSnapshot
from ..utils.exceptions import HistoryWriteFailure, SnapshotNotFoundError
from .gateway import PersistenceGateway

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class VersionHistoryStore:
    """
    Snapshot log stored through the persistence gateway.

    Appends are best-effort: they are bounded by a timeout and any failure
    is logged and dropped, so history never blocks a facility write.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        timeout_seconds: float = 2.0,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.gateway = gateway
        self.timeout_seconds = timeout_seconds
        self.clock = clock
        self.failed_appends = 0

    def build_snapshot(self, facility_id: str, prior_record: FacilityRecord) -> VersionSnapshot:
        return VersionSnapshot(
            id=str(uuid4()),
            facility_id=facility_id,
            data=prior_record.model_copy(deep=True),
            created_at=self.clock(),
        )

    async def append_snapshot(self, facility_id: str, prior_record: FacilityRecord) -> Optional[VersionSnapshot]:
        """
        Record the prior version of a facility.

        Returns:
            The stored snapshot, or None if it could not be stored
        """
        snapshot = self.build_snapshot(facility_id, prior_record)
        try:
            await asyncio.wait_for(self.gateway.append_snapshot(snapshot), timeout=self.timeout_seconds)
        except Exception as e:
            self.failed_appends += 1
            failure = HistoryWriteFailure(
                f"Could not store snapshot for facility {facility_id}",
                facility_id=facility_id,
                details={"cause": repr(e)},
            )
            logger.warning(f"{failure.message}: {e!r}")
            return None

        logger.debug(f"Stored snapshot {snapshot.id} for facility {facility_id}")
        return snapshot

    async def list_snapshots(self, facility_id: str) -> List[VersionSnapshot]:
        """Snapshots for a facility, newest first."""
        result = await self.gateway.list_snapshots(facility_id)
        return sorted(result.value, key=lambda snapshot: snapshot.created_at, reverse=True)

    async def get_snapshot(self, facility_id: str, snapshot_id: str) -> VersionSnapshot:
        """
        Look up one snapshot of a facility.

        Raises:
            SnapshotNotFoundError: If the facility has no such snapshot
        """
        for snapshot in await self.list_snapshots(facility_id):
            if snapshot.id == snapshot_id:
                return snapshot
        raise SnapshotNotFoundError(facility_id, snapshot_id)
