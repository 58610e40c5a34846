"""Save coordination: snapshot, write, re-read."""

import logging
from datetime import datetime
from typing import Callable, List, Optional

from ..models.base import Backend, FacilityRecord, VersionSnapshot
from ..models.results import SaveResult, StoreResult
from ..utils.exceptions import FacilityNotFoundError
from .gateway import PersistenceGateway
from .history import VersionHistoryStore, utc_now

logger = logging.getLogger(__name__)


class SaveCoordinator:
    """
    Orchestrates every mutation of the facility collection.

    A save reads the current collection, snapshots the existing version of
    the record (if any), writes the new version and re-reads the collection
    so the caller sees its own write. There is no locking or version check;
    concurrent saves of the same id resolve as last writer wins.
    """

    def __init__(
        self,
        gateway: PersistenceGateway,
        history: VersionHistoryStore,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.gateway = gateway
        self.history = history
        self.clock = clock

    async def read_result(self) -> StoreResult[List[FacilityRecord]]:
        """Read the collection along with the backend that served it."""
        return await self.gateway.read()

    async def read(self) -> List[FacilityRecord]:
        result = await self.gateway.read()
        return result.value

    async def get(self, facility_id: str) -> FacilityRecord:
        """
        Return one facility.

        Raises:
            FacilityNotFoundError: If the facility does not exist
        """
        for record in await self.read():
            if record.id == facility_id:
                return record
        raise FacilityNotFoundError(facility_id)

    def _stamp(
        self,
        record: FacilityRecord,
        existing: Optional[FacilityRecord],
        actor_id: Optional[str],
    ) -> FacilityRecord:
        if existing is not None:
            created_at = existing.created_at or record.created_at or self.clock()
            created_by = existing.created_by or record.created_by
        else:
            created_at = record.created_at or self.clock()
            created_by = record.created_by or actor_id
        return record.model_copy(update={
            "created_at": created_at,
            "created_by": created_by,
            "last_modified_by": actor_id or record.last_modified_by,
        })

    async def save(self, record: FacilityRecord, actor_id: Optional[str] = None) -> SaveResult:
        """
        Store a facility as a whole and return the refreshed collection.

        Args:
            record: New version of the facility
            actor_id: User performing the change, kept in the audit fields

        Returns:
            SaveResult with the re-read collection and the backend that took the write

        Raises:
            PermanentWriteFailure: If neither store accepted the write
        """
        current = await self.read()
        existing = next((item for item in current if item.id == record.id), None)

        snapshot_taken = False
        if existing is not None:
            snapshot = await self.history.append_snapshot(existing.id, existing)
            snapshot_taken = snapshot is not None

        stamped = self._stamp(record, existing, actor_id)
        written = await self.gateway.write(stamped)

        if written.degraded:
            logger.warning(f"Facility {record.id} saved to {written.backend.value} store only")
        else:
            logger.info(f"Facility {record.id} saved")

        refreshed = await self.read()
        return SaveResult(records=refreshed, backend=written.backend, snapshot_taken=snapshot_taken)

    async def delete(self, facility_id: str) -> Backend:
        """
        Remove a facility. Its snapshots are kept.

        Raises:
            FacilityNotFoundError: If the serving store had no such facility
            PermanentWriteFailure: If neither store accepted the delete
        """
        result = await self.gateway.delete(facility_id)
        if not result.value:
            raise FacilityNotFoundError(facility_id)
        logger.info(f"Facility {facility_id} deleted via {result.backend.value} store")
        return result.backend

    async def list_snapshots(self, facility_id: str) -> List[VersionSnapshot]:
        return await self.history.list_snapshots(facility_id)

    async def restore(self, snapshot: VersionSnapshot, actor_id: Optional[str] = None) -> SaveResult:
        """Save the record embedded in a snapshot as the current version."""
        logger.info(f"Restoring facility {snapshot.facility_id} to snapshot {snapshot.id}")
        return await self.save(snapshot.data.model_copy(deep=True), actor_id=actor_id)

    async def restore_by_id(self, facility_id: str, snapshot_id: str, actor_id: Optional[str] = None) -> SaveResult:
        snapshot = await self.history.get_snapshot(facility_id, snapshot_id)
        return await self.restore(snapshot, actor_id=actor_id)

    async def set_visibility(self, facility_id: str, is_public: bool, actor_id: Optional[str] = None) -> SaveResult:
        """Show or hide a facility; goes through the normal save path."""
        record = await self.get(facility_id)
        return await self.save(record.model_copy(update={"is_public": is_public}), actor_id=actor_id)
