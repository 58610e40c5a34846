"""Facility store interface shared by the primary and fallback backends."""

from abc import ABC, abstractmethod
from typing import List, Optional

from ..models.base import FacilityRecord, VersionSnapshot


class FacilityStore(ABC):
    """Abstract base class for facility storage backends."""

    name: str = "store"

    # Maximum number of snapshots kept across all facilities; None means unbounded
    history_limit: Optional[int] = None

    @abstractmethod
    async def read_all(self) -> List[FacilityRecord]:
        """Return all facilities, most recently created first."""
        pass

    @abstractmethod
    async def write(self, record: FacilityRecord) -> None:
        """
        Insert or replace a facility as a whole.

        Args:
            record: Facility to store under record.id
        """
        pass

    @abstractmethod
    async def delete(self, facility_id: str) -> bool:
        """
        Remove a facility.

        Returns:
            True if a facility was removed, False if none existed
        """
        pass

    @abstractmethod
    async def append_snapshot(self, snapshot: VersionSnapshot) -> None:
        """Append a snapshot to the version history."""
        pass

    @abstractmethod
    async def list_snapshots(self, facility_id: str) -> List[VersionSnapshot]:
        """Return snapshots for a facility, newest first."""
        pass

    async def health_check(self) -> bool:
        """Check that the backend can serve requests."""
        return True

    async def close(self):
        """Release backend resources."""
        return None
