"""Result models for persistence and search operations."""

from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

from .base import Backend, FacilityRecord

T = TypeVar("T")


class StoreResult(BaseModel, Generic[T]):
    """Value returned by the gateway together with the backend that produced it."""
    value: T
    backend: Backend

    @property
    def degraded(self) -> bool:
        """True when the primary store did not serve the operation."""
        return self.backend != Backend.PRIMARY


class SaveResult(BaseModel):
    """Outcome of a save: the refreshed collection and where the write landed."""
    records: List[FacilityRecord] = Field(default_factory=list)
    backend: Backend
    snapshot_taken: bool = False

    @property
    def degraded(self) -> bool:
        return self.backend != Backend.PRIMARY


class FacilityMatch(BaseModel):
    """A facility that passed the listing filter."""
    record: FacilityRecord
    distance_km: Optional[float] = None
    open_now: bool = False
