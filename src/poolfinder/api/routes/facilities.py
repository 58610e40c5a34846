"""API routes for browsing, saving and restoring facilities."""

import logging
from datetime import datetime
from typing import Any, List, Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field

from ...availability.engine import AvailabilityEngine
from ...config import Settings
from ...models.base import (
    FacilityRecord,
    HolidayPolicy,
    LegacyClosure,
    Location,
    StructuredClosure,
    VersionSnapshot,
)
from ...models.results import FacilityMatch, SaveResult
from ...services.coordinator import SaveCoordinator
from ...utils.exceptions import ValidationError
from ...utils.filters import FacilityFilter, FacilitySearch
from ..dependencies import (
    get_actor_id,
    get_coordinator,
    get_engine,
    get_facility_filter,
    get_settings,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/facilities", tags=["facilities"])


class FacilityListResponse(BaseModel):
    """Filtered facility listing."""
    facilities: List[FacilityMatch]
    count: int
    backend: str
    degraded: bool


class SaveResponse(BaseModel):
    """Result of a write, with the backend that accepted it."""
    facility: Optional[FacilityRecord] = None
    count: int
    backend: str
    degraded: bool
    snapshot_taken: bool = False


class VisibilityRequest(BaseModel):
    is_public: bool


class DeleteResponse(BaseModel):
    deleted: str
    backend: str
    degraded: bool


class HistoryResponse(BaseModel):
    facility_id: str
    snapshots: List[VersionSnapshot] = Field(default_factory=list)


def _save_response(result: SaveResult, facility_id: str) -> SaveResponse:
    facility = next((record for record in result.records if record.id == facility_id), None)
    return SaveResponse(
        facility=facility,
        count=len(result.records),
        backend=result.backend.value,
        degraded=result.degraded,
        snapshot_taken=result.snapshot_taken,
    )


def require_structured_closure(record: FacilityRecord) -> FacilityRecord:
    """
    New writes must describe closures with structured rules.

    An empty legacy label is read as "no regular closures".
    """
    closure = record.closed_days
    if isinstance(closure, LegacyClosure):
        if closure.text.strip():
            raise ValidationError(
                "Closed days must be sent as structured holiday rules",
                field="closed_days",
                details={"text": closure.text},
            )
        return record.model_copy(update={
            "closed_days": StructuredClosure(policy=HolidayPolicy(regular_enabled=False))
        })
    return record


@router.get("", response_model=FacilityListResponse)
async def list_facilities(
    region: Optional[str] = None,
    q: Optional[str] = None,
    available_only: bool = False,
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    radius_km: Optional[float] = Query(default=None, gt=0),
    at: Optional[datetime] = None,
    include_hidden: bool = False,
    created_by: Optional[str] = None,
    coordinator: SaveCoordinator = Depends(get_coordinator),
    facility_filter: FacilityFilter = Depends(get_facility_filter),
    settings: Settings = Depends(get_settings),
):
    """List facilities; lat/lng switch to a near-me search."""
    origin = Location(latitude=lat, longitude=lng) if lat is not None and lng is not None else None
    criteria = FacilitySearch(
        region=region,
        query=q,
        available_only=available_only,
        origin=origin,
        radius_km=radius_km or settings.proximity_radius_km,
        include_hidden=include_hidden,
        created_by=created_by,
    )

    result = await coordinator.read_result()
    matches = facility_filter.search(result.value, criteria, at or datetime.now())
    return FacilityListResponse(
        facilities=matches,
        count=len(matches),
        backend=result.backend.value,
        degraded=result.degraded,
    )


@router.get("/{facility_id}", response_model=FacilityRecord)
async def get_facility(
    facility_id: str,
    coordinator: SaveCoordinator = Depends(get_coordinator),
):
    return await coordinator.get(facility_id)


@router.get("/{facility_id}/availability")
async def get_availability(
    facility_id: str,
    at: Optional[datetime] = None,
    still_open_now: bool = True,
    coordinator: SaveCoordinator = Depends(get_coordinator),
    engine: AvailabilityEngine = Depends(get_engine),
) -> dict[str, Any]:
    """Open/closed judgement for one facility at a given local time."""
    record = await coordinator.get(facility_id)
    instant = at or datetime.now()
    summary = engine.describe(record, instant)
    summary["available"] = engine.is_open(record, instant, require_still_open_now=still_open_now)
    return summary


@router.put("/{facility_id}", response_model=SaveResponse)
async def save_facility(
    facility_id: str,
    record: FacilityRecord,
    coordinator: SaveCoordinator = Depends(get_coordinator),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    """Create or replace a facility."""
    if record.id != facility_id:
        raise ValidationError("Facility id in path and body differ", field="id")

    record = require_structured_closure(record)
    result = await coordinator.save(record, actor_id=actor_id)
    return _save_response(result, facility_id)


@router.delete("/{facility_id}", response_model=DeleteResponse)
async def delete_facility(
    facility_id: str,
    coordinator: SaveCoordinator = Depends(get_coordinator),
):
    backend = await coordinator.delete(facility_id)
    return DeleteResponse(deleted=facility_id, backend=backend.value, degraded=backend.value != "primary")


@router.patch("/{facility_id}/visibility", response_model=SaveResponse)
async def set_visibility(
    facility_id: str,
    request: VisibilityRequest,
    coordinator: SaveCoordinator = Depends(get_coordinator),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    result = await coordinator.set_visibility(facility_id, request.is_public, actor_id=actor_id)
    return _save_response(result, facility_id)


@router.get("/{facility_id}/history", response_model=HistoryResponse)
async def list_history(
    facility_id: str,
    coordinator: SaveCoordinator = Depends(get_coordinator),
):
    """Prior versions of a facility, newest first."""
    snapshots = await coordinator.list_snapshots(facility_id)
    return HistoryResponse(facility_id=facility_id, snapshots=snapshots)


@router.post("/{facility_id}/history/{snapshot_id}/restore", response_model=SaveResponse)
async def restore_snapshot(
    facility_id: str,
    snapshot_id: str,
    coordinator: SaveCoordinator = Depends(get_coordinator),
    actor_id: Optional[str] = Depends(get_actor_id),
):
    """Make a prior version current again; the replaced version is snapshotted too."""
    result = await coordinator.restore_by_id(facility_id, snapshot_id, actor_id=actor_id)
    return _save_response(result, facility_id)
