"""Utilities: geo helpers, listing filters, errors and logging."""

from .exceptions import (
    FacilityNotFoundError,
    HistoryWriteFailure,
    PermanentWriteFailure,
    PoolfinderError,
    SnapshotNotFoundError,
    TransientBackendError,
)
from .filters import FacilityFilter, FacilitySearch
from .geo import distance_km, nearby, within_radius

__all__ = [
    "FacilityFilter",
    "FacilityNotFoundError",
    "FacilitySearch",
    "HistoryWriteFailure",
    "PermanentWriteFailure",
    "PoolfinderError",
    "SnapshotNotFoundError",
    "TransientBackendError",
    "distance_km",
    "nearby",
    "within_radius",
]
