"""Data models for the poolfinder service."""

from .base import (
    Backend,
    ClosureDescriptor,
    DayClass,
    FacilityRecord,
    FeeCategory,
    FeeInfo,
    FeeType,
    HolidayPolicy,
    HolidayRule,
    LegacyClosure,
    Location,
    Occurrence,
    Review,
    ScheduleRule,
    StructuredClosure,
    VersionSnapshot,
)
from .results import FacilityMatch, SaveResult, StoreResult

__all__ = [
    "Backend",
    "ClosureDescriptor",
    "DayClass",
    "FacilityRecord",
    "FeeCategory",
    "FeeInfo",
    "FeeType",
    "HolidayPolicy",
    "HolidayRule",
    "LegacyClosure",
    "Location",
    "Occurrence",
    "Review",
    "ScheduleRule",
    "StructuredClosure",
    "VersionSnapshot",
    "FacilityMatch",
    "SaveResult",
    "StoreResult",
]
