"""Listing filters for the facility directory."""

import logging
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field

from ..availability.engine import AvailabilityEngine
from ..models.base import FacilityRecord, Location
from ..models.results import FacilityMatch
from .geo import DEFAULT_RADIUS_KM, nearby

logger = logging.getLogger(__name__)

# Region values meaning "no region filter"
ALL_REGIONS = {"", "all", "전체"}


class FacilitySearch(BaseModel):
    """Criteria for listing facilities."""
    region: Optional[str] = None
    query: Optional[str] = None
    available_only: bool = False
    origin: Optional[Location] = None  # "near me" when set
    radius_km: float = Field(default=DEFAULT_RADIUS_KM, gt=0)
    include_hidden: bool = False
    created_by: Optional[str] = None


class FacilityFilter:
    """Applies search criteria to a facility collection."""

    def __init__(self, engine: Optional[AvailabilityEngine] = None):
        self.engine = engine or AvailabilityEngine()
        self.searches = 0
        self.last_excluded = 0

    def search(
        self,
        records: List[FacilityRecord],
        criteria: FacilitySearch,
        instant: datetime,
    ) -> List[FacilityMatch]:
        """
        Filter and order facilities for display.

        Near-me searches keep facilities within the radius, nearest first,
        and ignore the region. Otherwise the input order is kept.

        Args:
            records: Facility collection as read from storage
            criteria: Search criteria
            instant: Caller's current local time, for the availability filter

        Returns:
            Matching facilities with distance and open-now flags
        """
        self.searches += 1
        candidates = records

        if not criteria.include_hidden:
            candidates = [record for record in candidates if record.is_public]

        if criteria.created_by is not None:
            candidates = [record for record in candidates if record.created_by == criteria.created_by]

        if criteria.origin is not None:
            located = nearby(criteria.origin, candidates, criteria.radius_km)
        else:
            if not self._is_all_regions(criteria.region):
                candidates = [record for record in candidates if record.region == criteria.region]
            located = [(record, None) for record in candidates]

        matches = []
        for record, distance in located:
            open_now = self.engine.is_open(record, instant, require_still_open_now=True)
            if criteria.available_only and not open_now:
                continue
            if criteria.query and not self._matches_query(record, criteria.query):
                continue
            matches.append(FacilityMatch(record=record, distance_km=distance, open_now=open_now))

        self.last_excluded = len(records) - len(matches)
        logger.debug(f"Search kept {len(matches)} of {len(records)} facilities")
        return matches

    @staticmethod
    def _is_all_regions(region: Optional[str]) -> bool:
        return region is None or region.strip().lower() in ALL_REGIONS

    @staticmethod
    def _matches_query(record: FacilityRecord, query: str) -> bool:
        return query in record.name or query in record.address

    def get_statistics(self) -> dict:
        """Get filter statistics."""
        return {
            "searches": self.searches,
            "last_excluded": self.last_excluded,
            "availability_evaluations": self.engine.evaluations,
        }
