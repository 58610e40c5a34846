"""Great-circle distance and proximity filtering."""

import logging
from typing import Iterable, List, Tuple, Union

from geopy.distance import great_circle

from ..models.base import FacilityRecord, Location

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
DEFAULT_RADIUS_KM = 15.0

Point = Union[Location, Tuple[float, float]]


def _coords(point: Point) -> Tuple[float, float]:
    if isinstance(point, Location):
        return point.as_tuple()
    return (float(point[0]), float(point[1]))


def distance_km(a: Point, b: Point) -> float:
    """Great-circle distance between two points on a sphere of radius 6371 km."""
    return great_circle(_coords(a), _coords(b), radius=EARTH_RADIUS_KM).km


def within_radius(origin: Point, point: Point, radius_km: float = DEFAULT_RADIUS_KM) -> bool:
    return distance_km(origin, point) <= radius_km


def nearby(
    origin: Point,
    records: Iterable[FacilityRecord],
    radius_km: float = DEFAULT_RADIUS_KM,
) -> List[Tuple[FacilityRecord, float]]:
    """
    Keep facilities within a radius of the origin, nearest first.

    Facilities without a location are skipped.
    """
    found = []
    skipped = 0
    for record in records:
        if record.location is None:
            skipped += 1
            continue
        distance = distance_km(origin, record.location)
        if distance <= radius_km:
            found.append((record, distance))

    if skipped:
        logger.debug(f"Skipped {skipped} facilities without coordinates")

    found.sort(key=lambda item: item[1])
    return found
