"""Tests for distance and proximity helpers."""

import pytest

from poolfinder.models.base import Location
from poolfinder.utils.geo import DEFAULT_RADIUS_KM, distance_km, nearby, within_radius

from conftest import make_record

SEOUL_CITY_HALL = (37.5663, 126.9779)
OLYMPIC_PARK = (37.5207, 127.1215)
BUSAN_STATION = (35.1151, 129.0415)


class TestDistance:
    """Great-circle distance."""

    @pytest.mark.parametrize("point", [SEOUL_CITY_HALL, BUSAN_STATION, (0.0, 0.0), (89.9, -179.9)])
    def test_distance_to_self_is_zero(self, point):
        assert distance_km(point, point) == 0

    def test_symmetry(self):
        assert distance_km(SEOUL_CITY_HALL, BUSAN_STATION) == pytest.approx(
            distance_km(BUSAN_STATION, SEOUL_CITY_HALL)
        )

    def test_known_distance(self):
        # Seoul to Busan is roughly 330 km as the crow flies
        assert distance_km(SEOUL_CITY_HALL, BUSAN_STATION) == pytest.approx(329, abs=5)

    def test_one_degree_of_latitude(self):
        assert distance_km((0.0, 0.0), (1.0, 0.0)) == pytest.approx(111.19, abs=0.01)

    def test_accepts_locations(self):
        a = Location(latitude=SEOUL_CITY_HALL[0], longitude=SEOUL_CITY_HALL[1])
        assert distance_km(a, OLYMPIC_PARK) == pytest.approx(distance_km(SEOUL_CITY_HALL, OLYMPIC_PARK))

    def test_within_radius(self):
        assert DEFAULT_RADIUS_KM == 15.0
        assert within_radius(SEOUL_CITY_HALL, OLYMPIC_PARK)
        assert not within_radius(SEOUL_CITY_HALL, BUSAN_STATION)


class TestNearby:
    """Proximity filtering."""

    def test_sorted_by_distance_and_bounded(self):
        near = make_record("near", location={"latitude": 37.5700, "longitude": 126.9820})
        mid = make_record("mid", location={"latitude": 37.5207, "longitude": 127.1215})
        far = make_record("far", location={"latitude": 35.1151, "longitude": 129.0415})

        found = nearby(SEOUL_CITY_HALL, [far, mid, near])

        assert [record.id for record, _ in found] == ["near", "mid"]
        assert found[0][1] < found[1][1] <= DEFAULT_RADIUS_KM

    def test_skips_records_without_location(self):
        record = make_record("nowhere", location=None)
        assert nearby(SEOUL_CITY_HALL, [record], radius_km=20000) == []

    def test_custom_radius(self):
        far = make_record("far", location={"latitude": 35.1151, "longitude": 129.0415})
        assert nearby(SEOUL_CITY_HALL, [far], radius_km=400)[0][0].id == "far"
