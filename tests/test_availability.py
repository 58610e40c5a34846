"""Tests for the availability engine."""

from datetime import date, datetime, timedelta

import pytest

from poolfinder.availability import AvailabilityEngine, is_open
from poolfinder.availability.closures import FixedHolidays
from poolfinder.models.base import LegacyClosure

from conftest import make_record

MONDAY_0830 = datetime(2024, 1, 8, 8, 30)
MONDAY_0930 = datetime(2024, 1, 8, 9, 30)


def every_minute_of_week(start: datetime, step_minutes: int = 37):
    current = start
    end = start + timedelta(days=7)
    while current < end:
        yield current
        current += timedelta(minutes=step_minutes)


class TestIsOpen:
    """Availability at an instant."""

    def test_weekday_session_still_running(self):
        record = make_record()
        assert is_open(record, MONDAY_0830, require_still_open_now=True)

    def test_weekday_session_already_over(self):
        record = make_record()
        assert not is_open(record, MONDAY_0930, require_still_open_now=True)
        # Without the refinement the day still counts
        assert is_open(record, MONDAY_0930)

    def test_later_session_counts_before_it_starts(self):
        record = make_record(free_swim_schedule=[
            {"day_class": "weekday", "start_time": "18:00", "end_time": "18:50"},
        ])
        assert is_open(record, MONDAY_0830, require_still_open_now=True)

    def test_end_boundary_is_exclusive(self):
        record = make_record()
        assert not is_open(record, datetime(2024, 1, 8, 9, 0), require_still_open_now=True)
        assert is_open(record, datetime(2024, 1, 8, 8, 59), require_still_open_now=True)

    def test_sunday_closure_overrides_all_day_schedule(self):
        record = make_record(
            free_swim_schedule=[{"day_class": "all", "start_time": "00:00", "end_time": "23:59"}],
            closed_days="매주 일요일 휴관",
        )
        assert isinstance(record.closed_days, LegacyClosure)
        for hour in (0, 6, 12, 23):
            instant = datetime(2024, 1, 7, hour, 0)
            assert not is_open(record, instant)
            assert not is_open(record, instant, require_still_open_now=True)
        assert is_open(record, datetime(2024, 1, 8, 12, 0))

    def test_empty_schedule_never_open(self):
        record = make_record(free_swim_schedule=[])
        for instant in every_minute_of_week(datetime(2024, 1, 7)):
            assert not is_open(record, instant)
            assert not is_open(record, instant, require_still_open_now=True)

    @pytest.mark.parametrize("still_open", [False, True])
    def test_no_rule_for_the_day(self, still_open):
        record = make_record(free_swim_schedule=[
            {"day_class": "saturday", "start_time": "00:00", "end_time": "23:59"},
        ])
        for day in range(7, 13):  # Sunday through Friday
            assert not is_open(record, datetime(2024, 1, day, 10, 0), require_still_open_now=still_open)
        assert is_open(record, datetime(2024, 1, 13, 10, 0), require_still_open_now=still_open)

    def test_structured_monthly_closure(self):
        record = make_record(
            free_swim_schedule=[{"day_class": "sunday", "start_time": "09:00", "end_time": "17:00"}],
            closed_days={"kind": "structured", "policy": {
                "rules": [{"occurrence": "MONTHLY", "week_ordinal": 2, "day_of_week": 0}],
            }},
        )
        assert is_open(record, datetime(2024, 1, 7, 10, 0))
        assert not is_open(record, datetime(2024, 1, 14, 10, 0))
        assert is_open(record, datetime(2024, 1, 21, 10, 0))


class TestAvailabilityEngine:
    """Engine wrapper with a holiday calendar."""

    @pytest.fixture
    def engine(self):
        return AvailabilityEngine(FixedHolidays([date(2024, 3, 1)]))

    def test_holiday_on_weekday_uses_holiday_sessions(self, engine):
        record = make_record(free_swim_schedule=[
            {"day_class": "weekend_or_holiday", "start_time": "10:00", "end_time": "16:00"},
        ])
        assert engine.is_open(record, datetime(2024, 3, 1, 11, 0))
        assert not engine.is_open(record, datetime(2024, 3, 4, 11, 0))

    def test_public_holiday_closure(self, engine):
        record = make_record(closed_days={"kind": "structured", "policy": {"public_holidays_enabled": True}})
        assert engine.is_closed_today(record, datetime(2024, 3, 1, 7, 0))
        assert not engine.is_open(record, datetime(2024, 3, 1, 7, 0))
        assert engine.is_open(record, datetime(2024, 3, 4, 7, 0))

    def test_describe(self, engine):
        record = make_record()
        summary = engine.describe(record, MONDAY_0930)

        assert summary["facility_id"] == "pool-1"
        assert summary["closed_today"] is False
        assert summary["open_today"] is True
        assert summary["open_now"] is False
        assert summary["sessions"] == ["06:00-09:00"]

    def test_describe_closed_day_has_no_sessions(self, engine):
        record = make_record(closed_days="EVERY_MON")
        summary = engine.describe(record, MONDAY_0830)

        assert summary["closed_today"] is True
        assert summary["open_now"] is False
        assert summary["sessions"] == []

    def test_counts_evaluations(self, engine):
        record = make_record()
        engine.is_open(record, MONDAY_0830)
        engine.is_open(record, MONDAY_0930, require_still_open_now=True)
        assert engine.evaluations == 2
