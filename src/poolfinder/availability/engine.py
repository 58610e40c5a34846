"""Free-swim availability for a facility at a given instant."""

import logging
from datetime import datetime
from typing import List, Optional

from ..models.base import FacilityRecord, ScheduleRule
from .closures import HolidayCalendar, NoHolidays, is_closed
from .schedule import day_of_week, matches, minute_of_day

logger = logging.getLogger(__name__)


def todays_sessions(
    record: FacilityRecord,
    instant: datetime,
    holidays: Optional[HolidayCalendar] = None,
) -> List[ScheduleRule]:
    """Schedule rules that apply on the instant's day, ignoring closures."""
    calendar = holidays or NoHolidays()
    holiday = calendar.is_public_holiday(instant.date())
    weekday = day_of_week(instant.date())
    return [rule for rule in record.free_swim_schedule if matches(rule, weekday, holiday)]


def is_open(
    record: FacilityRecord,
    instant: datetime,
    require_still_open_now: bool = False,
    holidays: Optional[HolidayCalendar] = None,
) -> bool:
    """
    Check whether a facility offers free swimming at the given instant.

    With require_still_open_now, at least one of the day's sessions must not
    have ended yet. Session start times are not checked, so a session later
    in the day also counts.

    Args:
        record: Facility to evaluate
        instant: Local wall-clock time, used as-is
        require_still_open_now: Only count sessions whose end is still ahead
        holidays: Public-holiday calendar (defaults to none)

    Returns:
        True if the facility is available
    """
    if is_closed(record.closed_days, instant.date(), holidays):
        return False

    sessions = todays_sessions(record, instant, holidays)
    if not sessions:
        return False

    if not require_still_open_now:
        return True

    now = minute_of_day(instant)
    return any(rule.end_minute > now for rule in sessions)


class AvailabilityEngine:
    """Evaluates availability against a fixed holiday calendar."""

    def __init__(self, holidays: Optional[HolidayCalendar] = None):
        self.holidays = holidays or NoHolidays()
        self.evaluations = 0

    def is_open(
        self,
        record: FacilityRecord,
        instant: datetime,
        require_still_open_now: bool = False,
    ) -> bool:
        self.evaluations += 1
        return is_open(record, instant, require_still_open_now, self.holidays)

    def is_closed_today(self, record: FacilityRecord, instant: datetime) -> bool:
        return is_closed(record.closed_days, instant.date(), self.holidays)

    def sessions(self, record: FacilityRecord, instant: datetime) -> List[ScheduleRule]:
        return todays_sessions(record, instant, self.holidays)

    def describe(self, record: FacilityRecord, instant: datetime) -> dict:
        """Availability summary for one facility, used by the API."""
        closed = self.is_closed_today(record, instant)
        sessions = [] if closed else self.sessions(record, instant)
        return {
            "facility_id": record.id,
            "at": instant.isoformat(),
            "closed_today": closed,
            "open_today": self.is_open(record, instant),
            "open_now": self.is_open(record, instant, require_still_open_now=True),
            "sessions": [rule.to_time_string() for rule in sessions],
        }
