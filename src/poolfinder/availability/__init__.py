"""Availability determination for free-swim sessions."""

from .closures import FixedHolidays, HolidayCalendar, NoHolidays, is_closed, nth_occurrence
from .engine import AvailabilityEngine, is_open, todays_sessions
from .schedule import day_of_week, matches, minute_of_day, to_minutes

__all__ = [
    "AvailabilityEngine",
    "FixedHolidays",
    "HolidayCalendar",
    "NoHolidays",
    "day_of_week",
    "is_closed",
    "is_open",
    "matches",
    "minute_of_day",
    "nth_occurrence",
    "to_minutes",
    "todays_sessions",
]
