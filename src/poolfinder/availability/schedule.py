"""Weekly schedule rule evaluation."""

from datetime import date, datetime

from ..models.base import DayClass, ScheduleRule

SUNDAY = 0
MONDAY = 1
FRIDAY = 5
SATURDAY = 6


def day_of_week(day: date) -> int:
    """Day of week with Sunday=0 ... Saturday=6, as stored in closure rules."""
    return (day.weekday() + 1) % 7


def to_minutes(time_str: str) -> int:
    """Convert HH:MM string to minutes from start of day."""
    hours, minutes = map(int, time_str.split(":"))
    return hours * 60 + minutes


def minute_of_day(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


def matches(rule: ScheduleRule, weekday: int, is_holiday: bool = False) -> bool:
    """
    Check whether a schedule rule applies on the given day.

    Args:
        rule: Schedule rule to classify
        weekday: Day of week, Sunday=0 ... Saturday=6
        is_holiday: Whether the day is a public holiday

    Returns:
        True if the rule's day class covers the day
    """
    day_class = rule.day_class

    if day_class == DayClass.ALL:
        return True
    if weekday == SATURDAY:
        return day_class in (DayClass.SATURDAY, DayClass.WEEKEND_OR_HOLIDAY)
    if weekday == SUNDAY:
        return day_class in (DayClass.SUNDAY, DayClass.WEEKEND_OR_HOLIDAY)
    if not MONDAY <= weekday <= FRIDAY:
        return False
    if day_class == DayClass.WEEKDAY:
        return True
    # Holidays falling on a weekday follow the weekend/holiday timetable as well
    return is_holiday and day_class == DayClass.WEEKEND_OR_HOLIDAY
