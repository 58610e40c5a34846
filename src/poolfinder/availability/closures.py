"""Closed-day resolution for legacy text labels and structured holiday policies."""

import logging
from datetime import date
from typing import Iterable, Optional, Protocol

from ..models.base import HolidayPolicy, HolidayRule, LegacyClosure, StructuredClosure
from .schedule import MONDAY, SUNDAY, day_of_week

logger = logging.getLogger(__name__)

# Known full-closure phrases in legacy free text, keyed by the day they close
LEGACY_CLOSURE_PHRASES = {
    MONDAY: ("매주 월요일", "every monday", "EVERY_MON"),
    SUNDAY: ("매주 일요일", "every sunday", "EVERY_SUN"),
}


class HolidayCalendar(Protocol):
    """Source of public holidays, supplied by the caller."""

    def is_public_holiday(self, day: date) -> bool:
        ...


class NoHolidays:
    """Calendar without any public holidays."""

    def is_public_holiday(self, day: date) -> bool:
        return False


class FixedHolidays:
    """Calendar backed by an explicit set of dates."""

    def __init__(self, dates: Iterable[date] = ()):
        self.dates = frozenset(dates)

    def is_public_holiday(self, day: date) -> bool:
        return day in self.dates


def nth_occurrence(day: date) -> int:
    """Which occurrence of its weekday the date is within its month (1-5)."""
    return (day.day - 1) // 7 + 1


def rule_fires(rule: HolidayRule, day: date) -> bool:
    """Check whether a single regular closure rule closes the given date."""
    if day_of_week(day) != rule.day_of_week:
        return False
    if rule.week_ordinal == 0:
        return True
    return nth_occurrence(day) == rule.week_ordinal


def _legacy_closed(text: str, day: date) -> bool:
    phrases = LEGACY_CLOSURE_PHRASES.get(day_of_week(day))
    if not phrases or not text:
        return False
    lowered = text.lower()
    return any(phrase in text or phrase.lower() in lowered for phrase in phrases)


def _policy_closed(policy: HolidayPolicy, day: date, holidays: HolidayCalendar) -> bool:
    if policy.regular_enabled and any(rule_fires(rule, day) for rule in policy.rules):
        return True
    if policy.public_holidays_enabled and holidays.is_public_holiday(day):
        return True
    # Specific-date and temporary closures have no dates attached; display only
    return False


def is_closed(descriptor, day: date, holidays: Optional[HolidayCalendar] = None) -> bool:
    """
    Decide whether a facility is fully closed on a calendar day.

    Unrecognised descriptors and evaluation errors resolve to "not closed".

    Args:
        descriptor: LegacyClosure, StructuredClosure, or a bare string
        day: Calendar day to check
        holidays: Public-holiday calendar (defaults to none)

    Returns:
        True if an enabled closure rule fires on the day
    """
    calendar = holidays or NoHolidays()

    try:
        if isinstance(descriptor, StructuredClosure):
            return _policy_closed(descriptor.policy, day, calendar)
        if isinstance(descriptor, HolidayPolicy):
            return _policy_closed(descriptor, day, calendar)
        if isinstance(descriptor, LegacyClosure):
            return _legacy_closed(descriptor.text, day)
        if isinstance(descriptor, str):
            return _legacy_closed(descriptor, day)
    except Exception as e:
        logger.debug(f"Closure evaluation failed, treating {day} as open: {e}")
        return False

    logger.debug(f"Unrecognised closure descriptor {type(descriptor).__name__}, treating as open")
    return False
