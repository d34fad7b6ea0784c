"""
Local wall-clock date/time arithmetic.
No timezone objects here: dates and HH:mm times are treated as naive local values.
"""

import re
from datetime import date, time, timedelta
from typing import Union

from app.core.exceptions import ValidationError

MINUTES_PER_DAY = 24 * 60

HHMM_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):[0-5][0-9]$")

TimeLike = Union[time, str]
DateLike = Union[date, str]


def is_valid_hhmm(value: str) -> bool:
    return bool(HHMM_PATTERN.match(value))


def parse_hhmm(value: TimeLike) -> time:
    """Parse a 24-hour HH:mm string to a time object."""
    if isinstance(value, time):
        return value
    if not isinstance(value, str) or not is_valid_hhmm(value):
        raise ValidationError(f"Time must be in HH:mm format, got {value!r}")
    hours, minutes = value.split(":")
    return time(int(hours), int(minutes))


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def parse_date(value: DateLike) -> date:
    """Parse a YYYY-MM-DD string to a date object."""
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Date must be in YYYY-MM-DD format, got {value!r}")


def minute_of_day(value: TimeLike) -> int:
    t = parse_hhmm(value)
    return t.hour * 60 + t.minute


def week_start_sunday(day: DateLike) -> date:
    """Sunday on or before the given calendar date."""
    d = parse_date(day)
    days_since_sunday = (d.weekday() + 1) % 7
    return d - timedelta(days=days_since_sunday)


def add_days(day: DateLike, n: int) -> date:
    return parse_date(day) + timedelta(days=n)


def minutes_between_local(start: TimeLike, end: TimeLike, next_day: bool = False) -> int:
    """
    Minutes from start to end on the wall clock.

    If end < start the interval crosses midnight and a full day is added.
    end == start is zero minutes unless the caller says the end falls on the
    next day (a 24h shift).
    """
    start_minutes = minute_of_day(start)
    end_minutes = minute_of_day(end)

    if end_minutes < start_minutes or next_day:
        end_minutes += MINUTES_PER_DAY

    return end_minutes - start_minutes


def minutes_until_midnight(start: TimeLike) -> int:
    return MINUTES_PER_DAY - minute_of_day(start)


def in_range(day: DateLike, start: DateLike, end: DateLike) -> bool:
    """Inclusive bounds check."""
    return parse_date(start) <= parse_date(day) <= parse_date(end)


def iter_dates(start: date, end: date):
    """Every calendar date from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
