"""
Boundary validation for contract and shift requests.

validate_* functions collect human-readable messages; ensure_* wrappers raise
ValidationError carrying those messages. Nothing past this module sees an
unchecked HH:mm string or an open-ended schedule mapping.
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from app.core.config import settings
from app.core.exceptions import ValidationError
from app.services.scheduling.local_time import is_valid_hhmm, parse_hhmm
from app.services.scheduling.timezones import is_valid_timezone
from app.services.scheduling.types import ScheduleConfig, Weekday


WEEKDAY_KEYS = tuple(str(int(w)) for w in Weekday)


@dataclass
class DayInput:
    enabled: bool = False
    start: Optional[str] = None
    end: Optional[str] = None


@dataclass
class ScheduleInput:
    """Wire schedule: defaults plus a "0".."6" keyed mapping of day overrides."""
    default_start: str
    default_end: str
    days: dict[str, DayInput] = field(default_factory=dict)


def validate_schedule(schedule: ScheduleInput, seed_shifts: bool) -> list[str]:
    errors = []

    if seed_shifts and not any(d.enabled for d in schedule.days.values()):
        errors.append("At least one weekday must be enabled when seedShifts is true")

    if not is_valid_hhmm(schedule.default_start):
        errors.append("defaultStart must be in HH:mm format")
    if not is_valid_hhmm(schedule.default_end):
        errors.append("defaultEnd must be in HH:mm format")

    for key, day in schedule.days.items():
        if key not in WEEKDAY_KEYS:
            errors.append(f"Day {key} is not a weekday index (0-6)")
            continue
        if day.start and not is_valid_hhmm(day.start):
            errors.append(f"Day {key} start time must be in HH:mm format")
        if day.end and not is_valid_hhmm(day.end):
            errors.append(f"Day {key} end time must be in HH:mm format")

    return errors


def validate_date_range(start_date: date, end_date: date) -> list[str]:
    if end_date < start_date:
        return ["endDate must be greater than or equal to startDate"]
    return []


def validate_query_range(from_date: date, to_date: date) -> list[str]:
    """Calendar queries: ordered and no wider than MAX_CALENDAR_RANGE_DAYS."""
    errors = []
    if to_date < from_date:
        errors.append("End date must be after start date")
    if (to_date - from_date).days > settings.MAX_CALENDAR_RANGE_DAYS:
        errors.append(f"Date range cannot exceed {settings.MAX_CALENDAR_RANGE_DAYS} days")
    return errors


def validate_timezone(name: str) -> list[str]:
    if not is_valid_timezone(name):
        return [f"Unknown timezone: {name}"]
    return []


def ensure_schedule(schedule: ScheduleInput, seed_shifts: bool) -> None:
    errors = validate_schedule(schedule, seed_shifts)
    if errors:
        raise ValidationError("Schedule validation failed", errors=errors)


def ensure_date_range(start_date: date, end_date: date) -> None:
    errors = validate_date_range(start_date, end_date)
    if errors:
        raise ValidationError("Date validation failed", errors=errors)


def ensure_query_range(from_date: date, to_date: date) -> None:
    errors = validate_query_range(from_date, to_date)
    if errors:
        raise ValidationError("Invalid date range", errors=errors)


def ensure_timezone(name: str) -> None:
    errors = validate_timezone(name)
    if errors:
        raise ValidationError("Timezone validation failed", errors=errors)


def to_schedule_config(schedule: ScheduleInput) -> ScheduleConfig:
    """Close a validated wire schedule over all seven weekdays."""
    overrides = {
        int(key): (
            day.enabled,
            parse_hhmm(day.start) if day.start else None,
            parse_hhmm(day.end) if day.end else None,
        )
        for key, day in schedule.days.items()
    }
    return ScheduleConfig.from_overrides(
        parse_hhmm(schedule.default_start),
        parse_hhmm(schedule.default_end),
        overrides,
    )
