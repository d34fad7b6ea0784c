"""
Schedule generator - expands a contract's weekly recurrence into dated shifts.

Pure computation: no database access. Seeding (persisting the output) lives
in seeding.py.
"""

from datetime import date, time

from app.core.exceptions import ValidationError

from .local_time import iter_dates
from .timezones import get_zone, shift_window_utc
from .types import DateRange, Occurrence, ScheduleConfig, Weekday


def effective_times(config: ScheduleConfig, weekday: int) -> tuple[time, time]:
    """Start/end for a weekday: the per-day override, else the config default."""
    day = config.day(weekday)
    return day.start or config.default_start, day.end or config.default_end


def occurrence_for_date(day: date, tz_name: str, config: ScheduleConfig) -> Occurrence:
    """Build the occurrence for one date using that weekday's effective times."""
    start, end = effective_times(config, Weekday.of(day))
    start_utc, end_utc = shift_window_utc(day, start, end, tz_name)
    return Occurrence(local_date=day, start_utc=start_utc, end_utc=end_utc)


def generate_shift_dates(
    start_date: date,
    end_date: date,
    tz_name: str,
    config: ScheduleConfig,
) -> list[Occurrence]:
    """
    Expand the weekly recurrence over [start_date, end_date].

    Every calendar date in the range whose weekday is enabled yields exactly one
    occurrence keyed by that date (the shift's start date, even for overnight
    shifts). Output is ascending by date and is a plain list, since a contract
    range is always bounded.

    Raises:
        ValidationError: If end_date is before start_date or the zone is unknown
    """
    if end_date < start_date:
        raise ValidationError(
            "endDate must be greater than or equal to startDate",
            errors=[f"{end_date.isoformat()} is before {start_date.isoformat()}"],
        )
    get_zone(tz_name)

    occurrences = []
    for day in iter_dates(start_date, end_date):
        if not config.day(Weekday.of(day)).enabled:
            continue
        occurrences.append(occurrence_for_date(day, tz_name, config))

    return occurrences


def generate_for_range(date_range: DateRange, tz_name: str, config: ScheduleConfig) -> list[Occurrence]:
    return generate_shift_dates(date_range.start, date_range.end, tz_name, config)


def expected_dates(date_range: DateRange, config: ScheduleConfig) -> list[date]:
    """Dates the generator would emit, without doing any timezone work."""
    return [d for d in iter_dates(date_range.start, date_range.end) if config.day(Weekday.of(d)).enabled]
