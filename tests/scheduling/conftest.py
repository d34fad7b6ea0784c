import pytest
from datetime import date, time

from app.services.scheduling.types import DateRange, ScheduleConfig, Weekday


def schedule(days, start=time(7, 0), end=time(19, 0)) -> ScheduleConfig:
    """Closed config with the given weekdays enabled at the default times."""
    return ScheduleConfig.from_overrides(start, end, {int(d): (True, None, None) for d in days})


@pytest.fixture
def first_week() -> DateRange:
    # Monday 2025-09-01 to Sunday 2025-09-07
    return DateRange(date(2025, 9, 1), date(2025, 9, 7))


@pytest.fixture
def mon_wed_fri() -> ScheduleConfig:
    return schedule([Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY])


@pytest.fixture
def mon_wed_fri_sun() -> ScheduleConfig:
    return schedule([Weekday.SUNDAY, Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY])


@pytest.fixture
def overnight_monday() -> ScheduleConfig:
    return ScheduleConfig.from_overrides(
        time(7, 0), time(19, 0),
        {int(Weekday.MONDAY): (True, time(19, 0), time(7, 0))},
    )


@pytest.fixture
def no_days() -> ScheduleConfig:
    return ScheduleConfig.from_overrides(time(7, 0), time(19, 0), {})


@pytest.fixture
def make_schedule():
    return schedule
