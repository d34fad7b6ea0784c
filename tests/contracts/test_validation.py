import pytest
from datetime import date, time

from app.core.exceptions import ValidationError
from app.services.contracts.validation import (
    DayInput,
    ScheduleInput,
    ensure_query_range,
    ensure_schedule,
    to_schedule_config,
    validate_date_range,
    validate_query_range,
    validate_schedule,
    validate_timezone,
)
from app.services.scheduling.types import Weekday


class TestValidateSchedule:
    def test_valid(self):
        schedule = ScheduleInput("07:00", "19:00", {"1": DayInput(enabled=True, start="19:00", end="07:00")})
        assert validate_schedule(schedule, seed_shifts=True) == []

    def test_seeding_needs_an_enabled_day(self):
        schedule = ScheduleInput("07:00", "19:00", {"1": DayInput(enabled=False)})
        assert validate_schedule(schedule, seed_shifts=True) == [
            "At least one weekday must be enabled when seedShifts is true"
        ]

    def test_no_enabled_day_is_fine_without_seeding(self):
        assert validate_schedule(ScheduleInput("07:00", "19:00"), seed_shifts=False) == []

    def test_bad_times_are_all_reported(self):
        schedule = ScheduleInput("7am", "19:00", {"2": DayInput(enabled=True, end="24:30")})
        assert validate_schedule(schedule, seed_shifts=False) == [
            "defaultStart must be in HH:mm format",
            "Day 2 end time must be in HH:mm format",
        ]

    def test_unknown_weekday_key(self):
        schedule = ScheduleInput("07:00", "19:00", {"7": DayInput(enabled=True)})
        assert validate_schedule(schedule, seed_shifts=False) == ["Day 7 is not a weekday index (0-6)"]

    def test_ensure_raises_with_errors(self):
        with pytest.raises(ValidationError) as exc:
            ensure_schedule(ScheduleInput("07:00", "xx"), seed_shifts=False)
        assert exc.value.errors == ["defaultEnd must be in HH:mm format"]


class TestRanges:
    def test_date_range(self):
        assert validate_date_range(date(2025, 9, 1), date(2025, 9, 1)) == []
        assert validate_date_range(date(2025, 9, 2), date(2025, 9, 1)) == [
            "endDate must be greater than or equal to startDate"
        ]

    def test_query_range_limit(self):
        assert validate_query_range(date(2025, 1, 1), date(2025, 4, 4)) == []
        assert validate_query_range(date(2025, 1, 1), date(2025, 4, 5)) == ["Date range cannot exceed 93 days"]

    def test_query_range_order(self):
        with pytest.raises(ValidationError):
            ensure_query_range(date(2025, 2, 1), date(2025, 1, 1))

    def test_timezone(self):
        assert validate_timezone("Europe/London") == []
        assert validate_timezone("Europe/Atlantis") == ["Unknown timezone: Europe/Atlantis"]


class TestToScheduleConfig:
    def test_closes_over_all_weekdays(self):
        config = to_schedule_config(ScheduleInput("07:00", "19:00", {"1": DayInput(enabled=True, start="08:00")}))

        assert set(config.days) == set(Weekday)
        monday = config.day(Weekday.MONDAY)
        assert (monday.enabled, monday.start, monday.end) == (True, time(8, 0), time(19, 0))
        sunday = config.day(Weekday.SUNDAY)
        assert (sunday.enabled, sunday.start, sunday.end) == (False, time(7, 0), time(19, 0))
