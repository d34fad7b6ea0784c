import pytest
from datetime import date, datetime, time, timedelta, timezone

from app.core.exceptions import ValidationError
from app.services.scheduling.generator import (
    effective_times,
    expected_dates,
    generate_for_range,
    generate_shift_dates,
)
from app.services.scheduling.types import DateRange, ScheduleConfig, Weekday

CHICAGO = "America/Chicago"


class TestGenerateShiftDates:
    def test_mon_wed_fri_first_week(self, first_week, mon_wed_fri):
        occurrences = generate_for_range(first_week, CHICAGO, mon_wed_fri)

        assert [o.local_date for o in occurrences] == [
            date(2025, 9, 1), date(2025, 9, 3), date(2025, 9, 5),
        ]
        for o in occurrences:
            assert o.duration_hours == 12
            assert o.start_utc == datetime.combine(o.local_date, time(12, 0), tzinfo=timezone.utc)

    def test_overnight_monday(self, overnight_monday):
        monday = date(2025, 9, 1)
        [occurrence] = generate_shift_dates(monday, monday, CHICAGO, overnight_monday)

        assert occurrence.local_date == monday
        assert occurrence.start_utc == datetime(2025, 9, 2, 0, 0, tzinfo=timezone.utc)
        assert occurrence.end_utc == datetime(2025, 9, 2, 12, 0, tzinfo=timezone.utc)
        assert occurrence.end_utc - occurrence.start_utc == timedelta(hours=12)

    def test_single_day_range_enabled(self, mon_wed_fri):
        wednesday = date(2025, 9, 3)
        assert len(generate_shift_dates(wednesday, wednesday, CHICAGO, mon_wed_fri)) == 1

    def test_single_day_range_disabled(self, mon_wed_fri):
        tuesday = date(2025, 9, 2)
        assert generate_shift_dates(tuesday, tuesday, CHICAGO, mon_wed_fri) == []

    def test_no_enabled_days_yields_nothing(self, first_week, no_days):
        assert generate_for_range(first_week, CHICAGO, no_days) == []

    def test_end_before_start_raises(self, mon_wed_fri):
        with pytest.raises(ValidationError):
            generate_shift_dates(date(2025, 9, 7), date(2025, 9, 1), CHICAGO, mon_wed_fri)

    def test_unknown_timezone_raises(self, first_week, mon_wed_fri):
        with pytest.raises(ValidationError):
            generate_for_range(first_week, "Nowhere/Special", mon_wed_fri)

    def test_per_day_override_beats_default(self):
        config = ScheduleConfig.from_overrides(
            time(7, 0), time(19, 0),
            {int(Weekday.TUESDAY): (True, time(9, 30), None)},
        )
        [occurrence] = generate_shift_dates(date(2025, 9, 2), date(2025, 9, 2), CHICAGO, config)

        assert effective_times(config, Weekday.TUESDAY) == (time(9, 30), time(19, 0))
        assert occurrence.start_utc == datetime(2025, 9, 2, 14, 30, tzinfo=timezone.utc)

    def test_short_shift_starting_in_spring_forward_gap(self):
        config = ScheduleConfig.from_overrides(
            time(2, 30), time(3, 15), {int(Weekday.SUNDAY): (True, None, None)},
        )
        [occurrence] = generate_shift_dates(date(2025, 3, 9), date(2025, 3, 9), CHICAGO, config)

        assert occurrence.end_utc > occurrence.start_utc
        assert occurrence.end_utc == datetime(2025, 3, 9, 8, 15, tzinfo=timezone.utc)
        assert occurrence.end_utc - occurrence.start_utc == timedelta(minutes=45)


class TestGeneratorInvariants:
    @pytest.mark.parametrize("enabled", [
        [Weekday.MONDAY],
        [Weekday.SATURDAY, Weekday.SUNDAY],
        list(Weekday),
    ])
    def test_output_matches_enabled_weekdays(self, make_schedule, enabled):
        date_range = DateRange(date(2025, 2, 20), date(2025, 4, 20))
        config = make_schedule(enabled, start=time(19, 0), end=time(7, 0))

        occurrences = generate_for_range(date_range, CHICAGO, config)
        dates = [o.local_date for o in occurrences]

        assert dates == sorted(set(dates))
        assert all(d in date_range for d in dates)
        assert set(dates) == {d for d in date_range.days() if Weekday.of(d) in enabled}
        assert dates == expected_dates(date_range, config)
        assert all(o.end_utc > o.start_utc for o in occurrences)
