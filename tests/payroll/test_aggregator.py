import pytest
from datetime import date, datetime, time, timezone
from decimal import Decimal

from app.services.payroll.aggregator import (
    PayrollContract,
    PayrollShift,
    WeekSegment,
    period_summary,
    period_totals,
    split_shift_by_local_week,
    summarise_shifts,
    to_payroll_shift,
    weekly_earnings_for_contract,
    weeks_covering,
)
from app.services.scheduling.types import Contract, Shift, ShiftSource, ShiftStatus

WEEK = date(2025, 9, 7)  # Sunday
ICU = PayrollContract(id=1, base_rate=Decimal("45.00"), ot_rate=Decimal("67.50"))


def day_shift(day, contract_id=1, start=time(7, 0), end=time(19, 0), status=ShiftStatus.IN_PROCESS):
    return PayrollShift(local_date=day, start_time=start, end_time=end, contract_id=contract_id, status=status)


@pytest.fixture
def four_twelves() -> list[PayrollShift]:
    # Mon-Thu 07:00-19:00, 48 hours
    return [day_shift(date(2025, 9, d)) for d in (8, 9, 10, 11)]


class TestWeeklyEarnings:
    def test_overtime_split(self, four_twelves):
        week = weekly_earnings_for_contract(WEEK, four_twelves, ICU)

        assert week.minutes == 48 * 60
        assert week.hours == Decimal(48)
        assert week.earnings == Decimal("2340.00")

    def test_under_threshold_is_base_only(self, four_twelves):
        week = weekly_earnings_for_contract(WEEK, four_twelves[:3], ICU)
        assert week.earnings == Decimal(36) * Decimal("45.00")

    def test_exactly_forty_hours(self):
        shifts = [day_shift(date(2025, 9, d), start=time(7, 0), end=time(17, 0)) for d in (8, 9, 10, 11)]
        week = weekly_earnings_for_contract(WEEK, shifts, ICU)
        assert week.earnings == Decimal("1800.00")

    def test_overtime_falls_back_to_base_rate(self, four_twelves):
        no_ot = PayrollContract(id=1, base_rate=Decimal("45.00"))
        week = weekly_earnings_for_contract(WEEK, four_twelves, no_ot)
        assert week.earnings == Decimal(48) * Decimal("45.00")

    def test_only_counts_this_contract(self, four_twelves):
        other = [day_shift(date(2025, 9, 12), contract_id=2)]
        week = weekly_earnings_for_contract(WEEK, four_twelves + other, ICU)
        assert week.minutes == 48 * 60

    def test_cancelled_excluded(self, four_twelves):
        shifts = four_twelves + [day_shift(date(2025, 9, 12), status=ShiftStatus.CANCELLED)]
        assert weekly_earnings_for_contract(WEEK, shifts, ICU).minutes == 48 * 60

    def test_finalized_counted(self):
        shifts = [day_shift(date(2025, 9, 8), status=ShiftStatus.FINALIZED)]
        assert weekly_earnings_for_contract(WEEK, shifts, ICU).minutes == 720


class TestSplitShiftByLocalWeek:
    def test_daytime_single_segment(self):
        assert split_shift_by_local_week(day_shift(date(2025, 9, 8))) == [WeekSegment(WEEK, 720)]

    def test_overnight_inside_week(self):
        shift = day_shift(date(2025, 9, 8), start=time(19, 0), end=time(7, 0))
        assert split_shift_by_local_week(shift) == [WeekSegment(WEEK, 720)]

    def test_saturday_night_splits_at_midnight(self):
        shift = day_shift(date(2025, 9, 13), start=time(23, 0), end=time(7, 0))
        assert split_shift_by_local_week(shift) == [
            WeekSegment(WEEK, 60),
            WeekSegment(date(2025, 9, 14), 420),
        ]

    def test_overtime_judged_per_week_after_split(self):
        # 40h Mon-Thu plus a Saturday night shift: only the pre-midnight hour is overtime
        shifts = [day_shift(date(2025, 9, d), start=time(7, 0), end=time(17, 0)) for d in (8, 9, 10, 11)]
        shifts.append(day_shift(date(2025, 9, 13), start=time(23, 0), end=time(7, 0)))

        this_week = weekly_earnings_for_contract(WEEK, shifts, ICU)
        next_week = weekly_earnings_for_contract(date(2025, 9, 14), shifts, ICU)

        assert this_week.earnings == Decimal("1800.00") + Decimal("67.50")
        assert next_week.earnings == Decimal(7) * Decimal("45.00")


class TestPeriodSummary:
    def test_one_week(self, four_twelves):
        summary = period_summary(WEEK, date(2025, 9, 13), four_twelves, {1: ICU})
        assert summary.hours == Decimal("48.0")
        assert summary.earnings == Decimal("2340.00")

    def test_contractless_shift_earns_nothing(self):
        shift = day_shift(date(2025, 9, 9), contract_id=None, start=time(9, 0), end=time(17, 0))

        summary = period_summary(WEEK, date(2025, 9, 13), [shift], {})

        assert summary.hours == Decimal("8.0")
        assert summary.earnings == Decimal("0.00")

    def test_unknown_contract_counts_hours_only(self):
        shift = day_shift(date(2025, 9, 9), contract_id=42)
        summary = period_summary(WEEK, date(2025, 9, 13), [shift], {1: ICU})
        assert summary.hours == Decimal("12.0")
        assert summary.earnings == Decimal("0.00")

    def test_overtime_is_per_contract(self):
        agency = PayrollContract(id=2, base_rate=Decimal("50.00"), ot_rate=Decimal("75.00"))
        shifts = [day_shift(date(2025, 9, d), contract_id=1) for d in (8, 9)]
        shifts += [day_shift(date(2025, 9, d), contract_id=2) for d in (10, 11)]

        summary = period_summary(WEEK, date(2025, 9, 13), shifts, {1: ICU, 2: agency})

        assert summary.hours == Decimal("48.0")
        assert summary.earnings == Decimal(24) * Decimal("45.00") + Decimal(24) * Decimal("50.00")

    def test_rounds_once_at_the_end(self):
        # 3 minutes a week is 0.05h: rounding per week would give 0.2
        shifts = [
            day_shift(date(2025, 9, 8), start=time(7, 0), end=time(7, 3)),
            day_shift(date(2025, 9, 15), start=time(7, 0), end=time(7, 3)),
        ]
        summary = period_summary(WEEK, date(2025, 9, 20), shifts, {1: ICU})
        assert summary.hours == Decimal("0.1")
        assert summary.earnings == Decimal("4.50")

    def test_month_is_sum_of_its_weeks(self):
        shifts = [day_shift(date(2025, 9, d)) for d in (1, 2, 3, 4, 5, 8, 10, 15, 16, 17, 18, 22, 29, 30)]
        shifts.append(day_shift(date(2025, 9, 27), start=time(19, 0), end=time(7, 0)))
        contracts = {1: ICU}

        month_hours, month_earnings = period_totals(date(2025, 9, 1), date(2025, 9, 30), shifts, contracts)

        weekly = [period_totals(w, w, shifts, contracts) for w in weeks_covering(date(2025, 9, 1), date(2025, 9, 30))]
        assert month_hours == sum(h for h, _ in weekly)
        assert month_earnings == sum(e for _, e in weekly)

    def test_weeks_covering_month(self):
        assert weeks_covering(date(2025, 9, 1), date(2025, 9, 30)) == [
            date(2025, 8, 31), date(2025, 9, 7), date(2025, 9, 14), date(2025, 9, 21), date(2025, 9, 28),
        ]


class TestStoredShifts:
    def test_projects_utc_rows_into_contract_zone(self):
        contract = Contract(
            id=1, user_id="nurse-1", name="ICU", facility="", start_date=date(2025, 9, 1),
            end_date=date(2025, 9, 30), base_rate=Decimal("45.00"), timezone="America/Chicago",
        )
        # Monday 19:00-07:00 Chicago
        shift = Shift(
            id=1, user_id="nurse-1", contract_id=1,
            start_utc=datetime(2025, 9, 9, 0, 0, tzinfo=timezone.utc),
            end_utc=datetime(2025, 9, 9, 12, 0, tzinfo=timezone.utc),
            local_date=date(2025, 9, 8), source=ShiftSource.CONTRACT_SEED, status=ShiftStatus.IN_PROCESS,
            timezone="America/Chicago",
        )

        payroll_shift = to_payroll_shift(shift, contract.timezone)
        summary = summarise_shifts(WEEK, date(2025, 9, 13), [shift], [contract])

        assert payroll_shift.start_time == time(19, 0)
        assert payroll_shift.end_time == time(7, 0)
        assert payroll_shift.overnight is True
        assert summary.hours == Decimal("12.0")
        assert summary.earnings == Decimal("540.00")

    def test_24_hour_shift(self):
        shift = Shift(
            id=1, user_id="nurse-1", contract_id=None,
            start_utc=datetime(2025, 9, 8, 12, 0, tzinfo=timezone.utc),
            end_utc=datetime(2025, 9, 9, 12, 0, tzinfo=timezone.utc),
            local_date=date(2025, 9, 8), source=ShiftSource.MANUAL, status=ShiftStatus.IN_PROCESS,
            timezone="America/Chicago",
        )
        payroll_shift = to_payroll_shift(shift, "America/Chicago")
        assert payroll_shift.ends_next_day is True
        assert payroll_shift.minutes == 1440
