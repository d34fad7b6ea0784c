import pytest
from datetime import date, time, timedelta

from app.services.scheduling.generator import expected_dates
from app.services.scheduling.reconciliation import apply_delta, compute_delta
from app.services.scheduling.types import DateRange, ScheduleConfig, ShiftSource, ShiftStatus, Weekday

CHICAGO = "America/Chicago"


def assert_disjoint(delta):
    add, remove, update = set(delta.add_dates), set(delta.remove_dates), set(delta.update_dates)
    assert not (add & remove)
    assert not (add & update)
    assert not (remove & update)


def replay(old_range, old_schedule, new_range, new_schedule, delta) -> set[date]:
    """Apply a delta to the old generation as plain date sets."""
    generated = set(expected_dates(old_range, old_schedule))
    return (generated - set(delta.remove_dates)) | set(delta.add_dates)


class TestComputeDelta:
    def test_identical_inputs_are_empty(self, first_week, mon_wed_fri):
        delta = compute_delta(first_week, mon_wed_fri, first_week, mon_wed_fri)
        assert delta.is_empty

    def test_extend_and_enable_sunday(self, first_week, mon_wed_fri, mon_wed_fri_sun):
        new_range = DateRange(date(2025, 9, 1), date(2025, 9, 14))

        delta = compute_delta(first_week, mon_wed_fri, new_range, mon_wed_fri_sun)

        # 09-07 is a toggle inside the overlap, the rest come from the extension
        assert delta.add_dates == [
            date(2025, 9, 7), date(2025, 9, 8), date(2025, 9, 10),
            date(2025, 9, 12), date(2025, 9, 14),
        ]
        assert delta.remove_dates == []
        assert delta.update_dates == []

    def test_narrowing_removes_every_date_outside(self, first_week, mon_wed_fri):
        new_range = DateRange(date(2025, 9, 1), date(2025, 9, 3))

        delta = compute_delta(first_week, mon_wed_fri, new_range, mon_wed_fri)

        assert delta.remove_dates == [date(2025, 9, 4), date(2025, 9, 5), date(2025, 9, 6), date(2025, 9, 7)]
        assert delta.add_dates == []

    def test_toggle_off_removes_only_overlap_dates(self, first_week, mon_wed_fri, make_schedule):
        new_schedule = make_schedule([Weekday.MONDAY, Weekday.FRIDAY])

        delta = compute_delta(first_week, mon_wed_fri, first_week, new_schedule)

        assert delta.remove_dates == [date(2025, 9, 3)]
        assert delta.add_dates == []

    def test_time_change_updates(self, first_week, mon_wed_fri):
        new_schedule = ScheduleConfig.from_overrides(
            time(7, 0), time(19, 0),
            {
                int(Weekday.MONDAY): (True, time(8, 0), None),
                int(Weekday.WEDNESDAY): (True, None, None),
                int(Weekday.FRIDAY): (True, None, None),
            },
        )

        delta = compute_delta(first_week, mon_wed_fri, first_week, new_schedule)

        assert delta.update_dates == [date(2025, 9, 1)]
        assert delta.add_dates == []
        assert delta.remove_dates == []

    def test_default_time_change_updates_every_enabled_date(self, first_week, mon_wed_fri, make_schedule):
        new_schedule = make_schedule([Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY], start=time(6, 0))

        delta = compute_delta(first_week, mon_wed_fri, first_week, new_schedule)

        assert delta.update_dates == [date(2025, 9, 1), date(2025, 9, 3), date(2025, 9, 5)]

    def test_timezone_change_updates_enabled_dates(self, first_week, mon_wed_fri):
        delta = compute_delta(
            first_week, mon_wed_fri, first_week, mon_wed_fri,
            old_timezone=CHICAGO, new_timezone="America/New_York",
        )

        assert delta.update_dates == [date(2025, 9, 1), date(2025, 9, 3), date(2025, 9, 5)]

    def test_disjoint_move(self, first_week, mon_wed_fri):
        new_range = DateRange(date(2025, 10, 1), date(2025, 10, 7))

        delta = compute_delta(first_week, mon_wed_fri, new_range, mon_wed_fri)

        assert delta.add_dates == [date(2025, 10, 1), date(2025, 10, 3), date(2025, 10, 6)]
        assert delta.remove_dates == first_week.days()
        assert delta.update_dates == []

    def test_start_moved_earlier(self, first_week, mon_wed_fri):
        new_range = DateRange(date(2025, 8, 25), date(2025, 9, 7))

        delta = compute_delta(first_week, mon_wed_fri, new_range, mon_wed_fri)

        assert delta.add_dates == [date(2025, 8, 25), date(2025, 8, 27), date(2025, 8, 29)]


class TestDeltaCompleteness:
    @pytest.mark.parametrize("new_start,new_end,new_days", [
        (date(2025, 9, 1), date(2025, 9, 14), [Weekday.SUNDAY, Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY]),
        (date(2025, 9, 3), date(2025, 9, 5), [Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY]),
        (date(2025, 8, 20), date(2025, 9, 30), [Weekday.TUESDAY, Weekday.THURSDAY]),
        (date(2025, 12, 1), date(2025, 12, 31), [Weekday.SATURDAY]),
        (date(2025, 9, 1), date(2025, 9, 7), []),
    ])
    def test_replaying_delta_reproduces_new_generation(self, first_week, mon_wed_fri, make_schedule, new_start, new_end, new_days):
        new_range = DateRange(new_start, new_end)
        new_schedule = make_schedule(new_days)

        delta = compute_delta(first_week, mon_wed_fri, new_range, new_schedule)

        assert_disjoint(delta)
        assert replay(first_week, mon_wed_fri, new_range, new_schedule, delta) == set(expected_dates(new_range, new_schedule))
        assert set(delta.update_dates) <= set(expected_dates(new_range, new_schedule))


class TestApplyDelta:
    def test_adds_and_removes_seeded_shifts(self, repo, make_contract, first_week, mon_wed_fri, mon_wed_fri_sun):
        contract = make_contract().contract
        new_range = DateRange(date(2025, 9, 1), date(2025, 9, 14))
        delta = compute_delta(first_week, mon_wed_fri, new_range, mon_wed_fri_sun)

        result = apply_delta(repo, contract.id, delta, CHICAGO, mon_wed_fri_sun)

        assert result.created == 5
        assert result.skipped == 0
        stored = repo.get_shifts_for_contract_in_range(contract.id, source=ShiftSource.CONTRACT_SEED)
        assert [s.local_date for s in stored] == sorted(set(expected_dates(new_range, mon_wed_fri_sun)))

    def test_existing_rows_are_skipped(self, repo, make_contract, first_week, mon_wed_fri):
        contract = make_contract().contract
        # pretend nothing was generated before: every date is an add
        delta = compute_delta(DateRange(date(2025, 8, 1), date(2025, 8, 1)), mon_wed_fri, first_week, mon_wed_fri)

        result = apply_delta(repo, contract.id, delta, CHICAGO, mon_wed_fri)

        assert result.created == 0
        assert result.skipped == 3

    def test_finalized_shifts_are_protected(self, repo, make_contract, first_week, mon_wed_fri):
        contract = make_contract().contract
        [friday] = repo.get_shifts_for_contract_in_range(contract.id, date(2025, 9, 5), date(2025, 9, 5))
        repo.update_shift(friday.id, status=ShiftStatus.FINALIZED)

        narrowed = DateRange(date(2025, 9, 1), date(2025, 9, 3))
        delta = compute_delta(first_week, mon_wed_fri, narrowed, mon_wed_fri)
        result = apply_delta(repo, contract.id, delta, CHICAGO, mon_wed_fri)

        assert result.deleted == 0
        assert result.protected_dates == [date(2025, 9, 5)]
        assert repo.get_shift(friday.id).status == ShiftStatus.FINALIZED

    def test_time_change_rewrites_pending_only(self, repo, make_contract, first_week, mon_wed_fri, make_schedule):
        contract = make_contract().contract
        shifts = repo.get_shifts_for_contract_in_range(contract.id)
        repo.update_shift(shifts[0].id, status=ShiftStatus.CANCELLED)

        later = make_schedule([Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY], start=time(8, 0), end=time(20, 0))
        delta = compute_delta(first_week, mon_wed_fri, first_week, later)
        result = apply_delta(repo, contract.id, delta, CHICAGO, later)

        assert result.updated == 2
        assert result.protected_dates == [date(2025, 9, 1)]
        wednesday = repo.get_shifts_for_contract_in_range(contract.id, date(2025, 9, 3), date(2025, 9, 3))[0]
        assert wednesday.start_utc.hour == 13
        assert wednesday.end_utc - wednesday.start_utc == timedelta(hours=12)
        monday = repo.get_shift(shifts[0].id)
        assert monday.start_utc.hour == 12
