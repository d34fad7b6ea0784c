"""
Contract edit reconciliation.

compute_delta works out which occurrence dates must be added, removed or
rewritten when a contract's date range, weekly schedule or timezone changes.
apply_delta pushes that delta through the repository, leaving finalized and
cancelled shifts alone and reporting the dates where they blocked a change.
"""

import logging
from datetime import date, timedelta
from typing import Optional

from .generator import effective_times, occurrence_for_date
from .local_time import iter_dates
from .repository import ScheduleRepository
from .types import (
    DateRange,
    PENDING_STATUSES,
    PROTECTED_STATUSES,
    ScheduleConfig,
    ScheduleDelta,
    ShiftSource,
    UpdateResult,
    Weekday,
)


logger = logging.getLogger(__name__)


def _enabled(config: ScheduleConfig, day: date) -> bool:
    return config.day(Weekday.of(day)).enabled


def compute_delta(
    old_range: DateRange,
    old_schedule: ScheduleConfig,
    new_range: DateRange,
    new_schedule: ScheduleConfig,
    old_timezone: Optional[str] = None,
    new_timezone: Optional[str] = None,
) -> ScheduleDelta:
    """
    Minimal add/remove/update sets to move from the old generation to the new one.

    Rules:
    1. Expansion: dates of the new range outside the old range, on an enabled
       weekday of the new schedule, are added.
    2. Narrowing: dates of the old range outside the new range are removed,
       whatever the old weekday setting was.
    3. Toggle (overlap only): a weekday switched on adds the date, switched off
       removes it.
    4. Time change (overlap only, enabled in both): a different effective start
       or end time, or a different timezone, rewrites the date.

    Expansion/narrowing dates lie outside the overlap, so a date can appear in
    at most one of the three lists. Each list is ascending.
    """
    delta = ScheduleDelta()
    timezone_changed = (
        old_timezone is not None and new_timezone is not None and old_timezone != new_timezone
    )

    # 1. expansion, clipped to the new range so disjoint moves stay correct
    if new_range.start < old_range.start:
        head_end = min(old_range.start - timedelta(days=1), new_range.end)
        delta.add_dates.extend(d for d in iter_dates(new_range.start, head_end) if _enabled(new_schedule, d))
    if new_range.end > old_range.end:
        tail_start = max(old_range.end + timedelta(days=1), new_range.start)
        delta.add_dates.extend(d for d in iter_dates(tail_start, new_range.end) if _enabled(new_schedule, d))

    # 2. narrowing
    if new_range.start > old_range.start or new_range.end < old_range.end:
        delta.remove_dates.extend(d for d in iter_dates(old_range.start, old_range.end) if d not in new_range)

    # 3 + 4. overlap
    overlap_start = max(old_range.start, new_range.start)
    overlap_end = min(old_range.end, new_range.end)

    for day in iter_dates(overlap_start, overlap_end):
        weekday = Weekday.of(day)
        was_enabled = old_schedule.day(weekday).enabled
        is_enabled = new_schedule.day(weekday).enabled

        if was_enabled != is_enabled:
            (delta.add_dates if is_enabled else delta.remove_dates).append(day)
        elif is_enabled:
            if timezone_changed or effective_times(old_schedule, weekday) != effective_times(new_schedule, weekday):
                delta.update_dates.append(day)

    delta.add_dates.sort()
    delta.remove_dates.sort()
    delta.update_dates.sort()
    return delta


def _protected_dates(repo: ScheduleRepository, contract_id: int, dates: list[date]) -> set[date]:
    """Dates among `dates` holding a finalized or cancelled seeded shift."""
    if not dates:
        return set()
    wanted = set(dates)
    shifts = repo.get_shifts_for_contract_in_range(
        contract_id, min(dates), max(dates), source=ShiftSource.CONTRACT_SEED
    )
    return {s.local_date for s in shifts if s.local_date in wanted and s.status in PROTECTED_STATUSES}


def apply_delta(
    repo: ScheduleRepository,
    contract_id: int,
    delta: ScheduleDelta,
    tz_name: str,
    schedule: ScheduleConfig,
) -> UpdateResult:
    """
    Persist a delta for one contract.

    - add: insert seeded shifts; an existing row for the date is skipped, not an error
    - remove: delete only pending seeded shifts
    - update: rewrite UTC start/end on pending seeded shifts only
    Dates where a finalized/cancelled shift blocked a removal or rewrite are
    returned in ``protected_dates`` instead of being silently orphaned.
    """
    result = UpdateResult()

    for day in delta.add_dates:
        occurrence = occurrence_for_date(day, tz_name, schedule)
        if repo.insert_seed_shift(
            contract_id, occurrence.local_date, occurrence.start_utc, occurrence.end_utc, timezone_name=tz_name
        ):
            result.created += 1
        else:
            result.skipped += 1
            logger.debug(f"Contract {contract_id}: seed shift for {day} already exists, skipped")

    protected = _protected_dates(repo, contract_id, delta.remove_dates + delta.update_dates)

    if delta.remove_dates:
        result.deleted = repo.delete_seed_shifts_by_dates(
            contract_id, delta.remove_dates, only_statuses=PENDING_STATUSES
        )

    for day in delta.update_dates:
        occurrence = occurrence_for_date(day, tz_name, schedule)
        if repo.update_seed_shift_times(
            contract_id,
            day,
            occurrence.start_utc,
            occurrence.end_utc,
            only_statuses=PENDING_STATUSES,
            timezone_name=tz_name,
        ):
            result.updated += 1

    result.protected_dates = sorted(protected)
    if result.protected_dates:
        logger.warning(
            f"Contract {contract_id}: {len(result.protected_dates)} finalized/cancelled shifts left untouched "
            f"({', '.join(d.isoformat() for d in result.protected_dates[:5])}"
            f"{'...' if len(result.protected_dates) > 5 else ''})"
        )

    logger.info(
        f"Contract {contract_id} reconciled: {result.created} created, {result.skipped} skipped, "
        f"{result.updated} updated, {result.deleted} deleted"
    )
    return result
