"""
Seeding - materialise generator output as CONTRACT_SEED shift rows.
"""

import logging

from app.core.exceptions import ValidationError

from .generator import generate_for_range
from .repository import ScheduleRepository
from .types import DateRange, ScheduleConfig, SeedResult


logger = logging.getLogger(__name__)


def seed_shifts(
    repo: ScheduleRepository,
    contract_id: int,
    date_range: DateRange,
    tz_name: str,
    schedule: ScheduleConfig,
) -> SeedResult:
    """
    Insert one seeded shift per generated occurrence.

    Idempotent: dates that already have a seeded row count as skipped, so
    re-running a seed (or racing another one) never creates duplicates.

    Raises:
        ValidationError: If no weekday is enabled
    """
    if not schedule.has_enabled_day:
        raise ValidationError(
            "Schedule validation failed",
            errors=["At least one weekday must be enabled when seedShifts is true"],
        )

    occurrences = generate_for_range(date_range, tz_name, schedule)

    created = 0
    skipped = 0
    for occurrence in occurrences:
        inserted = repo.insert_seed_shift(
            contract_id,
            occurrence.local_date,
            occurrence.start_utc,
            occurrence.end_utc,
            timezone_name=tz_name,
        )
        if inserted:
            created += 1
        else:
            skipped += 1

    logger.info(f"Contract {contract_id}: shifts seeded, {created} created, {skipped} skipped")

    return SeedResult(
        contract_id=contract_id,
        total_days=date_range.total_days,
        enabled_days=len(occurrences),
        created=created,
        skipped=skipped,
    )
