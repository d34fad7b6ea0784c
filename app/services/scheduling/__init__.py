"""
Contract scheduling package.

Usage:
    from datetime import date, time
    from app.services.scheduling import ScheduleConfig, generate_shift_dates

    config = ScheduleConfig.from_overrides(time(7), time(19), {1: (True, None, None)})
    occurrences = generate_shift_dates(date(2025, 9, 1), date(2025, 9, 7), "America/Chicago", config)

    # On contract edits, diff the old and new generation and apply it
    from app.services.scheduling import compute_delta, apply_delta

    delta = compute_delta(old_range, old_schedule, new_range, new_schedule)
    result = apply_delta(repo, contract_id, delta, "America/Chicago", new_schedule)

Everything here is pure except seed_shifts/apply_delta, which take a
ScheduleRepository.
"""

from .types import (
    ShiftStatus,
    ShiftSource,
    ContractStatus,
    Weekday,
    DateRange,
    ScheduleDay,
    ScheduleConfig,
    WeeklyScheduleDay,
    Occurrence,
    Contract,
    Shift,
    ScheduleDelta,
    SeedResult,
    UpdateResult,
    PENDING_STATUSES,
    PROTECTED_STATUSES,
    COUNTED_STATUSES,
)
from .local_time import (
    week_start_sunday,
    add_days,
    minutes_between_local,
    in_range,
)
from .timezones import convert_local_to_utc, convert_utc_to_local
from .generator import generate_shift_dates
from .reconciliation import compute_delta, apply_delta
from .repository import ScheduleRepository
from .seeding import seed_shifts

__all__ = [
    # Types
    "ShiftStatus",
    "ShiftSource",
    "ContractStatus",
    "Weekday",
    "DateRange",
    "ScheduleDay",
    "ScheduleConfig",
    "WeeklyScheduleDay",
    "Occurrence",
    "Contract",
    "Shift",
    "ScheduleDelta",
    "SeedResult",
    "UpdateResult",
    "PENDING_STATUSES",
    "PROTECTED_STATUSES",
    "COUNTED_STATUSES",
    "ScheduleRepository",
    # Time utilities
    "week_start_sunday",
    "add_days",
    "minutes_between_local",
    "in_range",
    "convert_local_to_utc",
    "convert_utc_to_local",
    # Main entry points
    "generate_shift_dates",
    "compute_delta",
    "apply_delta",
    "seed_shifts",
]
