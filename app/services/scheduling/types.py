"""
Internal data types for contract scheduling logic.
decoupled from SQLAlchemy models for cleaner logic.
"""

from dataclasses import dataclass, field
from datetime import date, time, datetime, timedelta
from decimal import Decimal
from enum import Enum, IntEnum
from typing import Optional


class ShiftStatus(str, Enum):
    PLANNED = "PLANNED"
    IN_PROCESS = "IN_PROCESS"
    FINALIZED = "FINALIZED"
    CANCELLED = "CANCELLED"

    @classmethod
    def parse(cls, value: str) -> "ShiftStatus":
        """Accept canonical names plus both legacy label families."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            pass
        status = _LEGACY_SHIFT_STATUSES.get(value.strip().lower())
        if status is None:
            raise ValueError(f"Unknown shift status: {value!r}")
        return status


_LEGACY_SHIFT_STATUSES = {
    "planned": ShiftStatus.PLANNED,
    "in process": ShiftStatus.IN_PROCESS,
    "finalized": ShiftStatus.FINALIZED,
    "cancelled": ShiftStatus.CANCELLED,
    "scheduled": ShiftStatus.PLANNED,
    "unconfirmed": ShiftStatus.IN_PROCESS,
    "completed": ShiftStatus.FINALIZED,
}

# Reconciliation may rewrite or delete these
PENDING_STATUSES = frozenset({ShiftStatus.PLANNED, ShiftStatus.IN_PROCESS})
# Reconciliation never touches these
PROTECTED_STATUSES = frozenset({ShiftStatus.FINALIZED, ShiftStatus.CANCELLED})
# Included in hours/earnings
COUNTED_STATUSES = frozenset({ShiftStatus.PLANNED, ShiftStatus.IN_PROCESS, ShiftStatus.FINALIZED})


class ShiftSource(str, Enum):
    CONTRACT_SEED = "CONTRACT_SEED"
    MANUAL = "MANUAL"


class ContractStatus(str, Enum):
    PLANNED = "PLANNED"
    ACTIVE = "ACTIVE"
    COMPLETED = "COMPLETED"
    ARCHIVED = "ARCHIVED"

    @classmethod
    def parse(cls, value: str) -> "ContractStatus":
        if isinstance(value, cls):
            return value
        normalised = value.strip().upper()
        if normalised == "UNCONFIRMED":
            return cls.PLANNED
        if normalised == "ARCHIVE":
            return cls.ARCHIVED
        return cls(normalised)


CONTRACT_STATUS_TRANSITIONS: dict[ContractStatus, frozenset[ContractStatus]] = {
    ContractStatus.PLANNED: frozenset({ContractStatus.ACTIVE, ContractStatus.ARCHIVED}),
    ContractStatus.ACTIVE: frozenset({ContractStatus.COMPLETED, ContractStatus.ARCHIVED}),
    ContractStatus.COMPLETED: frozenset({ContractStatus.ARCHIVED}),
    ContractStatus.ARCHIVED: frozenset(),
}


class Weekday(IntEnum):
    """0 = Sunday, matching the stored weekday index."""
    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date) -> "Weekday":
        # date.weekday() is Monday=0..Sunday=6
        return cls((day.weekday() + 1) % 7)


@dataclass(frozen=True)
class DateRange:
    """Inclusive calendar date range."""
    start: date
    end: date

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    def days(self) -> list[date]:
        count = (self.end - self.start).days + 1
        return [self.start + timedelta(days=i) for i in range(max(count, 0))]

    @property
    def total_days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True)
class ScheduleDay:
    """Resolved schedule for one weekday. Times are kept even when disabled."""
    enabled: bool
    start: time
    end: time


@dataclass(frozen=True)
class ScheduleConfig:
    """
    Closed weekly recurrence: exactly one ScheduleDay per Weekday.

    Built once at the boundary (see ``from_overrides`` / ``from_rows``) so the
    generator and reconciliation never deal with missing keys.
    """
    default_start: time
    default_end: time
    days: dict[Weekday, ScheduleDay]

    def __post_init__(self):
        missing = set(Weekday) - set(self.days)
        if missing:
            raise ValueError(f"ScheduleConfig is missing weekdays: {sorted(missing)}")

    def day(self, weekday: int) -> ScheduleDay:
        return self.days[Weekday(weekday)]

    @property
    def has_enabled_day(self) -> bool:
        return any(d.enabled for d in self.days.values())

    @classmethod
    def from_overrides(
        cls,
        default_start: time,
        default_end: time,
        overrides: dict[int, tuple[bool, Optional[time], Optional[time]]],
    ) -> "ScheduleConfig":
        """Missing weekdays are disabled; missing per-day times fall back to the defaults."""
        days = {}
        for weekday in Weekday:
            enabled, start, end = overrides.get(int(weekday), (False, None, None))
            days[weekday] = ScheduleDay(
                enabled=enabled,
                start=start or default_start,
                end=end or default_end,
            )
        return cls(default_start=default_start, default_end=default_end, days=days)

    @classmethod
    def from_rows(
        cls,
        rows: list["WeeklyScheduleDay"],
        default_start: time,
        default_end: time,
    ) -> "ScheduleConfig":
        """Rebuild a config from stored rows; absent rows are disabled defaults."""
        overrides = {r.weekday: (r.enabled, r.start_local, r.end_local) for r in rows}
        return cls.from_overrides(default_start, default_end, overrides)


@dataclass(frozen=True)
class WeeklyScheduleDay:
    weekday: int  # 0-6, Sunday first
    enabled: bool
    start_local: time
    end_local: time


@dataclass(frozen=True)
class Occurrence:
    """One concrete shift produced by expanding the weekly recurrence."""
    local_date: date
    start_utc: datetime
    end_utc: datetime

    @property
    def duration_hours(self) -> float:
        return (self.end_utc - self.start_utc).total_seconds() / 3600


@dataclass
class Contract:
    id: int
    user_id: str
    name: str
    facility: str
    start_date: date
    end_date: date
    base_rate: Decimal
    timezone: str
    status: ContractStatus = ContractStatus.PLANNED
    ot_rate: Optional[Decimal] = None
    hours_per_week: Optional[Decimal] = None

    @property
    def date_range(self) -> DateRange:
        return DateRange(self.start_date, self.end_date)


@dataclass
class Shift:
    """A persisted shift (seeded or manual)."""
    id: int
    user_id: str
    contract_id: Optional[int]
    start_utc: datetime
    end_utc: datetime
    local_date: date
    source: ShiftSource
    status: ShiftStatus
    # zone the wall-clock times were entered in
    timezone: str


@dataclass
class ScheduleDelta:
    """Dates to add, remove and rewrite when a contract's range or schedule changes."""
    add_dates: list[date] = field(default_factory=list)
    remove_dates: list[date] = field(default_factory=list)
    update_dates: list[date] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (self.add_dates or self.remove_dates or self.update_dates)


@dataclass
class SeedResult:
    contract_id: int
    total_days: int
    enabled_days: int
    created: int
    skipped: int


@dataclass
class UpdateResult:
    created: int = 0
    skipped: int = 0
    updated: int = 0
    deleted: int = 0
    # dates where a finalized/cancelled shift blocked a removal or rewrite
    protected_dates: list[date] = field(default_factory=list)
