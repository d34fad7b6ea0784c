"""
Contract orchestration: create, edit, status changes and schedule preview.

Validation runs before anything is written. Every write goes through the
repository and nothing here commits; the caller owns the transaction.
"""

import logging
from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Any, Mapping, Optional

from app.core.config import settings
from app.core.exceptions import NotFoundError, ValidationError
from app.services.scheduling.local_time import parse_hhmm
from app.services.scheduling.reconciliation import apply_delta, compute_delta
from app.services.scheduling.repository import ScheduleRepository
from app.services.scheduling.seeding import seed_shifts as seed_contract_shifts
from app.services.scheduling.types import (
    CONTRACT_STATUS_TRANSITIONS,
    Contract,
    ContractStatus,
    DateRange,
    ScheduleConfig,
    SeedResult,
    UpdateResult,
    Weekday,
)

from .validation import (
    ScheduleInput,
    ensure_date_range,
    ensure_schedule,
    ensure_timezone,
    to_schedule_config,
)


logger = logging.getLogger(__name__)

# Fields an edit may change without going through reconciliation
PLAIN_FIELDS = ("name", "facility", "base_rate", "ot_rate", "hours_per_week")


@dataclass
class ContractCreated:
    contract: Contract
    seed_result: Optional[SeedResult] = None


@dataclass
class ContractUpdated:
    contract: Contract
    update_result: UpdateResult


@dataclass(frozen=True)
class SchedulePreview:
    weekday: Weekday
    enabled: bool
    start: time
    end: time
    timezone: str


def _default_times() -> tuple[time, time]:
    return parse_hhmm(settings.DEFAULT_SHIFT_START), parse_hhmm(settings.DEFAULT_SHIFT_END)


def load_schedule(repo: ScheduleRepository, contract_id: int) -> ScheduleConfig:
    """Stored schedule as a closed config; weekdays without a row are disabled defaults."""
    default_start, default_end = _default_times()
    return ScheduleConfig.from_rows(repo.list_schedule_days(contract_id), default_start, default_end)


def save_schedule(repo: ScheduleRepository, contract_id: int, schedule: ScheduleConfig) -> None:
    for weekday in Weekday:
        day = schedule.day(weekday)
        repo.upsert_schedule_day(contract_id, int(weekday), day.enabled, day.start, day.end)


def get_contract(repo: ScheduleRepository, contract_id: int, user_id: Optional[str] = None) -> Contract:
    """Fetch a contract, hiding other users' contracts behind the same 404."""
    contract = repo.get_contract(contract_id)
    if contract is None or (user_id is not None and contract.user_id != user_id):
        raise NotFoundError("Contract", contract_id)
    return contract


def list_contracts(
    repo: ScheduleRepository,
    user_id: str,
    status: Optional[ContractStatus] = None,
) -> list[Contract]:
    contracts = repo.list_contracts(user_id)
    if status is not None:
        contracts = [c for c in contracts if c.status == status]
    return contracts


def create_contract(
    repo: ScheduleRepository,
    user_id: str,
    name: str,
    start_date: date,
    end_date: date,
    base_rate: Decimal,
    schedule: ScheduleInput,
    seed_shifts: bool = False,
    facility: str = "",
    timezone_name: Optional[str] = None,
    ot_rate: Optional[Decimal] = None,
    hours_per_week: Optional[Decimal] = None,
) -> ContractCreated:
    """
    Create a PLANNED contract, store its 7 schedule days and optionally seed shifts.

    Raises:
        ValidationError: Bad schedule, date range or timezone
    """
    timezone_name = timezone_name or settings.DEFAULT_TIMEZONE

    ensure_schedule(schedule, seed_shifts)
    ensure_date_range(start_date, end_date)
    ensure_timezone(timezone_name)
    config = to_schedule_config(schedule)

    contract = repo.create_contract(
        user_id=user_id,
        name=name,
        facility=facility,
        start_date=start_date,
        end_date=end_date,
        base_rate=base_rate,
        timezone_name=timezone_name,
        ot_rate=ot_rate,
        hours_per_week=hours_per_week,
        status=ContractStatus.PLANNED,
    )
    save_schedule(repo, contract.id, config)
    logger.info(f"Contract {contract.id} created for user {user_id}: {start_date} to {end_date}")

    seed_result = None
    if seed_shifts:
        seed_result = seed_contract_shifts(repo, contract.id, contract.date_range, timezone_name, config)

    return ContractCreated(contract=contract, seed_result=seed_result)


def update_contract(
    repo: ScheduleRepository,
    contract_id: int,
    changes: Mapping[str, Any],
    schedule: Optional[ScheduleInput] = None,
    seed_shifts: bool = False,
) -> ContractUpdated:
    """
    Apply an edit and resync the contract's seeded shifts.

    `changes` holds only the fields the caller set (start_date, end_date,
    timezone and the plain fields). When the range, schedule or timezone move,
    the old and new generation are diffed and the delta applied; finalized
    and cancelled shifts are reported, not touched.

    Raises:
        NotFoundError: Unknown contract
        ValidationError: Bad schedule, date range or timezone
    """
    existing = get_contract(repo, contract_id)

    unknown = set(changes) - set(PLAIN_FIELDS) - {"start_date", "end_date", "timezone"}
    if unknown:
        raise ValidationError("Contract validation failed", errors=[f"Unknown field: {f}" for f in sorted(unknown)])

    if schedule is not None:
        ensure_schedule(schedule, seed_shifts)

    new_range = DateRange(
        changes.get("start_date") or existing.start_date,
        changes.get("end_date") or existing.end_date,
    )
    ensure_date_range(new_range.start, new_range.end)

    new_timezone = changes.get("timezone") or existing.timezone
    ensure_timezone(new_timezone)

    old_schedule = load_schedule(repo, contract_id)
    new_schedule = to_schedule_config(schedule) if schedule is not None else old_schedule

    fields = {k: v for k, v in changes.items() if k in PLAIN_FIELDS}
    fields.update(start_date=new_range.start, end_date=new_range.end, timezone=new_timezone)
    contract = repo.update_contract(contract_id, **fields)
    if contract is None:
        raise NotFoundError("Contract", contract_id)

    if schedule is not None:
        save_schedule(repo, contract_id, new_schedule)

    result = UpdateResult()
    resync = (
        schedule is not None
        or new_range != existing.date_range
        or new_timezone != existing.timezone
    )
    if resync:
        delta = compute_delta(
            existing.date_range,
            old_schedule,
            new_range,
            new_schedule,
            old_timezone=existing.timezone,
            new_timezone=new_timezone,
        )
        if not delta.is_empty:
            result = apply_delta(repo, contract_id, delta, new_timezone, new_schedule)

    return ContractUpdated(contract=contract, update_result=result)


def update_contract_status(repo: ScheduleRepository, contract_id: int, status: ContractStatus) -> Contract:
    """
    Move a contract along PLANNED -> ACTIVE -> COMPLETED, or archive it.

    Raises:
        NotFoundError: Unknown contract
        ValidationError: Transition not allowed from the current status
    """
    existing = get_contract(repo, contract_id)

    if status not in CONTRACT_STATUS_TRANSITIONS[existing.status]:
        raise ValidationError(
            f"Invalid status transition from {existing.status.value} to {status.value}"
        )

    contract = repo.update_contract(contract_id, status=status)
    logger.info(f"Contract {contract_id} status {existing.status.value} -> {status.value}")
    return contract


def delete_contract(repo: ScheduleRepository, contract_id: int) -> None:
    """Remove a contract together with its schedule and every shift linked to it."""
    if not repo.delete_contract(contract_id):
        raise NotFoundError("Contract", contract_id)
    logger.info(f"Contract {contract_id} deleted")


def get_schedule_preview(repo: ScheduleRepository, contract_id: int, day: date) -> SchedulePreview:
    """What the contract schedule says for the weekday of `day` (used to prefill manual shifts)."""
    contract = get_contract(repo, contract_id)
    weekday = Weekday.of(day)
    schedule_day = load_schedule(repo, contract_id).day(weekday)
    return SchedulePreview(
        weekday=weekday,
        enabled=schedule_day.enabled,
        start=schedule_day.start,
        end=schedule_day.end,
        timezone=contract.timezone,
    )
