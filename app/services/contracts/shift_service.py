"""
Manual shift entry and calendar range queries.

Callers give a local date plus HH:mm start/end; UTC instants are always derived
through the timezone layer. An end at or before the start rolls onto the next
day, so 19:00-07:00 is overnight and 07:00-07:00 is a 24h shift.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime, time
from typing import Any, Mapping, Optional

from app.core.config import settings
from app.core.exceptions import NotFoundError, OutOfRangeError, ValidationError
from app.services.scheduling.repository import ScheduleRepository
from app.services.scheduling.timezones import convert_utc_to_local, get_zone, shift_window_utc
from app.services.scheduling.types import Contract, Shift, ShiftSource, ShiftStatus

from .validation import ensure_query_range


logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset({"contract_id", "local_date", "start", "end", "timezone", "status", "facility"})


@dataclass(frozen=True)
class LocalShift:
    """A stored shift with wall-clock times in the zone it was entered in."""
    id: int
    contract_id: Optional[int]
    local_date: date
    start: time
    end: time
    start_utc: datetime
    end_utc: datetime
    timezone: str
    overnight: bool
    source: ShiftSource
    status: ShiftStatus


def _contract_in_bounds(repo: ScheduleRepository, contract_id: int, shift_date: date) -> Contract:
    contract = repo.get_contract(contract_id)
    if contract is None:
        raise NotFoundError("Contract", contract_id)
    if shift_date not in contract.date_range:
        raise OutOfRangeError(shift_date, contract.start_date, contract.end_date)
    return contract


def _timezone_for(repo: ScheduleRepository, contract_id: Optional[int], explicit: Optional[str] = None) -> str:
    if explicit:
        get_zone(explicit)
        return explicit
    if contract_id is not None:
        contract = repo.get_contract(contract_id)
        if contract is not None:
            return contract.timezone
    return settings.DEFAULT_TIMEZONE


def to_local_shift(shift: Shift) -> LocalShift:
    _, start = convert_utc_to_local(shift.start_utc, shift.timezone)
    end_date, end = convert_utc_to_local(shift.end_utc, shift.timezone)
    return LocalShift(
        id=shift.id,
        contract_id=shift.contract_id,
        local_date=shift.local_date,
        start=start,
        end=end,
        start_utc=shift.start_utc,
        end_utc=shift.end_utc,
        timezone=shift.timezone,
        overnight=end_date > shift.local_date,
        source=shift.source,
        status=shift.status,
    )


def get_shift(repo: ScheduleRepository, shift_id: int, user_id: Optional[str] = None) -> Shift:
    """Stored shift; NotFoundError when missing or owned by another user."""
    shift = repo.get_shift(shift_id)
    if shift is None or (user_id is not None and shift.user_id != user_id):
        raise NotFoundError("Shift", shift_id)
    return shift


def create_shift(
    repo: ScheduleRepository,
    user_id: str,
    local_date: date,
    start: time,
    end: time,
    contract_id: Optional[int] = None,
    timezone_name: Optional[str] = None,
    status: ShiftStatus = ShiftStatus.IN_PROCESS,
    facility: Optional[str] = None,
) -> LocalShift:
    """
    Create a manual shift.

    Raises:
        NotFoundError: contract_id given but unknown
        OutOfRangeError: local_date outside the contract's dates
        ValidationError: Unknown timezone
    """
    if contract_id is not None:
        contract = _contract_in_bounds(repo, contract_id, local_date)
        facility = facility or contract.facility or None

    tz_name = _timezone_for(repo, contract_id, timezone_name)
    start_utc, end_utc = shift_window_utc(local_date, start, end, tz_name)

    shift = repo.create_shift(
        user_id=user_id,
        contract_id=contract_id,
        start_utc=start_utc,
        end_utc=end_utc,
        local_date=local_date,
        status=status,
        source=ShiftSource.MANUAL,
        facility=facility,
        timezone_name=tz_name,
    )
    logger.info(f"Manual shift {shift.id} created for user {user_id} on {local_date}")
    return to_local_shift(shift)


def update_shift(repo: ScheduleRepository, shift_id: int, changes: Mapping[str, Any]) -> LocalShift:
    """
    Apply a partial edit to a shift.

    `changes` holds only the fields the caller set. Missing start/end keep the
    shift's current wall-clock times; any change to date, times or timezone
    recomputes both UTC instants. Seeded shifts stay anchored to their
    contract and date.

    Raises:
        NotFoundError: Unknown shift, or unknown target contract
        OutOfRangeError: Resulting date outside the target contract's dates
        ValidationError: Unknown field, or a seeded shift moved off its contract date
    """
    existing = get_shift(repo, shift_id)

    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValidationError("Shift validation failed", errors=[f"Unknown field: {f}" for f in sorted(unknown)])

    if existing.source == ShiftSource.CONTRACT_SEED:
        moved = [
            field for field, current in (("local_date", existing.local_date), ("contract_id", existing.contract_id))
            if field in changes and changes[field] is not None and changes[field] != current
        ]
        if moved:
            raise ValidationError(
                "Shift validation failed",
                errors=[f"Seeded shifts cannot change {f}; edit the contract schedule instead" for f in moved],
            )

    contract_id = changes.get("contract_id", existing.contract_id)
    local_date = changes.get("local_date") or existing.local_date

    if contract_id is not None and ("contract_id" in changes or "local_date" in changes):
        _contract_in_bounds(repo, contract_id, local_date)

    fields = {}
    if "contract_id" in changes:
        fields["contract_id"] = contract_id
    if changes.get("status") is not None:
        fields["status"] = changes["status"]
    if "facility" in changes:
        fields["facility"] = changes["facility"]

    if changes.get("timezone"):
        tz_name = _timezone_for(repo, contract_id, changes["timezone"])
    elif "contract_id" in changes and contract_id != existing.contract_id:
        tz_name = _timezone_for(repo, contract_id)
    else:
        tz_name = existing.timezone

    if tz_name != existing.timezone or any(changes.get(k) is not None for k in ("local_date", "start", "end")):
        current = to_local_shift(existing)
        start = changes.get("start") or current.start
        end = changes.get("end") or current.end
        start_utc, end_utc = shift_window_utc(local_date, start, end, tz_name)
        fields.update(start_utc=start_utc, end_utc=end_utc, local_date=local_date, timezone=tz_name)

    shift = repo.update_shift(shift_id, **fields) if fields else existing
    return to_local_shift(shift)


def delete_shift(repo: ScheduleRepository, shift_id: int, user_id: Optional[str] = None) -> None:
    get_shift(repo, shift_id, user_id)
    repo.delete_shift(shift_id)


def list_shifts_in_range(
    repo: ScheduleRepository,
    user_id: str,
    from_date: date,
    to_date: date,
) -> list[LocalShift]:
    """
    Calendar query over local dates, each shift rendered in the zone it was entered in.

    Raises:
        ValidationError: to_date before from_date, or range wider than MAX_CALENDAR_RANGE_DAYS
    """
    ensure_query_range(from_date, to_date)
    return [to_local_shift(s) for s in repo.get_shifts_in_date_range(user_id, from_date, to_date)]
