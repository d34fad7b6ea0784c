"""
Dashboard summaries: this week / next week / this month earnings and the
upcoming shift list.
"""

import calendar
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone
from decimal import Decimal
from typing import Optional

from app.core.config import settings
from app.services.scheduling.local_time import week_start_sunday
from app.services.scheduling.repository import ScheduleRepository
from app.services.scheduling.timezones import convert_utc_to_local
from app.services.scheduling.types import Contract, ShiftStatus

from .aggregator import PeriodSummary, summarise_shifts


@dataclass(frozen=True)
class Period:
    start: date
    end: date


@dataclass(frozen=True)
class DashboardSummary:
    this_week: PeriodSummary
    next_week: PeriodSummary
    this_month: PeriodSummary


@dataclass(frozen=True)
class ContractBrief:
    id: int
    name: str
    facility: str
    base_rate: Decimal


@dataclass(frozen=True)
class UpcomingShift:
    id: int
    local_date: date
    start: time
    end: time
    status: ShiftStatus
    overnight: bool
    contract: Optional[ContractBrief] = None


def get_this_week(anchor: date) -> Period:
    """Sunday to Saturday week containing anchor."""
    start = week_start_sunday(anchor)
    return Period(start, start + timedelta(days=6))


def get_next_week(anchor: date) -> Period:
    start = get_this_week(anchor).end + timedelta(days=1)
    return Period(start, start + timedelta(days=6))


def get_this_month(anchor: date) -> Period:
    last_day = calendar.monthrange(anchor.year, anchor.month)[1]
    return Period(anchor.replace(day=1), anchor.replace(day=last_day))


def compute_summary(repo: ScheduleRepository, user_id: str, anchor: date) -> DashboardSummary:
    shifts = repo.get_all_shifts_for_user(user_id)
    contracts = repo.list_contracts(user_id)

    def _summary(period: Period) -> PeriodSummary:
        return summarise_shifts(period.start, period.end, shifts, contracts)

    return DashboardSummary(
        this_week=_summary(get_this_week(anchor)),
        next_week=_summary(get_next_week(anchor)),
        this_month=_summary(get_this_month(anchor)),
    )


def _brief(contract: Contract) -> ContractBrief:
    return ContractBrief(
        id=contract.id,
        name=contract.name,
        facility=contract.facility,
        base_rate=contract.base_rate,
    )


def get_upcoming(
    repo: ScheduleRepository,
    user_id: str,
    now: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> list[UpcomingShift]:
    """Shifts starting after `now`, soonest first, with wall-clock times and contract details."""
    now = now or datetime.now(timezone.utc)
    limit = limit or settings.UPCOMING_SHIFTS_LIMIT

    contracts_by_id = {c.id: c for c in repo.list_contracts(user_id)}

    future = sorted(
        (s for s in repo.get_all_shifts_for_user(user_id) if s.start_utc > now),
        key=lambda s: s.start_utc,
    )[:limit]

    upcoming = []
    for shift in future:
        contract = contracts_by_id.get(shift.contract_id)
        _, start_local = convert_utc_to_local(shift.start_utc, shift.timezone)
        end_date, end_local = convert_utc_to_local(shift.end_utc, shift.timezone)

        upcoming.append(UpcomingShift(
            id=shift.id,
            local_date=shift.local_date,
            start=start_local,
            end=end_local,
            status=shift.status,
            overnight=end_date > shift.local_date,
            contract=_brief(contract) if contract else None,
        ))

    return upcoming
