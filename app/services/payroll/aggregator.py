"""
Payroll aggregation over local wall-clock shift rows.

Weeks run Sunday to Saturday. Each contract's hours are totalled per week and
split 40h base / remainder overtime. An overnight shift whose two calendar
days fall in different weeks is split at midnight between them. Rounding
(hours to 0.1, earnings to 0.01) happens once, at the end of period_summary.
"""

import logging
from dataclasses import dataclass
from datetime import date, time, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Mapping, Optional

from app.services.scheduling.local_time import (
    minutes_between_local,
    minutes_until_midnight,
    minute_of_day,
    week_start_sunday,
)
from app.services.scheduling.timezones import convert_utc_to_local
from app.services.scheduling.types import COUNTED_STATUSES, Contract, Shift, ShiftStatus


logger = logging.getLogger(__name__)

OVERTIME_THRESHOLD_MINUTES = 40 * 60

HOURS_QUANTUM = Decimal("0.1")
MONEY_QUANTUM = Decimal("0.01")
MINUTES_PER_HOUR = Decimal(60)


@dataclass(frozen=True)
class PayrollShift:
    """A shift projected onto the local wall clock of its contract."""
    local_date: date
    start_time: time
    end_time: time
    contract_id: Optional[int]
    status: ShiftStatus
    # set for a shift ending at the same wall time the next day (24h)
    ends_next_day: bool = False

    @property
    def overnight(self) -> bool:
        return self.end_time < self.start_time or self.ends_next_day

    @property
    def minutes(self) -> int:
        return minutes_between_local(self.start_time, self.end_time, next_day=self.ends_next_day)


@dataclass(frozen=True)
class PayrollContract:
    id: int
    base_rate: Decimal
    ot_rate: Optional[Decimal] = None

    @property
    def effective_ot_rate(self) -> Decimal:
        return self.ot_rate if self.ot_rate is not None else self.base_rate

    @classmethod
    def from_contract(cls, contract: Contract) -> "PayrollContract":
        return cls(id=contract.id, base_rate=contract.base_rate, ot_rate=contract.ot_rate)


@dataclass(frozen=True)
class WeekSegment:
    week_start: date
    minutes: int


@dataclass(frozen=True)
class WeeklyTotal:
    """Unrounded totals for one contract (or the contractless bucket) in one week."""
    minutes: int
    hours: Decimal
    earnings: Decimal


@dataclass(frozen=True)
class PeriodSummary:
    hours: Decimal
    earnings: Decimal


def to_payroll_shift(shift: Shift, tz_name: str) -> PayrollShift:
    """
    Project a stored shift onto local wall-clock times.

    local_date comes from the stored row, never from the UTC instant.
    """
    _, start_local = convert_utc_to_local(shift.start_utc, tz_name)
    end_date, end_local = convert_utc_to_local(shift.end_utc, tz_name)
    ends_next_day = end_date > shift.local_date and end_local >= start_local
    return PayrollShift(
        local_date=shift.local_date,
        start_time=start_local,
        end_time=end_local,
        contract_id=shift.contract_id,
        status=shift.status,
        ends_next_day=ends_next_day,
    )


def split_shift_by_local_week(shift: PayrollShift) -> list[WeekSegment]:
    """
    Week segments for a shift.

    A daytime shift, or an overnight one that stays inside its week, is one
    segment. An overnight shift ending in the next Sunday-week is cut at
    midnight.
    """
    shift_week = week_start_sunday(shift.local_date)

    if not shift.overnight:
        return [WeekSegment(shift_week, shift.minutes)]

    next_week = week_start_sunday(shift.local_date + timedelta(days=1))
    if next_week == shift_week:
        return [WeekSegment(shift_week, shift.minutes)]

    return [
        WeekSegment(shift_week, minutes_until_midnight(shift.start_time)),
        WeekSegment(next_week, minute_of_day(shift.end_time)),
    ]


def _minutes_in_week(week_start: date, shifts: Iterable[PayrollShift], contract_id: Optional[int]) -> int:
    total = 0
    for shift in shifts:
        if shift.contract_id != contract_id or shift.status not in COUNTED_STATUSES:
            continue
        for segment in split_shift_by_local_week(shift):
            if segment.week_start == week_start:
                total += segment.minutes
    return total


def earnings_for_minutes(minutes: int, contract: PayrollContract) -> Decimal:
    """First 40 hours at the base rate, the rest at the overtime rate (base if unset)."""
    base_minutes = min(minutes, OVERTIME_THRESHOLD_MINUTES)
    ot_minutes = max(minutes - OVERTIME_THRESHOLD_MINUTES, 0)

    earnings = Decimal(base_minutes) * contract.base_rate / MINUTES_PER_HOUR
    if ot_minutes:
        earnings += Decimal(ot_minutes) * contract.effective_ot_rate / MINUTES_PER_HOUR
    return earnings


def weekly_earnings_for_contract(
    week_start: date,
    shifts: Iterable[PayrollShift],
    contract: Optional[PayrollContract],
) -> WeeklyTotal:
    """
    One contract's hours and earnings for the Sunday-week starting week_start.

    contract=None totals the contractless shifts, which earn nothing.
    Results are unrounded.
    """
    contract_id = contract.id if contract is not None else None
    minutes = _minutes_in_week(week_start, shifts, contract_id)
    hours = Decimal(minutes) / MINUTES_PER_HOUR

    if contract is None:
        return WeeklyTotal(minutes=minutes, hours=hours, earnings=Decimal(0))

    return WeeklyTotal(minutes=minutes, hours=hours, earnings=earnings_for_minutes(minutes, contract))


def weeks_covering(period_start: date, period_end: date) -> list[date]:
    """Sunday starts of the consecutive weeks covering [period_start, period_end]."""
    weeks = []
    current = week_start_sunday(period_start)
    while current <= period_end:
        weeks.append(current)
        current += timedelta(days=7)
    return weeks


def round_hours(hours: Decimal) -> Decimal:
    return hours.quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def round_money(amount: Decimal) -> Decimal:
    return amount.quantize(MONEY_QUANTUM, rounding=ROUND_HALF_UP)


def period_totals(
    period_start: date,
    period_end: date,
    shifts: Iterable[PayrollShift],
    contracts_by_id: Mapping[int, PayrollContract],
) -> tuple[Decimal, Decimal]:
    """Unrounded (hours, earnings) over the whole weeks covering the period."""
    counted = [s for s in shifts if s.status in COUNTED_STATUSES]
    referenced = sorted({s.contract_id for s in counted if s.contract_id is not None})

    unknown = [cid for cid in referenced if cid not in contracts_by_id]
    if unknown:
        logger.warning(f"Shifts reference unknown contracts {unknown}; counting hours without earnings")

    total_minutes = 0
    total_earnings = Decimal(0)

    for week_start in weeks_covering(period_start, period_end):
        for contract_id in referenced:
            contract = contracts_by_id.get(contract_id)
            if contract is None:
                total_minutes += _minutes_in_week(week_start, counted, contract_id)
                continue
            week = weekly_earnings_for_contract(week_start, counted, contract)
            total_minutes += week.minutes
            total_earnings += week.earnings

        total_minutes += weekly_earnings_for_contract(week_start, counted, None).minutes

    return Decimal(total_minutes) / MINUTES_PER_HOUR, total_earnings


def period_summary(
    period_start: date,
    period_end: date,
    shifts: Iterable[PayrollShift],
    contracts_by_id: Mapping[int, PayrollContract],
) -> PeriodSummary:
    """
    Hours and earnings for a period, built from whole Sunday-weeks.

    The period is covered by the weeks starting at week_start_sunday(period_start)
    up to the week containing period_end; overtime is always judged on the full
    week. Totals are rounded once here, not per week.
    """
    hours, earnings = period_totals(period_start, period_end, list(shifts), contracts_by_id)
    return PeriodSummary(hours=round_hours(hours), earnings=round_money(earnings))


def summarise_shifts(
    period_start: date,
    period_end: date,
    shifts: Iterable[Shift],
    contracts: Iterable[Contract],
) -> PeriodSummary:
    """period_summary over stored shifts, each projected in the zone it was entered in."""
    payroll_shifts = [to_payroll_shift(s, s.timezone) for s in shifts]
    contracts_by_id = {c.id: PayrollContract.from_contract(c) for c in contracts}
    return period_summary(period_start, period_end, payroll_shifts, contracts_by_id)
