"""
Payroll and dashboard aggregation.

Usage:
    from datetime import date
    from app.services.payroll import PayrollContract, PayrollShift, period_summary

    summary = period_summary(date(2025, 9, 1), date(2025, 9, 30), shifts, {1: PayrollContract(1, Decimal("45.00"))})
"""

from .aggregator import (
    PayrollShift,
    PayrollContract,
    WeekSegment,
    WeeklyTotal,
    PeriodSummary,
    to_payroll_shift,
    split_shift_by_local_week,
    weekly_earnings_for_contract,
    period_summary,
    summarise_shifts,
)
from .dashboard import (
    DashboardSummary,
    UpcomingShift,
    get_this_week,
    get_next_week,
    get_this_month,
    compute_summary,
    get_upcoming,
)

__all__ = [
    "PayrollShift",
    "PayrollContract",
    "WeekSegment",
    "WeeklyTotal",
    "PeriodSummary",
    "to_payroll_shift",
    "split_shift_by_local_week",
    "weekly_earnings_for_contract",
    "period_summary",
    "summarise_shifts",
    "DashboardSummary",
    "UpcomingShift",
    "get_this_week",
    "get_next_week",
    "get_this_month",
    "compute_summary",
    "get_upcoming",
]
