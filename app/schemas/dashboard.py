from datetime import date
from decimal import Decimal
from typing import Optional

from app.schemas.common import CamelModel, HHMMTime
from app.services.scheduling.types import ShiftStatus


class PeriodSummaryResponse(CamelModel):
    hours: Decimal
    earnings: Decimal


class DashboardSummaryResponse(CamelModel):
    this_week: PeriodSummaryResponse
    next_week: PeriodSummaryResponse
    this_month: PeriodSummaryResponse


class ContractBriefResponse(CamelModel):
    id: int
    name: str
    facility: str
    base_rate: Decimal


class UpcomingShiftResponse(CamelModel):
    id: int
    local_date: date
    start: HHMMTime
    end: HHMMTime
    status: ShiftStatus
    overnight: bool
    contract: Optional[ContractBriefResponse] = None
