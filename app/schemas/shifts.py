from pydantic import BeforeValidator, Field
from datetime import date, datetime
from typing import Annotated, Optional

from app.schemas.common import CamelModel, HHMMTime, HHMM_REGEX
from app.services.scheduling.types import ShiftSource, ShiftStatus


def _parse_status(value):
    # legacy labels ("Finalized", "completed", ...) are accepted at the boundary only
    return ShiftStatus.parse(value) if isinstance(value, str) else value


StatusIn = Annotated[ShiftStatus, BeforeValidator(_parse_status)]


class ShiftCreate(CamelModel):
    local_date: date
    start: str = Field(pattern=HHMM_REGEX)
    end: str = Field(pattern=HHMM_REGEX)
    contract_id: Optional[int] = None
    timezone: Optional[str] = None
    status: StatusIn = ShiftStatus.IN_PROCESS
    facility: Optional[str] = None


class ShiftUpdate(CamelModel):
    local_date: Optional[date] = None
    start: Optional[str] = Field(default=None, pattern=HHMM_REGEX)
    end: Optional[str] = Field(default=None, pattern=HHMM_REGEX)
    contract_id: Optional[int] = None
    timezone: Optional[str] = None
    status: Optional[StatusIn] = None
    facility: Optional[str] = None


class ShiftResponse(CamelModel):
    id: int
    contract_id: Optional[int]
    local_date: date
    start: HHMMTime
    end: HHMMTime
    start_utc: datetime
    end_utc: datetime
    timezone: str
    overnight: bool
    source: ShiftSource
    status: ShiftStatus
