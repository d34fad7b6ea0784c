from pydantic import BeforeValidator, Field
from datetime import date
from decimal import Decimal
from typing import Annotated, Any, Optional

from app.schemas.common import CamelModel, HHMMTime
from app.services.contracts.validation import DayInput, ScheduleInput
from app.services.scheduling.types import ContractStatus


class ScheduleDayIn(CamelModel):
    enabled: bool = False
    start: Optional[str] = None
    end: Optional[str] = None


class ScheduleConfigIn(CamelModel):
    # HH:mm strings are checked by the contract service so errors come back as a list
    default_start: str = "07:00"
    default_end: str = "19:00"
    days: dict[str, ScheduleDayIn] = Field(default_factory=dict)

    def to_input(self) -> ScheduleInput:
        return ScheduleInput(
            default_start=self.default_start,
            default_end=self.default_end,
            days={k: DayInput(enabled=d.enabled, start=d.start, end=d.end) for k, d in self.days.items()},
        )


class ContractBase(CamelModel):
    name: str = Field(min_length=1)
    facility: str = ""
    start_date: date
    end_date: date
    base_rate: Decimal = Field(ge=0)
    ot_rate: Optional[Decimal] = Field(default=None, ge=0)
    hours_per_week: Optional[Decimal] = Field(default=None, ge=0)
    timezone: Optional[str] = None


class ContractCreate(ContractBase):
    schedule: ScheduleConfigIn = Field(default_factory=ScheduleConfigIn)
    seed_shifts: bool = False


class ContractUpdate(CamelModel):
    name: Optional[str] = None
    facility: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    base_rate: Optional[Decimal] = Field(default=None, ge=0)
    ot_rate: Optional[Decimal] = Field(default=None, ge=0)
    hours_per_week: Optional[Decimal] = Field(default=None, ge=0)
    timezone: Optional[str] = None
    schedule: Optional[ScheduleConfigIn] = None
    seed_shifts: bool = False

    def changes(self) -> dict[str, Any]:
        """Contract fields the client actually sent. Only the rate extras may be cleared with null."""
        data = self.model_dump(exclude_unset=True, exclude={"schedule", "seed_shifts"})
        return {k: v for k, v in data.items() if v is not None or k in ("ot_rate", "hours_per_week")}


class ContractStatusUpdate(CamelModel):
    status: Annotated[
        ContractStatus,
        BeforeValidator(lambda v: ContractStatus.parse(v) if isinstance(v, str) else v),
    ]


class ContractResponse(CamelModel):
    id: int
    user_id: str
    name: str
    facility: str
    start_date: date
    end_date: date
    base_rate: Decimal
    ot_rate: Optional[Decimal]
    hours_per_week: Optional[Decimal]
    status: ContractStatus
    timezone: str


class SeedResultResponse(CamelModel):
    contract_id: int
    total_days: int
    enabled_days: int
    created: int
    skipped: int


class UpdateResultResponse(CamelModel):
    created: int
    skipped: int
    updated: int
    deleted: int
    protected_dates: list[date]


class ContractCreateResponse(CamelModel):
    contract: ContractResponse
    seed_result: Optional[SeedResultResponse] = None


class ContractUpdateResponse(CamelModel):
    contract: ContractResponse
    update_result: UpdateResultResponse


class SchedulePreviewResponse(CamelModel):
    weekday: int
    enabled: bool
    start: HHMMTime
    end: HHMMTime
    timezone: str
