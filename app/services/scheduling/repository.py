"""
Repository interface consumed by the scheduling core.

The core only depends on this protocol; app.db.repository provides the
SQLAlchemy implementation. Components receive a repository as a parameter
rather than reaching for a module-level session.
"""

from datetime import date, datetime, time
from decimal import Decimal
from typing import Iterable, Optional, Protocol

from .types import (
    Contract,
    ContractStatus,
    PENDING_STATUSES,
    Shift,
    ShiftSource,
    ShiftStatus,
    WeeklyScheduleDay,
)


class ScheduleRepository(Protocol):

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        ...

    def list_contracts(self, user_id: str) -> list[Contract]:
        ...

    def list_contract_ids(self) -> list[int]:
        ...

    def list_schedule_days(self, contract_id: int) -> list[WeeklyScheduleDay]:
        ...

    def upsert_schedule_day(
        self,
        contract_id: int,
        weekday: int,
        enabled: bool,
        start_local: time,
        end_local: time,
    ) -> None:
        ...

    def get_shifts_for_contract_in_range(
        self,
        contract_id: int,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        source: Optional[ShiftSource] = None,
    ) -> list[Shift]:
        ...

    def insert_seed_shift(
        self,
        contract_id: int,
        local_date: date,
        start_utc: datetime,
        end_utc: datetime,
        timezone_name: Optional[str] = None,
    ) -> bool:
        """Insert a CONTRACT_SEED shift. Returns False (no error) if one already exists for the date."""
        ...

    def delete_seed_shifts_by_dates(
        self,
        contract_id: int,
        dates: Iterable[date],
        only_statuses: frozenset[ShiftStatus] = PENDING_STATUSES,
    ) -> int:
        ...

    def update_seed_shift_times(
        self,
        contract_id: int,
        local_date: date,
        start_utc: datetime,
        end_utc: datetime,
        only_statuses: frozenset[ShiftStatus] = PENDING_STATUSES,
        timezone_name: Optional[str] = None,
    ) -> bool:
        ...

    def get_all_shifts_for_user(self, user_id: str) -> list[Shift]:
        ...

    def get_shifts_in_date_range(self, user_id: str, from_date: date, to_date: date) -> list[Shift]:
        ...

    # Contract and manual shift management, used by the service layer

    def create_contract(
        self,
        user_id: str,
        name: str,
        facility: str,
        start_date: date,
        end_date: date,
        base_rate: Decimal,
        timezone_name: str,
        ot_rate: Optional[Decimal] = None,
        hours_per_week: Optional[Decimal] = None,
        status: ContractStatus = ContractStatus.PLANNED,
    ) -> Contract:
        ...

    def update_contract(self, contract_id: int, **fields) -> Optional[Contract]:
        ...

    def delete_contract(self, contract_id: int) -> bool:
        ...

    def get_shift(self, shift_id: int) -> Optional[Shift]:
        ...

    def create_shift(
        self,
        user_id: str,
        contract_id: Optional[int],
        start_utc: datetime,
        end_utc: datetime,
        local_date: date,
        status: ShiftStatus = ShiftStatus.IN_PROCESS,
        source: ShiftSource = ShiftSource.MANUAL,
        facility: Optional[str] = None,
        timezone_name: Optional[str] = None,
    ) -> Shift:
        ...

    def update_shift(self, shift_id: int, **fields) -> Optional[Shift]:
        ...

    def delete_shift(self, shift_id: int) -> bool:
        ...
