"""
SQLAlchemy implementation of the scheduling repository.
Fetches rows from the database and converts them to internal types.
"""

from datetime import date, datetime, time, timezone
from decimal import Decimal
from typing import Iterable, Optional

from sqlalchemy import and_, delete, select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.db.models.contracts import Contracts
from app.db.models.contract_schedule_days import ContractScheduleDays
from app.db.models.expenses import Expenses
from app.db.models.shifts import Shifts, SEED_INDEX_WHERE
from app.services.scheduling.types import (
    Contract,
    ContractStatus,
    PENDING_STATUSES,
    Shift,
    ShiftSource,
    ShiftStatus,
    WeeklyScheduleDay,
)


_INSERT_BY_DIALECT = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}

_CONTRACT_UPDATABLE = frozenset({
    "name", "facility", "role", "start_date", "end_date", "base_rate",
    "ot_rate", "hours_per_week", "status", "timezone",
})
_SHIFT_UPDATABLE = frozenset({
    "contract_id", "start_utc", "end_utc", "local_date", "status", "facility", "timezone",
})


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; everything stored is UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_contract(row: Contracts) -> Contract:
    return Contract(
        id=row.id,
        user_id=row.user_id,
        name=row.name,
        facility=row.facility,
        start_date=row.start_date,
        end_date=row.end_date,
        base_rate=Decimal(row.base_rate),
        ot_rate=Decimal(row.ot_rate) if row.ot_rate is not None else None,
        hours_per_week=Decimal(row.hours_per_week) if row.hours_per_week is not None else None,
        status=row.status,
        timezone=row.timezone,
    )


def to_shift(row: Shifts) -> Shift:
    return Shift(
        id=row.id,
        user_id=row.user_id,
        contract_id=row.contract_id,
        start_utc=_as_utc(row.start_utc),
        end_utc=_as_utc(row.end_utc),
        local_date=row.local_date,
        source=row.source,
        status=row.status,
        timezone=row.timezone,
    )


class SqlScheduleRepository:
    """ScheduleRepository over a SQLAlchemy session. Commits are left to the caller."""

    def __init__(self, db: Session):
        self.db = db

    # Contracts

    def _contract_row(self, contract_id: int) -> Optional[Contracts]:
        return self.db.get(Contracts, contract_id)

    def get_contract(self, contract_id: int) -> Optional[Contract]:
        row = self._contract_row(contract_id)
        return to_contract(row) if row else None

    def list_contracts(self, user_id: str) -> list[Contract]:
        stmt = select(Contracts).where(Contracts.user_id == user_id).order_by(Contracts.start_date, Contracts.id)
        return [to_contract(r) for r in self.db.execute(stmt).scalars().all()]

    def list_contract_ids(self) -> list[int]:
        stmt = select(Contracts.id).order_by(Contracts.id)
        return list(self.db.execute(stmt).scalars().all())

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
        row = Contracts(
            user_id=user_id,
            name=name,
            facility=facility,
            start_date=start_date,
            end_date=end_date,
            base_rate=base_rate,
            ot_rate=ot_rate,
            hours_per_week=hours_per_week,
            status=status,
            timezone=timezone_name,
        )
        self.db.add(row)
        self.db.flush()
        return to_contract(row)

    def update_contract(self, contract_id: int, **fields) -> Optional[Contract]:
        row = self._contract_row(contract_id)
        if row is None:
            return None
        for field, value in fields.items():
            if field not in _CONTRACT_UPDATABLE:
                raise ValueError(f"Contract field {field!r} cannot be updated")
            setattr(row, field, value)
        self.db.flush()
        return to_contract(row)

    def delete_contract(self, contract_id: int) -> bool:
        """Delete a contract with its schedule days and shifts."""
        row = self._contract_row(contract_id)
        if row is None:
            return False
        # explicit deletes; SQLite does not enforce ON DELETE CASCADE by default
        self.db.execute(delete(Shifts).where(Shifts.contract_id == contract_id))
        self.db.execute(delete(ContractScheduleDays).where(ContractScheduleDays.contract_id == contract_id))
        self.db.delete(row)
        self.db.flush()
        return True

    # Schedule days

    def list_schedule_days(self, contract_id: int) -> list[WeeklyScheduleDay]:
        stmt = (
            select(ContractScheduleDays)
            .where(ContractScheduleDays.contract_id == contract_id)
            .order_by(ContractScheduleDays.weekday)
        )
        return [
            WeeklyScheduleDay(
                weekday=r.weekday,
                enabled=r.enabled,
                start_local=r.start_local,
                end_local=r.end_local,
            )
            for r in self.db.execute(stmt).scalars().all()
        ]

    def upsert_schedule_day(
        self,
        contract_id: int,
        weekday: int,
        enabled: bool,
        start_local: time,
        end_local: time,
    ) -> None:
        stmt = select(ContractScheduleDays).where(
            and_(
                ContractScheduleDays.contract_id == contract_id,
                ContractScheduleDays.weekday == weekday,
            )
        )
        row = self.db.execute(stmt).scalars().first()
        if row is None:
            row = ContractScheduleDays(contract_id=contract_id, weekday=weekday)
            self.db.add(row)
        row.enabled = enabled
        row.start_local = start_local
        row.end_local = end_local
        self.db.flush()

    # Shifts

    def get_shifts_for_contract_in_range(
        self,
        contract_id: int,
        from_date: Optional[date] = None,
        to_date: Optional[date] = None,
        source: Optional[ShiftSource] = None,
    ) -> list[Shift]:
        conditions = [Shifts.contract_id == contract_id]
        if from_date is not None:
            conditions.append(Shifts.local_date >= from_date)
        if to_date is not None:
            conditions.append(Shifts.local_date <= to_date)
        if source is not None:
            conditions.append(Shifts.source == source)

        stmt = select(Shifts).where(and_(*conditions)).order_by(Shifts.local_date, Shifts.id)
        return [to_shift(r) for r in self.db.execute(stmt).scalars().all()]

    def insert_seed_shift(
        self,
        contract_id: int,
        local_date: date,
        start_utc: datetime,
        end_utc: datetime,
        timezone_name: Optional[str] = None,
    ) -> bool:
        contract = self._contract_row(contract_id)
        if contract is None:
            raise NotFoundError("Contract", contract_id)

        dialect = self.db.get_bind().dialect.name
        insert = _INSERT_BY_DIALECT.get(dialect)
        if insert is None:
            raise NotImplementedError(f"Seed insert not supported for dialect {dialect!r}")

        # ON CONFLICT against the partial unique index keeps concurrent seeds from duplicating
        stmt = (
            insert(Shifts.__table__)
            .values(
                user_id=contract.user_id,
                contract_id=contract_id,
                start_utc=start_utc,
                end_utc=end_utc,
                local_date=local_date,
                source=ShiftSource.CONTRACT_SEED,
                status=ShiftStatus.IN_PROCESS,
                facility=contract.facility or None,
                timezone=timezone_name or contract.timezone,
            )
            .on_conflict_do_nothing(
                index_elements=["contract_id", "local_date"],
                index_where=SEED_INDEX_WHERE,
            )
        )
        result = self.db.execute(stmt)
        return result.rowcount > 0

    def delete_seed_shifts_by_dates(
        self,
        contract_id: int,
        dates: Iterable[date],
        only_statuses: frozenset[ShiftStatus] = PENDING_STATUSES,
    ) -> int:
        dates = list(dates)
        if not dates:
            return 0
        stmt = delete(Shifts).where(
            and_(
                Shifts.contract_id == contract_id,
                Shifts.source == ShiftSource.CONTRACT_SEED,
                Shifts.status.in_(list(only_statuses)),
                Shifts.local_date.in_(dates),
            )
        )
        result = self.db.execute(stmt, execution_options={"synchronize_session": False})
        self.db.expire_all()
        return result.rowcount

    def update_seed_shift_times(
        self,
        contract_id: int,
        local_date: date,
        start_utc: datetime,
        end_utc: datetime,
        only_statuses: frozenset[ShiftStatus] = PENDING_STATUSES,
        timezone_name: Optional[str] = None,
    ) -> bool:
        values = {"start_utc": start_utc, "end_utc": end_utc}
        if timezone_name:
            values["timezone"] = timezone_name
        stmt = (
            update(Shifts)
            .where(
                and_(
                    Shifts.contract_id == contract_id,
                    Shifts.local_date == local_date,
                    Shifts.source == ShiftSource.CONTRACT_SEED,
                    Shifts.status.in_(list(only_statuses)),
                )
            )
            .values(**values)
        )
        result = self.db.execute(stmt, execution_options={"synchronize_session": False})
        self.db.expire_all()
        return result.rowcount > 0

    def get_all_shifts_for_user(self, user_id: str) -> list[Shift]:
        stmt = select(Shifts).where(Shifts.user_id == user_id).order_by(Shifts.start_utc)
        return [to_shift(r) for r in self.db.execute(stmt).scalars().all()]

    def get_shifts_in_date_range(self, user_id: str, from_date: date, to_date: date) -> list[Shift]:
        stmt = (
            select(Shifts)
            .where(
                and_(
                    Shifts.user_id == user_id,
                    Shifts.local_date >= from_date,
                    Shifts.local_date <= to_date,
                )
            )
            .order_by(Shifts.start_utc)
        )
        return [to_shift(r) for r in self.db.execute(stmt).scalars().all()]

    def get_shift(self, shift_id: int) -> Optional[Shift]:
        row = self.db.get(Shifts, shift_id)
        return to_shift(row) if row else None

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
        if timezone_name is None:
            contract = self._contract_row(contract_id) if contract_id is not None else None
            timezone_name = contract.timezone if contract else settings.DEFAULT_TIMEZONE
        row = Shifts(
            user_id=user_id,
            contract_id=contract_id,
            start_utc=start_utc,
            end_utc=end_utc,
            local_date=local_date,
            status=status,
            source=source,
            facility=facility,
            timezone=timezone_name,
        )
        self.db.add(row)
        self.db.flush()
        return to_shift(row)

    def update_shift(self, shift_id: int, **fields) -> Optional[Shift]:
        row = self.db.get(Shifts, shift_id)
        if row is None:
            return None
        for field, value in fields.items():
            if field not in _SHIFT_UPDATABLE:
                raise ValueError(f"Shift field {field!r} cannot be updated")
            setattr(row, field, value)
        self.db.flush()
        return to_shift(row)

    def delete_shift(self, shift_id: int) -> bool:
        row = self.db.get(Shifts, shift_id)
        if row is None:
            return False
        self.db.delete(row)
        self.db.flush()
        return True

    # Expenses

    def list_expenses(self, user_id: str, from_date: Optional[date] = None, to_date: Optional[date] = None) -> list[Expenses]:
        conditions = [Expenses.user_id == user_id]
        if from_date is not None:
            conditions.append(Expenses.expense_date >= from_date)
        if to_date is not None:
            conditions.append(Expenses.expense_date <= to_date)
        stmt = select(Expenses).where(and_(*conditions)).order_by(Expenses.expense_date.desc(), Expenses.id)
        return list(self.db.execute(stmt).scalars().all())

    def create_expense(self, user_id: str, **fields) -> Expenses:
        row = Expenses(user_id=user_id, **fields)
        self.db.add(row)
        self.db.flush()
        return row

    def delete_expense(self, expense_id: int, user_id: Optional[str] = None) -> bool:
        row = self.db.get(Expenses, expense_id)
        if row is None or (user_id is not None and row.user_id != user_id):
            return False
        self.db.delete(row)
        self.db.flush()
        return True
