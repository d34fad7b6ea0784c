from typing import Optional
from datetime import datetime, date
from decimal import Decimal
from sqlalchemy import Date, DateTime, Enum as SQLEnum, Index, Integer, Numeric, String, func
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base
from app.services.scheduling.types import ContractStatus


class Contracts(Base):
    __tablename__ = "contracts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    facility: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    base_rate: Mapped[Decimal] = mapped_column(Numeric(10, 2), nullable=False)
    ot_rate: Mapped[Optional[Decimal]] = mapped_column(Numeric(10, 2), nullable=True)
    hours_per_week: Mapped[Optional[Decimal]] = mapped_column(Numeric(5, 2), nullable=True)
    status: Mapped[ContractStatus] = mapped_column(SQLEnum(ContractStatus, name="contract_status_enum"), nullable=False, default=ContractStatus.PLANNED)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False, default="America/Chicago")
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_contracts_status_dates", "status", "start_date", "end_date"),
    )
