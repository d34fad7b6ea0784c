from sqlalchemy import Date, Integer, DateTime, ForeignKey, Enum as SQLEnum, Index, String, func, text
from datetime import datetime, date
from sqlalchemy.orm import Mapped, mapped_column
from typing import Optional
from app.db.database import Base
from app.services.scheduling.types import ShiftStatus, ShiftSource

# partial index predicate, shared with the ON CONFLICT target in the repository
SEED_INDEX_WHERE = text("source = 'CONTRACT_SEED'")


class Shifts(Base):
    __tablename__ = "shifts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    user_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    contract_id: Mapped[Optional[int]] = mapped_column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=True)
    start_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    end_utc: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    local_date: Mapped[date] = mapped_column(Date, nullable=False)
    source: Mapped[ShiftSource] = mapped_column(SQLEnum(ShiftSource, name="shift_source_enum"), nullable=False)
    status: Mapped[ShiftStatus] = mapped_column(SQLEnum(ShiftStatus, name="shift_status_enum"), nullable=False)
    facility: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_shifts_contract_date", "contract_id", "local_date"),
        Index("ix_shifts_user_date", "user_id", "local_date"),
        # at most one seeded shift per contract and date; manual shifts may repeat
        Index(
            "uix_shifts_contract_date_seed",
            "contract_id",
            "local_date",
            unique=True,
            postgresql_where=SEED_INDEX_WHERE,
            sqlite_where=SEED_INDEX_WHERE,
        ),
    )
