from datetime import time
from sqlalchemy import Boolean, ForeignKey, Integer, Time, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from app.db.database import Base


class ContractScheduleDays(Base):
    __tablename__ = "contract_schedule_days"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    contract_id: Mapped[int] = mapped_column(Integer, ForeignKey("contracts.id", ondelete="CASCADE"), nullable=False, index=True)
    weekday: Mapped[int] = mapped_column(Integer, nullable=False)  # 0=Sun..6=Sat
    enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    # kept while disabled so re-enabling restores the last known times
    start_local: Mapped[time] = mapped_column(Time, nullable=False)
    end_local: Mapped[time] = mapped_column(Time, nullable=False)

    __table_args__ = (
        UniqueConstraint("contract_id", "weekday", name="uix_contract_schedule_days_weekday"),
    )
