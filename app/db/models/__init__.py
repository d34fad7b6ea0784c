from app.db.database import Base

# Import models
from app.db.models.contracts import Contracts
from app.db.models.contract_schedule_days import ContractScheduleDays
from app.db.models.shifts import Shifts
from app.db.models.expenses import Expenses
from app.services.scheduling.types import ContractStatus, ShiftStatus, ShiftSource

__all__ = [
    "Base",
    # Models
    "Contracts",
    "ContractScheduleDays",
    "Shifts",
    "Expenses",
    # Enums
    "ContractStatus",
    "ShiftStatus",
    "ShiftSource",
]
