from pydantic import Field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from app.schemas.common import CamelModel


class ExpenseBase(CamelModel):
    contract_id: Optional[int] = None
    expense_date: date
    category: str = Field(min_length=1, max_length=100)
    amount: Decimal = Field(ge=0)
    description: str = Field(min_length=1, max_length=255)
    note: Optional[str] = None
    deductible: bool = False


class ExpenseCreate(ExpenseBase):
    pass


class ExpenseResponse(ExpenseBase):
    id: int
    user_id: str
    created_at: datetime
