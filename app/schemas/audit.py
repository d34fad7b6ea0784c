from datetime import date
from typing import Literal

from app.schemas.common import CamelModel


class AuditResultResponse(CamelModel):
    contract_id: int
    contract_name: str
    missing: list[date]
    duplicates: list[date]
    finalized_touched: int
    expected_count: int
    actual_count: int
    status: Literal["healthy", "has_issues"]
