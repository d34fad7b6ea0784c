from typing import List
from fastapi import APIRouter, Depends

from app.api.deps import get_repository
from app.db.repository import SqlScheduleRepository
from app.schemas.audit import AuditResultResponse
from app.services.audit import audit_all_contracts

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/contracts", response_model=List[AuditResultResponse])
def audit_contracts(repo: SqlScheduleRepository = Depends(get_repository)):
    return audit_all_contracts(repo)
