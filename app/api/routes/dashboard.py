from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query

from app.api.deps import get_repository, get_user_id
from app.db.repository import SqlScheduleRepository
from app.schemas.dashboard import DashboardSummaryResponse, UpcomingShiftResponse
from app.services.payroll import compute_summary, get_upcoming

router = APIRouter(prefix="/dashboard", tags=["dashboard"])


@router.get("/summary", response_model=DashboardSummaryResponse)
def summary(
    anchor: Optional[date] = None,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    return compute_summary(repo, user_id, anchor or date.today())


@router.get("/upcoming", response_model=List[UpcomingShiftResponse])
def upcoming(
    limit: Optional[int] = Query(None, ge=1, le=100),
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    return get_upcoming(repo, user_id, limit=limit)
