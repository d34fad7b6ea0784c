from datetime import date
from typing import List
from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_repository, get_user_id
from app.db.repository import SqlScheduleRepository
from app.schemas.shifts import ShiftCreate, ShiftResponse, ShiftUpdate
from app.services.contracts import contract_service, shift_service
from app.services.scheduling.local_time import parse_hhmm

router = APIRouter(prefix="/shifts", tags=["shifts"])


@router.post("", response_model=ShiftResponse, status_code=status.HTTP_201_CREATED)
def create_shift(
    payload: ShiftCreate,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    if payload.contract_id is not None:
        contract_service.get_contract(repo, payload.contract_id, user_id)
    shift = shift_service.create_shift(
        repo,
        user_id,
        local_date=payload.local_date,
        start=parse_hhmm(payload.start),
        end=parse_hhmm(payload.end),
        contract_id=payload.contract_id,
        timezone_name=payload.timezone,
        status=payload.status,
        facility=payload.facility,
    )
    repo.db.commit()
    return shift


@router.get("", response_model=List[ShiftResponse])
def list_shifts(
    from_date: date = Query(..., alias="from"),
    to_date: date = Query(..., alias="to"),
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    return shift_service.list_shifts_in_range(repo, user_id, from_date, to_date)


@router.put("/{shift_id}", response_model=ShiftResponse)
def update_shift(
    shift_id: int,
    payload: ShiftUpdate,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    shift_service.get_shift(repo, shift_id, user_id)
    changes = payload.model_dump(exclude_unset=True)
    for field in ("start", "end"):
        if changes.get(field):
            changes[field] = parse_hhmm(changes[field])

    shift = shift_service.update_shift(repo, shift_id, changes)
    repo.db.commit()
    return shift


@router.delete("/{shift_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_shift(
    shift_id: int,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    shift_service.delete_shift(repo, shift_id, user_id)
    repo.db.commit()
