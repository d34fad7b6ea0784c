from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, Query, status

from app.api.deps import get_repository, get_user_id
from app.db.repository import SqlScheduleRepository
from app.schemas.audit import AuditResultResponse
from app.schemas.contracts import (
    ContractCreate,
    ContractCreateResponse,
    ContractResponse,
    ContractStatusUpdate,
    ContractUpdate,
    ContractUpdateResponse,
    SchedulePreviewResponse,
)
from app.services import contracts as contract_service
from app.services.audit import audit_contract
from app.services.scheduling.types import ContractStatus

router = APIRouter(prefix="/contracts", tags=["contracts"])


@router.post("", response_model=ContractCreateResponse, status_code=status.HTTP_201_CREATED)
def create_contract(
    payload: ContractCreate,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    created = contract_service.create_contract(
        repo,
        user_id,
        name=payload.name,
        start_date=payload.start_date,
        end_date=payload.end_date,
        base_rate=payload.base_rate,
        schedule=payload.schedule.to_input(),
        seed_shifts=payload.seed_shifts,
        facility=payload.facility,
        timezone_name=payload.timezone,
        ot_rate=payload.ot_rate,
        hours_per_week=payload.hours_per_week,
    )
    repo.db.commit()
    return created


@router.get("", response_model=List[ContractResponse])
def list_contracts(
    status_filter: Optional[ContractStatus] = Query(None, alias="status"),
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    return contract_service.list_contracts(repo, user_id, status_filter)


@router.get("/{contract_id}", response_model=ContractResponse)
def get_contract(
    contract_id: int,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    return contract_service.get_contract(repo, contract_id, user_id)


@router.put("/{contract_id}", response_model=ContractUpdateResponse)
def update_contract(
    contract_id: int,
    payload: ContractUpdate,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    contract_service.get_contract(repo, contract_id, user_id)
    updated = contract_service.update_contract(
        repo,
        contract_id,
        payload.changes(),
        schedule=payload.schedule.to_input() if payload.schedule else None,
        seed_shifts=payload.seed_shifts,
    )
    repo.db.commit()
    return updated


@router.patch("/{contract_id}/status", response_model=ContractResponse)
def update_contract_status(
    contract_id: int,
    payload: ContractStatusUpdate,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    contract_service.get_contract(repo, contract_id, user_id)
    contract = contract_service.update_contract_status(repo, contract_id, payload.status)
    repo.db.commit()
    return contract


@router.delete("/{contract_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_contract(
    contract_id: int,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    contract_service.get_contract(repo, contract_id, user_id)
    contract_service.delete_contract(repo, contract_id)
    repo.db.commit()


@router.get("/{contract_id}/schedule-preview", response_model=SchedulePreviewResponse)
def get_schedule_preview(
    contract_id: int,
    day: date = Query(..., alias="date"),
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    contract_service.get_contract(repo, contract_id, user_id)
    return contract_service.get_schedule_preview(repo, contract_id, day)


@router.get("/{contract_id}/audit", response_model=AuditResultResponse)
def audit(
    contract_id: int,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    contract_service.get_contract(repo, contract_id, user_id)
    return audit_contract(repo, contract_id)
