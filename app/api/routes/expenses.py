from datetime import date
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_repository, get_user_id
from app.db.repository import SqlScheduleRepository
from app.schemas.expenses import ExpenseCreate, ExpenseResponse
from app.services.contracts import ensure_query_range

router = APIRouter(prefix="/expenses", tags=["expenses"])


def _owns_contract(repo: SqlScheduleRepository, contract_id: int, user_id: str) -> bool:
    contract = repo.get_contract(contract_id)
    return contract is not None and contract.user_id == user_id


@router.post("", response_model=ExpenseResponse, status_code=status.HTTP_201_CREATED)
def create_expense(
    payload: ExpenseCreate,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    if payload.contract_id is not None and not _owns_contract(repo, payload.contract_id, user_id):
        raise HTTPException(status_code=404, detail="Contract not found")

    expense = repo.create_expense(user_id, **payload.model_dump())
    repo.db.commit()
    repo.db.refresh(expense)
    return expense


@router.get("", response_model=List[ExpenseResponse])
def list_expenses(
    from_date: Optional[date] = Query(None, alias="from"),
    to_date: Optional[date] = Query(None, alias="to"),
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    if from_date and to_date:
        ensure_query_range(from_date, to_date)
    return repo.list_expenses(user_id, from_date, to_date)


@router.delete("/{expense_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_expense(
    expense_id: int,
    user_id: str = Depends(get_user_id),
    repo: SqlScheduleRepository = Depends(get_repository),
):
    if not repo.delete_expense(expense_id, user_id):
        raise HTTPException(status_code=404, detail="Expense not found")
    repo.db.commit()
