from typing import Generator
from fastapi import Depends, Query
from sqlalchemy.orm import Session

from app.db.database import SessionLocal
from app.db.repository import SqlScheduleRepository


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_repository(db: Session = Depends(get_db)) -> SqlScheduleRepository:
    return SqlScheduleRepository(db)


def get_user_id(user_id: str = Query(..., min_length=1, max_length=64)) -> str:
    """Owning account. Authentication lives outside this service; callers pass the id."""
    return user_id
