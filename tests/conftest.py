import pytest
from datetime import date
from decimal import Decimal

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.db.models  # noqa: F401  registers the mappers
from app.api.deps import get_db
from app.db.database import Base
from app.db.repository import SqlScheduleRepository
from app.main import app
from app.services.contracts import DayInput, ScheduleInput, create_contract


@pytest.fixture
def engine():
    # one in-memory database per test, shared across connections
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def repo(db) -> SqlScheduleRepository:
    return SqlScheduleRepository(db)


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_contract(repo):
    """Factory: create a contract through the service, Mon/Wed/Fri 07:00-19:00 by default."""
    def _make(
        start_date=date(2025, 9, 1),
        end_date=date(2025, 9, 7),
        days=None,
        seed_shifts=True,
        user_id="nurse-1",
        timezone_name="America/Chicago",
        base_rate=Decimal("45.00"),
        ot_rate=Decimal("67.50"),
        default_start="07:00",
        default_end="19:00",
    ):
        if days is None:
            days = {"1": DayInput(enabled=True), "3": DayInput(enabled=True), "5": DayInput(enabled=True)}
        created = create_contract(
            repo,
            user_id,
            name="ICU Travel",
            start_date=start_date,
            end_date=end_date,
            base_rate=base_rate,
            schedule=ScheduleInput(default_start, default_end, days),
            seed_shifts=seed_shifts,
            facility="Memorial Regional",
            timezone_name=timezone_name,
            ot_rate=ot_rate,
        )
        repo.db.commit()
        return created

    return _make
