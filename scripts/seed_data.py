"""
Seed script for the NurseShift development database.
Run with: python -m scripts.seed_data            (seed)
          python -m scripts.seed_data cleanup    (remove the sample contract)
"""

import sys
from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import select

from app.db.database import SessionLocal, init_db
from app.db.models.contracts import Contracts
from app.db.repository import SqlScheduleRepository
from app.services.contracts import DayInput, ScheduleInput, create_contract, delete_contract, update_contract_status
from app.services.scheduling.local_time import week_start_sunday
from app.services.scheduling.types import ContractStatus, ShiftSource, ShiftStatus

SAMPLE_USER_ID = "demo-user"
SAMPLE_CONTRACT_NAME = "Sample ICU Travel Contract"


def cleanup_sample_data(repo):
    """Delete any previous sample contract along with its schedule and shifts."""
    print("Cleaning up existing sample data...")

    stmt = select(Contracts.id).where(
        Contracts.user_id == SAMPLE_USER_ID,
        Contracts.name == SAMPLE_CONTRACT_NAME,
    )
    contract_ids = list(repo.db.execute(stmt).scalars().all())
    for contract_id in contract_ids:
        delete_contract(repo, contract_id)

    repo.db.commit()
    print(f"Removed {len(contract_ids)} sample contracts.")


def seed_sample_contract(repo):
    """Mon-Wed 3x12h ICU contract, seeded through the generator so UTC times follow the zone rules."""
    print("Seeding sample contract...")

    start = week_start_sunday(date.today())
    end = start + timedelta(days=91)

    schedule = ScheduleInput(
        default_start="07:00",
        default_end="19:00",
        days={
            "1": DayInput(enabled=True),
            "2": DayInput(enabled=True),
            "3": DayInput(enabled=True),
        },
    )

    created = create_contract(
        repo,
        SAMPLE_USER_ID,
        name=SAMPLE_CONTRACT_NAME,
        start_date=start,
        end_date=end,
        base_rate=Decimal("45.00"),
        schedule=schedule,
        seed_shifts=True,
        facility="Memorial Regional Medical Center",
        timezone_name="America/Chicago",
        ot_rate=Decimal("67.50"),
        hours_per_week=Decimal("36.00"),
    )
    contract = update_contract_status(repo, created.contract.id, ContractStatus.ACTIVE)
    repo.db.commit()

    print(f"Created contract: {contract.name} (ID: {contract.id})")
    print(f"Seeded {created.seed_result.created} shifts ({created.seed_result.skipped} skipped).")
    return contract


def finalize_past_shifts(repo, contract_id):
    """Mark the seeded shifts that already happened as worked."""
    today = date.today()
    past = [
        s for s in repo.get_shifts_for_contract_in_range(contract_id, to_date=today - timedelta(days=1))
        if s.source == ShiftSource.CONTRACT_SEED
    ]
    for shift in past:
        repo.update_shift(shift.id, status=ShiftStatus.FINALIZED)
    repo.db.commit()
    print(f"Finalized {len(past)} past shifts.")


def main():
    init_db()
    db = SessionLocal()
    repo = SqlScheduleRepository(db)

    try:
        cleanup_sample_data(repo)
        if len(sys.argv) > 1 and sys.argv[1] == "cleanup":
            return

        contract = seed_sample_contract(repo)
        finalize_past_shifts(repo, contract.id)

        print("\n" + "="*50)
        print("Seeding complete!")
        print("="*50)
        print(f"\nSample account: user_id={SAMPLE_USER_ID}")
        print("="*50 + "\n")

    except Exception as e:
        db.rollback()
        print(f"\nError during seeding: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    main()
