"""
Contract seed audit.

Compares what the generator would produce for a contract against the
CONTRACT_SEED rows actually stored. Read-only: findings are returned as data
and logged, never raised and never repaired here.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date

from app.core.config import settings
from app.core.exceptions import NotFoundError
from app.services.scheduling.generator import generate_for_range
from app.services.scheduling.local_time import parse_hhmm
from app.services.scheduling.repository import ScheduleRepository
from app.services.scheduling.types import ScheduleConfig, Shift, ShiftSource, ShiftStatus


logger = logging.getLogger(__name__)

HEALTHY = "healthy"
HAS_ISSUES = "has_issues"


@dataclass
class AuditResult:
    contract_id: int
    contract_name: str
    missing: list[date] = field(default_factory=list)
    duplicates: list[date] = field(default_factory=list)
    finalized_touched: int = 0
    expected_count: int = 0
    actual_count: int = 0
    status: str = HEALTHY


def _group_by_date(shifts: list[Shift]) -> dict[date, list[Shift]]:
    grouped = defaultdict(list)
    for shift in shifts:
        grouped[shift.local_date].append(shift)
    return grouped


def audit_contract(repo: ScheduleRepository, contract_id: int) -> AuditResult:
    """
    Diff expected seeded dates against stored ones for one contract.

    - missing: expected dates with no stored row
    - duplicates: stored dates with more than one row
    - finalized_touched: finalized shifts sitting on a missing or duplicate date

    A contract without stored schedule days expects nothing and is healthy.

    Raises:
        NotFoundError: If the contract does not exist
    """
    contract = repo.get_contract(contract_id)
    if contract is None:
        raise NotFoundError("Contract", contract_id)

    rows = repo.list_schedule_days(contract_id)
    if not rows:
        return AuditResult(contract_id=contract_id, contract_name=contract.name)

    schedule = ScheduleConfig.from_rows(
        rows,
        parse_hhmm(settings.DEFAULT_SHIFT_START),
        parse_hhmm(settings.DEFAULT_SHIFT_END),
    )
    expected = generate_for_range(contract.date_range, contract.timezone, schedule)
    expected_dates = {o.local_date for o in expected}

    actual = repo.get_shifts_for_contract_in_range(contract_id, source=ShiftSource.CONTRACT_SEED)
    by_date = _group_by_date(actual)

    missing = sorted(d for d in expected_dates if d not in by_date)
    duplicates = sorted(d for d, shifts in by_date.items() if len(shifts) > 1)

    affected = set(missing) | set(duplicates)
    finalized_touched = sum(
        1
        for d in affected
        for s in by_date.get(d, [])
        if s.status == ShiftStatus.FINALIZED
    )

    result = AuditResult(
        contract_id=contract_id,
        contract_name=contract.name,
        missing=missing,
        duplicates=duplicates,
        finalized_touched=finalized_touched,
        expected_count=len(expected),
        actual_count=len(actual),
        status=HAS_ISSUES if missing or duplicates else HEALTHY,
    )

    if result.status == HAS_ISSUES:
        logger.warning(f"Contract {contract_id} ({contract.name}) has seeding issues")
        if missing:
            logger.warning(f"  Missing shifts: {len(missing)} dates - {_preview(missing)}")
        if duplicates:
            logger.warning(f"  Duplicate shifts: {len(duplicates)} dates - {_preview(duplicates)}")
        if finalized_touched:
            logger.warning(f"  {finalized_touched} finalized shifts would be affected by re-seeding")

    return result


def _preview(dates: list[date], limit: int = 5) -> str:
    shown = ", ".join(d.isoformat() for d in dates[:limit])
    return shown + ("..." if len(dates) > limit else "")


def audit_all_contracts(repo: ScheduleRepository) -> list[AuditResult]:
    results = []
    for contract_id in repo.list_contract_ids():
        try:
            results.append(audit_contract(repo, contract_id))
        except NotFoundError:
            # deleted between listing and auditing
            logger.error(f"Failed to audit contract {contract_id}: not found")
    return results
