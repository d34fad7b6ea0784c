"""
Contract and manual-shift services.

Usage:
    from app.db.repository import SqlScheduleRepository
    from app.services.contracts import ScheduleInput, DayInput, create_contract

    repo = SqlScheduleRepository(db)
    created = create_contract(
        repo, "user-1", "ICU Travel", date(2025, 9, 1), date(2025, 9, 7), Decimal("45.00"),
        schedule=ScheduleInput("07:00", "19:00", {"1": DayInput(enabled=True)}),
        seed_shifts=True,
    )
    db.commit()
"""

from .validation import (
    DayInput,
    ScheduleInput,
    validate_schedule,
    validate_date_range,
    validate_query_range,
    validate_timezone,
    ensure_schedule,
    ensure_date_range,
    ensure_query_range,
    ensure_timezone,
    to_schedule_config,
)
from .contract_service import (
    ContractCreated,
    ContractUpdated,
    SchedulePreview,
    get_contract,
    list_contracts,
    create_contract,
    update_contract,
    update_contract_status,
    delete_contract,
    get_schedule_preview,
    load_schedule,
)
from .shift_service import (
    LocalShift,
    get_shift,
    create_shift,
    update_shift,
    delete_shift,
    list_shifts_in_range,
)

__all__ = [
    "DayInput",
    "ScheduleInput",
    "validate_schedule",
    "validate_date_range",
    "validate_query_range",
    "validate_timezone",
    "ensure_schedule",
    "ensure_date_range",
    "ensure_query_range",
    "ensure_timezone",
    "to_schedule_config",
    "ContractCreated",
    "ContractUpdated",
    "SchedulePreview",
    "get_contract",
    "list_contracts",
    "create_contract",
    "update_contract",
    "update_contract_status",
    "delete_contract",
    "get_schedule_preview",
    "load_schedule",
    "LocalShift",
    "get_shift",
    "create_shift",
    "update_shift",
    "delete_shift",
    "list_shifts_in_range",
]
