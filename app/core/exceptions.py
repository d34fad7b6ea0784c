"""
Typed errors raised by the scheduling core and the contract service.

Callers branch on the class (and the machine-readable ``code``), never on the
message text. The API layer maps each class to an HTTP status.
"""

from datetime import date
from typing import Optional


class NurseShiftError(Exception):
    code: str = "NURSESHIFT_ERROR"

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(NurseShiftError):
    """Malformed input: bad HH:mm, end before start, no enabled day when seeding."""

    code = "VALIDATION_ERROR"


class NotFoundError(NurseShiftError):
    code = "NOT_FOUND"

    def __init__(self, resource: str, identifier):
        super().__init__(f"{resource} {identifier} not found")
        self.resource = resource
        self.identifier = identifier


class OutOfRangeError(NurseShiftError):
    """A shift date falls outside its contract's [start_date, end_date]."""

    code = "OUT_OF_RANGE"

    def __init__(self, shift_date: date, start_date: date, end_date: date):
        super().__init__(
            f"Shift date {shift_date.isoformat()} must be between "
            f"{start_date.isoformat()} and {end_date.isoformat()}"
        )
        self.shift_date = shift_date
        self.start_date = start_date
        self.end_date = end_date
