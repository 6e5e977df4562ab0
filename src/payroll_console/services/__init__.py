"""Payroll console services."""

from payroll_console.services.import_service import ImportResult, ImportService
from payroll_console.services.payroll_service import (
    BulkEntry,
    BulkSubmitResult,
    PayrollService,
)
from payroll_console.services.repository import PayrollRepository
from payroll_console.services.state_machine import (
    InvalidStatusTransitionError,
    RecordStateMachine,
)

__all__ = [
    "BulkEntry",
    "BulkSubmitResult",
    "ImportResult",
    "ImportService",
    "InvalidStatusTransitionError",
    "PayrollRepository",
    "PayrollService",
    "RecordStateMachine",
]
