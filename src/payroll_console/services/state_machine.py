"""Payroll record status progression."""

from __future__ import annotations

from payroll_console.calculators.types import RecordStatus
from payroll_console.errors import PayrollConsoleError


class InvalidStatusTransitionError(PayrollConsoleError):
    """Raised when a record status would move backwards or sideways."""

    code = "INVALID_STATUS_TRANSITION"

    def __init__(self, from_status: str, to_status: str, reason: str | None = None):
        self.from_status = from_status
        self.to_status = to_status
        self.reason = reason
        msg = f"Invalid transition from '{from_status}' to '{to_status}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


class RecordStateMachine:
    """Monotonic status progression for payroll records.

    Allowed transitions:
    - pending → processed
    - pending → paid
    - processed → paid
    """

    VALID_TRANSITIONS: dict[str, list[str]] = {
        RecordStatus.PENDING: [RecordStatus.PROCESSED, RecordStatus.PAID],
        RecordStatus.PROCESSED: [RecordStatus.PAID],
        RecordStatus.PAID: [],  # Terminal state
    }

    @classmethod
    def can_transition(cls, from_status: str, to_status: str) -> bool:
        """Check if a transition is valid."""
        allowed = cls.VALID_TRANSITIONS.get(from_status, [])
        return to_status in allowed

    @classmethod
    def validate_transition(cls, from_status: str, to_status: str) -> None:
        """Validate a transition, raising InvalidStatusTransitionError if invalid."""
        if from_status == to_status:
            raise InvalidStatusTransitionError(from_status, to_status, "status unchanged")
        if not cls.can_transition(from_status, to_status):
            raise InvalidStatusTransitionError(from_status, to_status)

    @classmethod
    def get_next_statuses(cls, current_status: str) -> list[str]:
        """Get list of valid next statuses from current status."""
        return cls.VALID_TRANSITIONS.get(current_status, [])

    @classmethod
    def is_terminal(cls, status: str) -> bool:
        return not cls.VALID_TRANSITIONS.get(status, [])
