"""Typed exceptions for payroll console operations.

ValidationError and NotFoundError are recoverable: batch operations record
them per row and keep going. ComputationError and DataIntegrityError signal
inconsistent figures and are never silently corrected.
"""

from __future__ import annotations

from typing import Any


class PayrollConsoleError(Exception):
    """Base class for all payroll console errors."""

    code: str = "PAYROLL_ERROR"

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"detail": self.message, "code": self.code}


class ValidationError(PayrollConsoleError):
    """Raised for negative, non-numeric or missing input."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class NotFoundError(PayrollConsoleError):
    """Raised when a referenced entity does not exist."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, key: Any):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key}")


class ComputationError(PayrollConsoleError):
    """Raised when a calculation produces a non-finite or inconsistent result."""

    code = "COMPUTATION_ERROR"


class DataIntegrityError(PayrollConsoleError):
    """Raised when externally supplied figures do not reconcile."""

    code = "DATA_INTEGRITY_ERROR"

    def __init__(self, message: str, context: dict[str, Any] | None = None):
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.context:
            data["context"] = {k: str(v) for k, v in self.context.items()}
        return data
