"""SQLAlchemy ORM models."""

from payroll_console.models.base import Base, TimestampMixin
from payroll_console.models.company import Company, CustomColumn, Department
from payroll_console.models.employee import Employee
from payroll_console.models.payroll import PayrollRecord

__all__ = [
    "Base",
    "TimestampMixin",
    "Company",
    "CustomColumn",
    "Department",
    "Employee",
    "PayrollRecord",
]
