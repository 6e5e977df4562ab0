"""Payroll calculation core."""

from payroll_console.calculators.line_builder import StubLineBuilder
from payroll_console.calculators.pay_calculator import PayCalculator, calculate_pay
from payroll_console.calculators.types import (
    CompensationProfile,
    Deductions,
    EmployeeRef,
    FilingStatus,
    PayCalculation,
    PayPeriodInput,
    PayrollRecordData,
    PayType,
    RecordStatus,
)

__all__ = [
    "PayCalculator",
    "calculate_pay",
    "StubLineBuilder",
    "CompensationProfile",
    "Deductions",
    "EmployeeRef",
    "FilingStatus",
    "PayCalculation",
    "PayPeriodInput",
    "PayrollRecordData",
    "PayType",
    "RecordStatus",
]
