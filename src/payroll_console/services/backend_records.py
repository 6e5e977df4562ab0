"""Normalisation of records computed by the remote payroll backend.

The backend reports retirement split into pre-tax and Roth payments and only
a total for deductions. "Other" deductions are the remainder, which must
reconcile exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from payroll_console.calculators.types import Deductions, PayPeriodInput, RecordStatus
from payroll_console.errors import DataIntegrityError, ValidationError


@dataclass(frozen=True)
class BackendRecord:
    """A backend-computed record in this system's single record shape."""

    employee_id: int
    period: PayPeriodInput
    gross_pay: Decimal
    net_pay: Decimal
    deductions: Deductions
    status: RecordStatus


def _amount(payload: dict[str, Any], key: str, default: Any = None) -> Decimal:
    raw = payload.get(key)
    if raw is None:
        raw = default
    if raw is None or isinstance(raw, bool):
        raise DataIntegrityError(f"Backend record is missing {key}", context={key: raw})
    try:
        value = Decimal(str(raw).strip())
    except InvalidOperation:
        raise DataIntegrityError(f"Backend record has non-numeric {key}", context={key: raw})
    if not value.is_finite():
        raise DataIntegrityError(f"Backend record has non-finite {key}", context={key: raw})
    return value


def normalize_backend_record(payload: dict[str, Any]) -> BackendRecord:
    """Map a backend payload onto gross, net and a tax/retirement/other breakdown.

    Raises:
        ValidationError: If identifying fields or the period are malformed
        DataIntegrityError: If the figures are missing, non-finite or do not reconcile
    """
    employee_id = payload.get("employee_id")
    if not isinstance(employee_id, int) or isinstance(employee_id, bool):
        raise ValidationError("employee_id is required", field="employee_id")

    period = PayPeriodInput.build(
        pay_period_start=payload.get("pay_period_start"),
        pay_period_end=payload.get("pay_period_end"),
        regular_hours=payload.get("regular_hours", 0),
        overtime_hours=payload.get("overtime_hours", 0),
        reported_tips=payload.get("reported_tips", 0),
    )

    gross_pay = _amount(payload, "gross_pay")
    net_pay = _amount(payload, "net_pay")
    tax = _amount(payload, "withholding_tax")
    retirement = _amount(payload, "retirement_payment", 0) + _amount(
        payload, "roth_retirement_payment", 0
    )
    total_deductions = _amount(payload, "total_deductions")
    other = total_deductions - (tax + retirement)

    figures = {
        "gross_pay": gross_pay,
        "withholding_tax": tax,
        "retirement": retirement,
        "other": other,
    }
    negative = {k: v for k, v in figures.items() if v < 0}
    if negative:
        raise DataIntegrityError(
            "Backend record has negative figures: " + ", ".join(sorted(negative)),
            context=figures,
        )
    if net_pay != gross_pay - total_deductions:
        raise DataIntegrityError(
            "Backend net pay does not equal gross pay minus total deductions",
            context={"gross_pay": gross_pay, "net_pay": net_pay, "total_deductions": total_deductions},
        )

    try:
        status = RecordStatus(payload.get("status") or RecordStatus.PENDING.value)
    except ValueError:
        raise ValidationError(f"Unknown record status: {payload.get('status')!r}", field="status")

    return BackendRecord(
        employee_id=employee_id,
        period=period,
        gross_pay=gross_pay,
        net_pay=net_pay,
        deductions=Deductions(tax=tax, retirement=retirement, other=other),
        status=status,
    )
