"""Payroll service - record submission, bulk entry and status changes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_console.calculators.pay_calculator import PayCalculator
from payroll_console.calculators.types import (
    PayPeriodInput,
    PayrollRecordData,
    RecordSource,
    RecordStatus,
)
from payroll_console.config import get_settings
from payroll_console.errors import NotFoundError, ValidationError
from payroll_console.services.backend_records import normalize_backend_record
from payroll_console.services.repository import PayrollRepository
from payroll_console.services.state_machine import RecordStateMachine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BulkEntry:
    """One row of a bulk entry: an employee and their hours for the period."""

    employee_id: int
    regular_hours: Any = 0
    overtime_hours: Any = 0
    reported_tips: Any = 0


@dataclass(frozen=True)
class BulkItemResult:
    """Outcome for one bulk entry row."""

    index: int
    employee_id: int
    record: PayrollRecordData | None = None
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class BulkSubmitResult:
    """Per-row outcomes of a bulk submission."""

    items: list[BulkItemResult] = field(default_factory=list)

    @property
    def records(self) -> list[PayrollRecordData]:
        return [i.record for i in self.items if i.record is not None]

    @property
    def errors(self) -> list[str]:
        return [f"Row {i.index + 1}: {i.error}" for i in self.items if i.error is not None]

    @property
    def succeeded(self) -> int:
        return sum(1 for i in self.items if i.success)

    @property
    def failed(self) -> int:
        return len(self.items) - self.succeeded

    @property
    def all_succeeded(self) -> bool:
        return self.failed == 0

    @property
    def all_failed(self) -> bool:
        return bool(self.items) and self.succeeded == 0

    @property
    def partial(self) -> bool:
        return self.succeeded > 0 and self.failed > 0


class PayrollService:
    """Service for creating payroll records and moving them through statuses.

    Operations:
    - submit_pay_period: calculate and store one employee's period
    - submit_bulk: same for many employees over one period, skip-and-report
    - accept_backend_record: store a record computed by the remote backend
    - advance_status: pending → processed → paid
    """

    def __init__(self, session: AsyncSession, calculator: PayCalculator | None = None):
        self.session = session
        self.repository = PayrollRepository(session)
        self.calculator = calculator or PayCalculator(get_settings().calculator_version)

    async def submit_pay_period(
        self,
        employee_id: int,
        period: PayPeriodInput,
        idempotency_key: str | None = None,
    ) -> PayrollRecordData:
        """Calculate and persist a pending record.

        With an idempotency key, a repeated submission returns the record
        created by the first one.

        Raises:
            NotFoundError: If the employee does not exist
            ValidationError: If the employee's profile or the period is invalid
        """
        if idempotency_key:
            existing = await self.repository.find_record_by_idempotency_key(idempotency_key)
            if existing is not None:
                if existing.employee_id != employee_id:
                    raise ValidationError(
                        "Idempotency key was already used for another employee",
                        field="idempotency_key",
                    )
                logger.info(
                    "Idempotent replay of record %s (key %s)", existing.id, idempotency_key
                )
                return existing.to_data()

        profile = await self.repository.get_compensation_profile(employee_id)
        calculation = self.calculator.calculate(profile, period)

        record = await self.repository.add_record(
            employee_id=employee_id,
            period=period,
            gross_pay=calculation.gross_pay,
            net_pay=calculation.net_pay,
            deductions=calculation.deductions,
            status=RecordStatus.PENDING,
            source=RecordSource.CALCULATED,
            idempotency_key=idempotency_key,
            inputs_fingerprint=calculation.inputs_fingerprint,
        )
        logger.info(
            "Created payroll record %s for employee %s: gross=%s net=%s",
            record.id,
            employee_id,
            calculation.gross_pay,
            calculation.net_pay,
        )
        return record.to_data()

    async def submit_bulk(
        self,
        company_id: int,
        pay_period_start: Any,
        pay_period_end: Any,
        entries: list[BulkEntry],
    ) -> BulkSubmitResult:
        """Submit one period for many employees.

        A failing row is rolled back to its savepoint and reported; later rows
        are still processed.
        """
        result = BulkSubmitResult()

        for index, entry in enumerate(entries):
            try:
                async with self.session.begin_nested():
                    company_of_employee = await self.repository.get_company_id_for_employee(
                        entry.employee_id
                    )
                    if company_of_employee != company_id:
                        raise NotFoundError("Employee", entry.employee_id)
                    period = PayPeriodInput.build(
                        pay_period_start,
                        pay_period_end,
                        entry.regular_hours,
                        entry.overtime_hours,
                        entry.reported_tips,
                    )
                    record = await self.submit_pay_period(entry.employee_id, period)
            except (ValidationError, NotFoundError) as e:
                logger.warning("Bulk entry row %d rejected: %s", index + 1, e)
                result.items.append(
                    BulkItemResult(index=index, employee_id=entry.employee_id, error=str(e))
                )
                continue

            result.items.append(
                BulkItemResult(index=index, employee_id=entry.employee_id, record=record)
            )

        logger.info(
            "Bulk entry for company %s: %d succeeded, %d failed",
            company_id,
            result.succeeded,
            result.failed,
        )
        return result

    async def accept_backend_record(
        self, company_id: int, payload: dict[str, Any]
    ) -> PayrollRecordData:
        """Store a backend-computed record verbatim; the calculator is bypassed.

        Raises:
            DataIntegrityError: If the backend figures do not reconcile
            NotFoundError: If the employee is not part of the company
        """
        backend = normalize_backend_record(payload)
        company_of_employee = await self.repository.get_company_id_for_employee(
            backend.employee_id
        )
        if company_of_employee != company_id:
            raise NotFoundError("Employee", backend.employee_id)

        record = await self.repository.add_record(
            employee_id=backend.employee_id,
            period=backend.period,
            gross_pay=backend.gross_pay,
            net_pay=backend.net_pay,
            deductions=backend.deductions,
            status=backend.status,
            source=RecordSource.BACKEND,
        )
        logger.info("Accepted backend record %s for employee %s", record.id, backend.employee_id)
        return record.to_data()

    async def advance_status(self, record_id: int, to_status: str) -> PayrollRecordData:
        """Move a record forward; statuses never go backwards.

        Raises:
            InvalidStatusTransitionError: If the transition is not allowed
        """
        try:
            target = RecordStatus(to_status)
        except ValueError:
            raise ValidationError(f"Unknown record status: {to_status!r}", field="status")

        record = await self.repository.get_record(record_id)
        RecordStateMachine.validate_transition(record.status, target.value)
        record = await self.repository.set_record_status(record_id, target)
        logger.info("Payroll record %s status -> %s", record_id, target.value)
        return record.to_data()
