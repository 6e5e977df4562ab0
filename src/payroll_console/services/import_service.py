"""CSV import of payroll records and employees."""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass, field

from sqlalchemy.ext.asyncio import AsyncSession

from payroll_console.calculators.pay_calculator import PayCalculator
from payroll_console.calculators.types import FilingStatus, PayPeriodInput, PayType
from payroll_console.errors import NotFoundError, ValidationError
from payroll_console.services.payroll_service import PayrollService
from payroll_console.services.repository import PayrollRepository

logger = logging.getLogger(__name__)

PAYROLL_TEMPLATE = (
    "Employee Number,Pay Period Start,Pay Period End,Regular Hours,Overtime Hours,Tips\n"
    "EMP001,2024-03-01,2024-03-15,80,5,100\n"
)

EMPLOYEE_TEMPLATE = (
    "First Name,Last Name,Employee Number,Payroll Type,Pay Rate,Filing Status,Retirement Rate\n"
    "John,Doe,EMP001,hourly,25.00,single,0.05\n"
)

PAYROLL_COLUMNS = 6
EMPLOYEE_COLUMNS = 7


@dataclass
class ImportResult:
    """Counts and messages for one import; failed rows never stop the batch."""

    success: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)

    def fail(self, message: str) -> None:
        self.failed += 1
        self.errors.append(message)

    @property
    def partial(self) -> bool:
        return self.success > 0 and self.failed > 0

    @property
    def all_failed(self) -> bool:
        return self.failed > 0 and self.success == 0


def iter_csv_rows(text: str) -> list[tuple[int, str, list[str]]]:
    """Data rows as (line number, raw line, trimmed fields); header and blank lines skipped."""
    rows: list[tuple[int, str, list[str]]] = []
    lines = text.splitlines()
    for line_no, raw in enumerate(lines[1:], start=2):
        if not raw.strip():
            continue
        fields = next(csv.reader(io.StringIO(raw)), [])
        rows.append((line_no, raw, [f.strip() for f in fields]))
    return rows


class ImportService:
    """Imports CSV uploads row by row, skipping and reporting bad rows."""

    def __init__(self, session: AsyncSession, calculator: PayCalculator | None = None):
        self.session = session
        self.repository = PayrollRepository(session)
        self.payroll_service = PayrollService(session, calculator)

    async def import_payroll_csv(self, company_id: int, text: str) -> ImportResult:
        """Import rows of employeeNumber, start, end, regular hours, overtime hours, tips."""
        await self.repository.get_company(company_id)
        result = ImportResult()

        for line_no, raw, fields in iter_csv_rows(text):
            if len(fields) < PAYROLL_COLUMNS:
                result.fail(f"Invalid row format: {raw}")
                continue

            employee_number, start, end, regular_hours, overtime_hours, tips = fields[:PAYROLL_COLUMNS]
            employee = await self.repository.find_employee_by_number(company_id, employee_number)
            if employee is None:
                result.fail(f"Employee not found: {employee_number}")
                continue

            try:
                async with self.session.begin_nested():
                    period = PayPeriodInput.build(start, end, regular_hours, overtime_hours, tips)
                    await self.payroll_service.submit_pay_period(employee.id, period)
            except (ValidationError, NotFoundError) as e:
                result.fail(f"Invalid row {line_no} ({employee_number}): {e}")
                continue

            result.success += 1

        logger.info(
            "Payroll import for company %s: %d imported, %d failed",
            company_id,
            result.success,
            result.failed,
        )
        return result

    async def import_employees_csv(self, department_id: int, text: str) -> ImportResult:
        """Import rows of first name, last name, number, payroll type, rate, filing status, retirement rate."""
        await self.repository.get_department(department_id)
        result = ImportResult()

        for line_no, raw, fields in iter_csv_rows(text):
            fields = fields + [""] * (EMPLOYEE_COLUMNS - len(fields))
            first_name, last_name, employee_number, payroll_type, pay_rate, filing_status, retirement_rate = fields[:EMPLOYEE_COLUMNS]

            if not first_name or not last_name or not employee_number:
                result.fail(f"Missing required fields: {raw}")
                continue

            try:
                async with self.session.begin_nested():
                    await self.repository.add_employee(
                        department_id=department_id,
                        first_name=first_name,
                        last_name=last_name,
                        employee_number=employee_number,
                        pay_type=PayType.SALARY if payroll_type.lower() == "salary" else PayType.HOURLY,
                        pay_rate=pay_rate or "0",
                        filing_status=(filing_status or FilingStatus.SINGLE.value).lower(),
                        retirement_rate=retirement_rate or "0",
                    )
            except ValidationError as e:
                result.fail(f"Invalid row {line_no} ({employee_number}): {e}")
                continue

            result.success += 1

        logger.info(
            "Employee import for department %s: %d imported, %d failed",
            department_id,
            result.success,
            result.failed,
        )
        return result
