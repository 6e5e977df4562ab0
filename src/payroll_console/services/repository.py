"""Record repository - persistence and queries for companies, employees and records."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_console.calculators.types import (
    CompensationProfile,
    Deductions,
    EmployeeRef,
    FilingStatus,
    PayPeriodInput,
    PayrollRecordData,
    PayType,
    RecordSource,
    RecordStatus,
)
from payroll_console.calculators.validation import require_non_negative
from payroll_console.errors import DataIntegrityError, NotFoundError, ValidationError
from payroll_console.models import Company, CustomColumn, Department, Employee, PayrollRecord
from payroll_console.reports.aggregator import ReportFilters, filter_records

logger = logging.getLogger(__name__)

CUSTOM_COLUMN_TYPES = ("number", "percentage", "text")

# Scale of the employee pay_rate and retirement_rate columns.
RATE_QUANTUM = Decimal("0.0001")


class PayrollRepository:
    """Async repository over the payroll console schema.

    Methods flush but never commit; the caller owns the transaction.
    """

    def __init__(self, session: AsyncSession):
        self.session = session

    # === Companies ===

    async def list_companies(self) -> list[Company]:
        result = await self.session.execute(select(Company).order_by(Company.id))
        return list(result.scalars().all())

    async def get_company(self, company_id: int) -> Company:
        company = await self.session.get(Company, company_id)
        if company is None:
            raise NotFoundError("Company", company_id)
        return company

    async def add_company(
        self, name: str, address: str | None = None, location: str | None = None
    ) -> Company:
        if not name or not name.strip():
            raise ValidationError("Company name is required", field="name")
        company = Company(name=name.strip(), address=address, location=location)
        self.session.add(company)
        await self.session.flush()
        return company

    # === Departments ===

    async def list_departments(self, company_id: int) -> list[Department]:
        result = await self.session.execute(
            select(Department).where(Department.company_id == company_id).order_by(Department.id)
        )
        return list(result.scalars().all())

    async def get_department(self, department_id: int) -> Department:
        department = await self.session.get(Department, department_id)
        if department is None:
            raise NotFoundError("Department", department_id)
        return department

    async def add_department(self, company_id: int, name: str) -> Department:
        await self.get_company(company_id)
        if not name or not name.strip():
            raise ValidationError("Department name is required", field="name")
        department = Department(company_id=company_id, name=name.strip())
        self.session.add(department)
        await self.session.flush()
        return department

    # === Employees ===

    async def list_employees(self, company_id: int) -> list[Employee]:
        result = await self.session.execute(
            select(Employee)
            .join(Department, Employee.department_id == Department.id)
            .where(Department.company_id == company_id)
            .order_by(Employee.id)
        )
        return list(result.scalars().all())

    async def list_employee_refs(self, company_id: int) -> list[EmployeeRef]:
        return [e.to_ref() for e in await self.list_employees(company_id)]

    async def get_employee(self, employee_id: int) -> Employee:
        employee = await self.session.get(Employee, employee_id)
        if employee is None:
            raise NotFoundError("Employee", employee_id)
        return employee

    async def find_employee_by_number(
        self, company_id: int, employee_number: str
    ) -> Employee | None:
        result = await self.session.execute(
            select(Employee)
            .join(Department, Employee.department_id == Department.id)
            .where(
                Department.company_id == company_id,
                Employee.employee_number == employee_number.strip(),
            )
        )
        return result.scalars().first()

    async def add_employee(
        self,
        department_id: int,
        first_name: str,
        last_name: str,
        employee_number: str,
        pay_type: str | PayType = PayType.HOURLY,
        pay_rate: Any = 0,
        filing_status: str | FilingStatus = FilingStatus.SINGLE,
        retirement_rate: Any = 0,
    ) -> Employee:
        """Create an employee; employee numbers are unique within a company."""
        department = await self.get_department(department_id)
        for field, value in (
            ("first_name", first_name),
            ("last_name", last_name),
            ("employee_number", employee_number),
        ):
            if not value or not str(value).strip():
                raise ValidationError(f"{field} is required", field=field)

        profile = CompensationProfile.build(pay_type, pay_rate, retirement_rate, filing_status)
        for field, rate in (
            ("pay_rate", profile.pay_rate),
            ("retirement_rate", profile.retirement_rate),
        ):
            if rate != rate.quantize(RATE_QUANTUM):
                raise ValidationError(
                    f"{field} cannot have more than 4 decimal places", field=field
                )

        existing = await self.find_employee_by_number(department.company_id, employee_number)
        if existing is not None:
            raise ValidationError(
                f"Employee number already exists: {employee_number}",
                field="employee_number",
            )

        employee = Employee(
            department_id=department_id,
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            employee_number=employee_number.strip(),
            pay_type=profile.pay_type.value,
            pay_rate=profile.pay_rate,
            filing_status=profile.filing_status.value,
            retirement_rate=profile.retirement_rate,
        )
        self.session.add(employee)
        await self.session.flush()
        return employee

    async def get_compensation_profile(self, employee_id: int) -> CompensationProfile:
        employee = await self.get_employee(employee_id)
        return employee.to_profile()

    async def get_company_id_for_employee(self, employee_id: int) -> int:
        result = await self.session.execute(
            select(Department.company_id)
            .join(Employee, Employee.department_id == Department.id)
            .where(Employee.id == employee_id)
        )
        company_id = result.scalar_one_or_none()
        if company_id is None:
            raise NotFoundError("Employee", employee_id)
        return company_id

    # === Custom columns ===

    async def list_custom_columns(self, company_id: int) -> list[CustomColumn]:
        result = await self.session.execute(
            select(CustomColumn)
            .where(CustomColumn.company_id == company_id)
            .order_by(CustomColumn.id)
        )
        return list(result.scalars().all())

    async def get_custom_column(self, column_id: int) -> CustomColumn:
        column = await self.session.get(CustomColumn, column_id)
        if column is None:
            raise NotFoundError("Custom column", column_id)
        return column

    async def add_custom_column(
        self,
        company_id: int,
        name: str,
        column_type: str = "number",
        is_deduction: bool = False,
        include_in_payroll: bool = True,
        not_subject_to_withholding: bool = False,
    ) -> CustomColumn:
        await self.get_company(company_id)
        self._validate_custom_column(name, column_type)
        column = CustomColumn(
            company_id=company_id,
            name=name.strip(),
            column_type=column_type,
            is_deduction=is_deduction,
            include_in_payroll=include_in_payroll,
            not_subject_to_withholding=not_subject_to_withholding,
        )
        self.session.add(column)
        await self.session.flush()
        return column

    async def update_custom_column(self, column_id: int, **updates: Any) -> CustomColumn:
        column = await self.get_custom_column(column_id)
        allowed = {
            "name",
            "column_type",
            "is_deduction",
            "include_in_payroll",
            "not_subject_to_withholding",
        }
        unknown = set(updates) - allowed
        if unknown:
            raise ValidationError(f"Unknown custom column fields: {sorted(unknown)}")
        self._validate_custom_column(
            updates.get("name", column.name), updates.get("column_type", column.column_type)
        )
        for key, value in updates.items():
            setattr(column, key, value.strip() if key == "name" else value)
        await self.session.flush()
        return column

    async def delete_custom_column(self, column_id: int) -> None:
        column = await self.get_custom_column(column_id)
        await self.session.delete(column)
        await self.session.flush()

    @staticmethod
    def _validate_custom_column(name: str, column_type: str) -> None:
        if not name or not name.strip():
            raise ValidationError("Column name is required", field="name")
        if column_type not in CUSTOM_COLUMN_TYPES:
            raise ValidationError(
                f"column_type must be one of {CUSTOM_COLUMN_TYPES}", field="column_type"
            )

    # === Payroll records ===

    async def add_record(
        self,
        employee_id: int,
        period: PayPeriodInput,
        gross_pay: Decimal,
        net_pay: Decimal,
        deductions: Deductions,
        status: RecordStatus = RecordStatus.PENDING,
        source: RecordSource = RecordSource.CALCULATED,
        idempotency_key: str | None = None,
        inputs_fingerprint: str | None = None,
    ) -> PayrollRecord:
        """Persist a record; the employee must exist and the figures must reconcile."""
        await self.get_employee(employee_id)

        for name, value in (
            ("gross_pay", gross_pay),
            ("tax", deductions.tax),
            ("retirement", deductions.retirement),
            ("other", deductions.other),
        ):
            require_non_negative(value, name)
        if net_pay != gross_pay - deductions.total:
            raise DataIntegrityError(
                "Net pay does not equal gross pay minus deductions",
                context={"gross_pay": gross_pay, "net_pay": net_pay, "deductions": deductions.total},
            )

        record = PayrollRecord(
            employee_id=employee_id,
            pay_period_start=period.pay_period_start,
            pay_period_end=period.pay_period_end,
            regular_hours=period.regular_hours,
            overtime_hours=period.overtime_hours,
            reported_tips=period.reported_tips,
            gross_pay=gross_pay,
            net_pay=net_pay,
            tax_deduction=deductions.tax,
            retirement_deduction=deductions.retirement,
            other_deduction=deductions.other,
            status=RecordStatus(status).value,
            source=RecordSource(source).value,
            idempotency_key=idempotency_key,
            inputs_fingerprint=inputs_fingerprint,
        )
        self.session.add(record)
        await self.session.flush()
        logger.debug("Stored payroll record %s for employee %s", record.id, employee_id)
        return record

    async def get_record(self, record_id: int) -> PayrollRecord:
        record = await self.session.get(PayrollRecord, record_id)
        if record is None:
            raise NotFoundError("Payroll record", record_id)
        return record

    async def find_record_by_idempotency_key(self, key: str) -> PayrollRecord | None:
        result = await self.session.execute(
            select(PayrollRecord).where(PayrollRecord.idempotency_key == key)
        )
        return result.scalar_one_or_none()

    async def list_records(
        self, company_id: int, filters: ReportFilters | None = None
    ) -> list[PayrollRecordData]:
        """All records of a company's employees, optionally narrowed by report filters."""
        result = await self.session.execute(
            select(PayrollRecord)
            .join(Employee, PayrollRecord.employee_id == Employee.id)
            .join(Department, Employee.department_id == Department.id)
            .where(Department.company_id == company_id)
            .order_by(PayrollRecord.pay_period_end, PayrollRecord.id)
        )
        records = [r.to_data() for r in result.scalars().all()]
        if filters is None:
            return records
        employees = await self.list_employee_refs(company_id)
        return filter_records(records, employees, filters)

    async def set_record_status(self, record_id: int, status: RecordStatus) -> PayrollRecord:
        """Write a new status. Transition rules are enforced by the caller."""
        record = await self.get_record(record_id)
        record.status = RecordStatus(status).value
        await self.session.flush()
        return record
