"""Tests for payroll record submission, bulk entry and status changes."""

from datetime import date
from decimal import Decimal

import pytest

from payroll_console.calculators.types import (
    PayPeriodInput,
    RecordSource,
    RecordStatus,
)
from payroll_console.errors import DataIntegrityError, NotFoundError, ValidationError
from payroll_console.models import Company, Department, Employee
from payroll_console.services import (
    BulkEntry,
    InvalidStatusTransitionError,
    PayrollRepository,
    PayrollService,
)

pytestmark = pytest.mark.asyncio

PERIOD = PayPeriodInput.build("2024-03-01", "2024-03-15", "75", "10", "200")


class TestSubmitPayPeriod:
    """Single-record submission."""

    async def test_creates_pending_record(self, session, test_employees):
        service = PayrollService(session)
        employee = test_employees["hourly"]

        record = await service.submit_pay_period(employee.id, PERIOD)

        assert record.id is not None
        assert record.employee_id == employee.id
        assert record.gross_pay == Decimal("3350.00")
        assert record.deductions.tax == Decimal("670.00")
        assert record.deductions.retirement == Decimal("201.00")
        assert record.net_pay == Decimal("2479.00")
        assert record.status == RecordStatus.PENDING
        assert record.source == RecordSource.CALCULATED
        assert record.pay_period_end == date(2024, 3, 15)

    async def test_salaried_employee(self, session, test_employees):
        service = PayrollService(session)

        record = await service.submit_pay_period(test_employees["salaried"].id, PERIOD)

        # 75000 / 26 plus 200 tips; overtime ignored
        assert record.gross_pay == Decimal("3084.62")

    async def test_unknown_employee(self, session, test_employees):
        service = PayrollService(session)

        with pytest.raises(NotFoundError, match="Employee not found: 999"):
            await service.submit_pay_period(999, PERIOD)

    async def test_idempotent_replay(self, session, test_company, test_employees):
        service = PayrollService(session)
        employee_id = test_employees["hourly"].id

        first = await service.submit_pay_period(employee_id, PERIOD, idempotency_key="abc-1")
        second = await service.submit_pay_period(employee_id, PERIOD, idempotency_key="abc-1")

        assert second.id == first.id
        records = await PayrollRepository(session).list_records(test_company.id)
        assert len(records) == 1

    async def test_idempotency_key_bound_to_employee(self, session, test_employees):
        service = PayrollService(session)
        await service.submit_pay_period(
            test_employees["hourly"].id, PERIOD, idempotency_key="abc-2"
        )

        with pytest.raises(ValidationError) as exc_info:
            await service.submit_pay_period(
                test_employees["salaried"].id, PERIOD, idempotency_key="abc-2"
            )

        assert exc_info.value.field == "idempotency_key"


class TestSubmitBulk:
    """Bulk entry records every row's outcome and never aborts."""

    async def test_partial_success(self, session, test_company, test_employees):
        service = PayrollService(session)
        entries = [
            BulkEntry(employee_id=test_employees["hourly"].id, regular_hours="80"),
            BulkEntry(employee_id=test_employees["salaried"].id, regular_hours="80"),
            BulkEntry(employee_id=999, regular_hours="80"),
            BulkEntry(employee_id=test_employees["hourly"].id, regular_hours="-4"),
        ]

        result = await service.submit_bulk(
            test_company.id, date(2024, 3, 1), date(2024, 3, 15), entries
        )

        assert result.succeeded == 2
        assert result.failed == 2
        assert result.partial is True
        assert result.all_succeeded is False
        assert result.errors == [
            "Row 3: Employee not found: 999",
            "Row 4: regular_hours cannot be negative",
        ]
        assert [r.gross_pay for r in result.records] == [
            Decimal("2800.00"),
            Decimal("2884.62"),
        ]

        stored = await PayrollRepository(session).list_records(test_company.id)
        assert len(stored) == 2

    async def test_reversed_period_fails_every_row(self, session, test_company, test_employees):
        service = PayrollService(session)
        entries = [BulkEntry(employee_id=e.id, regular_hours="8") for e in test_employees.values()]

        result = await service.submit_bulk(
            test_company.id, date(2024, 3, 15), date(2024, 3, 1), entries
        )

        assert result.all_failed is True
        assert result.records == []

    async def test_employee_of_other_company_rejected(self, session, test_company, test_employees):
        other = Company(name="Other Inc")
        session.add(other)
        await session.flush()
        department = Department(company_id=other.id, name="Ops")
        session.add(department)
        await session.flush()
        outsider = Employee(
            department_id=department.id,
            first_name="Out",
            last_name="Sider",
            employee_number="X1",
            pay_type="hourly",
            pay_rate=Decimal("10"),
            filing_status="single",
            retirement_rate=Decimal("0"),
        )
        session.add(outsider)
        await session.flush()

        result = await PayrollService(session).submit_bulk(
            test_company.id,
            date(2024, 3, 1),
            date(2024, 3, 15),
            [BulkEntry(employee_id=outsider.id, regular_hours="8")],
        )

        assert result.all_failed is True
        assert "Employee not found" in result.errors[0]


class TestAcceptBackendRecord:
    """Backend-computed records are stored as reported."""

    def payload(self, employee_id, **overrides):
        data = {
            "employee_id": employee_id,
            "pay_period_start": "2024-03-01",
            "pay_period_end": "2024-03-15",
            "regular_hours": 80,
            "gross_pay": "2000.00",
            "net_pay": "1450.00",
            "withholding_tax": "400.00",
            "retirement_payment": "80.00",
            "roth_retirement_payment": "20.00",
            "total_deductions": "550.00",
            "status": "processed",
        }
        data.update(overrides)
        return data

    async def test_stored_verbatim(self, session, test_company, test_employees):
        service = PayrollService(session)

        record = await service.accept_backend_record(
            test_company.id, self.payload(test_employees["hourly"].id)
        )

        assert record.source == RecordSource.BACKEND
        assert record.status == RecordStatus.PROCESSED
        assert record.gross_pay == Decimal("2000.00")
        assert record.deductions.other == Decimal("50.00")

    async def test_inconsistent_figures_not_stored(self, session, test_company, test_employees):
        service = PayrollService(session)

        with pytest.raises(DataIntegrityError):
            await service.accept_backend_record(
                test_company.id,
                self.payload(test_employees["hourly"].id, total_deductions="450.00"),
            )

        assert await PayrollRepository(session).list_records(test_company.id) == []

    async def test_employee_must_belong_to_company(self, session, test_company, test_employees):
        with pytest.raises(NotFoundError):
            await PayrollService(session).accept_backend_record(
                test_company.id + 1, self.payload(test_employees["hourly"].id)
            )


class TestAdvanceStatus:
    """Statuses only move forward."""

    async def test_forward_progression(self, session, test_employees):
        service = PayrollService(session)
        record = await service.submit_pay_period(test_employees["hourly"].id, PERIOD)

        processed = await service.advance_status(record.id, "processed")
        paid = await service.advance_status(record.id, "paid")

        assert processed.status == RecordStatus.PROCESSED
        assert paid.status == RecordStatus.PAID

    async def test_backwards_rejected(self, session, test_employees):
        service = PayrollService(session)
        record = await service.submit_pay_period(test_employees["hourly"].id, PERIOD)
        await service.advance_status(record.id, "paid")

        with pytest.raises(InvalidStatusTransitionError):
            await service.advance_status(record.id, "pending")

    async def test_unknown_status(self, session, test_employees):
        service = PayrollService(session)
        record = await service.submit_pay_period(test_employees["hourly"].id, PERIOD)

        with pytest.raises(ValidationError):
            await service.advance_status(record.id, "void")

    async def test_missing_record(self, session, test_employees):
        with pytest.raises(NotFoundError):
            await PayrollService(session).advance_status(12345, "paid")
