"""Pytest fixtures for payroll console tests."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker
from sqlalchemy.pool import StaticPool

from payroll_console.calculators.types import (
    CompensationProfile,
    Deductions,
    EmployeeRef,
    FilingStatus,
    PayrollRecordData,
    PayType,
    RecordStatus,
)
from payroll_console.database import create_schema, get_engine
from payroll_console.models import Company, Department, Employee

# In-memory SQLite shared by every session of one test
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


# =============================================================================
# Pure fixtures
# =============================================================================


@pytest.fixture
def hourly_profile() -> CompensationProfile:
    """$35/h, 6% retirement."""
    return CompensationProfile(
        pay_type=PayType.HOURLY,
        pay_rate=Decimal("35"),
        retirement_rate=Decimal("0.06"),
        filing_status=FilingStatus.SINGLE,
    )


@pytest.fixture
def salary_profile() -> CompensationProfile:
    """$75,000/year, 5% retirement."""
    return CompensationProfile(
        pay_type=PayType.SALARY,
        pay_rate=Decimal("75000"),
        retirement_rate=Decimal("0.05"),
        filing_status=FilingStatus.MARRIED,
    )


def make_record(
    id: int,
    employee_id: int,
    start: date,
    end: date,
    gross: str,
    tax: str = "0",
    retirement: str = "0",
    other: str = "0",
    status: RecordStatus = RecordStatus.PENDING,
) -> PayrollRecordData:
    """Record whose net reconciles with the given gross and deductions."""
    deductions = Deductions(
        tax=Decimal(tax), retirement=Decimal(retirement), other=Decimal(other)
    )
    gross_pay = Decimal(gross)
    return PayrollRecordData(
        id=id,
        employee_id=employee_id,
        pay_period_start=start,
        pay_period_end=end,
        regular_hours=Decimal("80"),
        overtime_hours=Decimal("0"),
        reported_tips=Decimal("0"),
        gross_pay=gross_pay,
        net_pay=gross_pay - deductions.total,
        deductions=deductions,
        status=status,
    )


@pytest.fixture
def employee_refs() -> list[EmployeeRef]:
    return [
        EmployeeRef(id=1, department_id=10, first_name="Ada", last_name="Lovelace", employee_number="EMP001"),
        EmployeeRef(id=2, department_id=10, first_name="Alan", last_name="Turing", employee_number="EMP002"),
        EmployeeRef(id=3, department_id=20, first_name="Grace", last_name="Hopper", employee_number="EMP003"),
    ]


# =============================================================================
# Database fixtures
# =============================================================================


@pytest_asyncio.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Fresh in-memory database per test."""
    engine = get_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Create a database session for each test."""
    async with session_factory() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture
async def test_company(session: AsyncSession) -> Company:
    """Create a test company."""
    company = Company(name="Acme Corp", address="1 Main St", location="Springfield")
    session.add(company)
    await session.flush()
    return company


@pytest_asyncio.fixture
async def test_departments(
    session: AsyncSession, test_company: Company
) -> dict[str, Department]:
    """Create Engineering and Sales departments."""
    engineering = Department(company_id=test_company.id, name="Engineering")
    sales = Department(company_id=test_company.id, name="Sales")
    session.add_all([engineering, sales])
    await session.flush()
    return {"engineering": engineering, "sales": sales}


@pytest_asyncio.fixture
async def test_employees(
    session: AsyncSession, test_departments: dict[str, Department]
) -> dict[str, Employee]:
    """One hourly engineer and one salaried sales employee."""
    hourly = Employee(
        department_id=test_departments["engineering"].id,
        first_name="Ada",
        last_name="Lovelace",
        employee_number="EMP001",
        pay_type="hourly",
        pay_rate=Decimal("35.00"),
        filing_status="single",
        retirement_rate=Decimal("0.06"),
    )
    salaried = Employee(
        department_id=test_departments["sales"].id,
        first_name="Grace",
        last_name="Hopper",
        employee_number="EMP002",
        pay_type="salary",
        pay_rate=Decimal("75000.00"),
        filing_status="married",
        retirement_rate=Decimal("0.05"),
    )
    session.add_all([hourly, salaried])
    await session.flush()
    return {"hourly": hourly, "salaried": salaried}
