"""API test fixtures: the app wired to the per-test in-memory database."""

from collections.abc import AsyncGenerator
from typing import Any

import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from payroll_console.api.app import create_app
from payroll_console.api.dependencies import get_db_session


@pytest_asyncio.fixture
async def client(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get a session on the test database."""
    app = create_app()

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db_session] = override_get_db_session

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as client:
        yield client


@pytest_asyncio.fixture
async def seeded(client: AsyncClient) -> dict[str, Any]:
    """A company with two departments, an hourly and a salaried employee."""
    company = (await client.post("/api/v1/companies", json={"name": "Acme Corp"})).json()
    engineering = (
        await client.post(
            f"/api/v1/companies/{company['id']}/departments", json={"name": "Engineering"}
        )
    ).json()
    sales = (
        await client.post(
            f"/api/v1/companies/{company['id']}/departments", json={"name": "Sales"}
        )
    ).json()
    hourly = (
        await client.post(
            f"/api/v1/departments/{engineering['id']}/employees",
            json={
                "first_name": "Ada",
                "last_name": "Lovelace",
                "employee_number": "EMP001",
                "pay_type": "hourly",
                "pay_rate": "35.00",
                "filing_status": "single",
                "retirement_rate": "0.06",
            },
        )
    ).json()
    salaried = (
        await client.post(
            f"/api/v1/departments/{sales['id']}/employees",
            json={
                "first_name": "Grace",
                "last_name": "Hopper",
                "employee_number": "EMP002",
                "pay_type": "salary",
                "pay_rate": "75000.00",
                "filing_status": "married",
                "retirement_rate": "0.05",
            },
        )
    ).json()
    return {
        "company": company,
        "departments": {"engineering": engineering, "sales": sales},
        "employees": {"hourly": hourly, "salaried": salaried},
    }
