"""FastAPI dependencies for dependency injection."""

from collections.abc import AsyncGenerator
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from payroll_console.database import init_db
from payroll_console.services.import_service import ImportService
from payroll_console.services.payroll_service import PayrollService
from payroll_console.services.repository import PayrollRepository


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """Get database session dependency."""
    _, session_factory = init_db()
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.close()


DbSession = Annotated[AsyncSession, Depends(get_db_session)]


def get_repository(db: DbSession) -> PayrollRepository:
    return PayrollRepository(db)


def get_payroll_service(db: DbSession) -> PayrollService:
    return PayrollService(db)


def get_import_service(db: DbSession) -> ImportService:
    return ImportService(db)


# Type aliases for cleaner dependency injection
Repository = Annotated[PayrollRepository, Depends(get_repository)]
Payroll = Annotated[PayrollService, Depends(get_payroll_service)]
Importer = Annotated[ImportService, Depends(get_import_service)]
