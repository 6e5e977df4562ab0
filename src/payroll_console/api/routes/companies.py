"""Company, department, employee and custom column endpoints."""

from typing import Annotated

from fastapi import APIRouter, Path, status

from payroll_console.api.dependencies import DbSession, Importer, Repository
from payroll_console.api.schemas import (
    CompanyCreate,
    CompanyResponse,
    CsvUpload,
    CustomColumnCreate,
    CustomColumnResponse,
    CustomColumnUpdate,
    DepartmentCreate,
    DepartmentResponse,
    EmployeeCreate,
    EmployeeResponse,
    ErrorResponse,
    ImportResultResponse,
)

router = APIRouter(tags=["companies"])


# ============================================================================
# Companies
# ============================================================================


@router.get("/companies", response_model=list[CompanyResponse])
async def list_companies(repo: Repository) -> list[CompanyResponse]:
    """List all companies."""
    companies = await repo.list_companies()
    return [CompanyResponse.model_validate(c) for c in companies]


@router.post(
    "/companies",
    response_model=CompanyResponse,
    status_code=status.HTTP_201_CREATED,
    responses={422: {"model": ErrorResponse}},
)
async def create_company(
    db: DbSession, repo: Repository, payload: CompanyCreate
) -> CompanyResponse:
    """Create a company."""
    company = await repo.add_company(payload.name, payload.address, payload.location)
    await db.commit()
    return CompanyResponse.model_validate(company)


@router.get(
    "/companies/{company_id}",
    response_model=CompanyResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_company(
    repo: Repository, company_id: Annotated[int, Path()]
) -> CompanyResponse:
    """Get a company by ID."""
    company = await repo.get_company(company_id)
    return CompanyResponse.model_validate(company)


# ============================================================================
# Departments
# ============================================================================


@router.get(
    "/companies/{company_id}/departments",
    response_model=list[DepartmentResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_departments(
    repo: Repository, company_id: Annotated[int, Path()]
) -> list[DepartmentResponse]:
    """List a company's departments."""
    await repo.get_company(company_id)
    departments = await repo.list_departments(company_id)
    return [DepartmentResponse.model_validate(d) for d in departments]


@router.post(
    "/companies/{company_id}/departments",
    response_model=DepartmentResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_department(
    db: DbSession,
    repo: Repository,
    company_id: Annotated[int, Path()],
    payload: DepartmentCreate,
) -> DepartmentResponse:
    """Create a department in a company."""
    department = await repo.add_department(company_id, payload.name)
    await db.commit()
    return DepartmentResponse.model_validate(department)


# ============================================================================
# Employees
# ============================================================================


@router.get(
    "/companies/{company_id}/employees",
    response_model=list[EmployeeResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_employees(
    repo: Repository, company_id: Annotated[int, Path()]
) -> list[EmployeeResponse]:
    """List employees across a company's departments."""
    await repo.get_company(company_id)
    employees = await repo.list_employees(company_id)
    return [EmployeeResponse.model_validate(e) for e in employees]


@router.post(
    "/departments/{department_id}/employees",
    response_model=EmployeeResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_employee(
    db: DbSession,
    repo: Repository,
    department_id: Annotated[int, Path()],
    payload: EmployeeCreate,
) -> EmployeeResponse:
    """Create an employee in a department."""
    employee = await repo.add_employee(department_id=department_id, **payload.model_dump())
    await db.commit()
    return EmployeeResponse.model_validate(employee)


@router.get(
    "/employees/{employee_id}",
    response_model=EmployeeResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_employee(
    repo: Repository, employee_id: Annotated[int, Path()]
) -> EmployeeResponse:
    """Get an employee by ID."""
    employee = await repo.get_employee(employee_id)
    return EmployeeResponse.model_validate(employee)


@router.post(
    "/departments/{department_id}/employees/import",
    response_model=ImportResultResponse,
    responses={404: {"model": ErrorResponse}},
)
async def import_employees(
    db: DbSession,
    importer: Importer,
    department_id: Annotated[int, Path()],
    payload: CsvUpload,
) -> ImportResultResponse:
    """Import employees from CSV; bad rows are skipped and reported."""
    result = await importer.import_employees_csv(department_id, payload.content)
    await db.commit()
    return ImportResultResponse.model_validate(result)


# ============================================================================
# Custom columns
# ============================================================================


@router.get(
    "/companies/{company_id}/custom-columns",
    response_model=list[CustomColumnResponse],
    responses={404: {"model": ErrorResponse}},
)
async def list_custom_columns(
    repo: Repository, company_id: Annotated[int, Path()]
) -> list[CustomColumnResponse]:
    """List a company's custom payroll columns."""
    await repo.get_company(company_id)
    columns = await repo.list_custom_columns(company_id)
    return [CustomColumnResponse.model_validate(c) for c in columns]


@router.post(
    "/companies/{company_id}/custom-columns",
    response_model=CustomColumnResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def create_custom_column(
    db: DbSession,
    repo: Repository,
    company_id: Annotated[int, Path()],
    payload: CustomColumnCreate,
) -> CustomColumnResponse:
    """Add a custom payroll column."""
    column = await repo.add_custom_column(company_id, **payload.model_dump())
    await db.commit()
    return CustomColumnResponse.model_validate(column)


@router.patch(
    "/custom-columns/{column_id}",
    response_model=CustomColumnResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def update_custom_column(
    db: DbSession,
    repo: Repository,
    column_id: Annotated[int, Path()],
    payload: CustomColumnUpdate,
) -> CustomColumnResponse:
    """Update the given fields of a custom column."""
    column = await repo.update_custom_column(column_id, **payload.model_dump(exclude_none=True))
    await db.commit()
    return CustomColumnResponse.model_validate(column)


@router.delete(
    "/custom-columns/{column_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponse}},
)
async def delete_custom_column(
    db: DbSession, repo: Repository, column_id: Annotated[int, Path()]
) -> None:
    """Delete a custom column."""
    await repo.delete_custom_column(column_id)
    await db.commit()
