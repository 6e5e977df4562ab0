"""Payroll record endpoints: entry, import, lookup, status, export and checks."""

from datetime import date
from typing import Annotated, Any

from fastapi import APIRouter, Body, Header, Path, Query, Response, status

from payroll_console.api.dependencies import DbSession, Importer, Payroll, Repository
from payroll_console.api.schemas import (
    BulkSubmitRequest,
    BulkSubmitResponse,
    CheckResponse,
    CsvUpload,
    ErrorResponse,
    ImportResultResponse,
    PayPeriodRequest,
    PayPreviewResponse,
    PayrollRecordListResponse,
    PayrollRecordResponse,
    StatusUpdate,
)
from payroll_console.calculators.types import PayPeriodInput, PayrollRecordData
from payroll_console.exports.checks import build_check
from payroll_console.exports.csv_export import CsvExporter, export_filename
from payroll_console.reports.aggregator import lookup_records
from payroll_console.services.payroll_service import BulkEntry
from payroll_console.services.repository import PayrollRepository

router = APIRouter(tags=["payroll-records"])


async def _lookup(
    repo: PayrollRepository,
    company_id: int,
    start_date: date | None,
    end_date: date | None,
    employee_id: int | None,
    department_id: int | None,
    search: str | None,
) -> list[PayrollRecordData]:
    await repo.get_company(company_id)
    records = await repo.list_records(company_id)
    employees = await repo.list_employee_refs(company_id)

    if employee_id is not None:
        records = [r for r in records if r.employee_id == employee_id]
    if department_id is not None:
        in_department = {e.id for e in employees if e.department_id == department_id}
        records = [r for r in records if r.employee_id in in_department]

    return lookup_records(records, employees, start_date, end_date, search)


# ============================================================================
# Lookup and export
# ============================================================================


@router.get(
    "/companies/{company_id}/payroll-records",
    response_model=PayrollRecordListResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def list_payroll_records(
    repo: Repository,
    company_id: Annotated[int, Path()],
    start_date: date | None = None,
    end_date: date | None = None,
    employee_id: int | None = None,
    department_id: int | None = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> PayrollRecordListResponse:
    """Look up records whose whole pay period falls inside the date range."""
    records = await _lookup(
        repo, company_id, start_date, end_date, employee_id, department_id, search
    )
    return PayrollRecordListResponse(
        items=[PayrollRecordResponse.from_data(r) for r in records],
        total=len(records),
    )


@router.get(
    "/companies/{company_id}/payroll-records/export",
    response_class=Response,
    responses={404: {"model": ErrorResponse}},
)
async def export_payroll_records(
    repo: Repository,
    company_id: Annotated[int, Path()],
    start_date: date | None = None,
    end_date: date | None = None,
    employee_id: int | None = None,
    department_id: int | None = None,
    search: Annotated[str | None, Query(max_length=200)] = None,
) -> Response:
    """Export the looked-up records as CSV."""
    records = await _lookup(
        repo, company_id, start_date, end_date, employee_id, department_id, search
    )
    employees = await repo.list_employee_refs(company_id)

    exporter = CsvExporter()
    filename = export_filename("payroll_records", date.today())
    return Response(
        content=exporter.export_records(records, employees),
        media_type=exporter.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


# ============================================================================
# Entry
# ============================================================================


@router.post(
    "/employees/{employee_id}/payroll-preview",
    response_model=PayPreviewResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def preview_pay(
    repo: Repository,
    payroll: Payroll,
    employee_id: Annotated[int, Path()],
    payload: PayPeriodRequest,
) -> PayPreviewResponse:
    """Calculate pay for a period without storing a record."""
    profile = await repo.get_compensation_profile(employee_id)
    period = PayPeriodInput.build(**payload.model_dump())
    calculation = payroll.calculator.calculate(profile, period)
    return PayPreviewResponse.from_calculation(calculation)


@router.post(
    "/employees/{employee_id}/payroll-records",
    response_model=PayrollRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def submit_payroll_record(
    db: DbSession,
    payroll: Payroll,
    employee_id: Annotated[int, Path()],
    payload: PayPeriodRequest,
    idempotency_key: Annotated[str | None, Header(alias="Idempotency-Key")] = None,
) -> PayrollRecordResponse:
    """Calculate and store one pay period for an employee.

    Repeating a request with the same Idempotency-Key returns the record
    created by the first request.
    """
    period = PayPeriodInput.build(**payload.model_dump())
    record = await payroll.submit_pay_period(employee_id, period, idempotency_key)
    await db.commit()
    return PayrollRecordResponse.from_data(record)


@router.post(
    "/companies/{company_id}/payroll-records/bulk",
    response_model=BulkSubmitResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def submit_bulk(
    db: DbSession,
    repo: Repository,
    payroll: Payroll,
    company_id: Annotated[int, Path()],
    payload: BulkSubmitRequest,
) -> BulkSubmitResponse:
    """Submit one pay period for many employees; failing rows are reported."""
    await repo.get_company(company_id)
    entries = [
        BulkEntry(
            employee_id=e.employee_id,
            regular_hours=e.regular_hours,
            overtime_hours=e.overtime_hours,
            reported_tips=e.reported_tips,
        )
        for e in payload.entries
    ]
    result = await payroll.submit_bulk(
        company_id, payload.pay_period_start, payload.pay_period_end, entries
    )
    await db.commit()
    return BulkSubmitResponse(
        records=[PayrollRecordResponse.from_data(r) for r in result.records],
        errors=result.errors,
        succeeded=result.succeeded,
        failed=result.failed,
        partial=result.partial,
    )


@router.post(
    "/companies/{company_id}/payroll-records/import",
    response_model=ImportResultResponse,
    responses={404: {"model": ErrorResponse}},
)
async def import_payroll_records(
    db: DbSession,
    importer: Importer,
    company_id: Annotated[int, Path()],
    payload: CsvUpload,
) -> ImportResultResponse:
    """Import payroll records from CSV; bad rows are skipped and reported."""
    result = await importer.import_payroll_csv(company_id, payload.content)
    await db.commit()
    return ImportResultResponse.model_validate(result)


@router.post(
    "/companies/{company_id}/payroll-records/backend",
    response_model=PayrollRecordResponse,
    status_code=status.HTTP_201_CREATED,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def accept_backend_record(
    db: DbSession,
    payroll: Payroll,
    company_id: Annotated[int, Path()],
    payload: Annotated[dict[str, Any], Body()],
) -> PayrollRecordResponse:
    """Store a record whose figures were computed by the payroll backend."""
    record = await payroll.accept_backend_record(company_id, payload)
    await db.commit()
    return PayrollRecordResponse.from_data(record)


# ============================================================================
# Status and checks
# ============================================================================


@router.patch(
    "/payroll-records/{record_id}/status",
    response_model=PayrollRecordResponse,
    responses={
        404: {"model": ErrorResponse},
        409: {"model": ErrorResponse},
        422: {"model": ErrorResponse},
    },
)
async def update_record_status(
    db: DbSession,
    payroll: Payroll,
    record_id: Annotated[int, Path()],
    payload: StatusUpdate,
) -> PayrollRecordResponse:
    """Move a record forward to processed or paid."""
    record = await payroll.advance_status(record_id, payload.status)
    await db.commit()
    return PayrollRecordResponse.from_data(record)


@router.get(
    "/payroll-records/{record_id}/check",
    response_model=CheckResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_check(
    repo: Repository, record_id: Annotated[int, Path()]
) -> CheckResponse:
    """Printable check content for a record."""
    record = await repo.get_record(record_id)
    employee = await repo.get_employee(record.employee_id)
    company = await repo.get_company(
        await repo.get_company_id_for_employee(record.employee_id)
    )
    check = build_check(
        record.to_data(),
        employee.to_ref(),
        company.name,
        profile=employee.to_profile(),
    )
    return CheckResponse.from_check(check)
