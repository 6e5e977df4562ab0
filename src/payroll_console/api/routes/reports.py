"""Report and dashboard chart endpoints."""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Path, Query, Response

from payroll_console.api.dependencies import Repository
from payroll_console.api.schemas import (
    ChartSeriesResponse,
    ChartsResponse,
    ErrorResponse,
    ReportRequest,
    ReportResponse,
)
from payroll_console.exports.csv_export import CsvExporter, export_filename
from payroll_console.reports.aggregator import (
    department_distribution,
    earnings_breakdown,
    payroll_trends,
    summarize,
)

router = APIRouter(prefix="/companies/{company_id}/reports", tags=["reports"])


@router.post(
    "",
    response_model=ReportResponse,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def generate_report(
    repo: Repository,
    company_id: Annotated[int, Path()],
    payload: ReportRequest,
) -> ReportResponse:
    """Totals over records whose period ends inside the date range."""
    await repo.get_company(company_id)
    filters = payload.to_filters()
    records = await repo.list_records(company_id, filters)
    return ReportResponse.from_summary(summarize(records), filters)


@router.post(
    "/export",
    response_class=Response,
    responses={404: {"model": ErrorResponse}, 422: {"model": ErrorResponse}},
)
async def export_report(
    repo: Repository,
    company_id: Annotated[int, Path()],
    payload: ReportRequest,
) -> Response:
    """Report totals as CSV."""
    await repo.get_company(company_id)
    filters = payload.to_filters()
    records = await repo.list_records(company_id, filters)

    exporter = CsvExporter()
    filename = export_filename("payroll_report", date.today())
    return Response(
        content=exporter.export_summary(summarize(records), filters.start_date, filters.end_date),
        media_type=exporter.media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get(
    "/charts",
    response_model=ChartsResponse,
    responses={404: {"model": ErrorResponse}},
)
async def get_charts(
    repo: Repository,
    company_id: Annotated[int, Path()],
    periods: Annotated[int, Query(ge=1, le=52)] = 6,
) -> ChartsResponse:
    """Dashboard datasets over all of a company's records."""
    await repo.get_company(company_id)
    records = await repo.list_records(company_id)
    employees = await repo.list_employee_refs(company_id)
    departments = [d.to_ref() for d in await repo.list_departments(company_id)]

    return ChartsResponse(
        payroll_trends=ChartSeriesResponse.from_series(payroll_trends(records, periods)),
        department_distribution=ChartSeriesResponse.from_series(
            department_distribution(records, employees, departments)
        ),
        earnings_breakdown=ChartSeriesResponse.from_series(earnings_breakdown(records)),
    )
