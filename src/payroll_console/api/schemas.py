"""Pydantic schemas for API request/response models."""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field

from payroll_console.calculators.types import (
    ChartSeries,
    PayCalculation,
    PayrollRecordData,
    StubLine,
)
from payroll_console.exports.checks import CheckData
from payroll_console.reports.aggregator import ReportFilters, ReportSummary, ReportType


# ============================================================================
# Common
# ============================================================================


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""

    detail: str
    code: str
    field: str | None = None


class CsvUpload(BaseModel):
    """CSV file contents, header row included."""

    content: str


class ImportResultResponse(BaseModel):
    """Outcome of a CSV import."""

    model_config = ConfigDict(from_attributes=True)

    success: int
    failed: int
    errors: list[str]
    partial: bool


# ============================================================================
# Company schemas
# ============================================================================


class CompanyCreate(BaseModel):
    """Schema for creating a company."""

    name: str
    address: str | None = None
    location: str | None = None


class CompanyResponse(BaseModel):
    """Schema for company response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    address: str | None = None
    location: str | None = None
    created_at: datetime


class DepartmentCreate(BaseModel):
    """Schema for creating a department."""

    name: str


class DepartmentResponse(BaseModel):
    """Schema for department response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    name: str


class CustomColumnCreate(BaseModel):
    """Schema for creating a custom payroll column."""

    name: str
    column_type: str = "number"
    is_deduction: bool = False
    include_in_payroll: bool = True
    not_subject_to_withholding: bool = False


class CustomColumnUpdate(BaseModel):
    """Partial update of a custom payroll column."""

    name: str | None = None
    column_type: str | None = None
    is_deduction: bool | None = None
    include_in_payroll: bool | None = None
    not_subject_to_withholding: bool | None = None


class CustomColumnResponse(BaseModel):
    """Schema for custom column response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    company_id: int
    name: str
    column_type: str
    is_deduction: bool
    include_in_payroll: bool
    not_subject_to_withholding: bool


# ============================================================================
# Employee schemas
# ============================================================================


class EmployeeCreate(BaseModel):
    """Schema for creating an employee."""

    first_name: str
    last_name: str
    employee_number: str
    pay_type: str = "hourly"
    pay_rate: Decimal = Decimal("0")
    filing_status: str = "single"
    retirement_rate: Decimal = Decimal("0")


class EmployeeResponse(BaseModel):
    """Schema for employee response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    department_id: int
    first_name: str
    last_name: str
    employee_number: str
    pay_type: str
    pay_rate: Decimal
    filing_status: str
    retirement_rate: Decimal


# ============================================================================
# Payroll record schemas
# ============================================================================


class PayPeriodRequest(BaseModel):
    """Hours and tips for one employee and one pay period."""

    pay_period_start: date
    pay_period_end: date
    regular_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    reported_tips: Decimal = Decimal("0")


class DeductionsResponse(BaseModel):
    """Deduction breakdown of a record."""

    tax: Decimal
    retirement: Decimal
    other: Decimal
    total: Decimal


class PayrollRecordResponse(BaseModel):
    """Schema for payroll record response."""

    id: int
    employee_id: int
    pay_period_start: date
    pay_period_end: date
    regular_hours: Decimal
    overtime_hours: Decimal
    reported_tips: Decimal
    gross_pay: Decimal
    net_pay: Decimal
    deductions: DeductionsResponse
    status: str
    source: str
    created_at: datetime | None = None

    @classmethod
    def from_data(cls, record: PayrollRecordData) -> "PayrollRecordResponse":
        return cls(
            id=record.id,
            employee_id=record.employee_id,
            pay_period_start=record.pay_period_start,
            pay_period_end=record.pay_period_end,
            regular_hours=record.regular_hours,
            overtime_hours=record.overtime_hours,
            reported_tips=record.reported_tips,
            gross_pay=record.gross_pay,
            net_pay=record.net_pay,
            deductions=DeductionsResponse(
                tax=record.deductions.tax,
                retirement=record.deductions.retirement,
                other=record.deductions.other,
                total=record.deductions.total,
            ),
            status=record.status.value,
            source=record.source.value,
            created_at=record.created_at,
        )


class PayrollRecordListResponse(BaseModel):
    """Schema for listing payroll records."""

    items: list[PayrollRecordResponse]
    total: int


class StatusUpdate(BaseModel):
    """Requested record status."""

    status: str


class BulkEntryRequest(BaseModel):
    """One employee's row in a bulk entry."""

    employee_id: int
    regular_hours: Decimal = Decimal("0")
    overtime_hours: Decimal = Decimal("0")
    reported_tips: Decimal = Decimal("0")


class BulkSubmitRequest(BaseModel):
    """One pay period submitted for many employees."""

    pay_period_start: date
    pay_period_end: date
    entries: list[BulkEntryRequest] = Field(min_length=1)


class BulkSubmitResponse(BaseModel):
    """Created records and per-row errors of a bulk submission."""

    records: list[PayrollRecordResponse]
    errors: list[str]
    succeeded: int
    failed: int
    partial: bool


# ============================================================================
# Preview and check schemas
# ============================================================================


class StubLineResponse(BaseModel):
    """Schema for a pay stub line."""

    line_type: str
    description: str
    amount: Decimal
    hours: Decimal | None = None
    rate: Decimal | None = None

    @classmethod
    def from_line(cls, line: StubLine) -> "StubLineResponse":
        return cls(
            line_type=line.line_type.value,
            description=line.description,
            amount=line.amount,
            hours=line.hours,
            rate=line.rate,
        )


class PayPreviewResponse(BaseModel):
    """Calculated pay for a period, not persisted."""

    regular_pay: Decimal
    overtime_pay: Decimal
    tips: Decimal
    gross_pay: Decimal
    deductions: DeductionsResponse
    net_pay: Decimal
    lines: list[StubLineResponse]
    inputs_fingerprint: str

    @classmethod
    def from_calculation(cls, calculation: PayCalculation) -> "PayPreviewResponse":
        return cls(
            regular_pay=calculation.regular_pay,
            overtime_pay=calculation.overtime_pay,
            tips=calculation.tips,
            gross_pay=calculation.gross_pay,
            deductions=DeductionsResponse(
                tax=calculation.deductions.tax,
                retirement=calculation.deductions.retirement,
                other=calculation.deductions.other,
                total=calculation.deductions.total,
            ),
            net_pay=calculation.net_pay,
            lines=[StubLineResponse.from_line(line) for line in calculation.lines],
            inputs_fingerprint=calculation.inputs_fingerprint,
        )


class CheckResponse(BaseModel):
    """Printable check content."""

    company_name: str
    payee: str
    amount: Decimal
    amount_in_words: str
    check_date: date
    memo: str
    lines: list[StubLineResponse]
    gross_pay: Decimal
    net_pay: Decimal

    @classmethod
    def from_check(cls, check: CheckData) -> "CheckResponse":
        return cls(
            company_name=check.company_name,
            payee=check.payee,
            amount=check.amount,
            amount_in_words=check.amount_in_words,
            check_date=check.date,
            memo=check.memo,
            lines=[StubLineResponse.from_line(line) for line in check.lines],
            gross_pay=check.gross_pay,
            net_pay=check.net_pay,
        )


# ============================================================================
# Report schemas
# ============================================================================


class ReportRequest(BaseModel):
    """Report filters; the date range is inclusive on the period end."""

    start_date: date
    end_date: date
    department_id: int | None = None
    employee_id: int | None = None
    type: ReportType = ReportType.YTD

    def to_filters(self) -> ReportFilters:
        return ReportFilters(
            start_date=self.start_date,
            end_date=self.end_date,
            department_id=self.department_id,
            employee_id=self.employee_id,
            type=self.type,
        )


class ReportResponse(BaseModel):
    """Report totals."""

    start_date: date
    end_date: date
    type: ReportType
    total_gross_pay: Decimal
    total_net_pay: Decimal
    total_taxes: Decimal
    total_deductions: Decimal
    employee_count: int
    record_count: int
    average_pay_per_employee: Decimal

    @classmethod
    def from_summary(
        cls, summary: ReportSummary, filters: ReportFilters
    ) -> "ReportResponse":
        return cls(
            start_date=filters.start_date,
            end_date=filters.end_date,
            type=filters.type,
            total_gross_pay=summary.total_gross_pay,
            total_net_pay=summary.total_net_pay,
            total_taxes=summary.total_taxes,
            total_deductions=summary.total_deductions,
            employee_count=summary.employee_count,
            record_count=summary.record_count,
            average_pay_per_employee=summary.average_pay_per_employee,
        )


class ChartSeriesResponse(BaseModel):
    """Labelled chart datasets."""

    labels: list[str]
    datasets: dict[str, list[Decimal]]

    @classmethod
    def from_series(cls, series: ChartSeries) -> "ChartSeriesResponse":
        return cls(labels=series.labels, datasets=series.datasets)


class ChartsResponse(BaseModel):
    """All dashboard chart datasets for a company."""

    payroll_trends: ChartSeriesResponse
    department_distribution: ChartSeriesResponse
    earnings_breakdown: ChartSeriesResponse
