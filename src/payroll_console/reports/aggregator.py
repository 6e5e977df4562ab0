"""Report generation - filter a record set and reduce it to totals."""

from __future__ import annotations

import calendar
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from enum import Enum

from payroll_console.calculators.line_builder import StubLineBuilder
from payroll_console.calculators.types import (
    ChartSeries,
    DepartmentRef,
    EmployeeRef,
    PayrollRecordData,
)
from payroll_console.errors import ValidationError


class ReportType(str, Enum):
    """Report types offered by the reports screen."""

    YTD = "ytd"
    MONTHLY = "monthly"
    DEPARTMENT = "department"


@dataclass(frozen=True)
class ReportFilters:
    """Filters for one report request."""

    start_date: date
    end_date: date
    department_id: int | None = None
    employee_id: int | None = None
    type: ReportType = ReportType.YTD

    def __post_init__(self) -> None:
        if self.start_date > self.end_date:
            raise ValidationError(
                f"start_date {self.start_date} is after end_date {self.end_date}",
                field="start_date",
            )

    @classmethod
    def year_to_date(cls, as_of: date, **kwargs) -> ReportFilters:
        """January 1st of ``as_of``'s year through ``as_of``."""
        return cls(
            start_date=date(as_of.year, 1, 1),
            end_date=as_of,
            type=ReportType.YTD,
            **kwargs,
        )

    @classmethod
    def for_month(cls, year: int, month: int, **kwargs) -> ReportFilters:
        """First through last day of the given month."""
        last_day = calendar.monthrange(year, month)[1]
        return cls(
            start_date=date(year, month, 1),
            end_date=date(year, month, last_day),
            type=ReportType.MONTHLY,
            **kwargs,
        )


@dataclass(frozen=True)
class ReportSummary:
    """Totals over the records matching a report's filters."""

    total_gross_pay: Decimal = Decimal("0")
    total_net_pay: Decimal = Decimal("0")
    total_taxes: Decimal = Decimal("0")
    total_deductions: Decimal = Decimal("0")
    employee_count: int = 0
    record_count: int = 0

    @property
    def average_pay_per_employee(self) -> Decimal:
        return average_pay(self)


def record_matches(
    record: PayrollRecordData,
    filters: ReportFilters,
    employees_by_id: Mapping[int, EmployeeRef],
) -> bool:
    """Inclusion predicate for a single record.

    The record's pay period END date must fall within [start_date, end_date].
    With a department filter, records whose employee cannot be resolved are
    excluded.
    """
    if not (filters.start_date <= record.pay_period_end <= filters.end_date):
        return False

    if filters.employee_id is not None and record.employee_id != filters.employee_id:
        return False

    if filters.department_id is not None:
        employee = employees_by_id.get(record.employee_id)
        if employee is None or employee.department_id != filters.department_id:
            return False

    return True


def filter_records(
    records: Iterable[PayrollRecordData],
    employees: Iterable[EmployeeRef],
    filters: ReportFilters,
) -> list[PayrollRecordData]:
    """Records matching ``filters``, in input order."""
    employees_by_id = {e.id: e for e in employees}
    return [r for r in records if record_matches(r, filters, employees_by_id)]


def summarize(records: Iterable[PayrollRecordData]) -> ReportSummary:
    """Reduce an already-filtered record set to a summary."""
    total_gross = Decimal("0")
    total_net = Decimal("0")
    total_taxes = Decimal("0")
    total_deductions = Decimal("0")
    employee_ids: set[int] = set()
    record_count = 0

    for record in records:
        total_gross += record.gross_pay
        total_net += record.net_pay
        total_taxes += record.deductions.tax
        total_deductions += record.deductions.total
        employee_ids.add(record.employee_id)
        record_count += 1

    return ReportSummary(
        total_gross_pay=total_gross,
        total_net_pay=total_net,
        total_taxes=total_taxes,
        total_deductions=total_deductions,
        employee_count=len(employee_ids),
        record_count=record_count,
    )


def generate_report(
    records: Iterable[PayrollRecordData],
    employees: Iterable[EmployeeRef],
    filters: ReportFilters,
) -> ReportSummary:
    """Filter ``records`` by ``filters`` and reduce to a ReportSummary."""
    return summarize(filter_records(records, employees, filters))


def average_pay(summary: ReportSummary) -> Decimal:
    """Gross pay per distinct employee; zero when no employee is represented."""
    if summary.employee_count == 0:
        return Decimal("0.00")
    return StubLineBuilder.round_to_cents(summary.total_gross_pay / summary.employee_count)


# === Dashboard datasets ===


def payroll_trends(records: Iterable[PayrollRecordData], periods: int = 6) -> ChartSeries:
    """Gross and net of the latest ``periods`` records, oldest first."""
    latest = sorted(records, key=lambda r: r.pay_period_end, reverse=True)[:periods]
    latest.reverse()
    return ChartSeries(
        labels=[f"{r.pay_period_end:%b} {r.pay_period_end.day}" for r in latest],
        datasets={
            "Gross Pay": [r.gross_pay for r in latest],
            "Net Pay": [r.net_pay for r in latest],
        },
    )


def department_distribution(
    records: Iterable[PayrollRecordData],
    employees: Iterable[EmployeeRef],
    departments: Iterable[DepartmentRef],
) -> ChartSeries:
    """Total gross pay per department, in department order."""
    department_of = {e.id: e.department_id for e in employees}
    totals: dict[int, Decimal] = {}
    for record in records:
        department_id = department_of.get(record.employee_id)
        if department_id is not None:
            totals[department_id] = totals.get(department_id, Decimal("0")) + record.gross_pay

    departments = list(departments)
    return ChartSeries(
        labels=[d.name for d in departments],
        datasets={
            "Department Distribution": [totals.get(d.id, Decimal("0")) for d in departments]
        },
    )


def earnings_breakdown(records: Iterable[PayrollRecordData]) -> ChartSeries:
    """Where gross pay went: taxes, retirement, other deductions and net pay."""
    tax = retirement = other = net = Decimal("0")
    for record in records:
        tax += record.deductions.tax
        retirement += record.deductions.retirement
        other += record.deductions.other
        net += record.net_pay
    return ChartSeries(
        labels=["Taxes", "Retirement", "Other Deductions", "Net Pay"],
        datasets={"Earnings Breakdown": [tax, retirement, other, net]},
    )


def lookup_records(
    records: Iterable[PayrollRecordData],
    employees: Iterable[EmployeeRef],
    start: date | None = None,
    end: date | None = None,
    search: str | None = None,
) -> list[PayrollRecordData]:
    """Records lookup: whole periods inside [start, end] and a name/number search.

    Unlike report filtering, both period bounds must fall inside the range.
    """
    if start is not None and end is not None and start > end:
        raise ValidationError(f"start {start} is after end {end}", field="start")
    employees_by_id = {e.id: e for e in employees}
    term = (search or "").strip().lower()

    matched: list[PayrollRecordData] = []
    for record in records:
        if start is not None and record.pay_period_start < start:
            continue
        if end is not None and record.pay_period_end > end:
            continue
        if term:
            employee = employees_by_id.get(record.employee_id)
            if employee is None:
                continue
            if term not in employee.full_name.lower() and term not in employee.employee_number.lower():
                continue
        matched.append(record)
    return matched
