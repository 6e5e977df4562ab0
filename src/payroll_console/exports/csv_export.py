"""CSV export of payroll records and report summaries."""

from __future__ import annotations

import csv
import io
from datetime import date
from typing import Iterable, Protocol

from payroll_console.calculators.types import EmployeeRef, PayrollRecordData
from payroll_console.reports.aggregator import ReportSummary

RECORD_COLUMNS = [
    "Employee Name",
    "Employee ID",
    "Pay Period Start",
    "Pay Period End",
    "Regular Hours",
    "Overtime Hours",
    "Tips",
    "Gross Pay",
    "Net Pay",
    "Tax Deductions",
    "Retirement Deductions",
    "Other Deductions",
    "Status",
]

DATE_FORMAT = "%m/%d/%Y"


class ExportSink(Protocol):
    """Protocol for export adapters.

    The API layer renders records and summaries through a sink without
    knowing the output format.
    """

    media_type: str

    def export_summary(self, summary: ReportSummary, start: date, end: date) -> str:
        """Render a report summary for the inclusive period start..end."""
        ...

    def export_records(
        self, records: Iterable[PayrollRecordData], employees: Iterable[EmployeeRef]
    ) -> str:
        """Render one row per payroll record."""
        ...


def format_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def export_filename(stem: str, today: date, extension: str = "csv") -> str:
    """Download filename of the form ``<stem>_YYYY-MM-DD.<extension>``."""
    return f"{stem}_{today.isoformat()}.{extension}"


class CsvExporter:
    """ExportSink producing CSV text."""

    media_type = "text/csv"

    def export_records(
        self, records: Iterable[PayrollRecordData], employees: Iterable[EmployeeRef]
    ) -> str:
        employees_by_id = {e.id: e for e in employees}

        output = io.StringIO()
        writer = csv.writer(output)
        writer.writerow(RECORD_COLUMNS)

        for record in records:
            employee = employees_by_id.get(record.employee_id)
            writer.writerow([
                employee.full_name if employee else "Unknown",
                employee.employee_number if employee else "",
                format_date(record.pay_period_start),
                format_date(record.pay_period_end),
                str(record.regular_hours),
                str(record.overtime_hours),
                str(record.reported_tips),
                str(record.gross_pay),
                str(record.net_pay),
                str(record.deductions.tax),
                str(record.deductions.retirement),
                str(record.deductions.other),
                record.status.value,
            ])

        return output.getvalue()

    def export_summary(self, summary: ReportSummary, start: date, end: date) -> str:
        output = io.StringIO()
        writer = csv.writer(output)

        writer.writerow(["Payroll Report"])
        writer.writerow(["Period", f"{format_date(start)} - {format_date(end)}"])
        writer.writerow([])
        writer.writerow(["Total Gross Pay", str(summary.total_gross_pay)])
        writer.writerow(["Total Net Pay", str(summary.total_net_pay)])
        writer.writerow(["Total Taxes", str(summary.total_taxes)])
        writer.writerow(["Total Deductions", str(summary.total_deductions)])
        writer.writerow(["Employee Count", summary.employee_count])
        writer.writerow(["Record Count", summary.record_count])
        writer.writerow(["Average Pay Per Employee", str(summary.average_pay_per_employee)])

        return output.getvalue()
