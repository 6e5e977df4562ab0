"""Report aggregation over payroll records."""

from payroll_console.reports.aggregator import (
    ReportFilters,
    ReportSummary,
    ReportType,
    average_pay,
    department_distribution,
    earnings_breakdown,
    filter_records,
    generate_report,
    lookup_records,
    payroll_trends,
    record_matches,
    summarize,
)

__all__ = [
    "ReportFilters",
    "ReportSummary",
    "ReportType",
    "average_pay",
    "department_distribution",
    "earnings_breakdown",
    "filter_records",
    "generate_report",
    "lookup_records",
    "payroll_trends",
    "record_matches",
    "summarize",
]
