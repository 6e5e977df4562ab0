"""Export adapters: CSV files and check data."""

from payroll_console.exports.checks import CheckData, amount_in_words, build_check
from payroll_console.exports.csv_export import CsvExporter, ExportSink, export_filename

__all__ = [
    "CheckData",
    "CsvExporter",
    "ExportSink",
    "amount_in_words",
    "build_check",
    "export_filename",
]
