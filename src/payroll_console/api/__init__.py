"""HTTP API for the payroll console."""
