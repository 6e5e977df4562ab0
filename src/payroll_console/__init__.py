"""Payroll console - company payroll records, reports and checks.

The calculation core (calculators, reports) is pure and synchronous; services
persist through an async SQLAlchemy repository and the api package exposes
everything over FastAPI.
"""

__version__ = "0.1.0"
