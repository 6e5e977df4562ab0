"""API routes."""

from payroll_console.api.routes.companies import router as companies_router
from payroll_console.api.routes.health import router as health_router
from payroll_console.api.routes.payroll_records import router as payroll_records_router
from payroll_console.api.routes.reports import router as reports_router

__all__ = ["companies_router", "health_router", "payroll_records_router", "reports_router"]
