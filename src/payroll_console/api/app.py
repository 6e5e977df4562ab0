"""FastAPI application factory."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from payroll_console.api.routes import (
    companies_router,
    health_router,
    payroll_records_router,
    reports_router,
)
from payroll_console.config import get_settings
from payroll_console.database import create_schema, dispose_db, init_db
from payroll_console.errors import (
    ComputationError,
    DataIntegrityError,
    NotFoundError,
    PayrollConsoleError,
    ValidationError,
)
from payroll_console.services.state_machine import InvalidStatusTransitionError

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[PayrollConsoleError], int] = {
    ValidationError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    NotFoundError: status.HTTP_404_NOT_FOUND,
    InvalidStatusTransitionError: status.HTTP_409_CONFLICT,
    DataIntegrityError: status.HTTP_422_UNPROCESSABLE_ENTITY,
    ComputationError: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler."""
    # Startup
    init_db()
    if get_settings().auto_create_schema:
        await create_schema()
    yield
    # Shutdown
    await dispose_db()


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="Payroll Console API",
        description="Company payroll management: employees, pay periods, reports and checks",
        version="0.1.0",
        lifespan=lifespan,
    )

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # Configure appropriately for production
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(PayrollConsoleError)
    async def payroll_error_handler(
        request: Request, exc: PayrollConsoleError
    ) -> JSONResponse:
        """Map domain errors onto HTTP status codes."""
        status_code = next(
            (code for error_type, code in ERROR_STATUS.items() if isinstance(exc, error_type)),
            status.HTTP_400_BAD_REQUEST,
        )
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc)
        else:
            logger.info("%s %s rejected: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=status_code, content=exc.to_dict())

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={
                "detail": "An unexpected error occurred",
                "code": "INTERNAL_ERROR",
            },
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(companies_router, prefix="/api/v1")
    app.include_router(payroll_records_router, prefix="/api/v1")
    app.include_router(reports_router, prefix="/api/v1")

    return app


# Default app instance for uvicorn
app = create_app()
