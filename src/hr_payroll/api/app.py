"""FastAPI application factory."""

from __future__ import annotations

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hr_payroll import __version__
from hr_payroll.api.routes import (
    employees_router,
    health_router,
    pay_periods_router,
    payrolls_router,
    sin_router,
    timesheets_router,
    users_router,
)
from hr_payroll.config import Settings, get_settings
from hr_payroll.database import create_schema, dispose_db, init_db
from hr_payroll.errors import AppError, ErrorKind
from hr_payroll.sin import SINCipher

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.DATABASE: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def _lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan handler."""
        engine, _ = init_db()
        if settings.auto_create_schema:
            logger.info("Creating database schema")
            await create_schema(engine)
        yield
        await dispose_db()

    return lifespan


def create_app(
    settings: Settings | None = None,
    cipher: SINCipher | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    The SIN cipher is built here rather than on first use so that a missing
    or malformed key stops the process before it serves traffic.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="HR Payroll API",
        description="Employee records, SIN vault and semi-monthly payroll",
        version=__version__,
        lifespan=_lifespan(settings),
    )
    app.state.sin_cipher = cipher or SINCipher.from_settings(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Exception handlers
    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        """Map domain errors onto HTTP status codes."""
        status_code = STATUS_BY_KIND[exc.kind]
        if status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
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
                "code": "INTERNAL_ERROR",
                "message": "An unexpected error occurred",
                "details": None,
            },
        )

    # Include routers
    app.include_router(health_router)
    for router in (
        employees_router,
        users_router,
        sin_router,
        timesheets_router,
        pay_periods_router,
        payrolls_router,
    ):
        app.include_router(router, prefix="/api/v1")

    return app
