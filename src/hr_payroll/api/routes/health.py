"""Health, readiness and liveness endpoints."""

import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from hr_payroll.api.dependencies import DbSession
from hr_payroll.errors import SINIntegrityError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

# Luhn-valid, never assigned
_SELF_TEST_SIN = "000000000"


class HealthResponse(BaseModel):
    """Per-component status of the service."""

    status: str
    timestamp: datetime
    database: str
    sin_vault: str


async def _database_status(db: DbSession) -> str:
    try:
        await db.execute(text("SELECT 1"))
    except SQLAlchemyError:
        logger.warning("Database check failed", exc_info=True)
        return "unhealthy"
    return "healthy"


def _vault_status(request: Request) -> str:
    """The SIN cipher must exist and round-trip a sample number."""
    cipher = getattr(request.app.state, "sin_cipher", None)
    if cipher is None:
        return "unconfigured"
    try:
        if cipher.decrypt(cipher.encrypt(_SELF_TEST_SIN)) != _SELF_TEST_SIN:
            return "unhealthy"
    except SINIntegrityError:
        logger.warning("SIN cipher self-test failed")
        return "unhealthy"
    return "healthy"


@router.get(
    "/health",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
)
async def health_check(request: Request, db: DbSession) -> HealthResponse:
    """Report database and SIN vault status."""
    db_status = await _database_status(db)
    vault_status = _vault_status(request)
    healthy = db_status == "healthy" and vault_status == "healthy"

    return HealthResponse(
        status="healthy" if healthy else "degraded",
        timestamp=datetime.now(timezone.utc),
        database=db_status,
        sin_vault=vault_status,
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness_check(request: Request) -> JSONResponse:
    """Ready once the SIN vault can encrypt; 503 until then."""
    vault_status = _vault_status(request)
    if vault_status != "healthy":
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={"status": "not ready", "sin_vault": vault_status},
        )
    return JSONResponse(content={"status": "ready"})


@router.get("/live", status_code=status.HTTP_200_OK)
async def liveness_check() -> dict[str, str]:
    """The process is up and serving requests."""
    return {"status": "alive"}
