"""
Health Check Endpoints.

Provides health and readiness endpoints for orchestration systems.
"""
import time
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from ....core.config import Settings, get_settings
from ....core.responses import HealthCheck, HealthResponse
from ....db.session import DbSession

router = APIRouter()


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Health check",
    description="Returns the health status of the service and its database.",
)
async def health_check(
    settings: Annotated[Settings, Depends(get_settings)],
    db: DbSession,
) -> HealthResponse:
    checks: dict[str, HealthCheck] = {}

    db_start = time.time()
    try:
        await db.execute(text("SELECT 1"))
        checks["database"] = HealthCheck(
            status="healthy",
            latency_ms=round((time.time() - db_start) * 1000, 2),
            message="Connected",
        )
    except SQLAlchemyError as e:
        checks["database"] = HealthCheck(status="unhealthy", message=str(e))

    overall_status = "healthy"
    if any(c.status == "unhealthy" for c in checks.values()):
        overall_status = "unhealthy"

    return HealthResponse(
        status=overall_status,
        service=settings.APP_NAME,
        version=settings.APP_VERSION,
        environment=settings.APP_ENV,
        checks=checks,
    )


@router.get(
    "/ready",
    summary="Readiness probe",
    description="Returns 200 if the service is ready to accept traffic.",
)
async def readiness_probe(
    db: DbSession,
) -> dict[str, str]:
    await db.execute(text("SELECT 1"))
    return {"status": "ready"}


@router.get(
    "/live",
    summary="Liveness probe",
    description="Returns 200 if the service is alive.",
)
async def liveness_probe() -> dict[str, str]:
    return {"status": "alive"}
