"""Health Routes — liveness of the crossed-paths API and readiness of its visit store.

Invariants:
    - GET /health/ returns 200 while the process is up, with service name and version
    - GET /health/ready returns 503 when the database holding visits and crossings
      cannot answer SELECT 1; visit recording would fail with WriteFailure then
"""

import logging
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from crosspaths import __version__
import crosspaths.infrastructure.database as database

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check():
    """Liveness: the API process is serving requests."""
    return {
        "status": "healthy",
        "service": "crosspaths-api",
        "version": __version__,
    }


@router.get("/ready")
async def readiness_check():
    """Ready only when the visit store answers a ping."""
    manager = database.db_manager
    db_ok = await manager.health_check() if manager else False
    if not db_ok:
        return JSONResponse(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            content={
                "status": "not_ready",
                "reason": "database_unavailable",
            },
        )
    return {"status": "ready", "checks": {"database": "healthy"}}
