"""Visit Routes — entry point for the attendance-confirmation workflow.

Invariants:
    - Callers must only post genuinely confirmed attendances (paid or RSVP'd);
      no authorization or payment checks happen here
    - POST is not idempotent: each call appends a visit
    - WriteFailure/LookupFailure surface as 503 via the global error handler;
      per-pair failures are reported inside a 201 body

Design Decisions:
    - Engine built per request from the db_manager singleton: every pair task
      opens its own session from db_manager.session
"""

import logging

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.config import get_settings
from crosspaths.infrastructure.database import (
    DatabaseSessionManager, get_db, get_db_manager,
)
from crosspaths.schemas.visit import (
    AttendanceCreate, CrossingResultResponse, VisitCreate, VisitResponse,
)
from crosspaths.services.crossing_engine import CrossingEngine
from crosspaths.services.visit_store import VisitStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["visits"])


def get_crossing_engine(
    manager: DatabaseSessionManager = Depends(get_db_manager),
) -> CrossingEngine:
    return CrossingEngine(
        manager.session,
        max_concurrency=get_settings().crossing_fanout_concurrency,
    )


@router.post(
    "/visits", response_model=CrossingResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_visit(
    body: VisitCreate, engine: CrossingEngine = Depends(get_crossing_engine),
):
    """Record a confirmed visit and update crossings with prior co-visitors."""
    result = await engine.record_visit(
        body.user_id, body.venue_id, body.venue_name,
        body.latitude, body.longitude, body.visited_at,
    )
    return CrossingResultResponse.from_result(result)


@router.post(
    "/visits/attendance", response_model=CrossingResultResponse,
    status_code=status.HTTP_201_CREATED,
)
async def record_attendance(
    body: AttendanceCreate, engine: CrossingEngine = Depends(get_crossing_engine),
):
    """Record a confirmed attendance by event location name."""
    result = await engine.record_attendance(
        body.user_id, body.location_name, body.visited_at,
    )
    return CrossingResultResponse.from_result(result)


@router.get("/users/{user_id}/visits", response_model=list[VisitResponse])
async def list_user_visits(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """A user's visit history, newest first."""
    records = await VisitStore(db).list_for_user(user_id, limit, offset)
    return [VisitResponse.from_record(r) for r in records]
