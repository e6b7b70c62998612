"""Visit Store — append-only ledger of confirmed attendances.

Invariants:
    - record_visit commits its own row before returning (a visit must exist before it can cross)
    - record_visit never deduplicates: every call appends a new row
    - find_other_visitors collapses a user's repeat visits into one entry
    - Storage failures surface as WriteFailure (writes) or LookupFailure (reads)

Design Decisions:
    - recorded_before filters on the visit sequence so only the later of two
      near-simultaneous visits records their crossing
    - find_other_visitors is an async generator; callers must not rely on its order
"""

import logging
from datetime import datetime
from typing import AsyncIterator

from sqlalchemy import select, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.crossing_result import OtherVisitor, VisitRecord
from crosspaths.core.domain_types import UserId, VenueId, VisitId
from crosspaths.core.errors import ErrorContext, LookupFailure, WriteFailure
from crosspaths.models.visit import Visit

logger = logging.getLogger(__name__)


def to_visit_record(visit: Visit) -> VisitRecord:
    return VisitRecord(
        id=VisitId(visit.id),
        user_id=UserId(visit.user_id),
        venue_id=VenueId(visit.venue_id),
        venue_name=visit.venue_name,
        latitude=visit.latitude,
        longitude=visit.longitude,
        visited_at=visit.visited_at,
        recorded_at=visit.recorded_at,
    )


class VisitStore:
    """SQLAlchemy-backed VisitRepository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_visit(
        self, user_id: str, venue_id: str, venue_name: str,
        latitude: float, longitude: float, visited_at: datetime,
    ) -> VisitRecord:
        """Append and commit a visit."""
        visit = Visit(
            user_id=user_id,
            venue_id=venue_id,
            venue_name=venue_name,
            latitude=latitude,
            longitude=longitude,
            visited_at=visited_at,
        )
        try:
            self.db.add(visit)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Visit write rejected: {e}",
                extra={"user_id": user_id, "venue_id": venue_id},
            )
            raise WriteFailure(
                type(e).__name__,
                ErrorContext(user_id=user_id, venue_id=venue_id),
            ) from e
        return to_visit_record(visit)

    async def find_other_visitors(
        self, venue_id: str, excluding_user_id: str,
        recorded_before: int | None = None,
    ) -> AsyncIterator[OtherVisitor]:
        """Yield each distinct user, other than excluding_user_id, who visited venue_id."""
        query = (
            select(Visit.user_id, func.max(Visit.visited_at))
            .where(Visit.venue_id == venue_id)
            .where(Visit.user_id != excluding_user_id)
            .group_by(Visit.user_id)
        )
        if recorded_before is not None:
            query = query.where(Visit.id < recorded_before)
        try:
            result = await self.db.execute(query)
        except SQLAlchemyError as e:
            logger.error(
                f"Visitor lookup failed: {e}",
                extra={"user_id": excluding_user_id, "venue_id": venue_id},
            )
            raise LookupFailure(
                type(e).__name__,
                ErrorContext(user_id=excluding_user_id, venue_id=venue_id),
            ) from e
        for user_id, visited_at in result:
            yield OtherVisitor(UserId(user_id), visited_at)

    async def list_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0,
    ) -> list[VisitRecord]:
        """A user's visits, newest first."""
        result = await self.db.execute(
            select(Visit)
            .where(Visit.user_id == user_id)
            .order_by(Visit.id.desc())
            .limit(limit)
            .offset(offset)
        )
        return [to_visit_record(v) for v in result.scalars().all()]
