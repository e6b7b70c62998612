"""Crossing Counter — per-(pair, venue) tally with a single atomic upsert.

Invariants:
    - Exactly one statement per call: INSERT ... ON CONFLICT DO UPDATE ... RETURNING
    - A fresh row starts at 1; every later call adds exactly 1
    - is_new is True only for the call that inserted the row (returned count == 1)
    - Does not commit: the caller owns the transaction

Design Decisions:
    - No read-then-write: concurrent callers on the same key serialize on the
      unique constraint, so no increment is lost
"""

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.crossing_result import CounterOutcome
from crosspaths.core.pair_canonicalizer import CanonicalPair
from crosspaths.infrastructure.upsert import dialect_insert
from crosspaths.models.crossing_count import CrossingCount

logger = logging.getLogger(__name__)

_CONFLICT_KEY = ["user_low_id", "user_high_id", "venue_id"]


class CrossingCounter:
    """SQLAlchemy-backed CrossingCounterRepository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_crossing(
        self, pair: CanonicalPair, venue_id: str, venue_name: str,
        latitude: float, longitude: float,
    ) -> CounterOutcome:
        """Insert the (pair, venue) row at 1, or increment it by 1."""
        now = datetime.now(timezone.utc)
        stmt = dialect_insert(self.db, CrossingCount).values(
            user_low_id=pair.low,
            user_high_id=pair.high,
            venue_id=venue_id,
            venue_name=venue_name,
            latitude=latitude,
            longitude=longitude,
            crossing_count=1,
            created_at=now,
            updated_at=now,
        )
        stmt = stmt.on_conflict_do_update(
            index_elements=_CONFLICT_KEY,
            set_={
                "crossing_count": CrossingCount.crossing_count + 1,
                "updated_at": now,
            },
        ).returning(CrossingCount.crossing_count)

        result = await self.db.execute(stmt)
        count = result.scalar_one()
        logger.debug(
            "Crossing counted",
            extra={
                "pair": list(pair), "venue_id": venue_id,
                "crossing_count": count,
            },
        )
        return CounterOutcome(is_new=count == 1, count=count)
