"""Relationship Aggregator — creates the crossed-path relationship once per pair.

Invariants:
    - INSERT ... ON CONFLICT DO NOTHING RETURNING id: created iff a row comes back
    - Idempotent: any number of calls for a pair leaves exactly one row
    - Existing rows are never touched; the representative venue is whichever
      crossing won the race to insert
    - Does not commit: the caller owns the transaction
"""

from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.crossing_result import RelationshipOutcome
from crosspaths.core.pair_canonicalizer import CanonicalPair
from crosspaths.infrastructure.upsert import dialect_insert
from crosspaths.models.crossed_path import CrossedPathRelationship


class RelationshipAggregator:
    """SQLAlchemy-backed RelationshipRepository."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def ensure_relationship(
        self, pair: CanonicalPair, venue_name: str,
        latitude: float, longitude: float,
    ) -> RelationshipOutcome:
        stmt = (
            dialect_insert(self.db, CrossedPathRelationship)
            .values(
                user_low_id=pair.low,
                user_high_id=pair.high,
                venue_name=venue_name,
                latitude=latitude,
                longitude=longitude,
                is_active=True,
            )
            .on_conflict_do_nothing(index_elements=["user_low_id", "user_high_id"])
            .returning(CrossedPathRelationship.id)
        )
        result = await self.db.execute(stmt)
        return RelationshipOutcome(created=result.scalar_one_or_none() is not None)
