"""Crossing Queries — read side for profile pages.

Invariants:
    - Read-only: never writes any table
    - Pair lookups always canonicalize first, so either user's perspective sees the same rows
"""

from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.pair_canonicalizer import CanonicalPair
from crosspaths.models.crossed_path import CrossedPathRelationship
from crosspaths.models.crossing_count import CrossingCount


class CrossingQueries:
    """Read-only lookups of a user's crossed paths and a pair's per-venue counts."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def relationships_for_user(
        self, user_id: str, limit: int = 50, offset: int = 0,
    ) -> list[CrossedPathRelationship]:
        result = await self.db.execute(
            select(CrossedPathRelationship)
            .where(or_(
                CrossedPathRelationship.user_low_id == user_id,
                CrossedPathRelationship.user_high_id == user_id,
            ))
            .order_by(CrossedPathRelationship.created_at.desc())
            .limit(limit)
            .offset(offset)
        )
        return list(result.scalars().all())

    async def counts_for_pair(self, pair: CanonicalPair) -> list[CrossingCount]:
        result = await self.db.execute(
            select(CrossingCount)
            .where(CrossingCount.user_low_id == pair.low)
            .where(CrossingCount.user_high_id == pair.high)
            .order_by(CrossingCount.venue_name)
        )
        return list(result.scalars().all())
