"""Crossing Routes — read-only views for profile pages.

Invariants:
    - Pair queries canonicalize user_a/user_b; swapping them returns identical data
    - Equal user ids are rejected with 400 INVALID_PAIR
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.pair_canonicalizer import CanonicalPair, canonicalize
from crosspaths.infrastructure.database import get_db
from crosspaths.schemas.crossing import (
    CrossedPathList, CrossedPathView, CrossingCountView, PairCrossings,
)
from crosspaths.services.crossing_queries import CrossingQueries

router = APIRouter(prefix="/api/v1", tags=["crossings"])


@router.get("/users/{user_id}/crossed-paths", response_model=CrossedPathList)
async def list_crossed_paths(
    user_id: str,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Everyone this user has crossed paths with, newest relationship first."""
    rows = await CrossingQueries(db).relationships_for_user(user_id, limit, offset)
    return CrossedPathList(
        user_id=user_id,
        crossed_paths=[
            CrossedPathView(
                other_user_id=CanonicalPair(r.user_low_id, r.user_high_id).other(user_id),
                venue_name=r.venue_name,
                latitude=r.latitude,
                longitude=r.longitude,
                is_active=r.is_active,
                created_at=r.created_at,
            )
            for r in rows
        ],
    )


@router.get("/crossings", response_model=PairCrossings)
async def get_pair_crossings(
    user_a: str = Query(min_length=1, max_length=64),
    user_b: str = Query(min_length=1, max_length=64),
    db: AsyncSession = Depends(get_db),
):
    """Per-venue crossing counts for a pair of users."""
    pair = canonicalize(user_a, user_b)
    rows = await CrossingQueries(db).counts_for_pair(pair)
    return PairCrossings(
        pair=list(pair),
        total_crossings=sum(r.crossing_count for r in rows),
        venues=[CrossingCountView.model_validate(r) for r in rows],
    )
