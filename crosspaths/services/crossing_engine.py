"""Crossing Engine — records a visit and fans out crossing updates to every prior co-visitor.

Invariants:
    - The visit is committed before any crossing work; WriteFailure aborts everything
    - LookupFailure aborts the fan-out but the committed visit stays
    - A visit only crosses with visits recorded before it (lower visit id)
    - Each pair runs in its own session and transaction: counter upsert and, on a
      first crossing, relationship insert commit or roll back together
    - A failing pair becomes a PairFailure; sibling pairs still commit, even when
      the pair task raises something other than a CrossPathsError
    - No internal retries: re-running record_visit appends another visit

Design Decisions:
    - Bounded fan-out: asyncio tasks gated by a semaphore (crossing_fanout_concurrency)
    - Store factories injected (default: SQLAlchemy stores) so tests can substitute fakes
    - Committed pairs are never rolled back when the caller cancels or times out
"""

import asyncio
import logging
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone
from typing import Callable

from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.crossing_result import (
    CrossingResult, OtherVisitor, PairFailure, PairOutcome, VisitRecord,
)
from crosspaths.core.errors import (
    CrossPathsError, DatabaseError, ErrorContext, LookupFailure,
    PairUpdateFailure, WriteFailure,
)
from crosspaths.core.pair_canonicalizer import canonicalize
from crosspaths.core.repository_protocols import (
    CrossingCounterRepository, RelationshipRepository, VisitRepository,
)
from crosspaths.services.crossing_counter import CrossingCounter
from crosspaths.services.relationship_aggregator import RelationshipAggregator
from crosspaths.services.venue_directory import VenueDirectory
from crosspaths.services.visit_store import VisitStore

logger = logging.getLogger(__name__)

SessionScope = Callable[[], AbstractAsyncContextManager[AsyncSession]]


class CrossingEngine:
    """Orchestrates VisitStore, CrossingCounter, and RelationshipAggregator."""

    def __init__(
        self,
        session_scope: SessionScope,
        max_concurrency: int = 8,
        visit_store: Callable[[AsyncSession], VisitRepository] = VisitStore,
        crossing_counter: Callable[[AsyncSession], CrossingCounterRepository] = CrossingCounter,
        relationship_aggregator: Callable[[AsyncSession], RelationshipRepository] = RelationshipAggregator,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self._session_scope = session_scope
        self._max_concurrency = max_concurrency
        self._visit_store = visit_store
        self._crossing_counter = crossing_counter
        self._relationship_aggregator = relationship_aggregator

    async def record_visit(
        self, user_id: str, venue_id: str, venue_name: str,
        latitude: float, longitude: float, visited_at: datetime,
    ) -> CrossingResult:
        """Record a confirmed visit and update crossings with every prior co-visitor."""
        visit = await self._write_visit(
            user_id, venue_id, venue_name, latitude, longitude, visited_at,
        )
        logger.info(
            "Visit recorded",
            extra={"visit_id": visit.id, "user_id": user_id, "venue_id": venue_id},
        )

        visitors = await self._find_prior_visitors(visit)
        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(visitor: OtherVisitor):
            async with semaphore:
                return await self._process_pair(visit, visitor)

        settled = await asyncio.gather(
            *(bounded(v) for v in visitors), return_exceptions=True,
        )
        settled = [
            self._unexpected_failure(visit, v, r) if isinstance(r, BaseException) else r
            for v, r in zip(visitors, settled)
        ]
        result = CrossingResult(
            visit=visit,
            outcomes=tuple(r for r in settled if isinstance(r, PairOutcome)),
            failures=tuple(r for r in settled if isinstance(r, PairFailure)),
        )
        logger.info(
            "Crossings processed",
            extra={
                "visit_id": visit.id,
                "visitors_processed": result.visitors_processed,
                "crossings_created": result.crossings_created,
                "failures": len(result.failures),
            },
        )
        return result

    async def record_attendance(
        self, user_id: str, location_name: str,
        visited_at: datetime | None = None,
    ) -> CrossingResult:
        """Resolve a venue by its name, then record_visit there."""
        async with self._session_scope() as db:
            venue = await VenueDirectory(db).resolve_by_name(location_name)
        return await self.record_visit(
            user_id, venue.id, venue.name, venue.latitude, venue.longitude,
            visited_at or datetime.now(timezone.utc),
        )

    # ─── Steps ──────────────────────────────────────────────────

    async def _write_visit(
        self, user_id, venue_id, venue_name, latitude, longitude, visited_at,
    ) -> VisitRecord:
        try:
            async with self._session_scope() as db:
                return await self._visit_store(db).record_visit(
                    user_id, venue_id, venue_name, latitude, longitude, visited_at,
                )
        except DatabaseError as e:
            raise WriteFailure(
                e.message, ErrorContext(user_id=user_id, venue_id=venue_id),
            ) from e

    async def _find_prior_visitors(self, visit: VisitRecord) -> list[OtherVisitor]:
        try:
            async with self._session_scope() as db:
                store = self._visit_store(db)
                return [
                    v async for v in store.find_other_visitors(
                        visit.venue_id, visit.user_id, recorded_before=visit.id,
                    )
                ]
        except DatabaseError as e:
            raise LookupFailure(
                e.message,
                ErrorContext(user_id=visit.user_id, venue_id=visit.venue_id),
            ) from e

    async def _process_pair(
        self, visit: VisitRecord, visitor: OtherVisitor,
    ) -> PairOutcome | PairFailure:
        """Count one crossing; on a first crossing, ensure the relationship. Never raises domain errors."""
        try:
            pair = canonicalize(visit.user_id, visitor.user_id)
            async with self._session_scope() as db:
                counted = await self._crossing_counter(db).record_crossing(
                    pair, visit.venue_id, visit.venue_name,
                    visit.latitude, visit.longitude,
                )
                relationship_created = False
                if counted.is_new:
                    ensured = await self._relationship_aggregator(db).ensure_relationship(
                        pair, visit.venue_name, visit.latitude, visit.longitude,
                    )
                    relationship_created = ensured.created
                await db.commit()
        except CrossPathsError as e:
            failure = PairUpdateFailure(
                e.message,
                ErrorContext(user_id=visitor.user_id, venue_id=visit.venue_id),
            )
            logger.warning(
                failure.message,
                extra={
                    "visit_id": visit.id, "other_user_id": visitor.user_id,
                    "venue_id": visit.venue_id, "error_code": e.code,
                },
            )
            return PairFailure(
                other_user_id=visitor.user_id,
                error_code=failure.code,
                cause_code=e.code,
                message=failure.message,
            )

        if counted.is_new:
            logger.info(
                "New crossing",
                extra={
                    "pair": list(pair), "venue_id": visit.venue_id,
                    "crossing_count": counted.count,
                },
            )
        return PairOutcome(
            other_user_id=visitor.user_id,
            pair=pair,
            count=counted.count,
            is_new=counted.is_new,
            relationship_created=relationship_created,
        )

    def _unexpected_failure(
        self, visit: VisitRecord, visitor: OtherVisitor, exc: BaseException,
    ) -> PairFailure:
        """Turn a non-domain exception from one pair task into a PairFailure."""
        if not isinstance(exc, Exception):
            raise exc
        failure = PairUpdateFailure(
            f"Unexpected error updating crossing: {type(exc).__name__}",
            ErrorContext(user_id=visitor.user_id, venue_id=visit.venue_id),
        )
        logger.error(
            failure.message,
            extra={
                "visit_id": visit.id, "other_user_id": visitor.user_id,
                "venue_id": visit.venue_id, "error_code": "INTERNAL_ERROR",
            },
            exc_info=exc,
        )
        return PairFailure(
            other_user_id=visitor.user_id,
            error_code=failure.code,
            cause_code="INTERNAL_ERROR",
            message=failure.message,
        )
