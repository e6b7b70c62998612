"""Boundary Protocols — contracts between the crossing engine and its stores.

Invariants:
    - Core NEVER imports from services, infrastructure, or models
    - Each store owns its own table; no store writes another store's rows
    - Implementations are constructed per session by the engine via factories

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async in Protocol: implementations do IO; the pure pieces (canonicalize,
      crossing_state) stay synchronous
"""

from datetime import datetime
from typing import AsyncIterator, Protocol

from crosspaths.core.crossing_result import (
    CounterOutcome, OtherVisitor, RelationshipOutcome, VisitRecord,
)
from crosspaths.core.pair_canonicalizer import CanonicalPair


class VisitRepository(Protocol):
    """Append-only visit ledger."""
    async def record_visit(
        self, user_id: str, venue_id: str, venue_name: str,
        latitude: float, longitude: float, visited_at: datetime,
    ) -> VisitRecord: ...

    def find_other_visitors(
        self, venue_id: str, excluding_user_id: str,
        recorded_before: int | None = None,
    ) -> AsyncIterator[OtherVisitor]: ...


class CrossingCounterRepository(Protocol):
    """Per-(pair, venue) crossing counter with atomic upsert-or-increment."""
    async def record_crossing(
        self, pair: CanonicalPair, venue_id: str, venue_name: str,
        latitude: float, longitude: float,
    ) -> CounterOutcome: ...


class RelationshipRepository(Protocol):
    """Venue-agnostic crossed-path relationship, created once per pair."""
    async def ensure_relationship(
        self, pair: CanonicalPair, venue_name: str,
        latitude: float, longitude: float,
    ) -> RelationshipOutcome: ...
