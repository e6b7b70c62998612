"""Crossing Results — immutable value objects exchanged between engine, stores, and callers.

Invariants:
    - VisitRecord is a detached snapshot of a committed visit (never an ORM instance)
    - CrossingResult counts are derived from outcomes/failures, never stored separately
    - visitors_processed + len(failures) == number of other visitors enumerated

Design Decisions:
    - Frozen dataclasses: results cross task boundaries in the fan-out, so no shared mutation
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import NamedTuple

from crosspaths.core.domain_types import (
    CrossingState, UserId, VenueId, VisitId, crossing_state,
)
from crosspaths.core.pair_canonicalizer import CanonicalPair


@dataclass(frozen=True)
class VisitRecord:
    """A committed visit."""
    id: VisitId
    user_id: UserId
    venue_id: VenueId
    venue_name: str
    latitude: float
    longitude: float
    visited_at: datetime
    recorded_at: datetime


class OtherVisitor(NamedTuple):
    """A distinct prior visitor of a venue, with their latest visit time."""
    user_id: UserId
    visited_at: datetime


class CounterOutcome(NamedTuple):
    is_new: bool
    count: int


class RelationshipOutcome(NamedTuple):
    created: bool


@dataclass(frozen=True)
class PairOutcome:
    """Committed result of one pair update."""
    other_user_id: UserId
    pair: CanonicalPair
    count: int
    is_new: bool
    relationship_created: bool

    @property
    def state(self) -> CrossingState:
        return crossing_state(self.count)


@dataclass(frozen=True)
class PairFailure:
    """A pair whose update failed; siblings were still processed."""
    other_user_id: UserId
    error_code: str
    cause_code: str
    message: str


@dataclass(frozen=True)
class CrossingResult:
    """Outcome of CrossingEngine.record_visit."""
    visit: VisitRecord
    outcomes: tuple[PairOutcome, ...] = field(default_factory=tuple)
    failures: tuple[PairFailure, ...] = field(default_factory=tuple)

    @property
    def visitors_processed(self) -> int:
        return len(self.outcomes)

    @property
    def crossings_created(self) -> int:
        return sum(1 for o in self.outcomes if o.is_new)

    @property
    def relationships_created(self) -> int:
        return sum(1 for o in self.outcomes if o.relationship_created)

    @property
    def succeeded(self) -> bool:
        """True when every enumerated pair was committed."""
        return not self.failures
