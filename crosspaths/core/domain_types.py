"""Domain Types — identity types and pair lifecycle states.

Invariants:
    - UserId and VenueId are opaque strings: compared for equality and order only
    - VisitId is the monotonic visit sequence (lower id = recorded earlier)
    - CrossingState has no transition back to NO_CROSSING

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum
from typing import NewType


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", str)
VenueId = NewType("VenueId", str)
VisitId = NewType("VisitId", int)


# ─── Enums ───────────────────────────────────────────────────────

class CrossingState(str, Enum):
    """Lifecycle of a single (pair, venue) relationship."""
    NO_CROSSING = "no_crossing"
    FIRST_CROSSING = "first_crossing"
    REPEAT_CROSSING = "repeat_crossing"


def crossing_state(count: int) -> CrossingState:
    """Classify a stored crossing count. Pure."""
    if count <= 0:
        return CrossingState.NO_CROSSING
    if count == 1:
        return CrossingState.FIRST_CROSSING
    return CrossingState.REPEAT_CROSSING
