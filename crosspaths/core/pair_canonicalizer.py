"""Pair Canonicalizer — order-independent identity for two users.

Invariants:
    - canonicalize(a, b) == canonicalize(b, a) for all distinct a, b
    - low < high under string ordering, always
    - Equal ids raise InvalidPairError (a user cannot cross paths with themselves)

Design Decisions:
    - Lexicographic comparison on str(id): total and stable for UUIDs and opaque strings alike
    - NamedTuple: hashable, unpacks as (low, high), usable directly as a dict key
"""

from typing import NamedTuple

from crosspaths.core.domain_types import UserId
from crosspaths.core.errors import InvalidPairError, ErrorContext


class CanonicalPair(NamedTuple):
    """Normalized (low, high) user pair."""
    low: UserId
    high: UserId

    def other(self, user_id: str) -> UserId:
        """Return the member of the pair that is not user_id."""
        user_id = str(user_id)
        if user_id == self.low:
            return self.high
        if user_id == self.high:
            return self.low
        raise InvalidPairError(
            user_id, ErrorContext(user_id=user_id, pair=(self.low, self.high)),
            message=f"User '{user_id}' is not a member of this pair",
        )


def canonicalize(user_a: str, user_b: str) -> CanonicalPair:
    """Normalize two distinct user ids into a CanonicalPair. Pure, no IO."""
    a, b = str(user_a), str(user_b)
    if a == b:
        raise InvalidPairError(a, ErrorContext(user_id=a))
    if a < b:
        return CanonicalPair(UserId(a), UserId(b))
    return CanonicalPair(UserId(b), UserId(a))
