"""ORM Models — SQLAlchemy declarative models for venues, visits, and crossings.

Invariants:
    - All models inherit from Base (db/base.py)
    - Pair tables always store the canonical (low, high) ordering

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all/autogenerate
"""

from crosspaths.models.venue import Venue  # noqa: F401
from crosspaths.models.visit import Visit  # noqa: F401
from crosspaths.models.crossing_count import CrossingCount  # noqa: F401
from crosspaths.models.crossed_path import CrossedPathRelationship  # noqa: F401
