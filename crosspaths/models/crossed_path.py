"""CrossedPathRelationship ORM — "these two users have crossed paths", anywhere, ever.

Invariants:
    - At most one row per (user_low_id, user_high_id) for the lifetime of the system
    - user_low_id < user_high_id (canonical pair)
    - Representative venue reflects the first crossing only; never updated by the engine

Design Decisions:
    - Unique constraint is the conflict target of the insert-or-nothing in RelationshipAggregator
    - No foreign key to crossing_counts: the relationship outlives any single venue
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Float, Boolean, DateTime, CheckConstraint, UniqueConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from crosspaths.db.base import Base


class CrossedPathRelationship(Base):
    """Venue-agnostic crossed-path record for a canonical pair."""
    __tablename__ = "crossed_path_relationships"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_low_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_high_id: Mapped[str] = mapped_column(String(64), nullable=False)
    venue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint(
            "user_low_id", "user_high_id",
            name="uq_crossed_path_relationships_pair",
        ),
        CheckConstraint(
            "user_low_id < user_high_id",
            name="ck_crossed_path_relationships_canonical",
        ),
        Index("ix_crossed_path_relationships_user_high_id", "user_high_id"),
    )
