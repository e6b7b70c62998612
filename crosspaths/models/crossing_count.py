"""CrossingCount ORM — how many times a pair co-located at one venue.

Invariants:
    - At most one row per (user_low_id, user_high_id, venue_id)
    - user_low_id < user_high_id (canonical pair, enforced by check constraint)
    - crossing_count >= 1; only ever incremented by 1

Design Decisions:
    - Unique constraint is the conflict target of the atomic upsert in CrossingCounter
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    String, Float, Integer, DateTime, CheckConstraint, UniqueConstraint, Index,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from crosspaths.db.base import Base


class CrossingCount(Base):
    """Per-venue crossing tally for a canonical pair."""
    __tablename__ = "crossing_counts"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    user_low_id: Mapped[str] = mapped_column(String(64), nullable=False)
    user_high_id: Mapped[str] = mapped_column(String(64), nullable=False)
    venue_id: Mapped[str] = mapped_column(String(64), nullable=False)
    venue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    crossing_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        UniqueConstraint(
            "user_low_id", "user_high_id", "venue_id",
            name="uq_crossing_counts_pair_venue",
        ),
        CheckConstraint(
            "user_low_id < user_high_id", name="ck_crossing_counts_canonical",
        ),
        CheckConstraint(
            "crossing_count >= 1", name="ck_crossing_counts_positive",
        ),
        Index("ix_crossing_counts_venue_id", "venue_id"),
    )
