"""Visit ORM — append-only ledger of confirmed attendances.

Invariants:
    - Rows are never updated or deleted
    - id is a monotonic sequence; a lower id was recorded earlier
    - venue_id references venues.id (writes with an unknown venue fail)
    - No uniqueness on (user_id, venue_id): every attendance is its own row

Design Decisions:
    - venue_name/latitude/longitude denormalized: the visit keeps the venue as it was at visit time
    - Composite index (venue_id, user_id) serves the other-visitors lookup
"""

from datetime import datetime, timezone

from sqlalchemy import BigInteger, Integer, String, Float, DateTime, ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column

from crosspaths.db.base import Base


class Visit(Base):
    """One user's confirmed attendance at one venue."""
    __tablename__ = "visits"

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True, autoincrement=True,
    )
    user_id: Mapped[str] = mapped_column(String(64), nullable=False)
    venue_id: Mapped[str] = mapped_column(
        String(64), ForeignKey("venues.id"), nullable=False,
    )
    venue_name: Mapped[str] = mapped_column(String(255), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    visited_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False,
    )
    recorded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    __table_args__ = (
        Index("ix_visits_venue_id_user_id", "venue_id", "user_id"),
        Index("ix_visits_user_id", "user_id"),
    )
