"""Venue Directory — register venues and resolve them by id or by exact name.

Invariants:
    - Venue ids and names are unique; duplicates raise VenueConflictError
    - Unknown ids/names raise VenueNotFoundError
    - Names are compared after stripping surrounding whitespace
"""

import logging

from sqlalchemy import select, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.core.errors import (
    ErrorContext, VenueConflictError, VenueNotFoundError,
)
from crosspaths.models.venue import Venue

logger = logging.getLogger(__name__)


class VenueDirectory:
    """Venue registry backed by the venues table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def register(
        self, venue_id: str, name: str, latitude: float, longitude: float,
    ) -> Venue:
        name = name.strip()
        existing = await self.db.execute(
            select(Venue).where(or_(Venue.id == venue_id, Venue.name == name)),
        )
        if existing.scalars().first() is not None:
            raise VenueConflictError(
                f"Venue id '{venue_id}' or name '{name}' already registered",
                ErrorContext(venue_id=venue_id),
            )

        venue = Venue(id=venue_id, name=name, latitude=latitude, longitude=longitude)
        self.db.add(venue)
        try:
            await self.db.commit()
        except IntegrityError as e:
            # lost a race with a concurrent registration
            await self.db.rollback()
            raise VenueConflictError(
                f"Venue id '{venue_id}' or name '{name}' already registered",
                ErrorContext(venue_id=venue_id),
            ) from e
        logger.info("Venue registered", extra={"venue_id": venue_id})
        return venue

    async def get(self, venue_id: str) -> Venue:
        venue = await self.db.get(Venue, venue_id)
        if venue is None:
            raise VenueNotFoundError(venue_id, ErrorContext(venue_id=venue_id))
        return venue

    async def resolve_by_name(self, name: str) -> Venue:
        """Exact-name lookup, as attendance confirmations only carry the location name."""
        name = name.strip()
        result = await self.db.execute(select(Venue).where(Venue.name == name))
        venue = result.scalar_one_or_none()
        if venue is None:
            raise VenueNotFoundError(name)
        return venue
