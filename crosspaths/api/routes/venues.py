"""Venue Routes — register venues and look them up by id or name."""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from crosspaths.infrastructure.database import get_db
from crosspaths.schemas.venue import VenueCreate, VenueResponse
from crosspaths.services.venue_directory import VenueDirectory

router = APIRouter(prefix="/api/v1/venues", tags=["venues"])


@router.post(
    "", response_model=VenueResponse, status_code=status.HTTP_201_CREATED,
)
async def register_venue(body: VenueCreate, db: AsyncSession = Depends(get_db)):
    venue = await VenueDirectory(db).register(
        body.id, body.name, body.latitude, body.longitude,
    )
    return VenueResponse.model_validate(venue)


@router.get("", response_model=VenueResponse)
async def find_venue_by_name(
    name: str = Query(min_length=1, max_length=255),
    db: AsyncSession = Depends(get_db),
):
    venue = await VenueDirectory(db).resolve_by_name(name)
    return VenueResponse.model_validate(venue)


@router.get("/{venue_id}", response_model=VenueResponse)
async def get_venue(venue_id: str, db: AsyncSession = Depends(get_db)):
    venue = await VenueDirectory(db).get(venue_id)
    return VenueResponse.model_validate(venue)
