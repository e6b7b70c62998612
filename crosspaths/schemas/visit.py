"""Visit Schemas — request/response models for recording visits.

Invariants:
    - user_id/venue_id: 1-64 chars, stripped, non-empty
    - latitude in [-90, 90], longitude in [-180, 180]
    - Naive timestamps are interpreted as UTC
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator

from crosspaths.core.crossing_result import CrossingResult, VisitRecord


def _strip_non_empty(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("must not be empty or whitespace")
    return v


def _assume_utc(v: datetime | None) -> datetime | None:
    if v is not None and v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v


class VisitCreate(BaseModel):
    """A confirmed attendance at a known venue."""
    user_id: str = Field(min_length=1, max_length=64)
    venue_id: str = Field(min_length=1, max_length=64)
    venue_name: str = Field(min_length=1, max_length=255)
    latitude: float = Field(ge=-90, le=90)
    longitude: float = Field(ge=-180, le=180)
    visited_at: datetime

    @field_validator("user_id", "venue_id", "venue_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_non_empty(v)

    @field_validator("visited_at")
    @classmethod
    def visited_at_utc(cls, v: datetime) -> datetime:
        return _assume_utc(v)


class AttendanceCreate(BaseModel):
    """A confirmed attendance known only by the event's location name."""
    user_id: str = Field(min_length=1, max_length=64)
    location_name: str = Field(min_length=1, max_length=255)
    visited_at: datetime | None = None

    @field_validator("user_id", "location_name")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_non_empty(v)

    @field_validator("visited_at")
    @classmethod
    def visited_at_utc(cls, v: datetime | None) -> datetime | None:
        return _assume_utc(v)


class VisitResponse(BaseModel):
    id: int
    user_id: str
    venue_id: str
    venue_name: str
    latitude: float
    longitude: float
    visited_at: datetime
    recorded_at: datetime

    @classmethod
    def from_record(cls, record: VisitRecord) -> "VisitResponse":
        return cls(
            id=record.id,
            user_id=record.user_id,
            venue_id=record.venue_id,
            venue_name=record.venue_name,
            latitude=record.latitude,
            longitude=record.longitude,
            visited_at=record.visited_at,
            recorded_at=record.recorded_at,
        )


class PairOutcomeResponse(BaseModel):
    other_user_id: str
    pair: list[str]
    crossing_count: int
    state: str
    is_new: bool
    relationship_created: bool


class PairFailureResponse(BaseModel):
    other_user_id: str
    error_code: str
    cause_code: str
    message: str


class CrossingResultResponse(BaseModel):
    """Summary of a recorded visit and its crossing fan-out."""
    visit: VisitResponse
    visitors_processed: int
    crossings_created: int
    relationships_created: int
    outcomes: list[PairOutcomeResponse]
    failures: list[PairFailureResponse]

    @classmethod
    def from_result(cls, result: CrossingResult) -> "CrossingResultResponse":
        return cls(
            visit=VisitResponse.from_record(result.visit),
            visitors_processed=result.visitors_processed,
            crossings_created=result.crossings_created,
            relationships_created=result.relationships_created,
            outcomes=[
                PairOutcomeResponse(
                    other_user_id=o.other_user_id,
                    pair=list(o.pair),
                    crossing_count=o.count,
                    state=o.state.value,
                    is_new=o.is_new,
                    relationship_created=o.relationship_created,
                )
                for o in result.outcomes
            ],
            failures=[
                PairFailureResponse(
                    other_user_id=f.other_user_id,
                    error_code=f.error_code,
                    cause_code=f.cause_code,
                    message=f.message,
                )
                for f in result.failures
            ],
        )
