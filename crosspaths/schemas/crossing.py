"""Crossing Schemas — read-side views of crossing counts and crossed-path relationships.

Invariants:
    - CrossedPathView is always expressed from the requesting user's perspective
      (other_user_id is never the requester)
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class CrossedPathView(BaseModel):
    other_user_id: str
    venue_name: str
    latitude: float
    longitude: float
    is_active: bool
    created_at: datetime


class CrossedPathList(BaseModel):
    user_id: str
    crossed_paths: list[CrossedPathView]


class CrossingCountView(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    venue_id: str
    venue_name: str
    latitude: float
    longitude: float
    crossing_count: int
    created_at: datetime
    updated_at: datetime


class PairCrossings(BaseModel):
    pair: list[str]
    total_crossings: int
    venues: list[CrossingCountView]
