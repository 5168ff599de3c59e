"""Route optimisation schemas."""

from typing import Optional

from pydantic import Field

from app.schemas.base import BaseSchema


class LatLng(BaseSchema):
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)


class OptimizeRequest(BaseSchema):
    start: LatLng
    end: LatLng
    waypoints: list[LatLng] = Field(default_factory=list, max_length=25)


class RouteLeg(BaseSchema):
    start_address: Optional[str] = None
    end_address: Optional[str] = None
    distance_m: int
    duration_s: int


class OptimizeResponse(BaseSchema):
    polyline: str
    order: list[int]
    legs: list[RouteLeg]
    total_distance_m: int
    total_duration_s: int
    total_duration_label: str
