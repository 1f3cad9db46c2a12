"""Pydantic request/response schemas for the Web API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class PointModel(BaseModel):
    x: float
    y: float


class TrackSummary(BaseModel):
    id: str
    name: str
    country: str
    location: str
    laps: int
    length_km: float
    turns: int
    best_lap_s: float
    has_geometry: bool


class TracksResponse(BaseModel):
    tracks: list[TrackSummary]


class OutlineResponse(BaseModel):
    track_id: str
    width: int
    height: int
    padding: int
    sample_count: int
    total_length: float
    points: list[PointModel]
    polyline: str


class PositionResponse(BaseModel):
    track_id: str
    progress: float
    x: float
    y: float
    angle: float
    angle_deg: float
    segment_index: int
    local_t: float


class SpeedRequest(BaseModel):
    tyre_compound: str = "medium"
    session_type: str = "race"
    fuel_kg: float = 5.0
    difficulty: str = "normal"
    base_speed: float = 0.0006
    extra: dict[str, float] = Field(default_factory=dict)


class SpeedResponse(BaseModel):
    effective_speed: float
    progress_per_second: float
    estimated_lap_s: float
    warnings: list[str]
