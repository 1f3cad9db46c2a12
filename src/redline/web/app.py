"""FastAPI Web application: track outlines and positions for display clients."""

from __future__ import annotations

import os

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException

from redline.config import SimulationConfig
from redline.track.normalizer import Viewport
from redline.web.schemas import (
    HealthResponse,
    OutlineResponse,
    PositionResponse,
    SpeedRequest,
    SpeedResponse,
    TracksResponse,
)
from redline.web.service import GeometryService

load_dotenv()  # loads .env from project root; must run before env vars are consumed

# ---------------------------------------------------------------------------
# App setup
# ---------------------------------------------------------------------------

VERSION = "0.1.0"

app = FastAPI(title="RedLine track geometry", version=VERSION)

_config = SimulationConfig.from_env()
_service = GeometryService()
_MAX_SAMPLES = int(os.environ.get("REDLINE_MAX_SAMPLES", "5000"))


def _viewport(width: int | None, height: int | None, padding: int | None) -> Viewport:
    default = _config.viewport
    try:
        return Viewport(
            width=default.width if width is None else width,
            height=default.height if height is None else height,
            padding=default.padding if padding is None else padding,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc


def _samples(samples: int | None) -> int:
    n = _config.sample_count if samples is None else samples
    if not 1 <= n <= _MAX_SAMPLES:
        raise HTTPException(status_code=422, detail=f"samples must be in [1, {_MAX_SAMPLES}]")
    return n


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(status="ok", version=VERSION)


@app.get("/api/tracks", response_model=TracksResponse)
def list_tracks() -> TracksResponse:
    return TracksResponse(tracks=_service.list_tracks())


@app.get("/api/tracks/{track_id}/outline", response_model=OutlineResponse)
def track_outline(
    track_id: str,
    width: int | None = None,
    height: int | None = None,
    padding: int | None = None,
    samples: int | None = None,
    precise: bool = True,
) -> OutlineResponse:
    """Normalized centerline of *track_id* fitted into the requested viewport."""
    viewport = _viewport(width, height, padding)
    try:
        return _service.outline(track_id, viewport, _samples(samples), precise=precise)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown track {track_id!r}") from exc


@app.get("/api/tracks/{track_id}/position", response_model=PositionResponse)
def track_position(
    track_id: str,
    progress: float = 0.0,
    width: int | None = None,
    height: int | None = None,
    padding: int | None = None,
    samples: int | None = None,
) -> PositionResponse:
    """Marker position and heading at *progress* along *track_id*."""
    viewport = _viewport(width, height, padding)
    try:
        return _service.position(track_id, progress, viewport, _samples(samples))
    except KeyError as exc:
        raise HTTPException(status_code=404, detail=f"Unknown track {track_id!r}") from exc


@app.post("/api/speed", response_model=SpeedResponse)
def effective_speed(req: SpeedRequest) -> SpeedResponse:
    try:
        return _service.speed(req)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
