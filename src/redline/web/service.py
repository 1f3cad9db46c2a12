"""GeometryService: cache-backed track geometry for the Web API."""

from __future__ import annotations

import math
from dataclasses import replace

from redline.hotpath.speed import SpeedFactors
from redline.overlay.renderer import OverlayRenderer
from redline.track.cache import TrackGeometry, TrackGeometryCache
from redline.track.normalizer import Viewport
from redline.track.path import resolve, wrap_progress
from redline.track.presets import TRACK_CATALOGUE, available_tracks
from redline.web.schemas import (
    OutlineResponse,
    PointModel,
    PositionResponse,
    SpeedRequest,
    SpeedResponse,
    TrackSummary,
)

_FRAMES_PER_SECOND = 60.0


class GeometryService:
    """Serves outlines, positions and speed estimates.

    Parameters
    ----------
    cache:
        Shared :class:`TrackGeometryCache`; a private one is created if None.
    """

    def __init__(self, cache: TrackGeometryCache | None = None) -> None:
        self._cache = cache or TrackGeometryCache()
        self._renderer = OverlayRenderer()

    def list_tracks(self) -> list[TrackSummary]:
        with_geometry = set(available_tracks())
        return [
            TrackSummary(
                id=t.id,
                name=t.name,
                country=t.country,
                location=t.location,
                laps=t.laps,
                length_km=t.length_km,
                turns=t.turns,
                best_lap_s=t.best_lap_s,
                has_geometry=t.id in with_geometry,
            )
            for t in TRACK_CATALOGUE
        ]

    def geometry(self, track_id: str, viewport: Viewport, sample_count: int) -> TrackGeometry:
        """Raises ``KeyError`` for tracks without a preset."""
        return self._cache.geometry(track_id, viewport, sample_count)

    def outline(
        self,
        track_id: str,
        viewport: Viewport,
        sample_count: int = 400,
        precise: bool = True,
    ) -> OutlineResponse:
        geo = self.geometry(track_id, viewport, sample_count)
        points = geo.normalized if precise else tuple(viewport.normalize(geo.raw, precise=False))
        return OutlineResponse(
            track_id=track_id,
            width=viewport.width,
            height=viewport.height,
            padding=viewport.padding,
            sample_count=sample_count,
            total_length=geo.index.total_length,
            points=[PointModel(x=p.x, y=p.y) for p in points],
            polyline=self._renderer.polyline(points, decimals=2 if precise else 0),
        )

    def position(
        self,
        track_id: str,
        progress: float,
        viewport: Viewport,
        sample_count: int = 400,
    ) -> PositionResponse:
        geo = self.geometry(track_id, viewport, sample_count)
        sample = resolve(geo.index, progress)
        return PositionResponse(
            track_id=track_id,
            progress=wrap_progress(progress),
            x=sample.x,
            y=sample.y,
            angle=sample.angle,
            angle_deg=math.degrees(sample.angle),
            segment_index=sample.segment_index,
            local_t=sample.local_t,
        )

    def speed(self, req: SpeedRequest) -> SpeedResponse:
        """Effective speed for a settings combination.

        Raises:
            ValueError: For unknown tyre, session or difficulty names.
        """
        factors = SpeedFactors.from_settings(
            tyre_compound=req.tyre_compound,
            session_type=req.session_type,
            fuel_kg=req.fuel_kg,
            difficulty=req.difficulty,
            base_speed=req.base_speed,
        )
        factors = replace(factors, extra=dict(req.extra))
        clean, reports = factors.sanitized()
        speed = clean.effective()
        per_second = speed * _FRAMES_PER_SECOND
        return SpeedResponse(
            effective_speed=speed,
            progress_per_second=per_second,
            estimated_lap_s=1.0 / per_second,
            warnings=[str(r) for r in reports],
        )
