"""Explicit cache of generated track geometry.

Raw centerlines are keyed by ``(track_id, sample_count)``; normalized
sequences and their path index are additionally keyed by the viewport.
Every cached value is immutable, so a reader holding a :class:`TrackGeometry`
never observes a partially rebuilt one.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass

from redline.track.models import Point2D
from redline.track.normalizer import Viewport
from redline.track.path import PathIndex, build_index
from redline.track.presets import generate_track

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrackGeometry:
    """Everything a session needs to resolve positions on one track."""

    track_id: str
    sample_count: int
    viewport: Viewport
    raw: tuple[Point2D, ...]
    normalized: tuple[Point2D, ...]
    index: PathIndex


class TrackGeometryCache:
    """Memoizes generated and normalized geometry per track.

    Args:
        generator: Callable ``(track_id, sample_count) -> list[Point2D]``.
            Defaults to the built-in presets; injectable for tests.
    """

    def __init__(self, generator=None) -> None:
        self._generate = generator or generate_track
        self._raw: dict[tuple[str, int], tuple[Point2D, ...]] = {}
        self._geometry: dict[tuple[str, int, Viewport], TrackGeometry] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def raw_points(self, track_id: str, sample_count: int = 400) -> tuple[Point2D, ...]:
        """Return the raw centerline for *track_id* at *sample_count* points.

        Raises:
            KeyError: If *track_id* has no preset.
        """
        key = (track_id, sample_count)
        with self._lock:
            cached = self._raw.get(key)
        if cached is not None:
            return cached

        points = tuple(self._generate(track_id, sample_count))
        with self._lock:
            self._raw[key] = points
        _logger.info("Generated %d-point centerline for %s", sample_count, track_id)
        return points

    def geometry(
        self,
        track_id: str,
        viewport: Viewport,
        sample_count: int = 400,
    ) -> TrackGeometry:
        """Return normalized geometry and path index for *track_id* in *viewport*."""
        key = (track_id, sample_count, viewport)
        with self._lock:
            cached = self._geometry.get(key)
        if cached is not None:
            return cached

        raw = self.raw_points(track_id, sample_count)
        normalized = tuple(viewport.normalize(raw, precise=True))
        geo = TrackGeometry(
            track_id=track_id,
            sample_count=sample_count,
            viewport=viewport,
            raw=raw,
            normalized=normalized,
            index=build_index(normalized, closed=True, fallback=viewport.center),
        )
        with self._lock:
            self._geometry[key] = geo
        return geo

    def invalidate(self, track_id: str | None = None, sample_count: int | None = None) -> int:
        """Drop cached entries, optionally filtered by track and sample count.

        Returns the number of raw centerlines removed.
        """
        def match(tid: str, n: int) -> bool:
            return (track_id is None or tid == track_id) and (
                sample_count is None or n == sample_count
            )

        with self._lock:
            raw_keys = [k for k in self._raw if match(*k)]
            for k in raw_keys:
                del self._raw[k]
            for k in [k for k in self._geometry if match(k[0], k[1])]:
                del self._geometry[k]
        return len(raw_keys)

    def __len__(self) -> int:
        with self._lock:
            return len(self._raw)
