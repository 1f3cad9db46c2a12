"""SimulationEngine: ties track geometry, progress driver and lap detector together."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from redline.config import SimulationConfig
from redline.hotpath.driver import ProgressDriver
from redline.hotpath.laps import LapDetector, LapEvent
from redline.hotpath.speed import NonFiniteSpeedFactor, SpeedFactors
from redline.hotpath.timer import RunTimer
from redline.track.cache import TrackGeometry, TrackGeometryCache
from redline.track.normalizer import Viewport
from redline.track.path import PositionSample, build_index, resolve

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SimulationFrame:
    """State produced by one engine tick."""

    progress: float
    sample: PositionSample
    lap: LapEvent | None
    running: bool
    remaining_s: float | None
    timestamp: float  # milliseconds, same clock as the driver


class SimulationEngine:
    """Runs one timeline: a single writer of progress and lap state.

    Parameters
    ----------
    cache:
        :class:`~redline.track.cache.TrackGeometryCache` supplying geometry.
    config:
        Session settings; defaults to :class:`~redline.config.SimulationConfig`.
    clock:
        Millisecond clock shared by the driver and the lap detector.
    """

    def __init__(
        self,
        cache: TrackGeometryCache | None = None,
        config: SimulationConfig | None = None,
        clock=None,
    ) -> None:
        self._cache = cache or TrackGeometryCache()
        self._cfg = config or SimulationConfig()
        self._clock = clock or (lambda: time.monotonic() * 1000.0)
        self._viewport = self._cfg.viewport
        self._sample_count = self._cfg.sample_count
        self._geometry: TrackGeometry | None = None
        self._empty_index = build_index([], fallback=self._viewport.center)
        self._driver = ProgressDriver(
            SpeedFactors(base_speed=self._cfg.base_speed),
            max_elapsed_ms=self._cfg.max_elapsed_ms,
            clock=self._clock,
        )
        self._laps = LapDetector(self._cfg.lap_wrap_high, self._cfg.lap_wrap_low)
        self._timer = RunTimer(self._cfg.run_minutes)
        self._last_tick_ms: float | None = None

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def geometry(self) -> TrackGeometry | None:
        return self._geometry

    @property
    def driver(self) -> ProgressDriver:
        return self._driver

    @property
    def laps(self) -> LapDetector:
        return self._laps

    @property
    def timer(self) -> RunTimer:
        return self._timer

    @property
    def is_running(self) -> bool:
        return self._driver.is_running

    # ------------------------------------------------------------------
    # Track / viewport changes
    # ------------------------------------------------------------------

    def load_track(self, track_id: str, viewport: Viewport | None = None) -> TrackGeometry:
        """Switch to *track_id*.  Stops the session and rewinds progress.

        Raises:
            KeyError: If *track_id* has no preset.
        """
        if viewport is not None:
            self._viewport = viewport
        geo = self._cache.geometry(track_id, self._viewport, self._sample_count)
        self.stop()
        self._driver.reset()
        self._laps.reset()
        self._timer.reset()
        self._geometry = geo
        _logger.info(
            "Loaded track %s (%d points, length %.1f px)",
            track_id, len(geo.normalized), geo.index.total_length,
        )
        return geo

    def set_viewport(self, viewport: Viewport) -> None:
        """Rebuild geometry for a new viewport; progress is preserved."""
        self._viewport = viewport
        if self._geometry is not None:
            self._geometry = self._cache.geometry(
                self._geometry.track_id, viewport, self._sample_count
            )

    def set_sample_count(self, sample_count: int) -> None:
        """Regenerate the active track at a new density, dropping stale cache entries."""
        if sample_count < 1:
            raise ValueError("sample_count must be >= 1")
        old = self._sample_count
        self._sample_count = sample_count
        if self._geometry is not None and old != sample_count:
            track_id = self._geometry.track_id
            self._cache.invalidate(track_id, old)
            self._geometry = self._cache.geometry(track_id, self._viewport, sample_count)

    def set_speed_factors(self, factors: SpeedFactors) -> list[NonFiniteSpeedFactor]:
        return self._driver.set_speed_factors(factors)

    # ------------------------------------------------------------------
    # Session control
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Start (or resume) the session.  A finished timed run restarts its timer."""
        if self._timer.expired:
            self._timer.reset()
        now = self._clock()
        self._last_tick_ms = now
        self._driver.start(now)

    def stop(self) -> None:
        self._driver.stop()
        self._last_tick_ms = None

    def reset(self) -> None:
        """Stop, rewind progress to 0 and clear lap history."""
        self.stop()
        self._driver.reset()
        self._laps.reset()
        self._timer.reset()

    # ------------------------------------------------------------------
    # Per-frame
    # ------------------------------------------------------------------

    def sample(self) -> PositionSample:
        """Resolve the current progress without advancing."""
        geo = self._geometry
        index = geo.index if geo is not None else self._empty_index
        return resolve(index, self._driver.progress)

    def tick(self, now_ms: float | None = None) -> SimulationFrame:
        """Advance one animation frame and return the resulting state."""
        now = self._clock() if now_ms is None else now_ms
        lap: LapEvent | None = None

        if self._driver.is_running:
            progress = self._driver.tick(now)
            lap = self._laps.observe(progress, now / 1000.0)
            # Same clamp as the driver: the run counts simulated time.
            gap_ms = 0.0 if self._last_tick_ms is None else now - self._last_tick_ms
            gap_ms = min(max(gap_ms, 0.0), self._cfg.max_elapsed_ms)
            if self._timer.advance(gap_ms / 1000.0):
                _logger.info("Run time elapsed; stopping session")
                self.stop()
            if self._driver.is_running:
                self._last_tick_ms = now

        # Read the geometry reference once so the whole frame uses one index.
        geo = self._geometry
        index = geo.index if geo is not None else self._empty_index
        return SimulationFrame(
            progress=self._driver.progress,
            sample=resolve(index, self._driver.progress),
            lap=lap,
            running=self._driver.is_running,
            remaining_s=self._timer.remaining_s,
            timestamp=now,
        )
