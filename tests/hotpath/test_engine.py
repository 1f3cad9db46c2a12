"""SimulationEngine: geometry swap, ticking, lap events and timed runs."""

from __future__ import annotations

import pytest

from redline.config import SimulationConfig
from redline.hotpath.driver import FRAME_MS
from redline.hotpath.engine import SimulationEngine, SimulationFrame
from redline.hotpath.speed import SpeedFactors
from redline.track.cache import TrackGeometryCache
from redline.track.normalizer import Viewport


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


def _engine(**cfg_kwargs) -> tuple[SimulationEngine, FakeClock]:
    clock = FakeClock()
    cfg = SimulationConfig(**cfg_kwargs)
    return SimulationEngine(TrackGeometryCache(), cfg, clock=clock), clock


def _run_frames(engine: SimulationEngine, clock: FakeClock, n: int, dt: float = FRAME_MS):
    frames = []
    for _ in range(n):
        clock.now += dt
        frames.append(engine.tick())
    return frames


def test_tick_without_track_returns_viewport_center():
    engine, _ = _engine()
    frame = engine.tick()
    assert isinstance(frame, SimulationFrame)
    assert (frame.sample.x, frame.sample.y) == (400.0, 300.0)
    assert frame.running is False


def test_load_track_positions_marker_at_first_point():
    engine, _ = _engine()
    geo = engine.load_track("monza")
    frame = engine.tick()
    assert (frame.sample.x, frame.sample.y) == (geo.normalized[0].x, geo.normalized[0].y)
    assert frame.progress == 0.0


def test_unknown_track_raises_and_keeps_old_geometry():
    engine, _ = _engine()
    geo = engine.load_track("monza")
    with pytest.raises(KeyError):
        engine.load_track("nowhere")
    assert engine.geometry is geo


def test_running_advances_progress():
    engine, clock = _engine()
    engine.load_track("monza")
    engine.start()
    frames = _run_frames(engine, clock, 60)
    assert frames[-1].progress == pytest.approx(0.036, rel=0.01)
    assert frames[-1].running is True


def test_stop_freezes_position():
    engine, clock = _engine()
    engine.load_track("spa")
    engine.start()
    _run_frames(engine, clock, 10)
    engine.stop()
    before = engine.sample()
    frames = _run_frames(engine, clock, 10)
    assert frames[-1].sample == before


def test_lap_event_returned_from_tick():
    engine, clock = _engine(base_speed=0.02)
    engine.load_track("monza")
    engine.start()
    frames = _run_frames(engine, clock, 160)  # 3.2 laps
    laps = [f.lap for f in frames if f.lap is not None]
    assert [lap.lap_number for lap in laps] == [1, 2, 3]
    assert laps[0].lap_time_s is None
    # 50 frames per lap at 60 fps
    assert laps[1].lap_time_s == pytest.approx(50 * FRAME_MS / 1000, abs=0.05)


def test_load_track_resets_progress_and_laps():
    engine, clock = _engine(base_speed=0.02)
    engine.load_track("monza")
    engine.start()
    _run_frames(engine, clock, 70)
    engine.load_track("silverstone")
    assert engine.is_running is False
    assert engine.driver.progress == 0.0
    assert engine.laps.laps_completed == 0
    assert engine.geometry.track_id == "silverstone"


def test_set_viewport_swaps_geometry_and_keeps_progress():
    engine, clock = _engine()
    engine.load_track("monza")
    engine.start()
    _run_frames(engine, clock, 30)
    progress = engine.driver.progress
    old = engine.geometry
    engine.set_viewport(Viewport(400, 300, 10))
    assert engine.geometry is not old
    assert engine.geometry.viewport == Viewport(400, 300, 10)
    assert engine.driver.progress == progress
    for p in engine.geometry.normalized:
        assert 10 - 1e-6 <= p.x <= 390 + 1e-6


def test_set_sample_count_rebuilds():
    engine, _ = _engine()
    engine.load_track("monza")
    engine.set_sample_count(200)
    assert len(engine.geometry.normalized) == 200


def test_reset_rewinds():
    engine, clock = _engine()
    engine.load_track("monza")
    engine.start()
    _run_frames(engine, clock, 30)
    engine.reset()
    assert engine.driver.progress == 0.0
    assert engine.is_running is False


def test_invalid_speed_factor_reported_not_raised():
    engine, clock = _engine()
    engine.load_track("monza")
    reports = engine.set_speed_factors(SpeedFactors(difficulty=0.0))
    assert [r.name for r in reports] == ["difficulty"]
    engine.start()
    frames = _run_frames(engine, clock, 5)
    assert frames[-1].progress > 0


def test_timed_run_stops_when_elapsed():
    engine, clock = _engine(run_minutes=1 / 60)  # one second
    engine.load_track("monza")
    engine.start()
    frames = _run_frames(engine, clock, 90)
    assert frames[0].remaining_s == pytest.approx(1.0 - FRAME_MS / 1000)
    assert any(not f.running for f in frames)
    assert engine.is_running is False
    stopped_at = engine.driver.progress
    _run_frames(engine, clock, 10)
    assert engine.driver.progress == stopped_at


def test_start_after_expiry_restarts_timer():
    engine, clock = _engine(run_minutes=1 / 60)
    engine.load_track("monza")
    engine.start()
    _run_frames(engine, clock, 90)
    engine.start()
    assert engine.timer.remaining_s == pytest.approx(1.0)
    assert engine.is_running


def test_long_pause_counts_against_run_like_the_driver():
    engine, clock = _engine(run_minutes=1 / 60)
    engine.load_track("monza")
    engine.start()
    clock.now += 10_000.0  # host suspended for 10 s
    frame = engine.tick()
    assert frame.running is True
    assert frame.remaining_s == pytest.approx(0.75)
    assert frame.progress == pytest.approx(0.0006 * 250.0 / FRAME_MS)
