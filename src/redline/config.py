"""Simulation settings with environment-variable overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from redline.hotpath.speed import DEFAULT_BASE_SPEED
from redline.track.normalizer import Viewport


def _env_float(name: str, default: float) -> float:
    raw = os.environ.get(name, "").strip()
    return float(raw) if raw else default


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name, "").strip()
    return int(raw) if raw else default


@dataclass
class SimulationConfig:
    """Tunables for a simulation session."""

    sample_count: int = 400
    viewport: Viewport = field(default_factory=Viewport)
    base_speed: float = DEFAULT_BASE_SPEED
    max_elapsed_ms: float = 250.0
    target_hz: float = 60.0
    run_minutes: float | None = None
    lap_wrap_high: float = 0.9
    lap_wrap_low: float = 0.1

    @classmethod
    def from_env(cls) -> SimulationConfig:
        """Build a config from ``REDLINE_*`` environment variables.

        Call :func:`dotenv.load_dotenv` first to pick up a ``.env`` file.

        Raises:
            ValueError: If a variable is set but not a valid number.
        """
        defaults = cls()
        viewport = Viewport(
            width=_env_int("REDLINE_VIEWPORT_WIDTH", defaults.viewport.width),
            height=_env_int("REDLINE_VIEWPORT_HEIGHT", defaults.viewport.height),
            padding=_env_int("REDLINE_VIEWPORT_PADDING", defaults.viewport.padding),
        )
        return cls(
            sample_count=_env_int("REDLINE_SAMPLE_COUNT", defaults.sample_count),
            viewport=viewport,
            base_speed=_env_float("REDLINE_BASE_SPEED", defaults.base_speed),
            max_elapsed_ms=_env_float("REDLINE_MAX_ELAPSED_MS", defaults.max_elapsed_ms),
            target_hz=_env_float("REDLINE_TARGET_HZ", defaults.target_hz),
        )
