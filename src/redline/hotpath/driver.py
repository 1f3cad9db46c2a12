"""ProgressDriver: frame-rate independent progress advance along a closed path."""

from __future__ import annotations

import enum
import math
import time
from collections.abc import Callable

from redline.hotpath.speed import NonFiniteSpeedFactor, SpeedFactors
from redline.track.path import wrap_progress

FRAME_MS = 1000.0 / 60.0  # one frame at the 60 fps reference rate


def _monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class DriverState(enum.Enum):
    STOPPED = "stopped"
    RUNNING = "running"


class DriverStateError(RuntimeError):
    """Raised when a command is not allowed in the driver's current state."""


class ProgressDriver:
    """Advances a progress value in ``[0, 1)`` on every animation tick.

    Each tick converts the wall-clock time since the previous tick into
    60 fps frame units and moves progress by ``frames × effective_speed``.
    Transitions between stopped and running happen only through
    :meth:`start` and :meth:`stop`.

    Parameters
    ----------
    factors:
        Speed multipliers.  Invalid values are replaced (see
        :meth:`set_speed_factors`).
    max_elapsed_ms:
        Upper bound on the time credited to a single tick, so a long pause
        (e.g. a suspended host) does not produce a multi-lap jump.
    clock:
        Returns the current time in milliseconds.  Defaults to
        :func:`time.monotonic`.
    """

    def __init__(
        self,
        factors: SpeedFactors | None = None,
        max_elapsed_ms: float = 250.0,
        clock: Callable[[], float] | None = None,
    ) -> None:
        if max_elapsed_ms <= 0:
            raise ValueError("max_elapsed_ms must be > 0")
        self._clock = clock or _monotonic_ms
        self._max_elapsed_ms = max_elapsed_ms
        self._state = DriverState.STOPPED
        self._progress = 0.0
        self._last_ms: float | None = None
        self._factors = SpeedFactors()
        self._speed = self._factors.effective()
        self.warnings: list[NonFiniteSpeedFactor] = []
        if factors is not None:
            self.set_speed_factors(factors)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def state(self) -> DriverState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is DriverState.RUNNING

    @property
    def progress(self) -> float:
        return self._progress

    @property
    def speed(self) -> float:
        """Effective progress per 60 fps frame."""
        return self._speed

    @property
    def factors(self) -> SpeedFactors:
        return self._factors

    def set_speed_factors(self, factors: SpeedFactors) -> list[NonFiniteSpeedFactor]:
        """Install new speed factors, replacing invalid ones with safe defaults.

        Returns the list of replaced factors (empty when all were valid); the
        same list is kept on :attr:`warnings`.  Never raises for bad values.
        """
        clean, reports = factors.sanitized()
        self._factors = clean
        self._speed = clean.effective()
        self.warnings = reports
        return reports

    def start(self, now_ms: float | None = None) -> None:
        """Switch to running; the next tick measures time from now."""
        if self._state is DriverState.RUNNING:
            return
        self._last_ms = self._clock() if now_ms is None else now_ms
        self._state = DriverState.RUNNING

    def stop(self) -> None:
        """Freeze progress at its current value.  Safe to call at any time."""
        self._state = DriverState.STOPPED
        self._last_ms = None

    def reset(self) -> None:
        """Set progress back to 0.

        Raises:
            DriverStateError: If the driver is running.
        """
        if self._state is DriverState.RUNNING:
            raise DriverStateError("reset() requires the driver to be stopped")
        self._progress = 0.0

    def tick(self, now_ms: float | None = None) -> float:
        """Advance progress for the time elapsed since the previous tick.

        Does nothing while stopped.  Returns the (possibly updated) progress.
        """
        if self._state is not DriverState.RUNNING:
            return self._progress

        now = self._clock() if now_ms is None else now_ms
        last = self._last_ms if self._last_ms is not None else now
        self._last_ms = now

        elapsed = now - last
        if not math.isfinite(elapsed) or elapsed < 0:
            elapsed = 0.0
        elapsed = min(elapsed, self._max_elapsed_ms)

        self._progress = wrap_progress(self._progress + (elapsed / FRAME_MS) * self._speed)
        return self._progress
