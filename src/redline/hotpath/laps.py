"""LapDetector: lap completion from progress wraparound."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class LapEvent:
    """Emitted when progress wraps from near 1.0 back to near 0.0."""

    lap_time_s: float | None
    """Seconds since the previous wrap; ``None`` for the first wrap observed."""

    progress_at_wrap: float
    """Progress value that triggered the wrap."""

    lap_number: int
    """1-based count of wraps seen so far."""


class LapDetector:
    """Observes successive progress values and reports wraps.

    A wrap is declared when the previous value is above *wrap_high* and the
    current one is below *wrap_low*.  This assumes progress moves forward in
    small steps (well under ``wrap_high - wrap_low`` per observation); a
    larger jump can miss a lap or report a spurious one.

    Parameters
    ----------
    wrap_high:
        Previous-value threshold (default 0.9).
    wrap_low:
        Current-value threshold (default 0.1).
    """

    def __init__(self, wrap_high: float = 0.9, wrap_low: float = 0.1) -> None:
        if not 0.0 < wrap_low < wrap_high < 1.0:
            raise ValueError("thresholds must satisfy 0 < wrap_low < wrap_high < 1")
        self.wrap_high = wrap_high
        self.wrap_low = wrap_low
        self.reset()

    def reset(self, progress: float = 0.0) -> None:
        """Forget all laps and start observing from *progress*."""
        self._prev = progress
        self._last_wrap_s: float | None = None
        self.laps_completed = 0
        self.last_lap_s: float | None = None
        self.best_lap_s: float | None = None

    def observe(self, progress: float, now_s: float) -> LapEvent | None:
        """Feed the next progress value observed at time *now_s* (seconds).

        Returns a :class:`LapEvent` when this value completes a wrap.
        """
        prev = self._prev
        self._prev = progress

        if not (prev > self.wrap_high and progress < self.wrap_low):
            return None

        lap_time = None if self._last_wrap_s is None else now_s - self._last_wrap_s
        self._last_wrap_s = now_s
        self.laps_completed += 1

        if lap_time is not None:
            self.last_lap_s = lap_time
            if self.best_lap_s is None or lap_time < self.best_lap_s:
                self.best_lap_s = lap_time

        return LapEvent(
            lap_time_s=lap_time,
            progress_at_wrap=progress,
            lap_number=self.laps_completed,
        )
