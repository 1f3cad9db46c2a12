"""RunTimer: optional countdown that ends a finite-length session."""

from __future__ import annotations


class RunTimer:
    """Counts down running time for a session of *run_minutes*.

    ``None`` or ``0`` minutes means the session runs indefinitely and
    :attr:`remaining_s` stays ``None``.
    """

    def __init__(self, run_minutes: float | None = None) -> None:
        if run_minutes is not None and run_minutes < 0:
            raise ValueError("run_minutes must be >= 0")
        self.run_minutes = run_minutes or None
        self.reset()

    @property
    def duration_s(self) -> float | None:
        return None if self.run_minutes is None else self.run_minutes * 60.0

    @property
    def remaining_s(self) -> float | None:
        return self._remaining

    @property
    def expired(self) -> bool:
        return self._remaining is not None and self._remaining <= 0.0

    def reset(self) -> None:
        self._remaining = self.duration_s

    def advance(self, elapsed_s: float) -> bool:
        """Subtract *elapsed_s* of running time.  Returns True once expired."""
        if self._remaining is None:
            return False
        self._remaining = max(0.0, self._remaining - max(0.0, elapsed_s))
        return self.expired
