"""Overlay rendering: display formatting for track outlines and the moving marker."""

from __future__ import annotations

import math
from collections.abc import Sequence

from redline.hotpath.engine import SimulationFrame
from redline.track.models import Point2D
from redline.track.path import PositionSample


class OverlayRenderer:
    """Formats geometry outputs for a drawing surface.

    Only reads :class:`PositionSample` and point sequences; all methods are
    pure data transformations with no side effects and safe to call from any
    thread.
    """

    def polyline(self, points: Sequence[Point2D], decimals: int = 2) -> str:
        """Format *points* as an SVG ``points`` attribute.

        Examples
        --------
        >>> OverlayRenderer().polyline([Point2D(1, 2), Point2D(3.456, 4)])
        '1.00,2.00 3.46,4.00'
        """
        return " ".join(f"{p.x:.{decimals}f},{p.y:.{decimals}f}" for p in points)

    def marker(self, sample: PositionSample) -> dict:
        """Return marker position and heading (degrees) for *sample*."""
        return {
            "x": sample.x,
            "y": sample.y,
            "angle_deg": math.degrees(sample.angle),
        }

    def format_lap_time(self, seconds: float | None) -> str:
        """Format a lap time as ``m:ss.mmm``.

        Examples
        --------
        >>> OverlayRenderer().format_lap_time(78.45)
        '1:18.450'
        >>> OverlayRenderer().format_lap_time(None)
        '--:--.---'
        """
        if seconds is None:
            return "--:--.---"
        millis = round(seconds * 1000)
        minutes, millis = divmod(millis, 60_000)
        secs, millis = divmod(millis, 1000)
        return f"{minutes}:{secs:02d}.{millis:03d}"

    def format_remaining(self, seconds: float | None) -> str:
        """Format a countdown as ``mm:ss``; ``None`` (indefinite) renders as ``∞``."""
        if seconds is None:
            return "∞"
        whole = int(seconds)
        return f"{whole // 60:02d}:{whole % 60:02d}"

    def render(self, frame: SimulationFrame) -> dict:
        """Return a display-ready dict from a :class:`SimulationFrame`.

        Returns
        -------
        dict with keys:
            ``marker``    – marker dict (see :meth:`marker`)
            ``progress``  – integer percentage 0–100
            ``running``   – bool
            ``remaining`` – formatted countdown
            ``lap``       – formatted lap time if this frame completed a lap,
              else ``None``
        """
        lap = None
        if frame.lap is not None:
            lap = self.format_lap_time(frame.lap.lap_time_s)
        return {
            "marker": self.marker(frame.sample),
            "progress": round(frame.progress * 100),
            "running": frame.running,
            "remaining": self.format_remaining(frame.remaining_s),
            "lap": lap,
        }
