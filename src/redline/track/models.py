"""Track modeling data structures."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Point2D:
    """A plain 2D coordinate.

    Units depend on the stage of the pipeline: arbitrary anchor units for
    presets, pixels once a sequence has been normalized into a viewport.
    """

    x: float
    y: float


@dataclass(frozen=True)
class TrackInfo:
    """Catalogue metadata for a circuit."""

    id: str
    """Track identifier (key into the anchor presets)."""

    name: str
    country: str
    location: str

    laps: int
    """Race distance in laps."""

    length_km: float
    turns: int

    best_lap_s: float
    """Reference lap record in seconds."""
