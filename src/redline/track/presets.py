"""Anchor presets and catalogue metadata for the built-in circuits.

The layouts are stylized approximations meant for visualization, not
surveyed geometry.
"""

from __future__ import annotations

import math

from redline.track.centerline import CurveGenerator, Perturbation
from redline.track.models import Point2D, TrackInfo


def _anchors(*coords: tuple[float, float]) -> tuple[Point2D, ...]:
    return tuple(Point2D(float(x), float(y)) for x, y in coords)


# ---------------------------------------------------------------------------
# Anchor sets
# ---------------------------------------------------------------------------

MONZA_ANCHORS = _anchors(
    (0, 0),      # start of front straight
    (320, -10),  # kink into chicane
    (480, 40),   # chicane exit
    (620, 140),  # loop down to Lesmo
    (560, 260),  # Lesmo
    (420, 320),  # Ascari
    (240, 300),
    (140, 200),
    (180, 80),
    (260, 20),   # finish line
)

SILVERSTONE_ANCHORS = _anchors(
    (0, 0),
    (140, -30),  # Copse
    (260, -10),
    (360, 40),   # Maggots
    (420, 110),  # Becketts
    (360, 200),  # Chapel
    (240, 240),  # Hangar straight
    (120, 220),
    (40, 160),
    (20, 80),
)

SPA_ANCHORS = _anchors(
    (0, 0),
    (120, -40),  # Eau Rouge compression
    (220, -20),  # Raidillon crest
    (350, 40),
    (420, 140),
    (520, 240),  # back straight
    (640, 300),
    (520, 360),
    (360, 340),
    (200, 240),  # final complex
)


# ---------------------------------------------------------------------------
# Perturbations
# ---------------------------------------------------------------------------

def silverstone_wobble(segment_index: int, t: float) -> tuple[float, float]:
    """Alternating sinusoidal wobble for the fast direction changes."""
    phase = segment_index + t
    wobble = math.sin(phase * 6) * 1.2
    sign = 1.0 if segment_index % 2 else -1.0
    return wobble * sign, math.cos(phase * 4) * 0.8


def spa_radial(segment_index: int, t: float) -> tuple[float, float]:
    """Small rotating radial offset along the long sweeping sectors."""
    phase = segment_index + t
    r = math.sin(phase * 3) * 1.6
    return r * math.cos(phase * 2.3), r * math.sin(phase * 2.3)


_PRESETS: dict[str, tuple[tuple[Point2D, ...], Perturbation | None]] = {
    "monza": (MONZA_ANCHORS, None),
    "silverstone": (SILVERSTONE_ANCHORS, silverstone_wobble),
    "spa": (SPA_ANCHORS, spa_radial),
}


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------

TRACK_CATALOGUE: tuple[TrackInfo, ...] = (
    TrackInfo("sgp", "Singapore", "Singapore", "Marina Bay, Singapore", 61, 5.063, 23, 88.062),
    TrackInfo("silverstone", "Silverstone", "United Kingdom", "Silverstone, United Kingdom",
              52, 5.891, 18, 87.325),
    TrackInfo("monza", "Monza", "Italy", "Monza, Italy", 53, 5.793, 11, 78.450),
    TrackInfo("lasvegas", "Las Vegas", "USA", "Las Vegas, USA", 50, 6.12, 17, 93.891),
    TrackInfo("yas", "Yas Marina", "UAE", "Yas Island, Abu Dhabi", 55, 5.281, 21, 89.234),
    TrackInfo("spa", "Spa-Francorchamps", "Belgium", "Stavelot, Belgium", 44, 7.004, 19, 106.286),
)


def available_tracks() -> list[str]:
    """Return the ids of all tracks that have an anchor preset."""
    return sorted(_PRESETS)


def get_preset(track_id: str) -> tuple[tuple[Point2D, ...], Perturbation | None]:
    """Return ``(anchors, perturbation)`` for *track_id*.

    Raises:
        KeyError: If no preset exists for *track_id*.
    """
    try:
        return _PRESETS[track_id]
    except KeyError:
        raise KeyError(f"No anchor preset for track {track_id!r}") from None


def get_track_info(track_id: str) -> TrackInfo | None:
    """Return catalogue metadata for *track_id*, or ``None``."""
    for info in TRACK_CATALOGUE:
        if info.id == track_id:
            return info
    return None


def generate_track(track_id: str, sample_count: int = 400) -> list[Point2D]:
    """Generate the raw centerline for a preset track."""
    anchors, perturbation = get_preset(track_id)
    return CurveGenerator(sample_count, perturbation).generate(anchors)
