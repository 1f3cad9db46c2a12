"""Viewport normalization: fit a point sequence into a padded rectangle."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from redline.track.models import Point2D


def normalize(
    points: Sequence[Point2D],
    width: float = 800,
    height: float = 600,
    padding: float = 20,
    precise: bool = True,
) -> list[Point2D]:
    """Scale and center *points* inside ``width × height`` minus *padding*.

    Aspect ratio is preserved.  Data extents are floored at 1 so single-point
    or collinear inputs do not divide by zero.

    Args:
        points: Input sequence in arbitrary units.
        width, height: Target rectangle size.
        padding: Inner margin on every side.
        precise: Keep full precision when True.  When False, coordinates are
            rounded to integer pixels, which can collapse short segments to
            zero length and should only be used for display.

    Returns:
        A new list with the same length and order as *points*.
    """
    if not points:
        return []

    xs = [p.x for p in points]
    ys = [p.y for p in points]
    min_x, max_x = min(xs), max(xs)
    min_y, max_y = min(ys), max(ys)

    data_w = max(1.0, max_x - min_x)
    data_h = max(1.0, max_y - min_y)

    target_w = max(1.0, width - 2 * padding)
    target_h = max(1.0, height - 2 * padding)
    scale = min(target_w / data_w, target_h / data_h)

    offset_x = padding + (target_w - data_w * scale) / 2
    offset_y = padding + (target_h - data_h * scale) / 2

    out: list[Point2D] = []
    for p in points:
        x = (p.x - min_x) * scale + offset_x
        y = (p.y - min_y) * scale + offset_y
        if not precise:
            x, y = float(round(x)), float(round(y))
        out.append(Point2D(x, y))
    return out


@dataclass(frozen=True)
class Viewport:
    """Target rectangle for normalization."""

    width: int = 800
    height: int = 600
    padding: int = 40

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Viewport width and height must be positive")
        if self.padding < 0:
            raise ValueError("Viewport padding must be >= 0")
        if 2 * self.padding >= min(self.width, self.height):
            raise ValueError("Viewport padding must leave a drawable area")

    @property
    def center(self) -> Point2D:
        return Point2D(self.width / 2, self.height / 2)

    def normalize(self, points: Sequence[Point2D], precise: bool = True) -> list[Point2D]:
        return normalize(points, self.width, self.height, self.padding, precise=precise)
