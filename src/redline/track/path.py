"""Arc-length parametrization of a point sequence.

:func:`build_index` precomputes per-segment lengths and their running totals
once per sequence; :func:`resolve` then maps a progress value in ``[0, 1)`` to
an interpolated position and heading along the path.  Resolution never
raises: degenerate paths fall back to a single best-effort point so a render
loop can keep going while a track is being swapped.
"""

from __future__ import annotations

import bisect
import logging
import math
from collections.abc import Sequence
from dataclasses import dataclass

from redline.track.models import Point2D

_logger = logging.getLogger(__name__)

#: Floor applied to every segment length (duplicate points must not yield 0).
MIN_SEGMENT_LENGTH = 1e-5


@dataclass(frozen=True)
class Segment:
    """A straight piece of the path from *a* to *b*."""

    a: Point2D
    b: Point2D
    length: float

    @property
    def angle(self) -> float:
        """Heading of the segment in radians (``atan2(dy, dx)``)."""
        return math.atan2(self.b.y - self.a.y, self.b.x - self.a.x)


@dataclass(frozen=True)
class PositionSample:
    """Resolved position along a path."""

    x: float
    y: float

    angle: float
    """Tangent direction of the containing segment, radians."""

    segment_index: int

    local_t: float
    """Fraction of the containing segment covered [0.0, 1.0]."""


@dataclass(frozen=True)
class PathIndex:
    """Precomputed arc-length data for one point sequence.

    Instances are immutable and safe to share between readers.
    """

    points: tuple[Point2D, ...]
    segments: tuple[Segment, ...]

    cumulative: tuple[float, ...]
    """``cumulative[i]`` is the path length up to the end of segment *i*."""

    total_length: float

    fallback: Point2D = Point2D(0.0, 0.0)
    """Position reported when the index has no points at all."""

    @property
    def is_degenerate(self) -> bool:
        return (
            not self.segments
            or not math.isfinite(self.total_length)
            or self.total_length <= 0.0
        )

    def polyline(self) -> list[Point2D]:
        return list(self.points)

    def distance_at(self, progress: float) -> float:
        """Arc-length distance covered at *progress* (wrapped into [0, 1))."""
        return wrap_progress(progress) * self.total_length


def wrap_progress(progress: float) -> float:
    """Wrap *progress* into ``[0, 1)``; non-finite values map to 0."""
    if not math.isfinite(progress):
        return 0.0
    wrapped = progress - math.floor(progress)
    # -1e-18 - floor(-1e-18) rounds to exactly 1.0
    return 0.0 if wrapped >= 1.0 else wrapped


def build_index(
    points: Sequence[Point2D],
    closed: bool = True,
    fallback: Point2D | None = None,
) -> PathIndex:
    """Build a :class:`PathIndex` from an ordered point sequence.

    Args:
        points: Ordered points, typically a normalized centerline.
        closed: Include the wrap-around segment from the last point back to
            the first.  Track centerlines are closed.
        fallback: Position to report when *points* is empty (for instance
            the viewport center).  Defaults to the origin.

    Returns:
        An index with empty segments and ``total_length == 0`` when fewer than
        two points are given.
    """
    pts = tuple(points)
    fb = fallback if fallback is not None else Point2D(0.0, 0.0)
    if len(pts) < 2:
        _logger.debug("Degenerate path with %d point(s); index has no segments", len(pts))
        return PathIndex(points=pts, segments=(), cumulative=(), total_length=0.0, fallback=fb)

    pairs = list(zip(pts, pts[1:]))
    if closed:
        pairs.append((pts[-1], pts[0]))

    segments: list[Segment] = []
    cumulative: list[float] = []
    total = 0.0
    for a, b in pairs:
        length = math.hypot(b.x - a.x, b.y - a.y)
        if length < MIN_SEGMENT_LENGTH:
            length = MIN_SEGMENT_LENGTH
        segments.append(Segment(a, b, length))
        total += length
        cumulative.append(total)

    return PathIndex(
        points=pts,
        segments=tuple(segments),
        cumulative=tuple(cumulative),
        total_length=total,
        fallback=fb,
    )


def _degenerate_sample(index: PathIndex) -> PositionSample:
    p = index.points[0] if index.points else index.fallback
    return PositionSample(x=p.x, y=p.y, angle=0.0, segment_index=0, local_t=0.0)


def _sample_on(index: PathIndex, i: int, target: float) -> PositionSample:
    seg = index.segments[i]
    before = index.cumulative[i - 1] if i > 0 else 0.0
    local = (target - before) / seg.length
    local = min(1.0, max(0.0, local))
    return PositionSample(
        x=seg.a.x + (seg.b.x - seg.a.x) * local,
        y=seg.a.y + (seg.b.y - seg.a.y) * local,
        angle=seg.angle,
        segment_index=i,
        local_t=local,
    )


def _end_sample(index: PathIndex) -> PositionSample:
    last = index.segments[-1]
    return PositionSample(
        x=last.b.x,
        y=last.b.y,
        angle=last.angle,
        segment_index=len(index.segments) - 1,
        local_t=1.0,
    )


def resolve(index: PathIndex, progress: float) -> PositionSample:
    """Map *progress* to a :class:`PositionSample` on *index*.

    The containing segment is the first one whose cumulative length is
    ``>=`` the target distance, found by bisection over the cumulative
    totals in O(log n).
    """
    if index.is_degenerate:
        return _degenerate_sample(index)

    target = wrap_progress(progress) * index.total_length
    i = bisect.bisect_left(index.cumulative, target)
    if i >= len(index.segments):
        return _end_sample(index)
    return _sample_on(index, i, target)


def resolve_scan(index: PathIndex, progress: float) -> PositionSample:
    """Linear-scan variant of :func:`resolve` (O(n), same tie-break)."""
    if index.is_degenerate:
        return _degenerate_sample(index)

    target = wrap_progress(progress) * index.total_length
    acc = 0.0
    for i, seg in enumerate(index.segments):
        if acc + seg.length >= target:
            return _sample_on(index, i, target)
        acc += seg.length
    return _end_sample(index)
