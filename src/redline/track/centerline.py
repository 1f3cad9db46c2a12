"""Closed centerline generation from a sparse set of anchor points.

Anchors are treated as a cyclic sequence and smoothed with a uniform
Catmull-Rom spline.  The dense spline samples are then resampled by index so
the output always holds exactly ``sample_count`` points, independent of how
many samples each span produced.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence

from redline.track.models import Point2D

#: Pure offset function ``(segment_index, t) -> (dx, dy)`` layered on top of
#: the base spline evaluation.
Perturbation = Callable[[int, float], tuple[float, float]]

MIN_ANCHORS = 4
MIN_SAMPLES_PER_SEGMENT = 3


class InvalidAnchorSet(ValueError):
    """Raised when an anchor set cannot describe a closed spline."""


# ---------------------------------------------------------------------------
# Spline primitives
# ---------------------------------------------------------------------------

def catmull_rom(p0: Point2D, p1: Point2D, p2: Point2D, p3: Point2D, t: float) -> Point2D:
    """Uniform Catmull-Rom point between *p1* (``t=0``) and *p2* (``t=1``)."""
    t2 = t * t
    t3 = t2 * t
    x = 0.5 * (
        (2 * p1.x)
        + (-p0.x + p2.x) * t
        + (2 * p0.x - 5 * p1.x + 4 * p2.x - p3.x) * t2
        + (-p0.x + 3 * p1.x - 3 * p2.x + p3.x) * t3
    )
    y = 0.5 * (
        (2 * p1.y)
        + (-p0.y + p2.y) * t
        + (2 * p0.y - 5 * p1.y + 4 * p2.y - p3.y) * t2
        + (-p0.y + 3 * p1.y - 3 * p2.y + p3.y) * t3
    )
    return Point2D(x, y)


def _mix(a: Point2D, b: Point2D, t: float) -> Point2D:
    return Point2D(a.x + (b.x - a.x) * t, a.y + (b.y - a.y) * t)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------

class CurveGenerator:
    """Produce a smooth closed centerline through an ordered anchor set.

    Args:
        sample_count: Number of points in every generated sequence.
        perturbation: Optional pure function ``(segment_index, t) -> (dx, dy)``
            added to each spline sample.  Used by presets to give named tracks
            some visual texture; must not depend on anything but its arguments.
    """

    def __init__(
        self,
        sample_count: int = 400,
        perturbation: Perturbation | None = None,
    ) -> None:
        if sample_count < 1:
            raise ValueError("sample_count must be >= 1")
        self.sample_count = sample_count
        self.perturbation = perturbation

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def generate(self, anchors: Sequence[Point2D]) -> list[Point2D]:
        """Generate exactly ``sample_count`` points tracing the closed curve.

        Args:
            anchors: Ordered anchor points, conceptually cyclic.

        Returns:
            List of :class:`Point2D`; the last point implicitly connects back
            to the first.

        Raises:
            InvalidAnchorSet: If fewer than 4 anchors are given.
        """
        if len(anchors) < MIN_ANCHORS:
            raise InvalidAnchorSet(
                f"At least {MIN_ANCHORS} anchors are required, got {len(anchors)}"
            )
        dense = self.sample_spline(anchors)
        return self._resample(dense)

    def sample_spline(self, anchors: Sequence[Point2D]) -> list[Point2D]:
        """Evaluate the spline span by span, before index resampling."""
        # Pad with the first three anchors so every span at the seam has
        # both neighbours.
        closed = list(anchors) + list(anchors[:3])
        segments = len(anchors)
        per_segment = max(MIN_SAMPLES_PER_SEGMENT, self.sample_count // segments)

        dense: list[Point2D] = []
        for s in range(segments):
            p0, p1, p2, p3 = closed[s], closed[s + 1], closed[s + 2], closed[s + 3]
            for i in range(per_segment):
                t = i / per_segment
                pt = catmull_rom(p0, p1, p2, p3, t)
                if self.perturbation is not None:
                    dx, dy = self.perturbation(s, t)
                    pt = Point2D(pt.x + dx, pt.y + dy)
                dense.append(pt)
        return dense

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _resample(self, dense: list[Point2D]) -> list[Point2D]:
        """Linear resample by index (not arc length) to ``sample_count`` points."""
        n_dense = len(dense)
        n = self.sample_count
        out: list[Point2D] = []
        for i in range(n):
            idx = (i / n) * n_dense
            base = math.floor(idx)
            i0 = base % n_dense
            i1 = (i0 + 1) % n_dense
            out.append(_mix(dense[i0], dense[i1], idx - base))
        return out
