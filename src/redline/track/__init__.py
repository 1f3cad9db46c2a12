"""Track geometry: centerline generation, normalization and arc-length lookup."""

from redline.track.cache import TrackGeometry, TrackGeometryCache
from redline.track.centerline import CurveGenerator, InvalidAnchorSet
from redline.track.models import Point2D, TrackInfo
from redline.track.normalizer import Viewport, normalize
from redline.track.path import PathIndex, PositionSample, Segment, build_index, resolve

__all__ = [
    "CurveGenerator",
    "InvalidAnchorSet",
    "PathIndex",
    "Point2D",
    "PositionSample",
    "Segment",
    "TrackGeometry",
    "TrackGeometryCache",
    "TrackInfo",
    "Viewport",
    "build_index",
    "normalize",
    "resolve",
]
