"""Polygon simplification with the Ramer-Douglas-Peucker algorithm."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import replace

from panoptes.polygonize import VectorFeature

Point = tuple[float, float]


def _segment_distance(point: Point, start: Point, end: Point) -> float:
    px, py = point
    sx, sy = start
    ex, ey = end
    dx, dy = ex - sx, ey - sy
    length_sq = dx * dx + dy * dy
    if length_sq == 0.0:
        return math.hypot(px - sx, py - sy)
    t = ((px - sx) * dx + (py - sy) * dy) / length_sq
    t = min(max(t, 0.0), 1.0)
    return math.hypot(px - (sx + t * dx), py - (sy + t * dy))


def _rdp(points: Sequence[Point], epsilon: float) -> list[Point]:
    if len(points) < 3:
        return list(points)
    first, last = points[0], points[-1]
    index, farthest = 0, 0.0
    for i, point in enumerate(points[1:-1], start=1):
        distance = _segment_distance(point, first, last)
        if distance > farthest:
            index, farthest = i, distance
    if farthest > epsilon:
        left = _rdp(points[: index + 1], epsilon)
        right = _rdp(points[index:], epsilon)
        return left[:-1] + right
    return [first, last]


def simplify_polygon(polygon: Sequence[Point], tolerance: float) -> list[Point]:
    """Simplify a polygon ring, dropping vertices closer than tolerance to the outline."""
    points = [(float(x), float(y)) for x, y in polygon]
    if tolerance <= 0.0:
        return points
    return _rdp(points, tolerance)


def simplify_features(features: list[VectorFeature], tolerance: float) -> None:
    """Simplify the geometry of every feature in place."""
    for index, feature in enumerate(features):
        features[index] = replace(
            feature, geometry=simplify_polygon(feature.geometry, tolerance)
        )