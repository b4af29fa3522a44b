"""Conversion of segmentation masks into vector features."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


class PolygonizeError(Exception):
    """Raised when a mask cannot be polygonized."""


class EmptyMaskError(PolygonizeError, ValueError):
    """The mask has no pixels."""

    def __init__(self) -> None:
        super().__init__("Empty mask")


@dataclass
class VectorFeature:
    """A feature extracted from a mask.

    geometry is the closed exterior ring as a list of (x, y) points.
    """

    class_id: int
    geometry: list[tuple[float, float]]
    area_px: float
    confidence: float


def _flood_fill(
    target: list[list[bool]], visited: list[list[bool]], start_y: int, start_x: int
) -> tuple[int, int, int, int, int]:
    """Visit a 4-connected component; returns pixel count and its bounding box."""
    h, w = len(target), len(target[0])
    min_x = max_x = start_x
    min_y = max_y = start_y
    count = 0
    visited[start_y][start_x] = True
    stack = [(start_y, start_x)]
    while stack:
        y, x = stack.pop()
        count += 1
        min_x, max_x = min(min_x, x), max(max_x, x)
        min_y, max_y = min(min_y, y), max(max_y, y)
        for ny, nx in ((y - 1, x), (y + 1, x), (y, x - 1), (y, x + 1)):
            if 0 <= ny < h and 0 <= nx < w and target[ny][nx] and not visited[ny][nx]:
                visited[ny][nx] = True
                stack.append((ny, nx))
    return count, min_x, min_y, max_x, max_y


def polygonize_class(mask: np.ndarray, class_id: int, min_area: float) -> list[VectorFeature]:
    """Bounding polygons of the 4-connected regions of one class, in scan order.

    Regions with fewer than min_area pixels are dropped.
    """
    grid = np.asarray(mask)
    if grid.ndim != 2:
        raise ValueError("mask must be two-dimensional")
    h, w = grid.shape
    if h == 0 or w == 0:
        raise EmptyMaskError()

    hits = grid == class_id
    target = hits.tolist()
    visited = [[False] * w for _ in range(h)]
    features = []

    for start_y, start_x in np.argwhere(hits).tolist():
        if visited[start_y][start_x]:
            continue
        count, min_x, min_y, max_x, max_y = _flood_fill(target, visited, start_y, start_x)
        area = float(count)
        if area < min_area:
            continue
        left, top = float(min_x), float(min_y)
        right, bottom = float(max_x + 1), float(max_y + 1)
        features.append(
            VectorFeature(
                class_id=class_id,
                geometry=[(left, top), (right, top), (right, bottom), (left, bottom), (left, top)],
                area_px=area,
                confidence=1.0,
            )
        )
    return features


def polygonize_all(mask: np.ndarray, num_classes: int, min_area: float) -> list[VectorFeature]:
    """Polygonize classes 0..num_classes-1 in order and concatenate the features."""
    features: list[VectorFeature] = []
    for class_id in range(num_classes):
        features.extend(polygonize_class(mask, class_id, min_area))
    return features