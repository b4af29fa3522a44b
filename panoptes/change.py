"""Change detection between two co-registered CHW images."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class ChangeResult:
    """Binary change mask, per-pixel magnitude in [0, 1] and the changed fraction."""

    change_mask: np.ndarray
    magnitude: np.ndarray
    change_ratio: float


def _abs_diff(before: np.ndarray, after: np.ndarray) -> np.ndarray:
    return np.abs(np.asarray(after, dtype=np.float32) - np.asarray(before, dtype=np.float32))


def detect_change(before: np.ndarray, after: np.ndarray, threshold: float) -> ChangeResult:
    """Pixel-difference change detection, assuming values in [0, 255]."""
    diff = _abs_diff(before, after)
    channels, h, w = diff.shape
    with np.errstate(invalid="ignore", divide="ignore"):
        avg = diff.sum(axis=0, dtype=np.float32) / np.float32(channels)
        magnitude = np.fmin(avg / np.float32(255.0), np.float32(1.0)).astype(np.float32)

    changed = magnitude >= np.float32(threshold)
    total = h * w
    ratio = int(np.count_nonzero(changed)) / total if total else float("nan")
    return ChangeResult(
        change_mask=changed.astype(np.uint8),
        magnitude=magnitude,
        change_ratio=ratio,
    )


def band_change_stats(before: np.ndarray, after: np.ndarray) -> list[float]:
    """Mean absolute difference for each band."""
    diff = _abs_diff(before, after)
    _, h, w = diff.shape
    pixel_count = h * w
    sums = diff.reshape(diff.shape[0], -1).sum(axis=1, dtype=np.float32)
    if pixel_count == 0:
        return [float("nan")] * len(sums)
    return [float(s) / pixel_count for s in sums]