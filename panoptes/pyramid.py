"""Multi-resolution image pyramids built by 2x average pooling."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass
class PyramidLevel:
    """One pyramid level; scale is relative to the original resolution."""

    level: int
    scale: float
    data: np.ndarray


def downsample_2x(image: np.ndarray) -> np.ndarray:
    """Halve a CHW image by averaging 2x2 blocks; odd edge rows/columns are dropped."""
    source = np.asarray(image, dtype=np.float32)
    _, h, w = source.shape
    cropped = source[:, : (h // 2) * 2, : (w // 2) * 2]
    total = (
        cropped[:, 0::2, 0::2]
        + cropped[:, 1::2, 0::2]
        + cropped[:, 0::2, 1::2]
        + cropped[:, 1::2, 1::2]
    )
    return total / np.float32(4.0)


def build_pyramid(image: np.ndarray, levels: int) -> list[PyramidLevel]:
    """Build a pyramid; the original image is always level 0."""
    current = np.array(image, dtype=np.float32)
    pyramid = [PyramidLevel(level=0, scale=1.0, data=current.copy())]
    for index in range(1, levels):
        current = downsample_2x(current)
        pyramid.append(PyramidLevel(level=index, scale=1.0 / (1 << index), data=current.copy()))
    return pyramid