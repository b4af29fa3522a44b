"""Sliding-window extraction of overlapping tiles from large images."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from panoptes.tile import Tile


@dataclass
class WindowConfig:
    """Tile size and overlap for sliding-window extraction."""

    tile_width: int
    tile_height: int
    overlap: int

    @classmethod
    def square(cls, tile_size: int, overlap: int) -> WindowConfig:
        return cls(tile_width=tile_size, tile_height=tile_size, overlap=overlap)

    @staticmethod
    def _stride(size: int, overlap: int) -> int:
        stride = size - overlap
        if stride <= 0:
            raise ValueError(f"overlap {overlap} must be smaller than the tile size {size}")
        return stride

    def stride_x(self) -> int:
        """Horizontal step between tiles."""
        return self._stride(self.tile_width, self.overlap)

    def stride_y(self) -> int:
        """Vertical step between tiles."""
        return self._stride(self.tile_height, self.overlap)


def extract_tiles(image: np.ndarray, config: WindowConfig) -> list[Tile]:
    """Cut every full tile of a CHW image, row by row."""
    _, img_h, img_w = image.shape
    stride_y = config.stride_y()
    stride_x = config.stride_x()
    return [
        Tile(
            data=np.array(image[:, y : y + config.tile_height, x : x + config.tile_width]),
            origin_x=x,
            origin_y=y,
            source_width=img_w,
            source_height=img_h,
        )
        for y in range(0, img_h - config.tile_height + 1, stride_y)
        for x in range(0, img_w - config.tile_width + 1, stride_x)
    ]


def tile_count(img_width: int, img_height: int, config: WindowConfig) -> int:
    """Number of tiles extract_tiles produces for an image of this size."""
    cols = (
        (img_width - config.tile_width) // config.stride_x() + 1
        if img_width >= config.tile_width
        else 0
    )
    rows = (
        (img_height - config.tile_height) // config.stride_y() + 1
        if img_height >= config.tile_height
        else 0
    )
    return rows * cols