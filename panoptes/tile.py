"""Loading images as CHW tensors and converting tensors back to images."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike

import numpy as np
from PIL import Image


class TileError(Exception):
    """Raised when an image cannot be read or decoded."""


@dataclass
class Tile:
    """A CHW tile cut from a larger image, with its position in that image."""

    data: np.ndarray
    origin_x: int
    origin_y: int
    source_width: int
    source_height: int


def load_image(path: str | PathLike[str]) -> np.ndarray:
    """Load an image file as a float32 RGB tensor in CHW layout."""
    try:
        with Image.open(path) as img:
            img.load()
            return image_to_tensor(img)
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        raise TileError(f"cannot load image {path}: {exc}") from exc


def image_to_tensor(img: Image.Image) -> np.ndarray:
    """Convert a Pillow image to a float32 RGB tensor in CHW layout."""
    rgb = np.asarray(img.convert("RGB"), dtype=np.float32)
    return np.ascontiguousarray(rgb.transpose(2, 0, 1))


def tensor_to_image(tensor: np.ndarray) -> Image.Image:
    """Convert a CHW tensor to an RGB image; missing channels repeat the last one."""
    source = np.asarray(tensor, dtype=np.float32)
    channels = source.shape[0]
    picked = source[[0, min(1, channels - 1), min(2, channels - 1)]]
    clipped = np.clip(np.nan_to_num(picked, nan=0.0), 0.0, 255.0)
    pixels = np.ascontiguousarray(clipped.astype(np.uint8).transpose(1, 2, 0))
    return Image.fromarray(pixels)


def create_test_tile(width: int, height: int, color: tuple[float, float, float]) -> np.ndarray:
    """A solid-colour CHW tensor of the given size."""
    tile = np.empty((3, height, width), dtype=np.float32)
    for channel, value in zip(tile, color):
        channel.fill(value)
    return tile