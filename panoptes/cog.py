"""Cloud-Optimized GeoTIFF metadata parsing and raw tile access."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import BinaryIO

_TAG_IMAGE_WIDTH = 256
_TAG_IMAGE_LENGTH = 257
_TAG_BITS_PER_SAMPLE = 258
_TAG_COMPRESSION = 259
_TAG_SAMPLES_PER_PIXEL = 277
_TAG_TILE_WIDTH = 322
_TAG_TILE_LENGTH = 323
_TAG_TILE_OFFSETS = 324
_TAG_TILE_BYTE_COUNTS = 325

_TYPE_SIZES = {3: 2, 4: 4, 16: 8}
_SIZE_FORMATS = {2: "H", 4: "I", 8: "Q"}


class CogError(Exception):
    """Raised when a COG cannot be read."""


class InvalidHeaderError(CogError):
    """The data does not start with a valid TIFF header."""

    def __init__(self) -> None:
        super().__init__("Invalid TIFF header")


class TileNotFoundError(CogError, LookupError):
    """The requested level or tile does not exist."""

    def __init__(self, tile_index: int) -> None:
        super().__init__(f"Tile not found at index {tile_index}")
        self.tile_index = tile_index


@dataclass
class IfdEntry:
    """One Image File Directory entry."""

    tag: int
    data_type: int
    count: int
    value_offset: int


@dataclass
class OverviewLevel:
    """Geometry and tile layout of one resolution level (0 = full resolution)."""

    level: int
    width: int
    height: int
    tile_width: int
    tile_height: int
    tiles_across: int
    tiles_down: int
    tile_offsets: list[int] = field(default_factory=list)
    tile_byte_counts: list[int] = field(default_factory=list)


@dataclass
class CogMetadata:
    """Metadata parsed from the IFD chain of a COG."""

    levels: list[OverviewLevel]
    samples_per_pixel: int
    bits_per_sample: int
    compression: int


def _read_exact(reader: BinaryIO, size: int) -> bytes:
    data = reader.read(size)
    if len(data) != size:
        raise CogError(f"unexpected end of data: wanted {size} bytes, got {len(data)}")
    return data


def _div_ceil(value: int, divisor: int) -> int:
    return -(-value // divisor)


def _read_offset_array(reader: BinaryIO, entry: IfdEntry, prefix: str) -> list[int]:
    if entry.count == 1:
        return [entry.value_offset]

    position = reader.tell()
    size = _TYPE_SIZES.get(entry.data_type, 4)
    reader.seek(entry.value_offset)
    raw = _read_exact(reader, size * entry.count)
    values = list(struct.unpack(f"{prefix}{entry.count}{_SIZE_FORMATS[size]}", raw))
    reader.seek(position)
    return values


def parse_cog_metadata(reader: BinaryIO) -> CogMetadata:
    """Walk the IFD chain of a seekable binary stream and collect level metadata."""
    header = _read_exact(reader, 8)
    if header[:2] == b"II":
        prefix = "<"
    elif header[:2] == b"MM":
        prefix = ">"
    else:
        raise InvalidHeaderError()

    magic, ifd_offset = struct.unpack(f"{prefix}HI", header[2:8])
    if magic != 42:
        raise InvalidHeaderError()

    levels: list[OverviewLevel] = []
    samples_per_pixel = 1
    bits_per_sample = 8
    compression = 1
    visited: set[int] = set()

    while ifd_offset != 0:
        if ifd_offset in visited:
            raise CogError(f"IFD chain loops back to offset {ifd_offset}")
        visited.add(ifd_offset)
        reader.seek(ifd_offset)
        (entry_count,) = struct.unpack(f"{prefix}H", _read_exact(reader, 2))

        width = height = 0
        tile_width = tile_height = 256
        tile_offsets: list[int] = []
        tile_byte_counts: list[int] = []

        for _ in range(entry_count):
            entry = IfdEntry(*struct.unpack(f"{prefix}HHII", _read_exact(reader, 12)))
            value = entry.value_offset
            if entry.tag == _TAG_IMAGE_WIDTH:
                width = value
            elif entry.tag == _TAG_IMAGE_LENGTH:
                height = value
            elif entry.tag == _TAG_BITS_PER_SAMPLE:
                bits_per_sample = value & 0xFFFF
            elif entry.tag == _TAG_COMPRESSION:
                compression = value & 0xFFFF
            elif entry.tag == _TAG_SAMPLES_PER_PIXEL:
                samples_per_pixel = value & 0xFFFF
            elif entry.tag == _TAG_TILE_WIDTH:
                tile_width = value
            elif entry.tag == _TAG_TILE_LENGTH:
                tile_height = value
            elif entry.tag == _TAG_TILE_OFFSETS:
                tile_offsets = _read_offset_array(reader, entry, prefix)
            elif entry.tag == _TAG_TILE_BYTE_COUNTS:
                tile_byte_counts = _read_offset_array(reader, entry, prefix)

        if tile_width == 0 or tile_height == 0:
            raise CogError("tile dimensions must be non-zero")

        levels.append(
            OverviewLevel(
                level=len(levels),
                width=width,
                height=height,
                tile_width=tile_width,
                tile_height=tile_height,
                tiles_across=_div_ceil(width, tile_width),
                tiles_down=_div_ceil(height, tile_height),
                tile_offsets=tile_offsets,
                tile_byte_counts=tile_byte_counts,
            )
        )

        (ifd_offset,) = struct.unpack(f"{prefix}I", _read_exact(reader, 4))

    return CogMetadata(
        levels=levels,
        samples_per_pixel=samples_per_pixel,
        bits_per_sample=bits_per_sample,
        compression=compression,
    )


def read_raw_tile(
    reader: BinaryIO, metadata: CogMetadata, level: int, tile_index: int
) -> bytes:
    """Read the undecoded bytes of one tile at the given overview level."""
    if not 0 <= level < len(metadata.levels):
        raise TileNotFoundError(tile_index)
    overview = metadata.levels[level]
    if not (
        0 <= tile_index < len(overview.tile_offsets)
        and tile_index < len(overview.tile_byte_counts)
    ):
        raise TileNotFoundError(tile_index)

    reader.seek(overview.tile_offsets[tile_index])
    return _read_exact(reader, overview.tile_byte_counts[tile_index])


def tiles_for_bounds(
    level: OverviewLevel, min_x: int, min_y: int, max_x: int, max_y: int
) -> list[int]:
    """Row-major indices of the tiles covering a pixel bounding box."""
    start_col = min_x // level.tile_width
    end_col = min(_div_ceil(max_x, level.tile_width), level.tiles_across)
    start_row = min_y // level.tile_height
    end_row = min(_div_ceil(max_y, level.tile_height), level.tiles_down)
    return [
        row * level.tiles_across + col
        for row in range(start_row, end_row)
        for col in range(start_col, end_col)
    ]