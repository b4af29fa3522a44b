import io
import struct

import pytest

from panoptes.cog import (
    CogError,
    InvalidHeaderError,
    OverviewLevel,
    TileNotFoundError,
    parse_cog_metadata,
    read_raw_tile,
    tiles_for_bounds,
)


def _ifd_size(entries):
    return 2 + 12 * len(entries) + 4


def _tiff(ifds, tail=b"", order="II"):
    prefix = "<" if order == "II" else ">"
    data = bytearray(order.encode())
    data += struct.pack(f"{prefix}HI", 42, 8 if ifds else 0)
    offset = 8
    for index, entries in enumerate(ifds):
        next_offset = offset + _ifd_size(entries)
        data += struct.pack(f"{prefix}H", len(entries))
        for tag, data_type, count, value in entries:
            data += struct.pack(f"{prefix}HHII", tag, data_type, count, value)
        data += struct.pack(f"{prefix}I", next_offset if index + 1 < len(ifds) else 0)
        offset = next_offset
    return bytes(data) + tail


def _minimal_entries(width=512, height=512, tile=256):
    return [
        (256, 4, 1, width),
        (257, 4, 1, height),
        (322, 4, 1, tile),
        (323, 4, 1, tile),
    ]


def _tiled_file():
    tiles = [b"AAAA", b"BB", b"CCC", b"D"]
    entries = _minimal_entries() + [(324, 4, 4, 0), (325, 3, 4, 0)]
    tail_start = 8 + _ifd_size(entries)
    offsets_at = tail_start
    counts_at = offsets_at + 16
    data_at = counts_at + 8
    offsets = []
    position = data_at
    for tile in tiles:
        offsets.append(position)
        position += len(tile)
    entries[4] = (324, 4, 4, offsets_at)
    entries[5] = (325, 3, 4, counts_at)
    tail = (
        struct.pack("<4I", *offsets)
        + struct.pack("<4H", *(len(t) for t in tiles))
        + b"".join(tiles)
    )
    return _tiff([entries], tail), offsets


def test_parse_minimal_tiff():
    metadata = parse_cog_metadata(io.BytesIO(_tiff([_minimal_entries()])))
    assert len(metadata.levels) == 1
    level = metadata.levels[0]
    assert level.width == 512
    assert level.height == 512
    assert level.tile_width == 256
    assert level.tiles_across == 2
    assert level.tiles_down == 2


def test_defaults_when_tags_absent():
    metadata = parse_cog_metadata(io.BytesIO(_tiff([[(256, 4, 1, 300), (257, 4, 1, 10)]])))
    assert metadata.samples_per_pixel == 1
    assert metadata.bits_per_sample == 8
    assert metadata.compression == 1
    level = metadata.levels[0]
    assert (level.tile_width, level.tile_height) == (256, 256)
    assert (level.tiles_across, level.tiles_down) == (2, 1)


def test_sample_tags_are_read():
    entries = _minimal_entries() + [(258, 3, 1, 16), (259, 3, 1, 8), (277, 3, 1, 3)]
    metadata = parse_cog_metadata(io.BytesIO(_tiff([entries])))
    assert metadata.bits_per_sample == 16
    assert metadata.compression == 8
    assert metadata.samples_per_pixel == 3


def test_big_endian_header():
    data = _tiff([_minimal_entries(width=1000, height=300)], order="MM")
    level = parse_cog_metadata(io.BytesIO(data)).levels[0]
    assert level.width == 1000
    assert level.height == 300
    assert level.tiles_across == 4
    assert level.tiles_down == 2


def test_overview_levels_are_chained():
    data = _tiff([_minimal_entries(512, 512), _minimal_entries(256, 256)])
    metadata = parse_cog_metadata(io.BytesIO(data))
    assert [level.level for level in metadata.levels] == [0, 1]
    assert [level.width for level in metadata.levels] == [512, 256]
    assert metadata.levels[1].tiles_across == 1


def test_offset_arrays_and_raw_tiles():
    data, offsets = _tiled_file()
    reader = io.BytesIO(data)
    metadata = parse_cog_metadata(reader)
    level = metadata.levels[0]
    assert level.tile_offsets == offsets
    assert level.tile_byte_counts == [4, 2, 3, 1]
    assert read_raw_tile(reader, metadata, 0, 2) == b"CCC"
    assert read_raw_tile(reader, metadata, 0, 0) == b"AAAA"


def test_single_count_offset_is_inline():
    entries = _minimal_entries(256, 256) + [(324, 4, 1, 1234), (325, 4, 1, 99)]
    level = parse_cog_metadata(io.BytesIO(_tiff([entries]))).levels[0]
    assert level.tile_offsets == [1234]
    assert level.tile_byte_counts == [99]


def test_missing_tile_raises():
    data, _ = _tiled_file()
    reader = io.BytesIO(data)
    metadata = parse_cog_metadata(reader)
    with pytest.raises(TileNotFoundError) as info:
        read_raw_tile(reader, metadata, 0, 4)
    assert info.value.tile_index == 4
    with pytest.raises(TileNotFoundError):
        read_raw_tile(reader, metadata, 1, 0)


def test_invalid_byte_order():
    with pytest.raises(InvalidHeaderError):
        parse_cog_metadata(io.BytesIO(b"XX" + struct.pack("<HI", 42, 8)))


def test_invalid_magic():
    with pytest.raises(InvalidHeaderError):
        parse_cog_metadata(io.BytesIO(b"II" + struct.pack("<HI", 43, 8)))


def test_truncated_data_raises():
    with pytest.raises(CogError):
        parse_cog_metadata(io.BytesIO(b"II*"))


def test_tiles_for_bounds():
    level = OverviewLevel(
        level=0,
        width=1024,
        height=1024,
        tile_width=256,
        tile_height=256,
        tiles_across=4,
        tiles_down=4,
    )
    indices = tiles_for_bounds(level, 0, 0, 512, 512)
    assert len(indices) == 4
    assert indices == [0, 1, 4, 5]


def test_tiles_for_bounds_clipped_to_grid():
    level = OverviewLevel(0, 1024, 1024, 256, 256, 4, 4)
    assert tiles_for_bounds(level, 768, 768, 5000, 5000) == [15]
    assert tiles_for_bounds(level, 300, 0, 520, 10) == [1, 2]