import numpy as np
import pytest

from panoptes.window import WindowConfig, extract_tiles, tile_count


def test_extract_tiles_no_overlap():
    image = np.zeros((3, 128, 128), dtype=np.float32)
    tiles = extract_tiles(image, WindowConfig.square(64, 0))
    assert len(tiles) == 4
    assert tiles[0].origin_x == 0
    assert tiles[0].origin_y == 0
    assert tiles[1].origin_x == 64
    assert tiles[3].origin_x == 64
    assert tiles[3].origin_y == 64


def test_extract_tiles_with_overlap():
    image = np.zeros((3, 128, 128), dtype=np.float32)
    tiles = extract_tiles(image, WindowConfig.square(64, 32))
    assert len(tiles) == 9


def test_tile_count():
    config = WindowConfig.square(64, 0)
    assert tile_count(128, 128, config) == 4
    assert tile_count(256, 256, config) == 16


def test_tile_count_matches_extraction():
    image = np.zeros((1, 100, 150), dtype=np.float32)
    config = WindowConfig(tile_width=40, tile_height=30, overlap=10)
    assert len(extract_tiles(image, config)) == tile_count(150, 100, config)


def test_image_smaller_than_tile():
    image = np.zeros((3, 10, 10), dtype=np.float32)
    config = WindowConfig.square(64, 0)
    assert extract_tiles(image, config) == []
    assert tile_count(10, 10, config) == 0


def test_tile_contents_and_source_size():
    image = np.arange(2 * 128 * 96, dtype=np.float32).reshape(2, 128, 96)
    tiles = extract_tiles(image, WindowConfig.square(32, 0))
    tile = tiles[1]
    assert (tile.origin_x, tile.origin_y) == (32, 0)
    assert np.array_equal(tile.data, image[:, 0:32, 32:64])
    assert (tile.source_width, tile.source_height) == (96, 128)


def test_tiles_are_copies():
    image = np.zeros((1, 8, 8), dtype=np.float32)
    tiles = extract_tiles(image, WindowConfig.square(4, 0))
    tiles[0].data[:] = 9.0
    assert image.max() == 0.0


def test_strides():
    config = WindowConfig(tile_width=64, tile_height=32, overlap=16)
    assert config.stride_x() == 48
    assert config.stride_y() == 16


def test_overlap_not_smaller_than_tile_raises():
    config = WindowConfig.square(16, 16)
    with pytest.raises(ValueError):
        extract_tiles(np.zeros((1, 32, 32), dtype=np.float32), config)