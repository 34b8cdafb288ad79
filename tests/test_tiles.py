import numpy as np
import pytest

from errors import PreconditionError
from tiles import Tile, partition_tiles, tile_count


@pytest.mark.parametrize("width,height,tile_size", [
    (1, 1, 1),
    (4, 4, 2),
    (5, 3, 2),
    (7, 13, 4),
    (64, 64, 64),
    (10, 10, 100),
    (1600, 900, 64),
])
def test_partition_covers_every_pixel_once(width, height, tile_size):
    hits = np.zeros((height, width), dtype=np.int32)
    tiles = partition_tiles(width, height, tile_size)
    for tile in tiles:
        assert tile.area > 0
        tile.region(hits)[...] += 1
    assert (hits == 1).all()
    assert len(tiles) == tile_count(width, height, tile_size)


def test_partition_order_and_clipping():
    tiles = partition_tiles(5, 3, 2)
    assert tiles == [
        Tile(0, 0, 2, 2), Tile(2, 0, 4, 2), Tile(4, 0, 5, 2),
        Tile(0, 2, 2, 3), Tile(2, 2, 4, 3), Tile(4, 2, 5, 3),
    ]


def test_four_by_four_with_tile_two_is_four_full_tiles():
    tiles = partition_tiles(4, 4, 2)
    assert len(tiles) == 4
    assert all(t.width == 2 and t.height == 2 for t in tiles)


def test_tile_larger_than_image_is_clipped():
    assert partition_tiles(3, 2, 64) == [Tile(0, 0, 3, 2)]


def test_region_is_a_writable_view():
    arr = np.zeros((4, 4, 3), dtype=np.uint8)
    Tile(1, 2, 3, 4).region(arr)[...] = 7
    assert arr[2:4, 1:3].min() == 7
    assert arr.sum() == 7 * 2 * 2 * 3


@pytest.mark.parametrize("width,height,tile_size", [
    (0, 4, 2), (4, 0, 2), (4, 4, 0), (-1, 4, 2), (4, 4, -3), (4, 4, 1.5), (4, 4, True),
])
def test_degenerate_input_fails_fast(width, height, tile_size):
    with pytest.raises(PreconditionError):
        partition_tiles(width, height, tile_size)
    with pytest.raises(PreconditionError):
        tile_count(width, height, tile_size)


def test_numpy_integer_dimensions_are_accepted():
    assert len(partition_tiles(np.int64(4), np.int32(4), np.int64(2))) == 4
