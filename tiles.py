"""
Tile partitioning: split an image into a fixed-origin grid of blocks.
"""
import numbers
from typing import List, NamedTuple

from errors import PreconditionError


class Tile(NamedTuple):
    """Half-open rectangle [start_x, end_x) x [start_y, end_y)."""
    start_x: int
    start_y: int
    end_x: int
    end_y: int

    @property
    def width(self) -> int:
        return self.end_x - self.start_x

    @property
    def height(self) -> int:
        return self.end_y - self.start_y

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def rows(self) -> slice:
        return slice(self.start_y, self.end_y)

    @property
    def cols(self) -> slice:
        return slice(self.start_x, self.end_x)

    def region(self, arr):
        """View of arr (H, W, ...) covered by this tile. Writes go through to arr."""
        return arr[self.start_y:self.end_y, self.start_x:self.end_x]


def _check_positive(name, value):
    # bool is Integral but never a valid size
    if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value <= 0:
        raise PreconditionError(f"{name} must be a positive integer, got {value!r}")


def tile_count(width: int, height: int, tile_size: int) -> int:
    """Number of tiles partition_tiles() yields for these dimensions."""
    _check_positive("width", width)
    _check_positive("height", height)
    _check_positive("tile_size", tile_size)
    return -(-width // tile_size) * -(-height // tile_size)


def partition_tiles(width: int, height: int, tile_size: int) -> List[Tile]:
    """
    Divide a width x height image into tiles of edge tile_size.

    Tiles are ordered row by row starting at (0, 0); the last column and
    row are clipped to the image bounds.
    """
    _check_positive("width", width)
    _check_positive("height", height)
    _check_positive("tile_size", tile_size)

    tiles = []
    for start_y in range(0, height, tile_size):
        for start_x in range(0, width, tile_size):
            end_x = min(start_x + tile_size, width)
            end_y = min(start_y + tile_size, height)
            tiles.append(Tile(start_x, start_y, end_x, end_y))
    return tiles
