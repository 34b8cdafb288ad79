#!/usr/bin/env python3
"""
Generate a test image made of solid random-colour blocks.
"""
import sys

import numpy as np

from errors import PreconditionError

IMAGE_WIDTH_TILES = 16
IMAGE_HEIGHT_TILES = 9
SCALE_FACTOR = 100


def generate_block_image(tiles_x=IMAGE_WIDTH_TILES, tiles_y=IMAGE_HEIGHT_TILES,
                         scale=SCALE_FACTOR, seed=None):
    """(tiles_y*scale, tiles_x*scale, 3) uint8 image; each scale x scale block has one colour."""
    for name, value in (("tiles_x", tiles_x), ("tiles_y", tiles_y), ("scale", scale)):
        if value <= 0:
            raise PreconditionError(f"{name} must be positive, got {value}")
    rng = np.random.default_rng(seed)
    colors = rng.integers(0, 256, size=(tiles_y, tiles_x, 3), dtype=np.uint8)
    return np.repeat(np.repeat(colors, scale, axis=0), scale, axis=1)


if __name__ == "__main__":
    from image_io import save_image

    output_path = sys.argv[1] if len(sys.argv) > 1 else "input.ppm"
    img = generate_block_image()
    save_image(img, output_path)
    print(f"PPM file generated: {output_path}")
