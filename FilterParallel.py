#!/usr/bin/env python3
"""
Barrier-parallel blur-then-invert using joblib.

Each stage is fanned out over tiles; the invert stage starts only after
every blur tile has finished.
"""
import sys

import numpy as np
from joblib import Parallel, delayed

from config import DEFAULT_KERNEL_SIZE, default_workers
from filters import blur_tile, invert_tile, validate_image
from tiles import partition_tiles


def apply_filters(img_arr, kernel_size=DEFAULT_KERNEL_SIZE, tile_size=None, n_jobs=-1):
    src = validate_image(img_arr)
    h, w = src.shape[0], src.shape[1]

    # Determine tile size (if None, use automatic calculation)
    if tile_size is None:
        n_cores = default_workers() if n_jobs == -1 else n_jobs
        # Aim for ~4 tiles per core for better load balancing
        total_tiles = n_cores * 4
        tile_size = max(64, int(np.sqrt(h * w / total_tiles)))

    tiles = partition_tiles(w, h, tile_size)

    blurred = np.empty_like(src)
    out = np.empty_like(src)

    # Workers write straight into tile views of the shared buffers
    Parallel(n_jobs=n_jobs, require="sharedmem")(
        delayed(blur_tile)(src, tile, kernel_size, tile.region(blurred))
        for tile in tiles
    )
    Parallel(n_jobs=n_jobs, require="sharedmem")(
        delayed(invert_tile)(blurred, tile, tile.region(out))
        for tile in tiles
    )
    return out


if __name__ == "__main__":
    from image_io import load_image, save_image

    # Configuration
    input_path = sys.argv[1] if len(sys.argv) > 1 else "input.ppm"
    output_path = sys.argv[2] if len(sys.argv) > 2 else "output_parallel.ppm"
    kernel_size = DEFAULT_KERNEL_SIZE
    n_jobs = -1  # -1 uses all available cores
    tile_size = None  # None = automatic, or set manually (e.g., 64, 128)

    arr = load_image(input_path)
    print(f"Processing image: {arr.shape[1]}x{arr.shape[0]} pixels")
    print(f"Parallelization: tiles, barrier between blur and invert")

    result = apply_filters(arr, kernel_size, tile_size=tile_size, n_jobs=n_jobs)

    save_image(result, output_path)
    print(f"Saved: {output_path}")
