#!/usr/bin/env python3
"""
Sequential blur-then-invert on the whole image.
Reference output for the parallel versions.
"""
import sys

import numpy as np

from config import DEFAULT_KERNEL_SIZE
from filters import validate_image


def _window_bounds(n, r):
    # [lo, hi) of the clamped window around every index 0..n-1
    idx = np.arange(n)
    return np.maximum(idx - r, 0), np.minimum(idx + r, n - 1) + 1


def box_blur(img_arr, kernel_size):
    """Separable box blur with clamped windows and truncating integer division."""
    h, w = img_arr.shape[0], img_arr.shape[1]
    r = kernel_size // 2
    img = img_arr.astype(np.int64)

    # ==== HORIZONTAL WINDOW SUMS ====
    lo_x, hi_x = _window_bounds(w, r)
    csum = np.zeros((h, w + 1, 3), dtype=np.int64)
    csum[:, 1:] = img.cumsum(axis=1)
    row_sums = csum[:, hi_x] - csum[:, lo_x]

    # ==== VERTICAL WINDOW SUMS ====
    lo_y, hi_y = _window_bounds(h, r)
    csum = np.zeros((h + 1, w, 3), dtype=np.int64)
    csum[1:] = row_sums.cumsum(axis=0)
    sums = csum[hi_y] - csum[lo_y]

    counts = (hi_y - lo_y)[:, None] * (hi_x - lo_x)[None, :]
    return (sums // counts[:, :, None]).astype(np.uint8)


def invert(img_arr):
    return 255 - img_arr


def apply_filters(img_arr, kernel_size=DEFAULT_KERNEL_SIZE):
    src = validate_image(img_arr)
    return invert(box_blur(src, kernel_size))


if __name__ == "__main__":
    from image_io import load_image, save_image

    # Configuration
    input_path = sys.argv[1] if len(sys.argv) > 1 else "input.ppm"
    output_path = sys.argv[2] if len(sys.argv) > 2 else "output_sequential.ppm"
    kernel_size = DEFAULT_KERNEL_SIZE

    arr = load_image(input_path)
    result = apply_filters(arr, kernel_size)

    save_image(result, output_path)
    print(f"Saved: {output_path}")
