"""
Per-tile filter kernels shared by every executor.

Each kernel reads from a full source image and writes one tile of the
destination. The destination is passed as the tile's own view so a worker
never touches pixels outside its block.
"""
import numpy as np

from errors import PreconditionError


def validate_image(img_arr):
    """Check an (H, W, 3) image with values in 0-255 and return it as C-contiguous uint8."""
    arr = np.asarray(img_arr)
    if arr.ndim != 3 or arr.shape[2] != 3:
        raise PreconditionError(f"expected an (H, W, 3) image, got shape {arr.shape}")
    h, w = arr.shape[0], arr.shape[1]
    if h <= 0 or w <= 0:
        raise PreconditionError(f"image must be non-empty, got {w}x{h}")
    if arr.dtype != np.uint8:
        if not np.issubdtype(arr.dtype, np.integer):
            raise PreconditionError(f"image must have an integer dtype, got {arr.dtype}")
        if arr.min() < 0 or arr.max() > 255:
            raise PreconditionError("channel values must lie in 0-255")
        arr = arr.astype(np.uint8)
    return np.ascontiguousarray(arr)


def blur_tile(src, tile, kernel_size, out=None):
    """
    Box blur of one tile of src.

    Every output pixel is the mean of the (2r+1)^2 neighbourhood with
    r = kernel_size // 2. Neighbours outside the image are left out of both
    the sum and the count; the division truncates.
    """
    h, w = src.shape[0], src.shape[1]
    r = kernel_size // 2

    # ==== HALO AROUND THE TILE, CLAMPED TO THE IMAGE ====
    y0 = max(tile.start_y - r, 0)
    y1 = min(tile.end_y + r, h)
    x0 = max(tile.start_x - r, 0)
    x1 = min(tile.end_x + r, w)
    halo = src[y0:y1, x0:x1].astype(np.int64)

    # ==== SUMMED-AREA TABLE (row/col 0 are zeros) ====
    sat = np.zeros((y1 - y0 + 1, x1 - x0 + 1, 3), dtype=np.int64)
    sat[1:, 1:] = halo.cumsum(axis=0).cumsum(axis=1)

    # ==== WINDOW BOUNDS PER OUTPUT ROW / COLUMN, IN SAT COORDINATES ====
    ys = np.arange(tile.start_y, tile.end_y)
    xs = np.arange(tile.start_x, tile.end_x)
    top = (np.maximum(ys - r, 0) - y0)[:, None]
    bottom = (np.minimum(ys + r, h - 1) + 1 - y0)[:, None]
    left = (np.maximum(xs - r, 0) - x0)[None, :]
    right = (np.minimum(xs + r, w - 1) + 1 - x0)[None, :]

    sums = sat[bottom, right] - sat[top, right] - sat[bottom, left] + sat[top, left]
    counts = (bottom - top) * (right - left)
    result = (sums // counts[:, :, None]).astype(np.uint8)

    if out is None:
        return result
    out[...] = result
    return out


def invert_tile(src, tile, out=None):
    """255 - v for every channel of one tile of src."""
    result = 255 - tile.region(src)
    if out is None:
        return result
    out[...] = result
    return out
