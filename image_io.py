"""
Image file reading and writing.

Any format Pillow understands can be read, including plain (P3) PPM.
.ppm targets are written as plain P3 text, one pixel per line; other
extensions are encoded by Pillow.
"""
from pathlib import Path

import numpy as np
from PIL import Image, UnidentifiedImageError

from errors import ImageFormatError
from filters import validate_image


def load_image(path):
    """Load an RGB image as an (H, W, 3) uint8 array."""
    try:
        img = Image.open(path).convert("RGB")
    except (UnidentifiedImageError, ValueError) as exc:
        raise ImageFormatError(f"cannot read image {path}") from exc
    return np.array(img)


def write_plain_ppm(arr, path):
    h, w = arr.shape[0], arr.shape[1]
    with open(path, "w") as f:
        f.write(f"P3\n{w} {h}\n255\n")
        np.savetxt(f, arr.reshape(-1, 3), fmt="%d")


def save_image(img_arr, path):
    arr = validate_image(img_arr)
    if Path(path).suffix.lower() == ".ppm":
        write_plain_ppm(arr, path)
    else:
        Image.fromarray(arr).save(path)
