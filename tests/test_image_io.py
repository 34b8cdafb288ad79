import numpy as np
import pytest

from errors import ImageFormatError
from generate_image import generate_block_image
from image_io import load_image, save_image


def test_ppm_is_written_as_plain_text(tmp_path):
    img = np.array([[[10, 20, 30], [0, 0, 255]]], dtype=np.uint8)
    path = tmp_path / "out.ppm"
    save_image(img, path)
    assert path.read_text().split("\n")[:5] == ["P3", "2 1", "255", "10 20 30", "0 0 255"]


def test_reads_plain_ppm(tmp_path):
    path = tmp_path / "in.ppm"
    path.write_text("P3\n2 2\n255\n1 2 3  4 5 6\n7 8 9\n10 11 12\n")
    img = load_image(path)
    assert img.shape == (2, 2, 3)
    assert img.dtype == np.uint8
    np.testing.assert_array_equal(img.reshape(-1, 3), [[1, 2, 3], [4, 5, 6], [7, 8, 9], [10, 11, 12]])


def test_ppm_written_by_save_loads_back(tmp_path):
    img = generate_block_image(tiles_x=3, tiles_y=2, scale=4, seed=5)
    path = tmp_path / "block.ppm"
    save_image(img, path)
    np.testing.assert_array_equal(load_image(path), img)


def test_png_through_pillow(tmp_path):
    img = generate_block_image(tiles_x=2, tiles_y=2, scale=3, seed=9)
    path = tmp_path / "block.png"
    save_image(img, path)
    np.testing.assert_array_equal(load_image(path), img)


def test_garbage_file_raises(tmp_path):
    path = tmp_path / "bad.ppm"
    path.write_text("hello world")
    with pytest.raises(ImageFormatError):
        load_image(path)


def test_missing_file_raises_os_error(tmp_path):
    with pytest.raises(OSError):
        load_image(tmp_path / "missing.ppm")
