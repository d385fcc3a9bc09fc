import os
import struct

import numpy as np
import pytest
from PIL import Image

from mandelbmp.bitmap import HEADER_SIZE, RasterImage, read_header
from mandelbmp.errors import NumericConversionError


def test_header_layout(tmp_path):
    path = tmp_path / "out.bmp"
    RasterImage(10, 10).write(str(path))
    raw = path.read_bytes()
    assert len(raw) == 14 + 40 + 300
    magic, size, reserved, offset = struct.unpack_from("<2siii", raw, 0)
    assert (magic, size, reserved, offset) == (b"BM", 354, 0, 54)
    info = struct.unpack_from("<iiihhiiiiii", raw, 14)
    assert info == (40, 10, 10, 1, 24, 0, 0, 0, 0, 0, 0)


def test_read_header_round_trip(tmp_path):
    path = tmp_path / "wide.bmp"
    RasterImage(32, 7).write(str(path))
    header = read_header(str(path))
    assert (header.width, header.height) == (32, 7)
    assert header.file_size == os.path.getsize(path) == HEADER_SIZE + 32 * 7 * 3
    assert header.data_offset == HEADER_SIZE
    assert header.bits_per_pixel == 24


def test_pixels_stored_bgr_bottom_up(tmp_path):
    path = tmp_path / "px.bmp"
    image = RasterImage(2, 2)
    image.set_pixel(0, 0, 255, 10, 20)
    image.write(str(path))
    body = path.read_bytes()[HEADER_SIZE:]
    # raster row 0 is the last row in the file
    assert body[6:9] == bytes([20, 10, 255])
    assert body[:6] == bytes(6)


def test_pillow_reads_image_upright(tmp_path):
    path = tmp_path / "pil.bmp"
    image = RasterImage(4, 2)
    image.set_pixel(1, 0, 10, 20, 30)
    image.set_pixel(3, 1, 200, 100, 50)
    image.write(str(path))
    with Image.open(path) as im:
        im = im.convert("RGB")
        assert im.size == (4, 2)
        assert im.getpixel((1, 0)) == (10, 20, 30)
        assert im.getpixel((3, 1)) == (200, 100, 50)
        assert im.getpixel((0, 0)) == (0, 0, 0)


def test_paste_and_pixel():
    image = RasterImage(3, 2)
    rgb = np.arange(18, dtype=np.uint8).reshape(2, 3, 3)
    image.paste(rgb)
    assert image.pixel(2, 1) == (15, 16, 17)
    assert np.array_equal(np.asarray(image.to_pil()), rgb)
    with pytest.raises(ValueError):
        image.paste(np.zeros((3, 2, 3), dtype=np.uint8))


def test_oversized_dimensions_fail_before_writing(tmp_path):
    path = tmp_path / "huge.bmp"
    image = RasterImage(1, 1)
    image.width = 2**31
    with pytest.raises(NumericConversionError):
        image.write(str(path))
    assert not path.exists()


def test_write_to_missing_directory(tmp_path):
    with pytest.raises(OSError):
        RasterImage(1, 1).write(str(tmp_path / "missing" / "x.bmp"))


def test_read_header_rejects_other_files(tmp_path):
    path = tmp_path / "not.bmp"
    path.write_bytes(b"PK" + bytes(60))
    with pytest.raises(ValueError):
        read_header(str(path))
    path.write_bytes(b"BM")
    with pytest.raises(ValueError):
        read_header(str(path))
