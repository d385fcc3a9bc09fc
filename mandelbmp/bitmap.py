"""24-bit uncompressed bitmap container."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import Tuple

import numpy as np
from PIL import Image

from mandelbmp.errors import NumericConversionError

# magic, file size, reserved, pixel data offset
FILE_HEADER = struct.Struct("<2siii")
# header size, width, height, planes, bits per pixel, compression, data size,
# horizontal resolution, vertical resolution, colours, important colours
INFO_HEADER = struct.Struct("<iiihhiiiiii")
HEADER_SIZE = FILE_HEADER.size + INFO_HEADER.size

_INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class BitmapHeader:
    file_size: int
    data_offset: int
    width: int
    height: int
    bits_per_pixel: int


def _int32(name: str, value: int) -> int:
    if not 0 <= value <= _INT32_MAX:
        raise NumericConversionError(f"{name}={value} does not fit a signed 32-bit header field.")
    return value


class RasterImage:
    """RGB pixel buffer, stored row-major as B, G, R bytes."""

    def __init__(self, width: int, height: int):
        self.width = int(width)
        self.height = int(height)
        self.pixels = np.zeros((self.height, self.width, 3), dtype=np.uint8)

    def set_pixel(self, x: int, y: int, red: int, green: int, blue: int) -> None:
        self.pixels[y, x] = (blue, green, red)

    def pixel(self, x: int, y: int) -> Tuple[int, int, int]:
        b, g, r = self.pixels[y, x]
        return int(r), int(g), int(b)

    def paste(self, rgb: np.ndarray) -> None:
        """Copy a (height, width, 3) RGB array into the buffer."""
        rgb = np.asarray(rgb)
        if rgb.shape != self.pixels.shape:
            raise ValueError(f"Expected shape {self.pixels.shape}, got {rgb.shape}")
        self.pixels[...] = rgb[..., ::-1]

    def to_pil(self) -> Image.Image:
        return Image.fromarray(np.ascontiguousarray(self.pixels[..., ::-1]))

    def header_bytes(self) -> bytes:
        data_size = self.width * self.height * 3
        file_size = _int32("file_size", HEADER_SIZE + data_size)
        width = _int32("width", self.width)
        height = _int32("height", self.height)

        file_header = FILE_HEADER.pack(b"BM", file_size, 0, HEADER_SIZE)
        info_header = INFO_HEADER.pack(INFO_HEADER.size, width, height, 1, 24, 0, 0, 0, 0, 0, 0)
        return file_header + info_header

    def write(self, path: str) -> bool:
        # header is validated before the file is created
        header = self.header_bytes()
        # bottom-up scan order: the last raster row is stored first
        body = np.ascontiguousarray(self.pixels[::-1]).tobytes()
        with open(path, "wb") as f:
            f.write(header)
            f.write(body)
        return True


def read_header(path: str) -> BitmapHeader:
    with open(path, "rb") as f:
        raw = f.read(HEADER_SIZE)
    if len(raw) < HEADER_SIZE:
        raise ValueError(f"{path} is too short to be a bitmap ({len(raw)} bytes).")
    magic, file_size, _reserved, data_offset = FILE_HEADER.unpack_from(raw, 0)
    if magic != b"BM":
        raise ValueError(f"{path} is not a bitmap (magic {magic!r}).")
    fields = INFO_HEADER.unpack_from(raw, FILE_HEADER.size)
    return BitmapHeader(
        file_size=file_size,
        data_offset=data_offset,
        width=fields[1],
        height=fields[2],
        bits_per_pixel=fields[4],
    )
