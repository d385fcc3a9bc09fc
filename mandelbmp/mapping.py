"""Pixel to complex-plane mapping with a pan/zoom transform."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

import numpy as np


def pixel_to_complex(
    x: float,
    y: float,
    width: int,
    height: int,
    original_scale: float,
    scale: float,
    zoom_center: Tuple[float, float],
) -> Tuple[float, float]:
    """
    The zoom center is a pixel position measured at original_scale; the frame
    is then sampled at scale around it. The extra width/4 shift keeps the
    main cardioid in the middle of the canvas.
    """
    x_center = (zoom_center[0] - width / 2.0) / original_scale
    y_center = (zoom_center[1] - height / 2.0) / original_scale

    cx = (x - width / 2.0 - width / 4.0) / scale + x_center
    cy = (y - height / 2.0) / scale + y_center
    return cx, cy


@dataclass(frozen=True)
class ZoomFrame:
    """Fixed view parameters shared by every pixel of one render."""

    width: int
    height: int
    original_scale: float
    scale: float
    zoom_center: Tuple[float, float]

    def center(self) -> Tuple[float, float]:
        return (
            (self.zoom_center[0] - self.width / 2.0) / self.original_scale,
            (self.zoom_center[1] - self.height / 2.0) / self.original_scale,
        )

    def point(self, x: int, y: int) -> Tuple[float, float]:
        return pixel_to_complex(x, y, self.width, self.height, self.original_scale, self.scale, self.zoom_center)

    def row(self, y: int) -> Tuple[np.ndarray, np.ndarray]:
        """Real and imaginary coordinates of every pixel in raster row y."""
        xs = np.arange(self.width, dtype=np.float64)
        cx, cy = pixel_to_complex(xs, float(y), self.width, self.height, self.original_scale, self.scale, self.zoom_center)
        return cx, np.full(self.width, cy, dtype=np.float64)
