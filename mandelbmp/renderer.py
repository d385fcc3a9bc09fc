from __future__ import annotations

import enum
from typing import List, Optional

import numpy as np
from tqdm import tqdm

from mandelbmp.bitmap import RasterImage
from mandelbmp.config import RenderSettings, build_color_table
from mandelbmp.errors import RenderOrderError
from mandelbmp.escape import escape_time_grid
from mandelbmp.histogram import IterationHistogram
from mandelbmp.mapping import ZoomFrame
from mandelbmp.palette import ColorBandTable
from mandelbmp.util.logging_setup import get_logger


class RenderState(enum.IntEnum):
    CONFIGURED = 0
    ITERATIONS_COMPUTED = 1
    RANGE_TOTALS_COMPUTED = 2
    RENDERED = 3
    WRITTEN = 4


class FractalRenderer:
    """
    Histogram-coloured Mandelbrot render of a single frame.

    Stages run strictly in order: compute_iterations, compute_range_totals,
    render_colors, write_output. render() runs all of them.
    """

    def __init__(self, settings: RenderSettings, color_table: Optional[ColorBandTable] = None, *, show_progress: bool = False):
        self.settings = settings
        self.table = color_table if color_table is not None else build_color_table(settings)
        self.show_progress = show_progress
        self.frame = ZoomFrame(
            width=settings.width,
            height=settings.height,
            original_scale=settings.original_scale,
            scale=settings.scale,
            zoom_center=settings.zoom_center,
        )
        self.image = RasterImage(settings.width, settings.height)
        self.iterations = np.zeros((settings.height, settings.width), dtype=np.int64)
        self.histogram = IterationHistogram(settings.max_iterations)
        self.range_totals: List[int] = []
        self.state = RenderState.CONFIGURED

    def _require(self, state: RenderState, action: str) -> None:
        if self.state != state:
            raise RenderOrderError(f"Cannot {action} in state {self.state.name}; expected {state.name}.")

    def compute_iterations(self) -> None:
        self._require(RenderState.CONFIGURED, "compute iterations")
        logger = get_logger()
        s = self.settings

        x_center, y_center = self.frame.center()
        logger.info("Iteration pass start size=%sx%s max_iter=%s center=(%s, %s) scale=%s",
                    s.width, s.height, s.max_iterations, x_center, y_center, s.scale)

        for y in tqdm(range(s.height), desc="rows", unit="row", disable=not self.show_progress):
            cx, cy = self.frame.row(y)
            counts = escape_time_grid(cx, cy, s.max_iterations)
            self.iterations[y] = counts
            self.histogram.record_many(counts)
            if y % s.progress_every == 0:
                logger.info("Computed row %s/%s", y, s.height)

        self.state = RenderState.ITERATIONS_COMPUTED
        logger.info("Iteration pass done escaped=%s in_set=%s",
                    self.histogram.total(), s.width * s.height - self.histogram.total())

    def compute_range_totals(self) -> List[int]:
        self._require(RenderState.ITERATIONS_COMPUTED, "compute range totals")
        self.range_totals = self.table.compute_range_totals(self.histogram)
        self.state = RenderState.RANGE_TOTALS_COMPUTED
        get_logger().debug("Range totals %s", self.range_totals)
        return self.range_totals

    def render_colors(self) -> None:
        self._require(RenderState.RANGE_TOTALS_COMPUTED, "render colours")
        # colour depends only on the escape time, so build a lookup table
        # for the counts that occur and apply it to the whole buffer
        lut = np.zeros((self.settings.max_iterations + 1, 3), dtype=np.uint8)
        for count in np.unique(self.iterations):
            count = int(count)
            band = self.table.band_of(count)
            density = self.histogram.cumulative_density(count)
            lut[count] = self.table.color_for(count, density, self.range_totals, band)

        self.image.paste(lut[self.iterations])
        self.state = RenderState.RENDERED

    def write_output(self, path: str) -> None:
        self._require(RenderState.RENDERED, "write output")
        self.image.write(path)
        self.state = RenderState.WRITTEN
        get_logger().info("Bitmap written: %s", path)

    def render(self, path: str) -> RasterImage:
        self.compute_iterations()
        self.compute_range_totals()
        self.render_colors()
        self.write_output(path)
        return self.image
