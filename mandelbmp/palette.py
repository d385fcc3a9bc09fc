"""Colour bands for histogram colouring."""

from __future__ import annotations

from typing import List, NamedTuple, Optional, Sequence

from mandelbmp.errors import ConfigurationError
from mandelbmp.escape import MAX_ITERATIONS


class Rgb(NamedTuple):
    red: int
    green: int
    blue: int

    def __sub__(self, other: "Rgb") -> "Rgb":  # type: ignore[override]
        return Rgb(self.red - other.red, self.green - other.green, self.blue - other.blue)


BLACK = Rgb(0, 0, 0)


def _lerp_channel(start: int, delta: int, density: int, total: int) -> int:
    # integer division truncating toward zero, deltas may be negative
    step = abs(delta) * density // total
    value = start + step if delta >= 0 else start - step
    return max(0, min(255, value))


class ColorBandTable:
    """
    Ordered (threshold, colour) control points. N points make N-1 bands.

    Thresholds are stored offset by max_iterations, so a logical threshold
    of 0.3 becomes max_iterations + 0.3 when compared with iteration counts.
    """

    def __init__(self, max_iterations: int = MAX_ITERATIONS):
        self.max_iterations = int(max_iterations)
        self.thresholds: List[float] = []
        self.colors: List[Rgb] = []

    def set_start_color(self, color: Sequence[int], threshold: float = 0.0) -> "ColorBandTable":
        if self.thresholds:
            raise ConfigurationError("Start colour already set.")
        self.thresholds.append(threshold + self.max_iterations)
        self.colors.append(Rgb(*color))
        return self

    def add_band(self, threshold: float, end_color: Sequence[int]) -> "ColorBandTable":
        if not self.thresholds:
            raise ConfigurationError("set_start_color must be called before add_band.")
        stored = threshold + self.max_iterations
        if stored <= self.thresholds[-1]:
            raise ConfigurationError(
                f"Colour range thresholds must increase: {threshold} follows {self.thresholds[-1] - self.max_iterations}"
            )
        self.thresholds.append(stored)
        self.colors.append(Rgb(*end_color))
        return self

    def add_range(self, threshold: float, color: Sequence[int]) -> "ColorBandTable":
        """Single-call form: the first range only sets the starting point."""
        if not self.thresholds:
            return self.set_start_color(color, threshold)
        return self.add_band(threshold, color)

    @property
    def band_count(self) -> int:
        return max(0, len(self.thresholds) - 1)

    def require_bands(self) -> None:
        if self.band_count < 1:
            raise ConfigurationError(
                f"At least two colour ranges are required, got {len(self.thresholds)}."
            )

    def band_of(self, iterations: int) -> int:
        for i in range(self.band_count):
            if iterations < self.thresholds[i + 1]:
                return i
        raise ConfigurationError(
            f"Iteration count {iterations} is not covered by any colour range "
            f"(last threshold {self.thresholds[-1] if self.thresholds else None})."
        )

    def compute_range_totals(self, histogram) -> List[int]:
        self.require_bands()
        totals = [0] * self.band_count
        band = 0
        for i in range(self.max_iterations):
            while band + 1 < self.band_count and i >= self.thresholds[band + 1]:
                band += 1
            totals[band] += int(histogram[i])
        return totals

    def color_for(self, iterations: int, density: int, range_totals: Sequence[int], band: Optional[int] = None) -> Rgb:
        """
        Colour for a pixel with the given escape time, where density is the
        number of pixels that escaped strictly earlier.
        """
        if iterations == self.max_iterations:
            return BLACK
        if band is None:
            band = self.band_of(iterations)
        start = self.colors[band]
        total = range_totals[band]
        if total == 0:
            return start
        diff = self.colors[band + 1] - start
        return Rgb(
            _lerp_channel(start.red, diff.red, density, total),
            _lerp_channel(start.green, diff.green, density, total),
            _lerp_channel(start.blue, diff.blue, density, total),
        )
