from __future__ import annotations

import numpy as np


class IterationHistogram:
    """
    Pixel counts per escape-time value. Index max_iterations is reserved for
    points that never escaped and is never incremented, so those pixels carry
    no weight in the colour normalisation.
    """

    def __init__(self, max_iterations: int):
        self.max_iterations = int(max_iterations)
        self.counts = np.zeros(self.max_iterations + 1, dtype=np.int64)
        self._prefix = None

    def record(self, iterations: int) -> None:
        if iterations == self.max_iterations:
            return
        self.counts[iterations] += 1
        self._prefix = None

    def record_many(self, iterations: np.ndarray) -> None:
        values = np.asarray(iterations, dtype=np.int64).ravel()
        values = values[values != self.max_iterations]
        self.counts += np.bincount(values, minlength=self.max_iterations + 1)[: self.max_iterations + 1]
        self._prefix = None

    def cumulative_density(self, up_to: int) -> int:
        """Sum of counts[0:up_to]."""
        if self._prefix is None:
            self._prefix = np.concatenate(([0], np.cumsum(self.counts)))
        return int(self._prefix[up_to])

    def total(self) -> int:
        return int(self.counts.sum())

    def __getitem__(self, iterations: int) -> int:
        return int(self.counts[iterations])

    def __len__(self) -> int:
        return len(self.counts)
