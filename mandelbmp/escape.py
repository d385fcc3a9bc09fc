from __future__ import annotations

import numpy as np

MAX_ITERATIONS = 1000
ESCAPE_RADIUS = 2.0


def escape_time(cx: float, cy: float, max_iterations: int = MAX_ITERATIONS) -> int:
    """
    Number of completed iterations of z <- z*z + c before |z| exceeds 2.
    Returns max_iterations exactly when the orbit never escapes.
    """
    z = 0j
    c = complex(cx, cy)
    n = 0
    while n < max_iterations:
        z = z * z + c
        if abs(z) > ESCAPE_RADIUS:
            break
        n += 1
    return n


def escape_time_grid(cx: np.ndarray, cy: np.ndarray, max_iterations: int = MAX_ITERATIONS) -> np.ndarray:
    """Array form of escape_time; each element is evaluated independently."""
    cx, cy = np.broadcast_arrays(np.asarray(cx, dtype=np.float64), np.asarray(cy, dtype=np.float64))
    shape = cx.shape
    c = np.empty(cx.size, dtype=np.complex128)
    c.real = cx.ravel()
    c.imag = cy.ravel()
    counts = np.zeros(c.size, dtype=np.int64)

    # indices of orbits still running
    live = np.arange(c.size)
    z = np.zeros(c.size, dtype=np.complex128)
    for _ in range(max_iterations):
        if live.size == 0:
            break
        z = z * z + c[live]
        keep = np.abs(z) <= ESCAPE_RADIUS
        live = live[keep]
        z = z[keep]
        counts[live] += 1

    return counts.reshape(shape)
