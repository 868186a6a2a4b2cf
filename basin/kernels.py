"""Analytic shape kernels used to compose channel bathymetry.

Every kernel takes a position already expressed relative to the feature
centre and a positive characteristic width in the same units, and accepts
scalars or numpy arrays.
"""

from __future__ import annotations

import numpy as np


def _check_width(width: float) -> None:
    if not np.all(np.asarray(width) > 0.0):
        raise ValueError("kernel width must be positive")


def bump(x, width):
    """Sinusoidal bump: 1 at the centre, 0 from half the width outward."""

    _check_width(width)
    ratio = np.minimum(np.abs(np.asarray(x, dtype=np.float64)) / width, 0.5)
    return 1.0 - np.sin(np.pi * ratio)


def cosine_bell(x, width):
    """Cosine bell: 1 at the centre, smoothly 0 at `|x| >= width`."""

    _check_width(width)
    ratio = np.minimum(np.abs(np.asarray(x, dtype=np.float64)) / width, 1.0)
    return 0.5 * (1.0 + np.cos(np.pi * ratio))


def half_cosine_bell(x, width, direction):
    """One-sided cosine bell, peak at the centre, decaying toward `direction`.

    `direction` is +1 for east/north and -1 for west/south. Positions on the
    opposite side are treated as lying beyond the width.
    """

    _check_width(width)
    if direction not in (1, -1):
        raise ValueError("direction must be +1 or -1")

    x = np.asarray(x, dtype=np.float64)
    ratio = np.minimum(np.abs(x) / width, 1.0)
    ratio = np.where(x * direction < 0.0, 1.0, ratio)
    value = np.cos(0.5 * np.pi * ratio)
    # cos(pi/2) is not exactly zero in floating point.
    return np.where(ratio >= 1.0, 0.0, value)[()]


def plateau(x, width):
    """Flat indicator of the band `|x| <= width`."""

    _check_width(width)
    inside = np.abs(np.asarray(x, dtype=np.float64)) <= width
    return np.where(inside, 1.0, 0.0)[()]
