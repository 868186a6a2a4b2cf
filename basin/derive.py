"""Preview rasters derived from the setup fields."""

from __future__ import annotations

import numpy as np


def hillshade(
    depth_m: np.ndarray,
    *,
    dx_m: float | np.ndarray,
    dy_m: float,
    azimuth_deg: float = 315.0,
    altitude_deg: float = 45.0,
    vertical_exaggeration: float = 1.0,
) -> np.ndarray:
    """Compute an 8-bit grayscale shaded relief of the sea floor.

    `dx_m` is the zonal cell width, either one value or one per row; on a
    latitude-longitude grid it shrinks toward the pole while `dy_m` does not.
    """

    if depth_m.ndim != 2 or depth_m.shape[0] < 2 or depth_m.shape[1] < 2:
        raise ValueError("depth_m must be a 2D array with at least 2 rows and columns")
    dx = np.reshape(np.asarray(dx_m, dtype=np.float64), (-1, 1))
    if dx.shape[0] not in (1, depth_m.shape[0]):
        raise ValueError("dx_m must be a scalar or hold one width per row")
    if np.any(dx <= 0) or dy_m <= 0:
        raise ValueError("cell sizes must be positive")

    floor = -depth_m.astype(np.float64) * float(vertical_exaggeration)
    dz_dy = np.gradient(floor, axis=0) / dy_m
    dz_dx = np.gradient(floor, axis=1) / dx

    slope = np.pi / 2.0 - np.arctan(np.hypot(dz_dx, dz_dy))
    aspect = np.arctan2(-dz_dx, dz_dy)

    azimuth = np.deg2rad(azimuth_deg)
    altitude = np.deg2rad(altitude_deg)

    shaded = (
        np.sin(altitude) * np.sin(slope)
        + np.cos(altitude) * np.cos(slope) * np.cos(azimuth - aspect)
    )
    shaded = np.clip(shaded, 0.0, 1.0)
    # Row 0 is the southern edge; images put north at the top.
    return np.flipud(np.round(shaded * 255.0).astype(np.uint8))


def depth_preview_u16(depth_m: np.ndarray, *, max_depth_m: float) -> np.ndarray:
    """Map depth in [0, max_depth_m] to 16-bit grayscale, deep is bright."""

    scale = max(float(max_depth_m), 1e-6)
    norm = np.clip(depth_m / scale, 0.0, 1.0)
    return np.flipud(np.round(norm * 65535.0).astype(np.uint16))


def float_preview_u8(values: np.ndarray, *, robust_percentiles: tuple[float, float] = (0.0, 100.0)) -> np.ndarray:
    """Map float values to 8-bit preview grayscale."""

    lo, hi = np.percentile(values, robust_percentiles)
    scale = max(hi - lo, 1e-30)
    norm = np.clip((values - lo) / scale, 0.0, 1.0)
    return np.flipud(np.round(norm * 255.0).astype(np.uint8))


def land_mask_u8(depth_m: np.ndarray, *, min_depth_m: float = 0.0) -> np.ndarray:
    """Encode land (depth at or above the minimum) as white."""

    return np.flipud(np.where(depth_m > min_depth_m, 0, 255).astype(np.uint8))
