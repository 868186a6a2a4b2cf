"""Initial layer thickness from a nominal profile and the bathymetry."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from basin.config import ConfigError


@dataclass(frozen=True)
class ThicknessResult:
    thickness_m: np.ndarray
    nominal_interfaces_m: np.ndarray


def nominal_interfaces(profile_m) -> np.ndarray:
    """Resting interface heights, top to bottom, starting at the surface."""

    profile = _validate_profile(profile_m)
    e0 = np.zeros(profile.size + 1, dtype=np.float64)
    for k in range(profile.size):
        e0[k + 1] = e0[k] - profile[k]
    return e0


def initialize_thickness(
    depth_m: np.ndarray,
    profile_m,
    *,
    min_thickness_m: float = 1.0e-10,
) -> ThicknessResult:
    """Fill each column from the bottom up without lifting interfaces above nominal.

    Layers below the local bottom collapse to `min_thickness_m`; the output
    is laid out `(ny, nx, nz)` with layer 0 at the surface.
    """

    if min_thickness_m < 0:
        raise ConfigError("minimum layer thickness must be non-negative")

    e0 = nominal_interfaces(profile_m)
    nz = e0.size - 1
    depth = np.asarray(depth_m, dtype=np.float64)

    thickness = np.empty(depth.shape + (nz,), dtype=np.float64)
    interface = -depth
    for k in range(nz - 1, -1, -1):
        h = np.maximum(min_thickness_m, e0[k] - interface)
        thickness[..., k] = h
        interface = np.maximum(e0[k], interface - h)

    return ThicknessResult(thickness_m=thickness, nominal_interfaces_m=e0)


def _validate_profile(profile_m) -> np.ndarray:
    if profile_m is None:
        raise ConfigError("INIT_THICKNESS_PROFILE is required")
    profile = np.asarray(profile_m, dtype=np.float64)
    if profile.ndim != 1 or profile.size == 0:
        raise ConfigError("thickness profile must be a non-empty sequence")
    if not np.all(np.isfinite(profile)) or np.any(profile <= 0):
        raise ConfigError("thickness profile entries must be finite and positive")
    return profile
