"""Northern sponge damping rate and restoring targets."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from basin.config import TARGET_INTERFACE_HEIGHTS_M, ConfigError, SpongeConfig
from basin.grid import ChannelGrid

__all__ = ["TARGET_INTERFACE_HEIGHTS_M", "SpongeResult", "build_sponge", "damping_rate"]


@dataclass(frozen=True)
class SpongeResult:
    """Inputs for the sponge restoring subsystem.

    `damping_s` is the inverse restoring time `(ny, nx)` in s-1 and
    `target_interface_m` the interface heights `(ny, nx, nz + 1)` to restore toward.
    """

    damping_s: np.ndarray
    target_interface_m: np.ndarray


def damping_rate(
    geo_lat: np.ndarray,
    depth_m: np.ndarray,
    *,
    north_lat: float,
    config: SpongeConfig,
) -> np.ndarray:
    """Inverse damping time, ramping linearly to the full rate at `north_lat`.

    Zero south of the sponge band and wherever the ocean is no deeper than
    the minimum depth, so side walls are never damped.
    """

    width = config.width_deg
    start = north_lat - width
    ramp = np.where(
        geo_lat >= start,
        config.damping_rate_s / width * (geo_lat - north_lat + width),
        0.0,
    )
    return np.where(depth_m > config.min_depth_m, ramp, 0.0)


def build_sponge(
    grid: ChannelGrid,
    depth_m: np.ndarray,
    nz: int,
    config: SpongeConfig | None = None,
) -> SpongeResult:
    cfg = config or SpongeConfig()
    if cfg.width_deg <= 0:
        raise ConfigError("sponge width must be positive")
    if cfg.damping_rate_s < 0:
        raise ConfigError("SPONGE_RATE must be non-negative")
    if depth_m.shape != grid.shape:
        raise ConfigError(f"bathymetry shape {depth_m.shape} does not match grid shape {grid.shape}")

    profile = np.asarray(cfg.target_interface_m, dtype=np.float64)
    if profile.ndim != 1 or profile.size != nz + 1:
        raise ConfigError(
            f"target interface profile has {profile.size} heights, expected nz + 1 = {nz + 1}"
        )

    damping = damping_rate(grid.geo_lat, depth_m, north_lat=grid.north_lat, config=cfg)
    ny, nx = grid.shape
    target = np.broadcast_to(profile, (ny, nx, nz + 1)).copy()
    return SpongeResult(damping_s=damping, target_interface_m=target)
