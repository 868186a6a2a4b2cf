"""Horizontal grid of the channel domain."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from basin.config import ConfigError, GridConfig


# Mean Earth radius of 6371 km.
METERS_PER_DEGREE = 111195.0


@dataclass(frozen=True)
class ChannelGrid:
    """Cell-centre geographic coordinates and domain extents, in degrees.

    Arrays are laid out `(ny, nx)` with rows running south to north.
    """

    geo_lon: np.ndarray
    geo_lat: np.ndarray
    west_lon: float
    south_lat: float
    len_lon: float
    len_lat: float

    @property
    def shape(self) -> tuple[int, int]:
        return self.geo_lon.shape

    @property
    def north_lat(self) -> float:
        return self.south_lat + self.len_lat

    @property
    def dx_nondim(self) -> float:
        """Zonal cell spacing as a fraction of the domain width."""

        return float(self.geo_lon[0, 1] - self.geo_lon[0, 0]) / self.len_lon

    def normalized_coords(self) -> tuple[np.ndarray, np.ndarray]:
        """Return cell positions scaled to [0, 1] across the domain extents."""

        x = (self.geo_lon - self.west_lon) / self.len_lon
        y = (self.geo_lat - self.south_lat) / self.len_lat
        return x, y

    def cell_size_m(self) -> tuple[np.ndarray, float]:
        """Zonal cell width per row and meridional cell height, in meters."""

        ny, nx = self.shape
        dx_m = METERS_PER_DEGREE * (self.len_lon / nx) * np.cos(np.deg2rad(self.geo_lat[:, 0]))
        dy_m = METERS_PER_DEGREE * self.len_lat / ny
        return dx_m, dy_m


def make_grid(config: GridConfig | None = None) -> ChannelGrid:
    """Build a regular latitude-longitude grid with cell centres at half steps."""

    cfg = config or GridConfig()
    if cfg.nx < 2 or cfg.ny < 1:
        raise ConfigError("grid needs at least 2 columns and 1 row")
    if cfg.len_lon_deg <= 0 or cfg.len_lat_deg <= 0:
        raise ConfigError("grid extents must be positive")

    dlon = cfg.len_lon_deg / cfg.nx
    dlat = cfg.len_lat_deg / cfg.ny
    lon = cfg.west_lon_deg + (np.arange(cfg.nx, dtype=np.float64) + 0.5) * dlon
    lat = cfg.south_lat_deg + (np.arange(cfg.ny, dtype=np.float64) + 0.5) * dlat
    geo_lon, geo_lat = np.meshgrid(lon, lat, indexing="xy")

    return ChannelGrid(
        geo_lon=geo_lon,
        geo_lat=geo_lat,
        west_lon=float(cfg.west_lon_deg),
        south_lat=float(cfg.south_lat_deg),
        len_lon=float(cfg.len_lon_deg),
        len_lat=float(cfg.len_lat_deg),
    )
