"""Channel bathymetry composition pipeline."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

import numpy as np

from basin.config import ConfigError, TopographyConfig
from basin.grid import ChannelGrid
from basin.kernels import bump, cosine_bell, half_cosine_bell, plateau


EPSILON = float(np.finfo(np.float64).eps)


@dataclass(frozen=True)
class FeatureGeometry:
    """Non-dimensional feature scales shared by composition and override passes."""

    dx: float
    arc_height: float
    reentrant_south: float
    reentrant_north: float
    passage_slope: float
    sponge_width: float
    slope_x: float
    slope_y: float


@dataclass(frozen=True)
class TopographyResult:
    """Bathymetry and the intermediate stages that produced it."""

    depth_m: np.ndarray
    normalized: np.ndarray
    normalized_composed: np.ndarray
    interior_mask: np.ndarray
    sponge_mask: np.ndarray
    land_bridge_mask: np.ndarray
    geometry: FeatureGeometry


OverridePass = Callable[[np.ndarray, np.ndarray, np.ndarray, FeatureGeometry], np.ndarray]


def feature_geometry(grid: ChannelGrid, config: TopographyConfig) -> FeatureGeometry:
    """Scale configured feature sizes by the domain extents and validate them."""

    cfg = config
    if cfg.max_depth_m <= 0:
        raise ConfigError("max_depth_m must be positive")
    if not 0.0 <= cfg.scotia_arc_height_m <= cfg.max_depth_m:
        raise ConfigError("scotia_arc_height_m must lie within [0, max_depth_m]")
    if cfg.reentrant_north_deg <= cfg.reentrant_south_deg:
        raise ConfigError("reentrant_north_deg must be north of reentrant_south_deg")
    widths = (
        cfg.passage_slope_width_deg,
        cfg.continental_slope_width_deg,
        cfg.sponge_width_deg,
        cfg.arc_bell_width_deg,
        cfg.arc_core_half_width_deg,
        cfg.arc_slope_width_deg,
        cfg.arc_ridge_half_length_deg,
    )
    if min(widths) <= 0:
        raise ConfigError("feature widths must be positive")

    latext = grid.len_lat
    lonext = grid.len_lon
    geometry = FeatureGeometry(
        dx=grid.dx_nondim,
        arc_height=cfg.scotia_arc_height_m / cfg.max_depth_m,
        reentrant_south=cfg.reentrant_south_deg / latext,
        reentrant_north=cfg.reentrant_north_deg / latext,
        passage_slope=cfg.passage_slope_width_deg / latext,
        sponge_width=cfg.sponge_width_deg / latext,
        slope_x=cfg.continental_slope_width_deg / lonext,
        slope_y=cfg.continental_slope_width_deg / latext,
    )

    gap_south, gap_north = passage_bounds(geometry)
    if gap_north - gap_south <= 0:
        raise ConfigError("passage gap between the land bridges must be positive")
    if 1.0 - 2.0 * geometry.dx / 1.5 <= 0:
        raise ConfigError("grid is too coarse to hold a passage between the edge walls")
    return geometry


def passage_bounds(geometry: FeatureGeometry) -> tuple[float, float]:
    """Non-dimensional latitudes bounding the zonally open passage."""

    half = geometry.passage_slope / 2.0
    return geometry.reentrant_south - half, geometry.reentrant_north + half


def compose_features(
    x: np.ndarray,
    y: np.ndarray,
    geometry: FeatureGeometry,
    config: TopographyConfig,
    *,
    len_lon: float,
    len_lat: float,
) -> np.ndarray:
    """Subtract every geographic feature from a flat full-depth basin."""

    g = geometry
    sa = g.arc_height
    rs, rn, sdp = g.reentrant_south, g.reentrant_north, g.passage_slope

    west = x - g.dx / 2.0
    east = x - 1.0 + g.dx / 2.0
    shelf_north = bump(np.minimum(0.0, y - rn - sdp / 2.0), sdp)
    shelf_south = bump(np.maximum(0.0, y - rs + sdp / 2.0), sdp)
    edge_west = bump(west, g.slope_x)
    edge_east = bump(east, g.slope_x)

    bell_lon = config.arc_bell_width_deg / len_lon
    bell_lat = config.arc_bell_width_deg / len_lat
    ridge_north = cosine_bell(y - config.extra_slope_north_deg / len_lat, bell_lat)
    ridge_south = cosine_bell(y - config.extra_slope_south_deg / len_lat, bell_lat)

    arc_x = cosine_bell(west - config.arc_center_lon_deg / len_lon, bell_lon)
    arc_north_edge = (config.arc_center_lat_deg + config.arc_core_half_width_deg) / len_lat
    arc_south_edge = (config.arc_center_lat_deg - config.arc_core_half_width_deg) / len_lat
    arc_slope = config.arc_slope_width_deg / len_lat
    ridge_east_slope = half_cosine_bell(
        west - config.arc_ridge_start_lon_deg / len_lon - EPSILON, bell_lon, 1
    )
    ridge_half = config.arc_ridge_half_length_deg / len_lon
    ridge_west_half = plateau(west - ridge_half, ridge_half)

    terms = (
        edge_west * shelf_north,  # Patagonia, west
        edge_east * shelf_north,  # Patagonia, east
        sa * edge_east * ridge_north,  # Patagonia, east, extra slope
        edge_west * shelf_south,  # Antarctic Peninsula, west
        edge_east * shelf_south,  # Antarctic Peninsula, east
        sa * edge_east * ridge_south,  # Antarctic Peninsula, east, extra slope
        bump(y, g.slope_y),  # Antarctica
        sa * arc_x * plateau(
            y - config.arc_center_lat_deg / len_lat,
            config.arc_core_half_width_deg / len_lat,
        ),
        sa * arc_x * half_cosine_bell(y - arc_north_edge - EPSILON, arc_slope, 1),
        sa * arc_x * half_cosine_bell(y - arc_south_edge + EPSILON, arc_slope, -1),
        sa * ridge_north * ridge_east_slope,
        sa * ridge_north * ridge_west_half,
        sa * ridge_south * ridge_east_slope,
        sa * ridge_south * ridge_west_half,
    )

    depth = np.ones_like(x, dtype=np.float64)
    for term in terms:
        depth = depth - term
    return depth


def interior_mask(x: np.ndarray, y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    """Cells away from the edge walls and the zonal boundaries' slopes."""

    g = geometry
    margin_x = g.dx / 1.5 + g.slope_x / 2.0
    return (
        (x >= margin_x)
        & (x <= 1.0 - margin_x)
        & (y >= g.slope_y / 2.0)
        & (y <= 1.0 - g.slope_y / 2.0)
    )


def sponge_mask(y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    return y >= 1.0 - geometry.sponge_width


def land_bridge_mask(x: np.ndarray, y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    """Edge columns outside the passage latitudes."""

    gap_south, gap_north = passage_bounds(geometry)
    closed_lat = (y >= gap_north) | (y <= gap_south)
    edge_col = (x < geometry.dx / 1.5) | (x > 1.0 - geometry.dx / 1.5)
    return closed_lat & edge_col


def clamp_depth(depth: np.ndarray, x: np.ndarray, y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    """Hold the interior no shallower than the arc top; cap everything else at full depth."""

    floor = 1.0 - geometry.arc_height
    raise_to_floor = interior_mask(x, y, geometry) & (depth < floor)
    return np.where(raise_to_floor, floor, np.where(depth > 1.0, 1.0, depth))


def flatten_sponge(depth: np.ndarray, x: np.ndarray, y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    """No slope inside the sponge band."""

    return np.where(sponge_mask(y, geometry), 1.0, depth)


def close_land_bridges(depth: np.ndarray, x: np.ndarray, y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    """Wall off the zonal boundary everywhere except through the passage."""

    return np.where(land_bridge_mask(x, y, geometry), 0.0, depth)


def limit_depth(depth: np.ndarray, x: np.ndarray, y: np.ndarray, geometry: FeatureGeometry) -> np.ndarray:
    """Overlapping corner slopes can dig below zero; treat those cells as land."""

    return np.maximum(depth, 0.0)


# Later passes take precedence over earlier ones.
OVERRIDE_PASSES: tuple[tuple[str, OverridePass], ...] = (
    ("clamp", clamp_depth),
    ("sponge", flatten_sponge),
    ("land_bridge", close_land_bridges),
    ("limit", limit_depth),
)


def apply_overrides(
    depth: np.ndarray,
    x: np.ndarray,
    y: np.ndarray,
    geometry: FeatureGeometry,
    passes: tuple[tuple[str, OverridePass], ...] = OVERRIDE_PASSES,
) -> np.ndarray:
    for _, override in passes:
        depth = override(depth, x, y, geometry)
    return depth


def generate_topography(grid: ChannelGrid, config: TopographyConfig | None = None) -> TopographyResult:
    """Generate the channel bottom depth in meters, positive downward."""

    cfg = config or TopographyConfig()
    geometry = feature_geometry(grid, cfg)
    x, y = grid.normalized_coords()

    composed = compose_features(x, y, geometry, cfg, len_lon=grid.len_lon, len_lat=grid.len_lat)
    normalized = apply_overrides(composed, x, y, geometry)

    return TopographyResult(
        depth_m=normalized * cfg.max_depth_m,
        normalized=normalized,
        normalized_composed=composed,
        interior_mask=interior_mask(x, y, geometry),
        sponge_mask=sponge_mask(y, geometry),
        land_bridge_mask=land_bridge_mask(x, y, geometry),
        geometry=geometry,
    )
