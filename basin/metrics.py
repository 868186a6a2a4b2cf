"""Basin geometry and initial-state consistency metrics."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy import ndimage


@dataclass(frozen=True)
class ChannelMetrics:
    """Summary of the generated fields for run metadata and sanity checks."""

    wet_fraction: float
    num_wet_components: int
    largest_wet_component_ratio: float
    is_reentrant: bool
    reentrant_row_count: int
    max_depth_m: float
    mean_wet_depth_m: float
    profile_total_m: float
    profile_covers_bathymetry: bool
    max_column_excess_m: float
    sponge_cell_count: int


def wet_mask(depth_m: np.ndarray, min_depth_m: float = 0.0) -> np.ndarray:
    return depth_m > min_depth_m


def channel_metrics(
    depth_m: np.ndarray,
    thickness_m: np.ndarray,
    damping_s: np.ndarray,
    *,
    profile_total_m: float,
    min_depth_m: float = 0.0,
) -> ChannelMetrics:
    """Compute connectivity, coverage, and column consistency metrics."""

    if depth_m.ndim != 2:
        raise ValueError("depth_m must be 2D")
    if thickness_m.shape[:2] != depth_m.shape:
        raise ValueError("thickness_m must be laid out (ny, nx, nz) over the bathymetry grid")

    wet = wet_mask(depth_m, min_depth_m)
    total_wet = int(wet.sum())

    # 4-connectivity: diagonal contact across a wall corner does not carry flow.
    labels, num_components = ndimage.label(wet)
    if num_components:
        sizes = np.bincount(labels.ravel())[1:]
        largest_ratio = float(sizes.max() / total_wet)
    else:
        largest_ratio = 0.0

    open_rows = wet[:, 0] & wet[:, -1]
    max_depth = float(depth_m.max()) if depth_m.size else 0.0
    mean_wet_depth = float(depth_m[wet].mean()) if total_wet else 0.0

    column_total = thickness_m.sum(axis=-1)
    excess = np.where(wet, column_total - depth_m, 0.0)

    return ChannelMetrics(
        wet_fraction=float(total_wet / depth_m.size),
        num_wet_components=int(num_components),
        largest_wet_component_ratio=largest_ratio,
        is_reentrant=bool(open_rows.any()),
        reentrant_row_count=int(open_rows.sum()),
        max_depth_m=max_depth,
        mean_wet_depth_m=mean_wet_depth,
        profile_total_m=float(profile_total_m),
        profile_covers_bathymetry=bool(profile_total_m >= max_depth),
        max_column_excess_m=float(excess.max()) if excess.size else 0.0,
        sponge_cell_count=int((damping_s > 0.0).sum()),
    )
