"""One-shot generation of every setup field for the Drake Passage channel."""

from __future__ import annotations

from dataclasses import dataclass

from basin.config import ConfigError, GeneratorConfig
from basin.grid import ChannelGrid, make_grid
from basin.metrics import ChannelMetrics, channel_metrics
from basin.sponge import SpongeResult, build_sponge
from basin.thickness import ThicknessResult, initialize_thickness
from basin.topography import TopographyResult, generate_topography


@dataclass(frozen=True)
class ChannelSetupResult:
    """Bathymetry, sponge inputs, and initial thickness for one configuration."""

    grid: ChannelGrid
    topography: TopographyResult
    sponge: SpongeResult
    thickness: ThicknessResult
    metrics: ChannelMetrics


def generate_channel_setup(config: GeneratorConfig | None = None) -> ChannelSetupResult:
    """Generate all setup fields; raises ConfigError before producing anything."""

    cfg = config or GeneratorConfig()
    profile = cfg.thickness.profile_m
    if profile is None:
        raise ConfigError("INIT_THICKNESS_PROFILE is required to initialize layer thickness")
    if len(profile) != cfg.grid.nz:
        raise ConfigError(
            f"INIT_THICKNESS_PROFILE has {len(profile)} layers but the grid has NK = {cfg.grid.nz}"
        )

    grid = make_grid(cfg.grid)
    topography = generate_topography(grid, cfg.topography)
    sponge = build_sponge(grid, topography.depth_m, cfg.grid.nz, cfg.sponge)
    thickness = initialize_thickness(
        topography.depth_m,
        profile,
        min_thickness_m=cfg.thickness.min_thickness_m,
    )
    metrics = channel_metrics(
        topography.depth_m,
        thickness.thickness_m,
        sponge.damping_s,
        profile_total_m=float(-thickness.nominal_interfaces_m[-1]),
        min_depth_m=cfg.sponge.min_depth_m,
    )
    return ChannelSetupResult(
        grid=grid,
        topography=topography,
        sponge=sponge,
        thickness=thickness,
        metrics=metrics,
    )
