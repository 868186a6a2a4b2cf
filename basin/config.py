"""Configuration models for channel setup fields."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
import re
from typing import Any


DEFAULT_NX = 80
DEFAULT_NY = 80
DEFAULT_NZ = 30
DEFAULT_MAX_DEPTH_M = 4000.0

# Target interface heights for the sponge density classes, top to bottom, in meters.
# Zonal mean along 30S diagnosed from a previous spin-up; heights above 0 were reset to 0.
TARGET_INTERFACE_HEIGHTS_M: tuple[float, ...] = (
    0.0,
    0.0,
    0.0,
    0.0,
    -3.03516385164754,
    -36.3033413229318,
    -74.3258283549342,
    -129.677962599130,
    -203.404488662194,
    -300.373813497609,
    -400.174464258654,
    -488.574700717268,
    -567.427597045898,
    -640.999226537244,
    -712.274279364224,
    -783.668835870151,
    -858.271678003772,
    -939.502461400525,
    -1031.69079589844,
    -1146.23940724340,
    -1303.42024809739,
    -1550.78595602101,
    -1854.75769463901,
    -2146.14440061335,
    -2448.03345598493,
    -2738.49512154715,
    -3023.71094621931,
    -3311.24889470881,
    -3622.51995738636,
    -3921.27119584517,
    -4000.0,
)


class ConfigError(ValueError):
    """Raised when configuration values cannot produce consistent fields."""


_IDENTIFIER_RE = re.compile(r"[A-Za-z0-9_.-]+")


def check_identifier(identifier: str) -> str:
    """Require a single plain path component, since it names the output directory."""

    if not _IDENTIFIER_RE.fullmatch(identifier) or identifier in (".", ".."):
        raise ConfigError(
            f"identifier {identifier!r} must be a single name of letters, digits, '_', '-' or '.'"
        )
    return identifier


@dataclass(frozen=True)
class GridConfig:
    """Regular latitude-longitude grid of the channel domain, in degrees."""

    nx: int = DEFAULT_NX
    ny: int = DEFAULT_NY
    nz: int = DEFAULT_NZ
    west_lon_deg: float = 0.0
    south_lat_deg: float = -70.0
    len_lon_deg: float = 40.0
    len_lat_deg: float = 40.0


@dataclass(frozen=True)
class TopographyConfig:
    """Geographic feature positions and widths of the channel bathymetry.

    Latitudes are measured northward from the southern boundary and longitudes
    eastward from the western boundary, both in degrees.
    """

    max_depth_m: float = DEFAULT_MAX_DEPTH_M
    scotia_arc_height_m: float = 1500.0
    reentrant_south_deg: float = 6.0
    reentrant_north_deg: float = 10.0
    passage_slope_width_deg: float = 6.0
    continental_slope_width_deg: float = 6.0
    sponge_width_deg: float = 1.0
    extra_slope_north_deg: float = 12.0
    extra_slope_south_deg: float = 4.0
    arc_bell_width_deg: float = 2.5
    arc_center_lon_deg: float = 20.0
    arc_center_lat_deg: float = 8.0
    arc_core_half_width_deg: float = 2.0
    arc_slope_width_deg: float = 3.0
    arc_ridge_start_lon_deg: float = 18.0
    arc_ridge_half_length_deg: float = 9.0


@dataclass(frozen=True)
class SpongeConfig:
    """Northern sponge restoring setup."""

    damping_rate_s: float = 1.0 / (10.0 * 86400.0)
    width_deg: float = 1.0
    min_depth_m: float = 0.0
    target_interface_m: tuple[float, ...] = TARGET_INTERFACE_HEIGHTS_M


@dataclass(frozen=True)
class ThicknessConfig:
    """Initial layer thickness setup; the profile has no default."""

    profile_m: tuple[float, ...] | None = None
    min_thickness_m: float = 1.0e-10


@dataclass(frozen=True)
class RenderConfig:
    """Preview raster rendering configuration."""

    hillshade_azimuth_deg: float = 315.0
    hillshade_altitude_deg: float = 45.0
    hillshade_vertical_exaggeration: float = 40.0


@dataclass(frozen=True)
class GeneratorConfig:
    """Primary setup configuration."""

    identifier: str = "drake_channel"
    grid: GridConfig = field(default_factory=GridConfig)
    topography: TopographyConfig = field(default_factory=TopographyConfig)
    sponge: SpongeConfig = field(default_factory=SpongeConfig)
    thickness: ThicknessConfig = field(default_factory=ThicknessConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
