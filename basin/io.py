"""Output layout for a generated channel setup.

One run writes into `<out_root>/<identifier>/<nx>x<ny>/`:

- model input fields as float64 `.npy`: `bathymetry`, `damping`,
  `target_interface` `(ny, nx, nz + 1)` and `thickness` `(ny, nx, nz)`;
- PNG previews with north at the top;
- `deterministic_meta.json` and, with runtime fields added, `meta.json`.

Files are written to a staging directory first and published in one step.
"""

from __future__ import annotations

from dataclasses import asdict
import json
from pathlib import Path
import shutil
from typing import TYPE_CHECKING, Any

import numpy as np
from PIL import Image

from basin.config import ConfigError, GeneratorConfig, check_identifier
from basin.derive import depth_preview_u16, float_preview_u8, hillshade, land_mask_u8

if TYPE_CHECKING:
    from basin.channel import ChannelSetupResult


def resolve_output_dir(out_root: str | Path, config: GeneratorConfig, *, overwrite: bool) -> Path:
    """Create and return the output directory for one configuration."""

    check_identifier(config.identifier)
    root = Path(out_root)
    target = root / config.identifier / f"{config.grid.nx}x{config.grid.ny}"
    _require_inside(target, root)
    if target.exists() and any(target.iterdir()) and not overwrite:
        raise FileExistsError(
            f"Output directory already exists and is not empty: {target}. Use --overwrite to replace files."
        )
    target.mkdir(parents=True, exist_ok=True)
    return target


def setup_fields(result: ChannelSetupResult) -> dict[str, np.ndarray]:
    return {
        "bathymetry.npy": result.topography.depth_m,
        "damping.npy": result.sponge.damping_s,
        "target_interface.npy": result.sponge.target_interface_m,
        "thickness.npy": result.thickness.thickness_m,
    }


def preview_rasters(result: ChannelSetupResult, config: GeneratorConfig) -> dict[str, np.ndarray]:
    depth_m = result.topography.depth_m
    dx_m, dy_m = result.grid.cell_size_m()
    return {
        "bathymetry_16.png": depth_preview_u16(depth_m, max_depth_m=config.topography.max_depth_m),
        "hillshade.png": hillshade(
            depth_m,
            dx_m=dx_m,
            dy_m=dy_m,
            azimuth_deg=config.render.hillshade_azimuth_deg,
            altitude_deg=config.render.hillshade_altitude_deg,
            vertical_exaggeration=config.render.hillshade_vertical_exaggeration,
        ),
        "land_mask.png": land_mask_u8(depth_m, min_depth_m=config.sponge.min_depth_m),
        "damping.png": float_preview_u8(result.sponge.damping_s),
    }


def write_setup_outputs(stage_dir: Path, result: ChannelSetupResult, config: GeneratorConfig) -> list[str]:
    """Write model input fields and previews into stage_dir; return file names."""

    names = []
    for name, field in setup_fields(result).items():
        np.save(stage_dir / name, field.astype(np.float64), allow_pickle=False)
        names.append(name)
    for name, raster in preview_rasters(result, config).items():
        # uint8 saves as 8-bit grayscale, uint16 as 16-bit.
        Image.fromarray(np.ascontiguousarray(raster)).save(stage_dir / name)
        names.append(name)
    return names


def write_metadata(
    stage_dir: Path,
    result: ChannelSetupResult,
    config: GeneratorConfig,
    *,
    parameters: list[dict[str, Any]],
    runtime: dict[str, Any],
) -> None:
    """Write deterministic_meta.json, and meta.json with runtime fields added."""

    deterministic_meta = {
        "identifier": config.identifier,
        "nx": config.grid.nx,
        "ny": config.grid.ny,
        "nz": config.grid.nz,
        "config": config.to_dict(),
        "metrics": asdict(result.metrics),
        "parameters": parameters,
    }
    _write_json(stage_dir / "deterministic_meta.json", deterministic_meta)
    _write_json(stage_dir / "meta.json", {**deterministic_meta, **runtime})


def publish_outputs(stage_dir: Path, out_dir: Path, *, out_root: str | Path) -> None:
    """Replace the contents of out_dir with the staged files."""

    _require_inside(out_dir, Path(out_root))
    out_dir.mkdir(parents=True, exist_ok=True)
    for child in out_dir.iterdir():
        if child.is_symlink() or child.is_file():
            child.unlink()
        elif child.is_dir():
            shutil.rmtree(child)
    for child in stage_dir.iterdir():
        shutil.move(str(child), str(out_dir / child.name))


def _require_inside(target: Path, root: Path) -> None:
    if not target.resolve().is_relative_to(root.resolve()):
        raise ConfigError(f"output directory {target} is outside the output root {root}")


def _write_json(path: Path, payload: dict[str, Any]) -> None:
    text = json.dumps(payload, indent=2, sort_keys=True)
    path.write_text(text + "\n", encoding="utf-8")
