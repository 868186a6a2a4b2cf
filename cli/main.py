"""CLI entry point for channel setup field generation."""

from __future__ import annotations

import argparse
from datetime import datetime, timezone
from pathlib import Path
import platform
import shutil
import tempfile
import time

import numpy as np
from basin.channel import generate_channel_setup
from basin.config import ConfigError
from basin.io import publish_outputs, resolve_output_dir, write_metadata, write_setup_outputs
from basin.params import ParameterLog, config_from_params, load_params


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Drake Passage channel bathymetry, sponge, and initial thickness")
    parser.add_argument("--params", required=True, help="Parameter file in MOM_input format")
    parser.add_argument("--out", default="out", help="Output root directory")
    parser.add_argument("--nx", type=int, default=None, help="Override NIGLOBAL (zonal cells)")
    parser.add_argument("--ny", type=int, default=None, help="Override NJGLOBAL (meridional cells)")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite files in existing output directory")
    parser.add_argument(
        "--json",
        action=argparse.BooleanOptionalAction,
        default=True,
        help="Write metadata JSON files",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    log = ParameterLog()
    try:
        params = load_params(args.params)
        if args.nx is not None:
            params["NIGLOBAL"] = args.nx
        if args.ny is not None:
            params["NJGLOBAL"] = args.ny
        config = config_from_params(params, log=log)
    except FileNotFoundError as exc:
        parser.error(f"parameter file not found: {exc.filename}")
    except ConfigError as exc:
        parser.error(str(exc))

    generation_start = time.perf_counter()
    try:
        result = generate_channel_setup(config)
    except ConfigError as exc:
        parser.error(str(exc))
    generation_seconds = time.perf_counter() - generation_start

    try:
        out_dir = resolve_output_dir(args.out, config, overwrite=args.overwrite)
    except ConfigError as exc:
        parser.error(str(exc))

    stage_dir = Path(tempfile.mkdtemp(prefix=".staging-", dir=str(out_dir.parent)))
    try:
        write_setup_outputs(stage_dir, result, config)
        if args.json:
            runtime = {
                "generated_at_utc": datetime.now(timezone.utc).isoformat(),
                "parameter_file": str(Path(args.params).resolve()),
                "generation_seconds": generation_seconds,
                "python_version": platform.python_version(),
                "numpy_version": np.__version__,
            }
            write_metadata(stage_dir, result, config, parameters=log.to_list(), runtime=runtime)
        publish_outputs(stage_dir, out_dir, out_root=args.out)
    finally:
        shutil.rmtree(stage_dir, ignore_errors=True)

    metrics = result.metrics
    print(f"Generated channel setup: {out_dir}")
    print(
        "Bathymetry: "
        f"max={metrics.max_depth_m:.1f}m, "
        f"mean wet={metrics.mean_wet_depth_m:.1f}m, "
        f"wet fraction={metrics.wet_fraction:.3f}, "
        f"reentrant rows={metrics.reentrant_row_count}"
    )
    print(
        "Sponge: "
        f"damped cells={metrics.sponge_cell_count}, "
        f"rate={config.sponge.damping_rate_s:.3e} s-1"
    )
    print(
        "Thickness: "
        f"layers={config.grid.nz}, "
        f"profile total={metrics.profile_total_m:.1f}m, "
        f"max column excess={metrics.max_column_excess_m:.3e}m"
    )
    if not metrics.profile_covers_bathymetry:
        print(
            "Note: INIT_THICKNESS_PROFILE is shallower than the deepest bathymetry; "
            "the bottom layer absorbs the difference."
        )
    print(f"Generation time: {generation_seconds:.3f} s ({config.grid.nx}x{config.grid.ny}x{config.grid.nz})")
    file_count = sum(1 for child in out_dir.iterdir() if child.is_file())
    print(f"Output files: {file_count}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
