from __future__ import annotations

from dataclasses import replace

import numpy as np
import pytest
from PIL import Image

from basin.channel import generate_channel_setup
from basin.config import ConfigError, GeneratorConfig, GridConfig, ThicknessConfig
from basin.io import publish_outputs, resolve_output_dir, write_metadata, write_setup_outputs


def _small_config() -> GeneratorConfig:
    return GeneratorConfig(
        grid=GridConfig(nx=40, ny=40),
        thickness=ThicknessConfig(profile_m=(100.0,) * 20 + (200.0,) * 10),
    )


def test_output_dir_is_named_by_identifier_and_grid(tmp_path) -> None:
    out_dir = resolve_output_dir(tmp_path / "out", _small_config(), overwrite=False)

    assert out_dir == tmp_path / "out" / "drake_channel" / "40x40"
    assert out_dir.is_dir()


@pytest.mark.parametrize("identifier", ["../escaped", "..", "nested/name"])
def test_output_dir_rejects_identifier_paths(tmp_path, identifier: str) -> None:
    config = replace(_small_config(), identifier=identifier)

    with pytest.raises(ConfigError):
        resolve_output_dir(tmp_path / "out", config, overwrite=True)
    assert not (tmp_path / "escaped").exists()
    assert not (tmp_path / "out").exists()


def test_setup_outputs_write_fields_and_previews(tmp_path) -> None:
    config = _small_config()
    result = generate_channel_setup(config)

    names = write_setup_outputs(tmp_path, result, config)

    assert sorted(names) == sorted(
        [
            "bathymetry.npy",
            "damping.npy",
            "target_interface.npy",
            "thickness.npy",
            "bathymetry_16.png",
            "hillshade.png",
            "land_mask.png",
            "damping.png",
        ]
    )
    thickness = np.load(tmp_path / "thickness.npy")
    assert thickness.dtype == np.float64
    assert np.array_equal(thickness, result.thickness.thickness_m)
    with Image.open(tmp_path / "land_mask.png") as image:
        assert image.mode == "L"
        assert image.size == (40, 40)
    with Image.open(tmp_path / "bathymetry_16.png") as image:
        assert image.mode.startswith("I")


def test_metadata_keeps_runtime_fields_out_of_deterministic_file(tmp_path) -> None:
    config = _small_config()
    result = generate_channel_setup(config)

    write_metadata(tmp_path, result, config, parameters=[], runtime={"generation_seconds": 0.5})

    deterministic = (tmp_path / "deterministic_meta.json").read_text(encoding="utf-8")
    meta = (tmp_path / "meta.json").read_text(encoding="utf-8")
    assert "generation_seconds" not in deterministic
    assert "generation_seconds" in meta
    assert '"is_reentrant": true' in deterministic


def test_publish_replaces_previous_outputs(tmp_path) -> None:
    out_root = tmp_path / "out"
    out_dir = resolve_output_dir(out_root, _small_config(), overwrite=False)
    (out_dir / "stale.png").write_bytes(b"")
    stage_dir = tmp_path / "out" / "drake_channel" / ".staging"
    stage_dir.mkdir()
    (stage_dir / "bathymetry.npy").write_bytes(b"x")

    publish_outputs(stage_dir, out_dir, out_root=out_root)

    assert sorted(p.name for p in out_dir.iterdir()) == ["bathymetry.npy"]


def test_publish_refuses_directories_outside_the_root(tmp_path) -> None:
    stage_dir = tmp_path / "stage"
    stage_dir.mkdir()
    outside = tmp_path / "elsewhere"
    outside.mkdir()
    (outside / "keep.txt").write_text("keep", encoding="utf-8")

    with pytest.raises(ConfigError):
        publish_outputs(stage_dir, outside, out_root=tmp_path / "out")
    assert (outside / "keep.txt").exists()
