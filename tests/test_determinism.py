from __future__ import annotations

import hashlib

import numpy as np

from basin.channel import generate_channel_setup
from basin.config import GeneratorConfig, ThicknessConfig


def _hash_bytes(payload: bytes) -> str:
    return hashlib.sha256(payload).hexdigest()


def test_setup_fields_are_deterministic() -> None:
    config = GeneratorConfig(thickness=ThicknessConfig(profile_m=(100.0,) * 20 + (200.0,) * 10))

    run_a = generate_channel_setup(config)
    run_b = generate_channel_setup(config)

    for a, b in (
        (run_a.topography.depth_m, run_b.topography.depth_m),
        (run_a.sponge.damping_s, run_b.sponge.damping_s),
        (run_a.sponge.target_interface_m, run_b.sponge.target_interface_m),
        (run_a.thickness.thickness_m, run_b.thickness.thickness_m),
    ):
        assert np.array_equal(a, b)
        assert _hash_bytes(a.tobytes()) == _hash_bytes(b.tobytes())
    assert run_a.metrics == run_b.metrics
