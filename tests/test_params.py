from __future__ import annotations

import pytest

from basin.config import ConfigError, GeneratorConfig
from basin.params import (
    ParameterError,
    ParameterLog,
    config_from_params,
    get_param,
    load_params,
    parse_params,
    parse_value,
)


PROFILE_TEXT = ", ".join(["100.0"] * 20 + ["200.0"] * 10)


def test_parse_params_reads_scalars_lists_and_comments() -> None:
    text = f"""
! Drake Passage channel
NIGLOBAL = 40            ! zonal cells
SPONGE_RATE = 1.0d-6     ! [s-1]
MINIMUM_DEPTH = 0.
REENTRANT_X = True
SETUP_IDENTIFIER = "drake ! test"
INIT_THICKNESS_PROFILE = {PROFILE_TEXT}
"""
    params = parse_params(text)

    assert params["NIGLOBAL"] == 40
    assert params["SPONGE_RATE"] == pytest.approx(1.0e-6)
    assert params["MINIMUM_DEPTH"] == 0.0
    assert params["REENTRANT_X"] is True
    assert params["SETUP_IDENTIFIER"] == "drake ! test"
    assert len(params["INIT_THICKNESS_PROFILE"]) == 30
    assert params["INIT_THICKNESS_PROFILE"][-1] == 200.0


def test_override_replaces_and_duplicates_fail() -> None:
    params = parse_params("#override MINIMUM_DEPTH = 5.0\nMINIMUM_DEPTH = 1.0\n")
    assert params["MINIMUM_DEPTH"] == 5.0

    with pytest.raises(ParameterError, match="set twice"):
        parse_params("NK = 30\nNK = 31\n")


@pytest.mark.parametrize(
    "line",
    ["NK 30", "NK = ", "NK = thirty", "NK = 'open", "NK = 1,,2", "NK = \"a\", \"b", "NK = \"a\"b"],
)
def test_malformed_lines_are_rejected(line: str) -> None:
    with pytest.raises(ParameterError, match="line 1"):
        parse_params(line)


def test_parse_value_types() -> None:
    assert parse_value("-3") == -3
    assert parse_value("2.5E+3") == 2500.0
    assert parse_value(".5") == 0.5
    assert parse_value("false") is False
    assert parse_value("1, 2.0") == (1, 2.0)


def test_get_param_default_and_log() -> None:
    log = ParameterLog()
    value = get_param({}, "MINIMUM_DEPTH", default=0.0, units="m", description="The minimum depth of the ocean.", log=log)

    assert value == 0.0
    assert log.to_list() == [
        {
            "name": "MINIMUM_DEPTH",
            "value": 0.0,
            "default": 0.0,
            "units": "m",
            "description": "The minimum depth of the ocean.",
        }
    ]


def test_missing_required_parameter_is_fatal() -> None:
    with pytest.raises(ParameterError) as exc:
        get_param({}, "INIT_THICKNESS_PROFILE", description="Profile of initial layer thicknesses.", fail_if_missing=True)

    message = str(exc.value)
    assert "INIT_THICKNESS_PROFILE" in message
    assert "Profile of initial layer thicknesses." in message
    assert isinstance(exc.value, ConfigError)


def test_config_from_params_applies_values_over_defaults() -> None:
    params = parse_params(
        f"NIGLOBAL = 40\nNJGLOBAL = 40\nMAXIMUM_DEPTH = 4000.0\nSPONGE_RATE = 2.0e-6\nINIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n"
    )
    log = ParameterLog()

    config = config_from_params(params, log=log)

    assert isinstance(config, GeneratorConfig)
    assert config.grid.nx == 40
    assert config.grid.ny == 40
    assert config.grid.nz == 30
    assert config.sponge.damping_rate_s == 2.0e-6
    assert config.sponge.min_depth_m == 0.0
    assert config.thickness.min_thickness_m == 1.0e-10
    assert sum(config.thickness.profile_m) == 4000.0

    logged = {rec["name"]: rec for rec in log.to_list()}
    assert logged["SPONGE_RATE"]["default"] == pytest.approx(1.0 / 864000.0)
    assert logged["INIT_THICKNESS_PROFILE"]["default"] is None
    assert logged["INIT_THICKNESS_PROFILE"]["units"] == "m"


def test_config_from_params_requires_thickness_profile() -> None:
    with pytest.raises(ParameterError, match="INIT_THICKNESS_PROFILE"):
        config_from_params(parse_params("NK = 30\n"))


def test_config_from_params_checks_types() -> None:
    with pytest.raises(ParameterError, match="NIGLOBAL"):
        config_from_params(parse_params(f"NIGLOBAL = 40.5\nINIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n"))
    with pytest.raises(ParameterError, match="SPONGE_RATE"):
        config_from_params(parse_params(f"SPONGE_RATE = 'fast'\nINIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n"))


def test_load_params_reads_file(tmp_path) -> None:
    path = tmp_path / "MOM_input"
    path.write_text(f"INIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n", encoding="utf-8")

    params = load_params(path)

    assert len(params["INIT_THICKNESS_PROFILE"]) == 30


def test_parse_value_splits_quoted_lists_outside_quotes() -> None:
    assert parse_value('"a", "b"') == ("a", "b")
    assert parse_value("'x, y', 2") == ("x, y", 2)
    assert parse_value('"single"') == "single"


def test_config_from_params_reads_identifier() -> None:
    params = parse_params(f'SETUP_IDENTIFIER = "drake_40"\nINIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n')

    assert config_from_params(params).identifier == "drake_40"


@pytest.mark.parametrize("identifier", ["../escaped", "a/b", "..", ".", "", "with space"])
def test_identifier_must_be_a_single_name(identifier: str) -> None:
    params = parse_params(f'SETUP_IDENTIFIER = "{identifier}"\nINIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n')

    with pytest.raises(ParameterError, match="SETUP_IDENTIFIER"):
        config_from_params(params)


def test_identifier_must_be_a_string() -> None:
    params = parse_params(f"SETUP_IDENTIFIER = 7\nINIT_THICKNESS_PROFILE = {PROFILE_TEXT}\n")

    with pytest.raises(ParameterError, match="SETUP_IDENTIFIER"):
        config_from_params(params)
