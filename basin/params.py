"""Parameter file parsing and documented parameter lookup.

Parameter files follow the `MOM_input` layout::

    NIGLOBAL = 80              ! number of zonal cells
    SPONGE_RATE = 1.0e-6       ! [s-1]
    INIT_THICKNESS_PROFILE = 100.0, 100.0, 200.0
    #override MINIMUM_DEPTH = 10.0

Everything after `!` is a comment. A name may be assigned once; a later
`#override` line replaces it.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
import re
from typing import Any, Callable

from basin.config import (
    ConfigError,
    GeneratorConfig,
    GridConfig,
    ThicknessConfig,
    check_identifier,
)


_LINE_RE = re.compile(r"^(?P<override>#override\s+)?(?P<name>[A-Za-z_][A-Za-z0-9_]*)\s*=\s*(?P<value>.*)$")
_INT_RE = re.compile(r"^[+-]?\d+$")
_FLOAT_RE = re.compile(r"^[+-]?(\d+\.?\d*|\.\d+)([eEdD][+-]?\d+)?$")
_MISSING = object()


class ParameterError(ConfigError):
    """Raised when a parameter file is malformed or lacks a required value."""


@dataclass(frozen=True)
class ParameterRecord:
    """One parameter as used by a run, for the run's parameter documentation."""

    name: str
    value: Any
    default: Any
    units: str
    description: str


@dataclass
class ParameterLog:
    records: list[ParameterRecord] = field(default_factory=list)

    def add(self, record: ParameterRecord) -> None:
        self.records.append(record)

    def to_list(self) -> list[dict[str, Any]]:
        out = []
        for rec in self.records:
            value = list(rec.value) if isinstance(rec.value, tuple) else rec.value
            default = list(rec.default) if isinstance(rec.default, tuple) else rec.default
            out.append(
                {
                    "name": rec.name,
                    "value": value,
                    "default": default,
                    "units": rec.units,
                    "description": rec.description,
                }
            )
        return out


def parse_params(text: str) -> dict[str, Any]:
    """Parse parameter file text into a name -> value mapping."""

    values: dict[str, Any] = {}
    overrides: dict[str, Any] = {}
    for lineno, raw_line in enumerate(text.splitlines(), start=1):
        line = _strip_comment(raw_line).strip()
        if not line:
            continue
        match = _LINE_RE.fullmatch(line)
        if match is None:
            raise ParameterError(f"line {lineno}: cannot parse {raw_line.strip()!r}")

        name = match.group("name")
        try:
            value = parse_value(match.group("value"))
        except ParameterError as exc:
            raise ParameterError(f"line {lineno}: {name}: {exc}") from exc

        if match.group("override"):
            overrides[name] = value
        elif name in values:
            raise ParameterError(f"line {lineno}: {name} is set twice; use #override to replace it")
        else:
            values[name] = value

    values.update(overrides)
    return values


def load_params(path: str | Path) -> dict[str, Any]:
    return parse_params(Path(path).read_text(encoding="utf-8"))


def parse_value(text: str) -> Any:
    """Parse a scalar or a comma-separated list of scalars and quoted strings."""

    text = text.strip()
    if not text:
        raise ParameterError("missing value")

    items = [_parse_item(item) for item in _split_items(text)]
    if len(items) == 1:
        return items[0]
    return tuple(items)


def get_param(
    params: dict[str, Any],
    name: str,
    *,
    default: Any = _MISSING,
    units: str = "",
    description: str = "",
    fail_if_missing: bool = False,
    cast: Callable[[str, Any], Any] | None = None,
    log: ParameterLog | None = None,
) -> Any:
    """Look up `name`, falling back to `default`, and document the result in `log`."""

    if name in params:
        value = params[name]
    elif fail_if_missing or default is _MISSING:
        message = f"{name} is required but was not set in the parameter file."
        if description:
            message = f"{message} {name}: {description}"
        raise ParameterError(message)
    else:
        value = default

    if cast is not None:
        value = cast(name, value)
    if log is not None:
        log.add(
            ParameterRecord(
                name=name,
                value=value,
                default=None if default is _MISSING else default,
                units=units,
                description=description,
            )
        )
    return value


def as_int(name: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ParameterError(f"{name} must be an integer, got {value!r}")
    return value


def as_float(name: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParameterError(f"{name} must be a number, got {value!r}")
    return float(value)


def as_float_tuple(name: str, value: Any) -> tuple[float, ...]:
    items = value if isinstance(value, tuple) else (value,)
    return tuple(as_float(name, item) for item in items)


def as_identifier(name: str, value: Any) -> str:
    if not isinstance(value, str):
        raise ParameterError(f"{name} must be a quoted string, got {value!r}")
    try:
        return check_identifier(value)
    except ConfigError as exc:
        raise ParameterError(f"{name}: {exc}") from exc


def config_from_params(
    params: dict[str, Any],
    *,
    base: GeneratorConfig | None = None,
    log: ParameterLog | None = None,
) -> GeneratorConfig:
    """Build a setup configuration from parameter values over `base` defaults."""

    base = base or GeneratorConfig()

    def param(name, default, units, description, cast=as_float):
        return get_param(params, name, default=default, units=units, description=description, cast=cast, log=log)

    grid = GridConfig(
        nx=param("NIGLOBAL", base.grid.nx, "nondim", "The total number of thickness grid points in the x-direction.", as_int),
        ny=param("NJGLOBAL", base.grid.ny, "nondim", "The total number of thickness grid points in the y-direction.", as_int),
        nz=param("NK", base.grid.nz, "nondim", "The number of model layers.", as_int),
        west_lon_deg=param("WESTLON", base.grid.west_lon_deg, "degrees", "The western longitude of the domain."),
        south_lat_deg=param("SOUTHLAT", base.grid.south_lat_deg, "degrees", "The southern latitude of the domain."),
        len_lon_deg=param("LENLON", base.grid.len_lon_deg, "degrees", "The longitudinal length of the domain."),
        len_lat_deg=param("LENLAT", base.grid.len_lat_deg, "degrees", "The latitudinal length of the domain."),
    )
    topography = replace(
        base.topography,
        max_depth_m=param("MAXIMUM_DEPTH", base.topography.max_depth_m, "m", "The maximum depth of the ocean."),
    )
    sponge = replace(
        base.sponge,
        damping_rate_s=param(
            "SPONGE_RATE", base.sponge.damping_rate_s, "s-1", "The rate at which the zonal-mean sponges damp."
        ),
        min_depth_m=param("MINIMUM_DEPTH", base.sponge.min_depth_m, "m", "The minimum depth of the ocean."),
    )
    thickness = ThicknessConfig(
        profile_m=get_param(
            params,
            "INIT_THICKNESS_PROFILE",
            units="m",
            description="Profile of initial layer thicknesses.",
            fail_if_missing=True,
            cast=as_float_tuple,
            log=log,
        ),
        min_thickness_m=param(
            "ANGSTROM", base.thickness.min_thickness_m, "m", "The minimum layer thickness, usually one-Angstrom."
        ),
    )
    identifier = get_param(
        params,
        "SETUP_IDENTIFIER",
        default=base.identifier,
        description="Name of this configuration, used for the output directory.",
        cast=as_identifier,
        log=log,
    )
    return GeneratorConfig(
        identifier=identifier,
        grid=grid,
        topography=topography,
        sponge=sponge,
        thickness=thickness,
        render=base.render,
    )


def _parse_scalar(token: str) -> Any:
    if not token:
        raise ParameterError("empty list item")
    lowered = token.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    if _INT_RE.fullmatch(token):
        return int(token)
    if _FLOAT_RE.fullmatch(token):
        return float(token.replace("d", "e").replace("D", "e"))
    raise ParameterError(f"cannot parse value {token!r}")


def _strip_comment(line: str) -> str:
    quote = None
    for i, char in enumerate(line):
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == "!":
            return line[:i]
    return line


def _split_items(text: str) -> list[str]:
    items = []
    start = 0
    quote = None
    for i, char in enumerate(text):
        if quote:
            if char == quote:
                quote = None
        elif char in "\"'":
            quote = char
        elif char == ",":
            items.append(text[start:i].strip())
            start = i + 1
    if quote:
        raise ParameterError(f"unterminated string {text!r}")
    items.append(text[start:].strip())
    return items


def _parse_item(token: str) -> Any:
    if token[:1] in ("\"", "'"):
        if len(token) < 2 or token[-1] != token[0] or token[0] in token[1:-1]:
            raise ParameterError(f"cannot parse value {token!r}")
        return token[1:-1]
    return _parse_scalar(token)
