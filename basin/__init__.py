"""Setup fields for an idealized Drake Passage channel."""

from .config import DEFAULT_MAX_DEPTH_M, DEFAULT_NX, DEFAULT_NY, DEFAULT_NZ, ConfigError, GeneratorConfig

__all__ = ["DEFAULT_NX", "DEFAULT_NY", "DEFAULT_NZ", "DEFAULT_MAX_DEPTH_M", "ConfigError", "GeneratorConfig"]
