"""YAML config loader, API key resolution and dotted-key lookup."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml

from skyview.config.schema import SkyviewConfig
from skyview.errors import ConfigError

logger = logging.getLogger(__name__)


def load_config(path: str | Path | None = None) -> SkyviewConfig:
    """Load and validate config from a YAML file.

    With no path, or an empty file, every section takes its defaults.
    """
    if path is None:
        return SkyviewConfig()

    path = Path(path)
    with open(path) as f:
        raw = yaml.safe_load(f) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config root must be a mapping: {path}")

    return SkyviewConfig(**raw)


def resolve_api_key(
    config: SkyviewConfig, env: Mapping[str, str] | None = None
) -> str:
    """Read the provider API key from the environment variable named in config."""
    if env is None:
        env = os.environ
    key = env.get(config.provider.api_key_env, "").strip()
    if not key:
        logger.error("OpenWeatherMap API key is missing (%s)", config.provider.api_key_env)
        raise ConfigError("Weather API configuration error")
    return key


def get_config_value(config: SkyviewConfig, dotted_key: str) -> Any:
    """Get a config value by dotted key path. E.g. 'forecast.forecast_stride'."""
    parts = dotted_key.split(".")
    obj: Any = config
    for part in parts:
        if isinstance(obj, list):
            obj = obj[int(part)]
        elif isinstance(obj, dict):
            obj = obj[part]
        elif hasattr(obj, part):
            obj = getattr(obj, part)
        else:
            raise KeyError(f"Config key not found: {dotted_key}")
    return obj
