"""Layered configuration.

Later layers override earlier ones:

  1. package defaults
  2. ~/.any2db/config.yaml
  3. any2db.yaml in the working directory or its nearest ancestor
  4. ANY2DB_<FIELD> environment variables
  5. keyword overrides from the caller (None means "not given")

Values stay loosely typed until load_settings() validates them, so
environment strings are coerced by the Settings model.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from any2db.config.defaults import get_defaults
from any2db.config.schema import Settings

logger = logging.getLogger(__name__)

_GLOBAL_CONFIG_PATH = Path.home() / ".any2db" / "config.yaml"
_PROJECT_CONFIG_NAME = "any2db.yaml"
_ENV_PREFIX = "ANY2DB_"


def load_config_hierarchy(**runtime_overrides: Any) -> dict[str, Any]:
    """Merge every configuration layer into one flat dict."""
    layers = [
        get_defaults(),
        _read_config_file(_GLOBAL_CONFIG_PATH),
        _read_config_file(_find_project_config()),
        _env_layer(),
        {key: value for key, value in runtime_overrides.items() if value is not None},
    ]
    merged: dict[str, Any] = {}
    for layer in layers:
        merged.update(layer)
    return merged


def load_settings(**runtime_overrides: Any) -> Settings:
    return Settings.model_validate(load_config_hierarchy(**runtime_overrides))


def env_var_name(field: str) -> str:
    return _ENV_PREFIX + field.upper()


def _read_config_file(path: Path | None) -> dict[str, Any]:
    if path is None or not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text())
    except (OSError, yaml.YAMLError) as e:
        logger.warning("Ignoring config %s: %s", path, e)
        return {}
    if data is None:
        return {}
    if not isinstance(data, dict):
        logger.warning("Ignoring config %s: top level is %s, not a mapping", path, type(data).__name__)
        return {}

    unknown = sorted(set(data) - set(Settings.model_fields))
    if unknown:
        logger.warning("Unknown keys in %s: %s", path, ", ".join(map(str, unknown)))
    logger.debug("Loaded config layer %s", path)
    return data


def _find_project_config() -> Path | None:
    cwd = Path.cwd()
    for directory in (cwd, *cwd.parents):
        candidate = directory / _PROJECT_CONFIG_NAME
        if candidate.is_file():
            return candidate
    return None


def _env_layer() -> dict[str, str]:
    layer: dict[str, str] = {}
    for field in Settings.model_fields:
        value = os.environ.get(env_var_name(field))
        if value is not None:
            layer[field] = value
    return layer
