"""YAML loading for credential alias files."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Load any YAML file safely."""
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"YAML file not found: {path}")

    with open(path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError(f"Expected YAML mapping, got {type(raw).__name__} in {path}")

    return raw


def load_credentials_yaml(path: str | Path) -> dict[str, dict[str, Any]]:
    """Load an alias → credential map file.

    Expected shape::

        aliases:
          reports:
            type: s3
            key: ...
            secret: ...
    """
    raw = load_yaml(path)
    aliases = raw.get("aliases")
    if not isinstance(aliases, dict):
        raise ValueError(f"Invalid credentials YAML: missing top-level 'aliases' mapping in {path}")

    result: dict[str, dict[str, Any]] = {}
    for name, creds in aliases.items():
        if not isinstance(creds, dict):
            raise ValueError(f"Credentials for alias '{name}' must be a mapping in {path}")
        result[str(name)] = dict(creds)
    return result
