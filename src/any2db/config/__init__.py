"""Configuration — layered YAML/env settings and credential alias files."""

from any2db.config.hierarchy import load_config_hierarchy, load_settings
from any2db.config.loader import load_credentials_yaml
from any2db.config.schema import Settings

__all__ = [
    "Settings",
    "load_config_hierarchy",
    "load_settings",
    "load_credentials_yaml",
]
