"""YAML configuration loader with environment variable overrides.

Configuration is layered (later layers win):

    1. Defaults declared on :class:`Settings`
    2. ``config/config.yaml`` - static defaults checked into the repo
    3. ``.env`` file and environment variables

YAML sections are flattened into setting names by joining the section and
key (``database: {driver: memory}`` becomes ``database_driver``).  A key
whose joined name is not a setting is tried on its own, so ``app:
{cors_origins: [...]}`` sets ``cors_origins``.  Unknown keys are ignored.
"""

from pathlib import Path
from typing import Any

import yaml

from freqshow.config.settings import Settings
from freqshow.utils.errors import ConfigurationError


def _flatten(yaml_config: dict[str, Any]) -> dict[str, Any]:
    fields = Settings.model_fields
    flat: dict[str, Any] = {}
    for section, values in yaml_config.items():
        if not isinstance(values, dict):
            if section in fields:
                flat[section] = values
            continue
        for key, value in values.items():
            joined = f"{section}_{key}"
            if joined in fields:
                flat[joined] = value
            elif key in fields:
                flat[key] = value
    return flat


def load_yaml(path: str | Path) -> dict[str, Any]:
    """Read a YAML file into a dict; a missing file yields ``{}``."""
    config_path = Path(path)
    if not config_path.exists():
        return {}
    try:
        with open(config_path) as f:
            loaded = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(
            message=f"Could not parse {config_path}: {exc}",
        ) from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(message=f"{config_path} must contain a mapping")
    return loaded


def load_settings(path: str | Path = "config/config.yaml") -> Settings:
    """Build :class:`Settings` from YAML defaults overlaid by the environment.

    Args:
        path: Path to the YAML configuration file.

    Returns:
        Fully resolved settings.
    """
    yaml_values = _flatten(load_yaml(path))

    # Settings() reads only .env and the environment; anything it was
    # explicitly given must keep precedence over the YAML file.
    from_env = Settings()
    overrides = {
        key: value
        for key, value in yaml_values.items()
        if key not in from_env.model_fields_set
    }
    return Settings(**overrides)
