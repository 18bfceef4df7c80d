"""
Configuration loader — reads the optional YAML config into ProvisionConfig.

Without a config file every default applies, which is the stock
bootstrap's fixed layout. Lookup order:

    --config PATH  >  $DOTSTRAP_CONFIG  >  ~/.config/dotstrap/config.yml
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from dotstrap.core.models.config import ProvisionConfig

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "DOTSTRAP_CONFIG"
DEFAULT_CONFIG_RELPATH = Path(".config") / "dotstrap" / "config.yml"


class ConfigError(Exception):
    """Raised when the configuration file is invalid or unreadable."""


def find_config_file(home: Path, environ: dict[str, str] | None = None) -> Path | None:
    """Locate the config file, or None to run on defaults.

    An explicit ``$DOTSTRAP_CONFIG`` is returned even if it doesn't exist,
    so that load_config() can complain about it.
    """
    env = os.environ if environ is None else environ
    explicit = env.get(CONFIG_ENV_VAR)
    if explicit:
        return Path(explicit).expanduser()

    candidate = home / DEFAULT_CONFIG_RELPATH
    if candidate.is_file():
        return candidate
    return None


def load_config(path: Path | None = None) -> ProvisionConfig:
    """Load and validate the configuration.

    Args:
        path: Config file, or None for pure defaults.

    Raises:
        ConfigError: If the file is missing, unreadable, not YAML, or
            does not match the schema.
    """
    if path is None:
        logger.debug("No config file — using defaults")
        return ProvisionConfig()

    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Loading config from %s", path)

    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e

    try:
        data = yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Expected a YAML mapping in {path}, got {type(data).__name__}")

    try:
        config = ProvisionConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}: {e}") from e

    logger.info("Loaded config from %s", path)
    return config


def dump_config(config: ProvisionConfig) -> str:
    """Render a config as YAML, in the same shape load_config() reads."""
    return yaml.safe_dump(config.model_dump(mode="json"), sort_keys=False)
