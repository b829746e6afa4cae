"""Configuration management with pydantic and YAML support.

Configuration is consulted when a method is registered. A registered
descriptor keeps the key scheme and stats flag it was registered with, so
changing the config later only affects methods memoized afterwards.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field

from .constants import ENV_CONFIG_PATH, __version__
from .logging import set_log_level
from .types import KeyScheme


class KeysConfig(BaseModel):
    """Cache key configuration."""

    # FLAT is collision-safe; HASHED trades that for a smaller key
    scheme: KeyScheme = KeyScheme.FLAT


class StatsConfig(BaseModel):
    """Hit/miss accounting."""

    enabled: bool = False


class LoggingConfig(BaseModel):
    """Library log output."""

    level: Literal["DEBUG", "INFO", "WARN", "ERROR"] = "WARN"


class ArgmemoConfig(BaseModel):
    """Root configuration object."""

    keys: KeysConfig = Field(default_factory=KeysConfig)
    stats: StatsConfig = Field(default_factory=StatsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(path: str | Path) -> ArgmemoConfig:
    """Load configuration from YAML file.

    Args:
        path: Path to YAML config file.

    Returns:
        Parsed ArgmemoConfig object.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        data = yaml.safe_load(f)

    data = dict(data or {})
    data.pop("version", None)
    return ArgmemoConfig.model_validate(data)


def save_config(config: ArgmemoConfig, path: str | Path) -> None:
    """Save configuration to YAML file.

    Args:
        config: Configuration to save.
        path: Output path.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    data = {"version": __version__, **config.model_dump(mode="json")}
    with open(path, "w") as f:
        yaml.safe_dump(data, f, default_flow_style=False)


def default_config() -> ArgmemoConfig:
    """Return default configuration."""
    return ArgmemoConfig()


def merge_config(base: ArgmemoConfig, overrides: dict[str, Any]) -> ArgmemoConfig:
    """Merge overrides into base configuration.

    Args:
        base: Base configuration.
        overrides: Dictionary of override values.

    Returns:
        New configuration with overrides applied.
    """
    base_dict = base.model_dump(mode="json")

    def deep_merge(d1: dict, d2: dict) -> dict:
        result = d1.copy()
        for k, v in d2.items():
            if k in result and isinstance(result[k], dict) and isinstance(v, dict):
                result[k] = deep_merge(result[k], v)
            else:
                result[k] = v
        return result

    merged = deep_merge(base_dict, overrides)
    return ArgmemoConfig.model_validate(merged)


# Process-wide configuration, loaded lazily
_config: ArgmemoConfig | None = None


def get_config() -> ArgmemoConfig:
    """Return the process-wide configuration.

    The first call loads the YAML file named by ARGMEMO_CONFIG, if set.
    """
    global _config
    if _config is None:
        env_path = os.environ.get(ENV_CONFIG_PATH)
        set_config(load_config(env_path) if env_path else default_config())
    return _config


def set_config(config: ArgmemoConfig) -> None:
    """Replace the process-wide configuration and apply its log level."""
    global _config
    _config = config
    set_log_level(config.logging.level)


def reset_config() -> None:
    """Drop the process-wide configuration; the next get_config() reloads it."""
    global _config
    _config = None
