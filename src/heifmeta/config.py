"""Configuration management for heifmeta.

Supports loading configuration from:
1. Environment variables (HEIFMETA_*)
2. Config file (~/.heifmeta/config.yaml)
3. Default values

Example config file (~/.heifmeta/config.yaml):
    walker:
      max_depth: 32
      allow_rewind: true
    display_p3:
      profiles: [apple, legacy]
      white_point_tolerance: 0.01
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

# Config file search locations (in priority order)
CONFIG_LOCATIONS = [
    Path.home() / ".heifmeta" / "config.yaml",
    Path.home() / ".config" / "heifmeta" / "config.yaml",
    Path(".heifmeta.yaml"),
]

DEFAULT_P3_PROFILES = ["apple", "legacy"]


@dataclass
class WalkerConfig:
    """Box walker configuration."""

    max_depth: int = 32
    allow_rewind: bool = True


@dataclass
class DisplayP3Config:
    """Display P3 classification configuration."""

    profiles: list[str] = field(default_factory=lambda: list(DEFAULT_P3_PROFILES))
    white_point_tolerance: float = 0.01


@dataclass
class HeifMetaConfig:
    """Main configuration for heifmeta."""

    walker: WalkerConfig = field(default_factory=WalkerConfig)
    display_p3: DisplayP3Config = field(default_factory=DisplayP3Config)


def _load_yaml_config() -> dict[str, Any]:
    """Load configuration from YAML file if available."""
    try:
        import yaml
    except ImportError:
        return {}

    for config_path in CONFIG_LOCATIONS:
        if config_path.exists():
            try:
                with open(config_path) as f:
                    data = yaml.safe_load(f)
                    return data if data else {}
            except (OSError, yaml.YAMLError):
                continue
    return {}


def _get_env(key: str, default: Any = None) -> Any:
    """Get environment variable with HEIFMETA_ prefix."""
    return os.environ.get(f"HEIFMETA_{key}", default)


def _parse_bool(value: str | None) -> bool | None:
    """Parse boolean from string."""
    if value is None:
        return None
    return value.lower() in ("true", "1", "yes", "on")


def _parse_list(value: str | None) -> list[str] | None:
    """Parse a comma-separated list."""
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def load_config() -> HeifMetaConfig:
    """Load configuration from file and environment variables.

    Priority (highest first):
    1. Environment variables (HEIFMETA_*)
    2. Config file (~/.heifmeta/config.yaml)
    3. Default values
    """
    file_config = _load_yaml_config()

    # Walker config
    walker_config = file_config.get("walker", {})
    walker = WalkerConfig(
        max_depth=int(_get_env("MAX_DEPTH") or walker_config.get("max_depth", 32)),
        allow_rewind=(
            _parse_bool(_get_env("ALLOW_REWIND"))
            if _get_env("ALLOW_REWIND")
            else walker_config.get("allow_rewind", True)
        ),
    )

    # Display P3 config
    p3_config = file_config.get("display_p3", {})
    display_p3 = DisplayP3Config(
        profiles=_parse_list(_get_env("P3_PROFILES"))
        or list(p3_config.get("profiles", DEFAULT_P3_PROFILES)),
        white_point_tolerance=float(
            _get_env("WHITE_POINT_TOLERANCE") or p3_config.get("white_point_tolerance", 0.01)
        ),
    )

    return HeifMetaConfig(walker=walker, display_p3=display_p3)


# Global config instance (lazy loaded)
_config: HeifMetaConfig | None = None


def get_config() -> HeifMetaConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
