"""JSON/YAML configuration for enhancement, builder, and token defaults."""
from __future__ import annotations

from .config_service import ConfigError, LoadedConfig, load_config, save_config

__all__ = ["ConfigError", "LoadedConfig", "load_config", "save_config"]
