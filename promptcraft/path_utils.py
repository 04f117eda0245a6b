"""Where PromptCraft keeps its config file and the published request bundle.

Each location is an explicit ``PROMPTCRAFT_*`` variable if set, then the
Windows per-user folder, then the XDG-style home directory.
"""
from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Optional

CONFIG_DIR_ENV = "PROMPTCRAFT_CONFIG_DIR"
CONFIG_FILE_ENV = "PROMPTCRAFT_CONFIG_FILE"
BUNDLE_PATH_ENV = "PROMPTCRAFT_BUNDLE_PATH"

CONFIG_FILENAME = "config.yaml"
BUNDLE_FILENAME = "generation_request.json"


def _from_env(name: str) -> Optional[Path]:
    value = os.environ.get(name)
    return Path(value).expanduser() if value else None


def _windows_folder(variable: str) -> Optional[Path]:
    """``%APPDATA%``/``%LOCALAPPDATA%`` + PromptCraft, or None off Windows."""

    if not platform.system().lower().startswith("windows"):
        return None
    base = os.environ.get(variable)
    return Path(base) / "PromptCraft" if base else None


def get_config_root() -> Path:
    return (
        _from_env(CONFIG_DIR_ENV)
        or _windows_folder("APPDATA")
        or Path.home() / ".config" / "promptcraft"
    )


def get_config_file() -> Path:
    return _from_env(CONFIG_FILE_ENV) or get_config_root() / CONFIG_FILENAME


def get_bundle_path() -> Path:
    cache_root = _windows_folder("LOCALAPPDATA") or Path.home() / ".cache" / "promptcraft"
    return _from_env(BUNDLE_PATH_ENV) or cache_root / BUNDLE_FILENAME
