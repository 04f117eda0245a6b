#!/usr/bin/env python3
"""Configuration service for PromptCraft.

Loads and saves a single JSON/YAML configuration file holding enhancement,
builder, and token defaults, with environment and command-line overrides.
"""
from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

import yaml

from promptcraft.path_utils import get_config_file
from promptcraft.prompt_builder.models import CATEGORIES, QUALITY_TIERS

logger = logging.getLogger(__name__)


class ConfigError(Exception):
    pass


DEFAULT_CONFIG_PATH = str(get_config_file())
CURRENT_VERSION = 1
ENV_PREFIX = "PROMPTCRAFT_"

DEFAULT_CONFIG: Dict[str, Any] = {
    "version": CURRENT_VERSION,
    "enhancement": {
        "category": "ai-image",
        "quality": "high",
        "negative_prompt": True,
        "technical_specs": True,
        "style_descriptors": True,
        "composition_guidance": True,
    },
    "builder": {
        "max_length": 4000,
        "validate_tokens": True,
        "strict_mode": False,
    },
    "tokens": {
        "strict_mode": False,
        "values": {},
    },
    "generation": {
        "provider": "openai",
    },
}

BOOLEAN_FIELDS = (
    "enhancement.negative_prompt",
    "enhancement.technical_specs",
    "enhancement.style_descriptors",
    "enhancement.composition_guidance",
    "builder.validate_tokens",
    "builder.strict_mode",
    "tokens.strict_mode",
)


@dataclass
class LoadedConfig:
    data: Dict[str, Any]
    warnings: List[str]


def coerce_value(value: Any) -> Any:
    if isinstance(value, str):
        lower = value.strip().lower()
        if lower in {"true", "1", "yes", "on"}:
            return True
        if lower in {"false", "0", "no", "off"}:
            return False
        if lower.isdigit():
            return int(lower)
    return value


def deep_get(data: Dict[str, Any], path: str) -> Any:
    current: Any = data
    for key in path.split("."):
        if not isinstance(current, dict) or key not in current:
            return None
        current = current[key]
    return current


def deep_set(data: Dict[str, Any], path: str, value: Any) -> None:
    current = data
    parts = path.split(".")
    for key in parts[:-1]:
        if key not in current or not isinstance(current[key], dict):
            current[key] = {}
        current = current[key]
    current[parts[-1]] = value


def deep_merge(base: Dict[str, Any], incoming: Dict[str, Any]) -> Dict[str, Any]:
    merged = deepcopy(base)
    for key, value in incoming.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def parse_env_style(text: str) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = line.split("=", 1)
        deep_set(parsed, key.strip(), coerce_value(value.strip()))
    return parsed


def load_raw_config(path: str) -> Tuple[Dict[str, Any], List[str]]:
    warnings: List[str] = []
    if not os.path.exists(path):
        return {}, warnings

    with open(path, "r", encoding="utf-8") as f:
        text = f.read()

    stripped = text.lstrip()
    if not stripped:
        return {}, warnings

    if stripped.startswith("{") or stripped.startswith("["):
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ConfigError(f"Invalid JSON in {path}: {exc}") from exc
    elif stripped[0] in {"-", ":"} or ":" in stripped.splitlines()[0]:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Invalid YAML in {path}: {exc}") from exc
    else:
        data = parse_env_style(text)
        warnings.append("Loaded legacy env-style configuration; save it again to write structured YAML/JSON.")
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be an object/dictionary.")
    return data, warnings


def validate(config: Dict[str, Any], warnings: List[str]) -> Dict[str, Any]:
    """Repair invalid values in place, recording one warning per repair."""

    category = deep_get(config, "enhancement.category")
    if category not in CATEGORIES:
        warnings.append(f"Invalid enhancement.category '{category}' replaced with 'ai-image'.")
        deep_set(config, "enhancement.category", "ai-image")

    quality = deep_get(config, "enhancement.quality")
    if quality not in QUALITY_TIERS:
        warnings.append(
            f"Invalid enhancement.quality '{quality}' replaced with 'high'. Allowed: {list(QUALITY_TIERS)}"
        )
        deep_set(config, "enhancement.quality", "high")

    max_length = deep_get(config, "builder.max_length")
    if isinstance(max_length, bool) or not isinstance(max_length, int) or max_length <= 0:
        warnings.append(f"Invalid builder.max_length '{max_length}' replaced with 4000.")
        deep_set(config, "builder.max_length", 4000)

    for field in BOOLEAN_FIELDS:
        value = deep_get(config, field)
        if value is None or isinstance(value, bool):
            continue
        warnings.append(f"Field {field} expected boolean; coerced from '{value}'.")
        deep_set(config, field, bool(coerce_value(str(value))))

    values = deep_get(config, "tokens.values")
    if not isinstance(values, dict):
        warnings.append("Field tokens.values must be a mapping; reset to empty.")
        deep_set(config, "tokens.values", {})
    else:
        deep_set(config, "tokens.values", {str(key): str(value) for key, value in values.items()})

    return config


def apply_overrides(config: Dict[str, Any], overrides: List[str]) -> None:
    for override in overrides:
        if "=" not in override:
            raise ConfigError(f"Override '{override}' must use key=value format")
        key, raw_value = override.split("=", 1)
        deep_set(config, key.strip(), coerce_value(raw_value.strip()))


def apply_env_overrides(config: Dict[str, Any], prefix: str, warnings: List[str]) -> None:
    if not prefix:
        return
    for key, value in os.environ.items():
        if not key.startswith(prefix) or "__" not in key[len(prefix) :]:
            continue
        path = key[len(prefix) :].lower().replace("__", ".")
        warnings.append(f"Environment override {key} applied to {path}")
        deep_set(config, path, coerce_value(value))


def load_config(
    path: str = DEFAULT_CONFIG_PATH, env_prefix: str = ENV_PREFIX, overrides: Optional[List[str]] = None
) -> LoadedConfig:
    raw, warnings = load_raw_config(path)
    config = deep_merge(DEFAULT_CONFIG, raw)
    apply_env_overrides(config, env_prefix, warnings)
    if overrides:
        apply_overrides(config, overrides)
    validated = validate(config, warnings)
    for note in warnings:
        logger.warning(note)
    return LoadedConfig(validated, warnings)


def save_config(data: Dict[str, Any], path: str) -> None:
    root = os.path.dirname(path)
    if root:
        os.makedirs(root, exist_ok=True)
    ext = os.path.splitext(path)[1].lower()
    with open(path, "w", encoding="utf-8") as f:
        if ext in {".yaml", ".yml"}:
            yaml.safe_dump(data, f, sort_keys=False)
        else:
            json.dump(data, f, indent=2)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PromptCraft configuration service")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="Path to the JSON/YAML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    show_parser = subparsers.add_parser("show", help="Print the effective configuration")
    show_parser.add_argument("--format", choices=["json", "yaml"], default="json")
    show_parser.add_argument("--env-prefix", default=ENV_PREFIX, help="Environment variable prefix for overrides")
    show_parser.add_argument("--set", dest="overrides", action="append", default=[], help="Override key=value pairs")

    save_parser = subparsers.add_parser("save", help="Persist configuration changes")
    save_parser.add_argument("--set", dest="overrides", action="append", default=[], help="Updated key=value pairs")
    return parser


def command_show(args: argparse.Namespace) -> int:
    loaded = load_config(args.config, args.env_prefix, args.overrides)
    if args.format == "yaml":
        sys.stdout.write(yaml.safe_dump(loaded.data, sort_keys=False))
    else:
        json.dump(loaded.data, sys.stdout, indent=2)
        sys.stdout.write("\n")
    for note in loaded.warnings:
        print(f"[warn] {note}", file=sys.stderr)
    return 0


def command_save(args: argparse.Namespace) -> int:
    loaded = load_config(args.config, env_prefix="", overrides=args.overrides)
    save_config(loaded.data, args.config)
    for note in loaded.warnings:
        print(f"[warn] {note}", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)

    try:
        if args.command == "show":
            return command_show(args)
        if args.command == "save":
            return command_save(args)
    except ConfigError as exc:
        print(f"[error] {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
