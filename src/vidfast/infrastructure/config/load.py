"""Layered configuration loader for the VidFast provider.

Four layers are merged in order, each overriding the one before it:
built-in defaults, an optional YAML file, ``VIDFAST_*`` environment
variables (optionally seeded from a ``.env`` file) and CLI flags.  YAML may
use either the sectioned shape (``tmdb: {api_key: ...}``) or flat keys
(``tmdb_api_key: ...``); ENV and CLI layers are always flat.
"""

from __future__ import annotations

from copy import deepcopy
from pathlib import Path
from typing import Any, Mapping

import yaml
from dotenv import load_dotenv
from pydantic import ValidationError

from vidfast.domain.exceptions import ConfigError

from .defaults import DEFAULT_CONFIG
from .schema import AppConfig, EnvOverrides

_SECTION_KEYS: set[str] = {"http", "logging", "tmdb", "vidfast", "subtitles"}

# Flat -> section mappings (ENV/CLI keys)
_FLAT_MAP: dict[str, tuple[str, str]] = {
    "http_timeout_seconds": ("http", "timeout_seconds"),
    "http_follow_redirects": ("http", "follow_redirects"),
    "http_user_agent": ("http", "user_agent"),
    "log_level": ("logging", "level"),
    "log_format": ("logging", "format"),
    "tmdb_api_key": ("tmdb", "api_key"),
    "tmdb_language": ("tmdb", "language"),
    "main_url": ("vidfast", "main_url"),
    "strategy": ("vidfast", "strategy"),
    "api_path": ("vidfast", "api_path"),
    "subtitles_enabled": ("subtitles", "enabled"),
    "subtitles_api_url": ("subtitles", "api_url"),
}


def _deep_merge(base: dict[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Merge *override* into *base* in place; nested sections merge key by key."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, Mapping):
            _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


def _normalize_layer(data: Mapping[str, Any]) -> dict[str, Any]:
    """Rewrite one layer into the sectioned shape ``AppConfig`` validates.

    Flat keys from ``_FLAT_MAP`` land in their section and win over a
    sectioned block given in the same layer.  Unknown keys are dropped.
    """
    out: dict[str, Any] = {
        key: data[key] for key in ("app_name", "environment") if key in data
    }

    for section in _SECTION_KEYS:
        block = data.get(section)
        if isinstance(block, Mapping):
            out[section] = dict(block)

    for flat_key, (section, section_key) in _FLAT_MAP.items():
        if flat_key in data:
            out.setdefault(section, {})
            out[section][section_key] = data[flat_key]

    return out


def _read_yaml_config(config_path: Path) -> dict[str, Any]:
    raw = config_path.read_text(encoding="utf-8")
    parsed = yaml.safe_load(raw)
    if parsed is None:
        return {}
    if not isinstance(parsed, dict):
        raise ConfigError(f"Config YAML must be a mapping, got: {type(parsed)!r}")
    return parsed


def load_config(
    *,
    config_path: Path | None = None,
    dotenv_path: Path | None = None,
    cli_overrides: dict[str, Any] | None = None,
) -> AppConfig:
    """Build the validated ``AppConfig`` for one provider process.

    Raises ``FileNotFoundError`` for a missing YAML or ``.env`` path and
    ``ConfigError`` for a non-mapping YAML document or any value that fails
    validation.  Only reads files; never writes any.
    """
    if dotenv_path is not None:
        if not dotenv_path.exists():
            raise FileNotFoundError(dotenv_path)
        # Real environment variables keep priority over .env entries.
        load_dotenv(dotenv_path, override=False)

    yaml_data: dict[str, Any] = {}
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(config_path)
        yaml_data = _read_yaml_config(config_path)

    try:
        layers = (yaml_data, EnvOverrides().to_update_dict(), cli_overrides or {})
        merged = _normalize_layer(deepcopy(DEFAULT_CONFIG))
        for layer in layers:
            _deep_merge(merged, _normalize_layer(layer))
        return AppConfig.model_validate(merged)
    except ValidationError as exc:
        raise ConfigError(str(exc)) from exc
