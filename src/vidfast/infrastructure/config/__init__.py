from __future__ import annotations

from .load import load_config
from .schema import AppConfig, EnvOverrides, SubtitleConfig, TmdbConfig, VidFastConfig

__all__ = [
    "AppConfig",
    "EnvOverrides",
    "SubtitleConfig",
    "TmdbConfig",
    "VidFastConfig",
    "load_config",
]
