"""Hardcoded default configuration values."""

from __future__ import annotations

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {
    "app_name": "vidfast",
    "environment": "dev",
    "http": {
        "timeout_seconds": 15.0,
        "follow_redirects": True,
        "user_agent": (
            "Mozilla/5.0 (Windows NT 10.0; Win64; x64) "
            "AppleWebKit/537.36 (KHTML, like Gecko) "
            "Chrome/131.0.0.0 Safari/537.36"
        ),
    },
    "logging": {
        "level": "INFO",
        "format": None,  # Derived from environment in schema.py
    },
    "tmdb": {
        "api_key": None,
        "api_url": "https://api.themoviedb.org/3",
        "image_url": "https://image.tmdb.org/t/p/w500",
        "backdrop_url": "https://image.tmdb.org/t/p/original",
        "language": "en-US",
    },
    "vidfast": {
        "main_url": "https://vidfast.pro",
        "strategy": "scrape",
        "api_path": None,
    },
    "subtitles": {
        "enabled": True,
        "api_url": "https://sub.wyzie.ru",
    },
}
