"""Shared test fixtures for the VidFast test suite."""

from __future__ import annotations

import httpx
import pytest

from vidfast.domain.entities.media import EpisodeRef, MovieRef
from vidfast.infrastructure.config.schema import (
    AppConfig,
    SubtitleConfig,
    TmdbConfig,
    VidFastConfig,
)

MAIN_URL = "https://vidfast.pro"
TMDB_API = "https://api.themoviedb.org/3"
WYZIE_API = "https://sub.wyzie.ru"

# ---------------------------------------------------------------------------
# Domain fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def movie_ref() -> MovieRef:
    """Fight Club."""
    return MovieRef(tmdb_id="550", imdb_id="tt0137523")


@pytest.fixture()
def episode_ref() -> EpisodeRef:
    """Game of Thrones S01E02."""
    return EpisodeRef(tmdb_id="1399", season=1, episode=2)


# ---------------------------------------------------------------------------
# Config fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def vidfast_config() -> VidFastConfig:
    return VidFastConfig(main_url=MAIN_URL)


@pytest.fixture()
def subtitle_config() -> SubtitleConfig:
    return SubtitleConfig(api_url=WYZIE_API)


@pytest.fixture()
def tmdb_config() -> TmdbConfig:
    return TmdbConfig(api_key="test-api-key-123", api_url=TMDB_API)


@pytest.fixture()
def app_config(
    tmdb_config: TmdbConfig,
    vidfast_config: VidFastConfig,
    subtitle_config: SubtitleConfig,
) -> AppConfig:
    return AppConfig(
        environment="test",
        tmdb=tmdb_config,
        vidfast=vidfast_config,
        subtitles=subtitle_config,
    )


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------


@pytest.fixture()
def http_client() -> httpx.AsyncClient:
    """Real httpx.AsyncClient for use with respx mocking."""
    return httpx.AsyncClient()
