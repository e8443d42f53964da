"""Composition root: wire config, HTTP client and adapters into a provider."""

from __future__ import annotations

import httpx
import structlog

from vidfast.application.provider import VidFastProvider
from vidfast.infrastructure.config.schema import AppConfig
from vidfast.infrastructure.extractors.embed import EmbedExtractor
from vidfast.infrastructure.http.base import build_http_client
from vidfast.infrastructure.subtitles.wyzie import WyzieSubtitleClient
from vidfast.infrastructure.tmdb.client import HttpxTmdbClient
from vidfast.infrastructure.vidfast.resolver import VidFastLinkResolver

log = structlog.get_logger(__name__)


def build_provider(
    config: AppConfig, http_client: httpx.AsyncClient | None = None
) -> VidFastProvider:
    """Build a ready-to-use provider.

    When *http_client* is omitted the provider creates and owns one;
    ``VidFastProvider.cleanup()`` closes it.
    """
    owns_client = http_client is None
    client = http_client or build_http_client(config)

    resolver = VidFastLinkResolver(
        client,
        config=config.vidfast,
        subtitles=WyzieSubtitleClient(client, config.subtitles),
        extractor=EmbedExtractor(client),
    )
    provider = VidFastProvider(
        config=config,
        tmdb=HttpxTmdbClient(config=config.tmdb, http_client=client),
        resolver=resolver,
        http_client=client if owns_client else None,
    )
    log.debug(
        "provider_built",
        strategy=config.vidfast.strategy,
        api_path_pinned=config.vidfast.api_path is not None,
        subtitles=config.subtitles.enabled,
    )
    return provider
