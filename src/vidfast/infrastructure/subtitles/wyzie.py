"""Wyzie subtitle search client.

    GET {api_url}/search?id={imdb or tmdb id}[&season=S&episode=E]

Returns a JSON array of ``{"url", "display", "language", ...}`` entries.
"""

from __future__ import annotations

from typing import Any

import httpx

from vidfast.domain.entities.media import (
    EpisodeRef,
    MediaRef,
    MovieRef,
    SubtitleDescriptor,
)
from vidfast.domain.results import ErrorKind, StepResult
from vidfast.infrastructure.config.schema import SubtitleConfig
from vidfast.infrastructure.http.base import HttpxStepClient

_STEP = "subtitle_search"


def _query_params(ref: MediaRef) -> dict[str, Any]:
    if isinstance(ref, MovieRef):
        return {"id": ref.imdb_id or ref.tmdb_id}
    return {"id": ref.tmdb_id, "season": ref.season, "episode": ref.episode}


def parse_subtitles(payload: Any) -> list[SubtitleDescriptor]:
    """Map wyzie entries to descriptors, dropping entries without a URL."""
    if not isinstance(payload, list):
        return []
    subtitles: list[SubtitleDescriptor] = []
    for entry in payload:
        if not isinstance(entry, dict):
            continue
        url = entry.get("url")
        if not isinstance(url, str) or not url:
            continue
        label = entry.get("display") or entry.get("language") or "Unknown"
        subtitles.append(SubtitleDescriptor(language_label=str(label), url=url))
    return subtitles


class WyzieSubtitleClient(HttpxStepClient):
    """Implements ``SubtitleSearchPort`` against sub.wyzie.ru."""

    name = "wyzie"

    def __init__(self, http_client: httpx.AsyncClient, config: SubtitleConfig) -> None:
        super().__init__(http_client)
        self._config = config

    async def search(self, ref: MediaRef) -> StepResult[list[SubtitleDescriptor]]:
        if not self._config.enabled:
            return StepResult.success([])

        result = await self._fetch_json(
            f"{self._config.api_url}/search",
            step=_STEP,
            params=_query_params(ref),
        )
        if not result.ok:
            return StepResult(failure=result.failure)

        if not isinstance(result.value, list):
            self._log.warning("wyzie_unexpected_payload", ref=repr(ref))
            return StepResult.fail(_STEP, ErrorKind.MISSING_FIELD, "expected a list")

        subtitles = parse_subtitles(result.value)
        self._log.debug(
            "wyzie_subtitles_found",
            count=len(subtitles),
            episode=isinstance(ref, EpisodeRef),
        )
        return StepResult.success(subtitles)
