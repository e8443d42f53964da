"""Compact link-data strings passed through the host.

``load`` attaches one of these strings to every movie/episode and the host
hands it back to ``load_links`` unchanged:

    movie:   {"tmdbId":"550","imdbId":"tt0137523"}
    episode: {"episodeTmdbId":"1399","season":1,"episode":2}
"""

from __future__ import annotations

import json
from typing import Any

from vidfast.domain.entities.media import EpisodeRef, MediaRef, MovieRef
from vidfast.domain.exceptions import InvalidLinkDataError


def encode_media_ref(ref: MediaRef) -> str:
    """Encode a MediaRef into its link-data string."""
    if isinstance(ref, MovieRef):
        payload: dict[str, Any] = {"tmdbId": ref.tmdb_id, "imdbId": ref.imdb_id}
    elif isinstance(ref, EpisodeRef):
        payload = {
            "episodeTmdbId": ref.tmdb_id,
            "season": ref.season,
            "episode": ref.episode,
        }
    else:
        raise TypeError(f"Unsupported media reference: {type(ref)!r}")
    return json.dumps(payload, separators=(",", ":"))


def _require_int(payload: dict[str, Any], key: str) -> int:
    value = payload.get(key)
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidLinkDataError(f"'{key}' must be an integer, got {value!r}")
    return value


def _require_id(payload: dict[str, Any], key: str) -> str:
    value = payload.get(key)
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if not isinstance(value, str) or not value:
        raise InvalidLinkDataError(f"'{key}' must be a non-empty id, got {value!r}")
    return value


def decode_media_ref(data: str) -> MediaRef:
    """Decode a link-data string.

    Raises:
        InvalidLinkDataError: malformed JSON or an unknown shape.
    """
    try:
        payload = json.loads(data)
    except (json.JSONDecodeError, TypeError) as e:
        raise InvalidLinkDataError(f"Link data is not valid JSON: {data!r}") from e

    if not isinstance(payload, dict):
        raise InvalidLinkDataError("Link data must be a JSON object")

    if "episodeTmdbId" in payload:
        return EpisodeRef(
            tmdb_id=_require_id(payload, "episodeTmdbId"),
            season=_require_int(payload, "season"),
            episode=_require_int(payload, "episode"),
        )

    if "tmdbId" in payload:
        imdb_id = payload.get("imdbId")
        if imdb_id is not None and not isinstance(imdb_id, str):
            raise InvalidLinkDataError(f"'imdbId' must be a string, got {imdb_id!r}")
        return MovieRef(tmdb_id=_require_id(payload, "tmdbId"), imdb_id=imdb_id)

    raise InvalidLinkDataError(f"Unknown link data shape: {sorted(payload)}")
