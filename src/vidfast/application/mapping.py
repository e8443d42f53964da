"""TMDB JSON -> catalog value objects."""

from __future__ import annotations

from typing import Any

from vidfast.domain.entities.catalog import (
    CastMember,
    ContentType,
    MetaPreview,
    ShowStatus,
)

MAX_ACTORS = 15

_STATUS_MAP: dict[str, ShowStatus] = {
    "Returning Series": ShowStatus.ONGOING,
    "Ended": ShowStatus.COMPLETED,
    "Canceled": ShowStatus.COMPLETED,
}


def image_url(path: str | None, base: str) -> str | None:
    if not path:
        return None
    return f"{base}{path}"


def year_of(date_str: str | None) -> int | None:
    """``"1999-10-15"`` -> ``1999``; anything unparsable -> ``None``."""
    if not date_str or len(date_str) < 4:
        return None
    try:
        return int(date_str[:4])
    except ValueError:
        return None


def show_status(status: str | None) -> ShowStatus | None:
    if not status:
        return None
    return _STATUS_MAP.get(status)


def genre_names(detail: dict[str, Any]) -> list[str]:
    genres = detail.get("genres") or []
    return [g["name"] for g in genres if isinstance(g, dict) and g.get("name")]


def imdb_id_of(detail: dict[str, Any]) -> str | None:
    """Movies carry ``imdb_id`` at the top level, shows only in ``external_ids``."""
    external = detail.get("external_ids") or {}
    return detail.get("imdb_id") or external.get("imdb_id") or None


def cast_members(detail: dict[str, Any], image_base: str) -> list[CastMember]:
    credits = detail.get("credits") or {}
    actors: list[CastMember] = []
    for cast in (credits.get("cast") or [])[:MAX_ACTORS]:
        if not isinstance(cast, dict) or not cast.get("name"):
            continue
        actors.append(
            CastMember(
                name=cast["name"],
                image=image_url(cast.get("profile_path"), image_base),
            )
        )
    return actors


def to_preview(
    item: dict[str, Any], *, main_url: str, image_base: str
) -> MetaPreview | None:
    """Map a TMDB list/search item to a preview.

    Returns ``None`` for people (trending endpoint) and for items without
    an id or a title.  Typed endpoints omit ``media_type``: an item with a
    ``title`` is a movie, one with only a ``name`` is a show.
    """
    tmdb_id = item.get("id")
    name = item.get("title") or item.get("name")
    if tmdb_id is None or not name:
        return None

    media_type = item.get("media_type")
    if media_type == "person":
        return None

    is_movie = media_type == "movie" or (media_type is None and item.get("title"))
    content_type: ContentType = "movie" if is_movie else "tv"

    return MetaPreview(
        name=name,
        url=f"{main_url}/{content_type}/{tmdb_id}",
        type=content_type,
        tmdb_id=str(tmdb_id),
        poster=image_url(item.get("poster_path"), image_base),
    )


def to_previews(
    items: list[dict[str, Any]], *, main_url: str, image_base: str
) -> list[MetaPreview]:
    previews = (to_preview(i, main_url=main_url, image_base=image_base) for i in items)
    return [p for p in previews if p is not None]
