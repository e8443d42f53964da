"""Catalog value objects built from TMDB metadata."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

ContentType = Literal["movie", "tv"]


class ShowStatus(str, Enum):
    ONGOING = "ongoing"
    COMPLETED = "completed"


@dataclass(frozen=True)
class MainPageSection:
    """A catalog row on the host's main page."""

    name: str
    path: str  # TMDB list path, e.g. "/movie/popular"


@dataclass(frozen=True)
class MetaPreview:
    """A catalog or search item."""

    name: str
    url: str  # Provider URL, later passed back to ``load``
    type: ContentType
    tmdb_id: str
    poster: str | None = None


@dataclass(frozen=True)
class HomePage:
    name: str
    items: list[MetaPreview] = field(default_factory=list)
    has_next: bool = False


@dataclass(frozen=True)
class CastMember:
    name: str
    image: str | None = None


@dataclass(frozen=True)
class EpisodeInfo:
    """A loadable episode; ``data`` is the encoded link-data string."""

    data: str
    season: int
    episode: int
    name: str | None = None
    poster: str | None = None
    description: str | None = None
    air_date: str | None = None


@dataclass(frozen=True)
class MovieDetail:
    name: str
    url: str
    data: str  # Encoded link-data string for ``load_links``
    tmdb_id: str
    imdb_id: str | None = None
    poster: str | None = None
    backdrop: str | None = None
    year: int | None = None
    plot: str | None = None
    tags: list[str] = field(default_factory=list)
    duration: int | None = None
    actors: list[CastMember] = field(default_factory=list)
    recommendations: list[MetaPreview] = field(default_factory=list)
    type: ContentType = "movie"


@dataclass(frozen=True)
class SeriesDetail:
    name: str
    url: str
    tmdb_id: str
    episodes: list[EpisodeInfo] = field(default_factory=list)
    imdb_id: str | None = None
    poster: str | None = None
    backdrop: str | None = None
    year: int | None = None
    plot: str | None = None
    tags: list[str] = field(default_factory=list)
    status: ShowStatus | None = None
    actors: list[CastMember] = field(default_factory=list)
    recommendations: list[MetaPreview] = field(default_factory=list)
    type: ContentType = "tv"
