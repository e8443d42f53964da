"""Domain entities for link resolution.

Pure value objects with no framework dependencies and no I/O.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

from vidfast.domain.results import StepFailure


class StreamQuality(IntEnum):
    """Ranked quality levels (higher value = better quality)."""

    UNKNOWN = 0
    SD = 30
    HD_720P = 40
    HD_1080P = 50
    UHD_4K = 60

    @classmethod
    def from_label(cls, label: str | None) -> StreamQuality:
        """Guess the quality from a free-text label like ``"Server 2 (1080p)"``."""
        if not label:
            return cls.UNKNOWN
        text = label.lower()
        if re.search(r"\b(?:2160p?|4k|uhd)\b", text):
            return cls.UHD_4K
        if re.search(r"\b1080p?\b|\bfhd\b", text):
            return cls.HD_1080P
        if re.search(r"\b720p?\b|\bhd\b", text):
            return cls.HD_720P
        if re.search(r"\b(?:480|360|240)p?\b|\bsd\b", text):
            return cls.SD
        return cls.UNKNOWN


@dataclass(frozen=True)
class MovieRef:
    """A movie, identified by its TMDB id (IMDb id when known)."""

    tmdb_id: str
    imdb_id: str | None = None


@dataclass(frozen=True)
class EpisodeRef:
    """A single episode of a TV show."""

    tmdb_id: str
    season: int
    episode: int


MediaRef = Union[MovieRef, EpisodeRef]


@dataclass(frozen=True)
class ServerEntry:
    """One entry of the embed site's server list.

    ``token`` is opaque and only valid for the stream endpoint call that
    immediately follows.
    """

    display_name: str
    token: str


@dataclass(frozen=True)
class StreamDescriptor:
    """A playable stream handed to the host."""

    source_label: str
    url: str
    is_m3u8: bool = True
    quality: StreamQuality = StreamQuality.UNKNOWN
    referer: str = ""


@dataclass(frozen=True)
class SubtitleDescriptor:
    """A subtitle track handed to the host."""

    language_label: str
    url: str


@dataclass(frozen=True)
class ResolvedStream:
    """Result of running the generic embed extractor on a page."""

    video_url: str  # Actual playable URL (.mp4, .m3u8, etc.)
    headers: dict[str, str] = field(default_factory=dict)
    is_hls: bool = False
    quality: StreamQuality = StreamQuality.UNKNOWN


@dataclass
class LinkResolution:
    """Everything one resolution call gathered.

    ``failures`` lists the units of work that were dropped; they never
    turn the call itself into an error.
    """

    streams: list[StreamDescriptor] = field(default_factory=list)
    subtitles: list[SubtitleDescriptor] = field(default_factory=list)
    failures: list[StepFailure] = field(default_factory=list)

    def add_subtitle(self, subtitle: SubtitleDescriptor) -> None:
        """Append a subtitle unless one with the same URL is already present."""
        if any(s.url == subtitle.url for s in self.subtitles):
            return
        self.subtitles.append(subtitle)

    @property
    def is_empty(self) -> bool:
        return not self.streams and not self.subtitles
