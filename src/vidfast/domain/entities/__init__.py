from .catalog import (
    CastMember,
    ContentType,
    EpisodeInfo,
    HomePage,
    MainPageSection,
    MetaPreview,
    MovieDetail,
    SeriesDetail,
    ShowStatus,
)
from .media import (
    EpisodeRef,
    LinkResolution,
    MediaRef,
    MovieRef,
    ResolvedStream,
    ServerEntry,
    StreamDescriptor,
    StreamQuality,
    SubtitleDescriptor,
)

__all__ = [
    "CastMember",
    "ContentType",
    "EpisodeInfo",
    "EpisodeRef",
    "HomePage",
    "LinkResolution",
    "MainPageSection",
    "MediaRef",
    "MetaPreview",
    "MovieDetail",
    "MovieRef",
    "ResolvedStream",
    "SeriesDetail",
    "ServerEntry",
    "ShowStatus",
    "StreamDescriptor",
    "StreamQuality",
    "SubtitleDescriptor",
]
