from .extractor import ExtractorPort
from .link_resolver import LinkResolverPort
from .provider import ProviderPort, StreamCallback, SubtitleCallback
from .subtitles import SubtitleSearchPort
from .tmdb import TmdbClientPort

__all__ = [
    "ExtractorPort",
    "LinkResolverPort",
    "ProviderPort",
    "StreamCallback",
    "SubtitleCallback",
    "SubtitleSearchPort",
    "TmdbClientPort",
]
