"""VidFast provider: the host-facing capability contract.

Discovery goes through TMDB; playback goes through the link resolver:

    main page / search -> MetaPreview (url = {main_url}/movie|tv/{tmdb_id})
    load(url)          -> MovieDetail | SeriesDetail (link data per title/episode)
    load_links(data)   -> StreamDescriptor / SubtitleDescriptor via callbacks
"""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import structlog

from vidfast.domain.entities.catalog import (
    EpisodeInfo,
    HomePage,
    MainPageSection,
    MetaPreview,
    MovieDetail,
    SeriesDetail,
)
from vidfast.domain.entities.media import EpisodeRef, LinkResolution, MovieRef
from vidfast.domain.exceptions import InvalidLinkDataError
from vidfast.domain.link_data import decode_media_ref, encode_media_ref
from vidfast.domain.ports.link_resolver import LinkResolverPort
from vidfast.domain.ports.provider import StreamCallback, SubtitleCallback
from vidfast.domain.ports.tmdb import TmdbClientPort
from vidfast.infrastructure.config.schema import AppConfig

from .mapping import (
    cast_members,
    genre_names,
    image_url,
    imdb_id_of,
    show_status,
    to_previews,
    year_of,
)

log = structlog.get_logger(__name__)

MAIN_PAGE_SECTIONS: tuple[MainPageSection, ...] = (
    MainPageSection("Popular Movies", "/movie/popular"),
    MainPageSection("Top Rated Movies", "/movie/top_rated"),
    MainPageSection("Now Playing", "/movie/now_playing"),
    MainPageSection("Upcoming Movies", "/movie/upcoming"),
    MainPageSection("Popular TV Shows", "/tv/popular"),
    MainPageSection("Top Rated TV Shows", "/tv/top_rated"),
    MainPageSection("On The Air", "/tv/on_the_air"),
    MainPageSection("Trending This Week", "/trending/all/week"),
)


class VidFastProvider:
    """Implements ``ProviderPort`` for vidfast.pro."""

    name = "VidFast"
    lang = "en"
    has_main_page = True
    has_quick_search = False
    supported_types = ("movie", "tv")

    def __init__(
        self,
        *,
        config: AppConfig,
        tmdb: TmdbClientPort,
        resolver: LinkResolverPort,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._tmdb = tmdb
        self._resolver = resolver
        self._http_client = http_client
        self.main_url = config.vidfast.main_url

    @property
    def main_page_sections(self) -> list[MainPageSection]:
        return list(MAIN_PAGE_SECTIONS)

    def section(self, name: str) -> MainPageSection | None:
        """Look up a main-page section by name (case-insensitive)."""
        wanted = name.strip().lower()
        for section in MAIN_PAGE_SECTIONS:
            if section.name.lower() == wanted:
                return section
        return None

    async def cleanup(self) -> None:
        """Close the shared httpx client, if this provider owns one."""
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    # ------------------------------------------------------------------
    # Catalog
    # ------------------------------------------------------------------

    def _previews(self, items: list[dict[str, Any]]) -> list[MetaPreview]:
        return to_previews(
            items, main_url=self.main_url, image_base=self._config.tmdb.image_url
        )

    async def get_main_page(self, section: MainPageSection, page: int = 1) -> HomePage:
        results, total_pages = await self._tmdb.list_page(section.path, page=page)
        return HomePage(
            name=section.name,
            items=self._previews(results),
            has_next=page < total_pages,
        )

    async def search(self, query: str) -> list[MetaPreview]:
        """Movie matches first, then TV matches."""
        if not query.strip():
            return []
        movies, shows = await asyncio.gather(
            self._tmdb.search_movies(query), self._tmdb.search_tv(query)
        )
        results = self._previews(movies) + self._previews(shows)
        log.info("vidfast_search", query=query, count=len(results))
        return results

    # ------------------------------------------------------------------
    # Load
    # ------------------------------------------------------------------

    async def load(self, url: str) -> MovieDetail | SeriesDetail | None:
        """Load ``{main_url}/movie/{id}`` or ``{main_url}/tv/{id}``."""
        path = url.removeprefix(self.main_url).strip("/")
        segments = path.split("/")
        if len(segments) < 2 or not segments[1]:
            log.debug("vidfast_load_unknown_url", url=url)
            return None

        media_type, tmdb_id = segments[0], segments[1]
        if media_type == "movie":
            return await self._load_movie(tmdb_id)
        if media_type == "tv":
            return await self._load_series(tmdb_id)
        log.debug("vidfast_load_unknown_type", url=url, media_type=media_type)
        return None

    async def _load_movie(self, tmdb_id: str) -> MovieDetail | None:
        detail = await self._tmdb.movie_detail(tmdb_id)
        if detail is None:
            return None
        name = detail.get("title") or detail.get("original_title")
        if not name:
            return None

        tmdb = self._config.tmdb
        imdb_id = imdb_id_of(detail)
        runtime = detail.get("runtime")
        recommendations = (detail.get("recommendations") or {}).get("results") or []
        return MovieDetail(
            name=name,
            url=f"{self.main_url}/movie/{tmdb_id}",
            data=encode_media_ref(MovieRef(tmdb_id=tmdb_id, imdb_id=imdb_id)),
            tmdb_id=tmdb_id,
            imdb_id=imdb_id,
            poster=image_url(detail.get("poster_path"), tmdb.image_url),
            backdrop=image_url(detail.get("backdrop_path"), tmdb.backdrop_url),
            year=year_of(detail.get("release_date")),
            plot=detail.get("overview") or None,
            tags=genre_names(detail),
            duration=runtime if isinstance(runtime, int) and runtime > 0 else None,
            actors=cast_members(detail, tmdb.image_url),
            recommendations=self._previews(recommendations),
        )

    async def _load_season(self, tmdb_id: str, season: int) -> list[EpisodeInfo]:
        season_detail = await self._tmdb.tv_season(tmdb_id, season)
        if season_detail is None:
            log.info("vidfast_season_missing", tmdb_id=tmdb_id, season=season)
            return []

        episodes: list[EpisodeInfo] = []
        for ep in season_detail.get("episodes") or []:
            number = ep.get("episode_number") if isinstance(ep, dict) else None
            if not isinstance(number, int):
                continue
            ref = EpisodeRef(tmdb_id=tmdb_id, season=season, episode=number)
            episodes.append(
                EpisodeInfo(
                    data=encode_media_ref(ref),
                    season=season,
                    episode=number,
                    name=ep.get("name") or None,
                    poster=image_url(ep.get("still_path"), self._config.tmdb.image_url),
                    description=ep.get("overview") or None,
                    air_date=ep.get("air_date") or None,
                )
            )
        return episodes

    async def _load_series(self, tmdb_id: str) -> SeriesDetail | None:
        detail = await self._tmdb.tv_detail(tmdb_id)
        if detail is None:
            return None
        name = detail.get("name") or detail.get("original_name")
        if not name:
            return None

        # Season 0 holds specials.
        season_numbers = [
            s["season_number"]
            for s in detail.get("seasons") or []
            if isinstance(s, dict)
            and isinstance(s.get("season_number"), int)
            and s["season_number"] != 0
        ]
        per_season = await asyncio.gather(
            *(self._load_season(tmdb_id, n) for n in season_numbers)
        )
        episodes = [ep for season in per_season for ep in season]

        tmdb = self._config.tmdb
        recommendations = (detail.get("recommendations") or {}).get("results") or []
        return SeriesDetail(
            name=name,
            url=f"{self.main_url}/tv/{tmdb_id}",
            tmdb_id=tmdb_id,
            episodes=episodes,
            imdb_id=imdb_id_of(detail),
            poster=image_url(detail.get("poster_path"), tmdb.image_url),
            backdrop=image_url(detail.get("backdrop_path"), tmdb.backdrop_url),
            year=year_of(detail.get("first_air_date")),
            plot=detail.get("overview") or None,
            tags=genre_names(detail),
            status=show_status(detail.get("status")),
            actors=cast_members(detail, tmdb.image_url),
            recommendations=self._previews(recommendations),
        )

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    async def resolve_links(self, data: str) -> LinkResolution | None:
        """Decode link data and resolve it. ``None`` for undecodable data."""
        try:
            ref = decode_media_ref(data)
        except InvalidLinkDataError as e:
            log.warning("vidfast_invalid_link_data", data=data, error=str(e))
            return None
        return await self._resolver.resolve(ref)

    async def load_links(
        self,
        data: str,
        subtitle_callback: SubtitleCallback,
        callback: StreamCallback,
    ) -> bool:
        """Push every stream and subtitle for *data* into the host's sinks.

        Returns ``False`` only when *data* cannot be decoded; finding no
        streams is still a success.
        """
        resolution = await self.resolve_links(data)
        if resolution is None:
            return False
        for subtitle in resolution.subtitles:
            subtitle_callback(subtitle)
        for stream in resolution.streams:
            callback(stream)
        return True
