"""VidFast link resolver.

Turns a MediaRef into stream and subtitle descriptors.  Two strategies:

``scrape`` (default)
    page fetch -> token + API base path -> server list -> one stream
    request per server, sequentially.  Servers that fail are skipped,
    never retried.
``extractor``
    hand the canonical embed URL to the generic extractor.

Subtitle search runs after either strategy and does not depend on it.
``resolve`` never raises: every dropped unit of work is logged and
recorded in ``LinkResolution.failures``.
"""

from __future__ import annotations

import httpx

from vidfast.domain.entities.media import (
    LinkResolution,
    MediaRef,
    MovieRef,
    ServerEntry,
    StreamDescriptor,
    StreamQuality,
)
from vidfast.domain.ports.extractor import ExtractorPort
from vidfast.domain.ports.subtitles import SubtitleSearchPort
from vidfast.domain.results import ErrorKind, StepFailure
from vidfast.infrastructure.config.schema import VidFastConfig
from vidfast.infrastructure.extractors.embed import extract_domain
from vidfast.infrastructure.http.base import HttpxStepClient

from .parsing import (
    extract_api_path,
    extract_token,
    parse_servers,
    parse_stream,
    stream_base_path,
)

SOURCE_NAME = "VidFast"


def page_url(main_url: str, ref: MediaRef) -> str:
    """Watch page scraped by the ``scrape`` strategy."""
    if isinstance(ref, MovieRef):
        return f"{main_url}/movie/{ref.tmdb_id}"
    return f"{main_url}/tv/{ref.tmdb_id}/{ref.season}/{ref.episode}"


def embed_url(main_url: str, ref: MediaRef) -> str:
    """Canonical embed URL handed to the generic extractor."""
    if isinstance(ref, MovieRef):
        return f"{main_url}/embed/movie/{ref.tmdb_id}?autoPlay=true"
    return (
        f"{main_url}/embed/tv/{ref.tmdb_id}/{ref.season}/{ref.episode}?autoPlay=true"
    )


class VidFastLinkResolver(HttpxStepClient):
    """Implements ``LinkResolverPort`` for vidfast.pro."""

    name = "vidfast"

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        *,
        config: VidFastConfig,
        subtitles: SubtitleSearchPort | None = None,
        extractor: ExtractorPort | None = None,
    ) -> None:
        super().__init__(http_client)
        self._config = config
        self._subtitles = subtitles
        self._extractor = extractor

    # ------------------------------------------------------------------
    # Public API (LinkResolverPort)
    # ------------------------------------------------------------------

    async def resolve(self, ref: MediaRef) -> LinkResolution:
        resolution = LinkResolution()

        try:
            if self._config.strategy == "extractor":
                await self._resolve_via_extractor(ref, resolution)
            else:
                await self._resolve_via_scrape(ref, resolution)
        except Exception as exc:  # noqa: BLE001
            self._log.exception("vidfast_streams_error", ref=repr(ref))
            self._record(
                resolution, StepFailure("streams", ErrorKind.UNEXPECTED, str(exc))
            )

        try:
            await self._resolve_subtitles(ref, resolution)
        except Exception as exc:  # noqa: BLE001
            self._log.exception("vidfast_subtitles_error", ref=repr(ref))
            self._record(
                resolution, StepFailure("subtitles", ErrorKind.UNEXPECTED, str(exc))
            )

        self._log.info(
            "vidfast_resolved",
            ref=repr(ref),
            streams=len(resolution.streams),
            subtitles=len(resolution.subtitles),
            failures=len(resolution.failures),
        )
        return resolution

    # ------------------------------------------------------------------
    # Strategy: scrape the site's internal API
    # ------------------------------------------------------------------

    async def _resolve_via_scrape(
        self, ref: MediaRef, resolution: LinkResolution
    ) -> None:
        main_url = self._config.main_url
        watch_url = page_url(main_url, ref)

        page = await self._safe_fetch(
            watch_url, step="page", headers={"Referer": main_url}
        )
        if not page.ok:
            self._record(resolution, page.failure)
            return
        html = page.value.text

        token = extract_token(html, self._config.token_pattern)
        if token is None:
            self._log.info("vidfast_token_missing", url=watch_url)
            self._record(
                resolution,
                StepFailure("token", ErrorKind.MISSING_PATTERN, url=watch_url),
            )
            return

        base_path = self._api_base_path(html)
        if base_path is None:
            self._log.info("vidfast_api_path_missing", url=watch_url)
            self._record(
                resolution,
                StepFailure("api_path", ErrorKind.MISSING_PATTERN, url=watch_url),
            )
            return

        servers = await self._fetch_servers(base_path, token, watch_url, resolution)
        stream_path = stream_base_path(
            base_path, self._config.server_segment, self._config.stream_segment
        )
        for server in servers:
            await self._fetch_stream(server, stream_path, watch_url, resolution)

    def _api_base_path(self, html: str) -> str | None:
        """Pinned ``api_path`` from config, else the path found in the page."""
        if self._config.api_path:
            return self._config.api_path
        return extract_api_path(html, self._config.api_path_pattern)

    async def _fetch_servers(
        self,
        base_path: str,
        token: str,
        referer: str,
        resolution: LinkResolution,
    ) -> list[ServerEntry]:
        url = f"{self._config.main_url}{base_path}{token}"
        result = await self._fetch_json(
            url, step="server_list", headers={"Referer": referer}
        )
        if not result.ok:
            self._record(resolution, result.failure)
            return []

        if not isinstance(result.value, list):
            self._log.warning("vidfast_server_list_unexpected", url=url)
            self._record(
                resolution,
                StepFailure("server_list", ErrorKind.MISSING_FIELD, url=url),
            )
            return []

        servers, malformed = parse_servers(result.value)
        if malformed:
            self._log.info("vidfast_servers_malformed", count=malformed, url=url)
            self._record(
                resolution,
                StepFailure(
                    "server_list",
                    ErrorKind.MISSING_FIELD,
                    f"{malformed} malformed server entries",
                    url=url,
                ),
            )
        self._log.debug("vidfast_servers_found", count=len(servers))
        return servers

    async def _fetch_stream(
        self,
        server: ServerEntry,
        stream_path: str,
        referer: str,
        resolution: LinkResolution,
    ) -> None:
        url = f"{self._config.main_url}{stream_path}{server.token}"
        result = await self._fetch_json(
            url, step="stream", headers={"Referer": referer}
        )
        if not result.ok:
            self._record(resolution, result.failure)
            return

        manifest_url, tracks = parse_stream(result.value)
        if manifest_url is None:
            self._log.info("vidfast_stream_url_missing", server=server.display_name)
            self._record(
                resolution,
                StepFailure(
                    "stream", ErrorKind.MISSING_FIELD, server.display_name, url=url
                ),
            )
            return

        resolution.streams.append(
            StreamDescriptor(
                source_label=f"{SOURCE_NAME} - {server.display_name}",
                url=manifest_url,
                is_m3u8=not manifest_url.lower().split("?")[0].endswith(".mp4"),
                quality=StreamQuality.from_label(server.display_name),
                referer=self._config.main_url,
            )
        )
        for track in tracks:
            resolution.add_subtitle(track)

    # ------------------------------------------------------------------
    # Strategy: delegate to the generic extractor
    # ------------------------------------------------------------------

    async def _resolve_via_extractor(
        self, ref: MediaRef, resolution: LinkResolution
    ) -> None:
        if self._extractor is None:
            self._log.warning("vidfast_extractor_not_configured")
            self._record(
                resolution,
                StepFailure("extractor", ErrorKind.UNEXPECTED, "no extractor"),
            )
            return

        url = embed_url(self._config.main_url, ref)
        result = await self._extractor.extract(url, referer=self._config.main_url)
        if not result.ok:
            self._record(resolution, result.failure)
            return

        for stream in result.value:
            host = extract_domain(stream.video_url) or self._extractor.name
            resolution.streams.append(
                StreamDescriptor(
                    source_label=f"{SOURCE_NAME} - {host}",
                    url=stream.video_url,
                    is_m3u8=stream.is_hls,
                    quality=stream.quality,
                    referer=stream.headers.get("Referer", self._config.main_url),
                )
            )

    # ------------------------------------------------------------------
    # Subtitles
    # ------------------------------------------------------------------

    async def _resolve_subtitles(
        self, ref: MediaRef, resolution: LinkResolution
    ) -> None:
        if self._subtitles is None:
            return
        result = await self._subtitles.search(ref)
        if not result.ok:
            self._record(resolution, result.failure)
            return
        for subtitle in result.value:
            resolution.add_subtitle(subtitle)

    @staticmethod
    def _record(resolution: LinkResolution, failure: StepFailure | None) -> None:
        if failure is not None:
            resolution.failures.append(failure)

