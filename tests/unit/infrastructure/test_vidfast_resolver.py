"""Tests for VidFastLinkResolver (scrape and extractor strategies)."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest
import respx

from vidfast.domain.entities.media import (
    EpisodeRef,
    MovieRef,
    ResolvedStream,
    StreamDescriptor,
    StreamQuality,
    SubtitleDescriptor,
)
from vidfast.domain.results import ErrorKind, StepResult
from vidfast.infrastructure.config.schema import VidFastConfig
from vidfast.infrastructure.vidfast.resolver import (
    VidFastLinkResolver,
    embed_url,
    page_url,
)

_MAIN = "https://vidfast.pro"
_API_PATH = "/hezushon/cu/abc/krI/"
_STREAM_PREFIX = f"{_MAIN}/hezushon/cu/abc/L5aN/"
_MOVIE_PAGE = f"{_MAIN}/movie/550"
_SERVER_LIST = f"{_MAIN}{_API_PATH}abc123"
_PLAYLIST = "https://cdn.example/playlist.m3u8"

_PAGE_HTML = (
    '<html><script>var t = {"en":"abc123"};</script>'
    f'<script>fetch("{_API_PATH}" + t.en)</script></html>'
)

_MOVIE = MovieRef(tmdb_id="550", imdb_id="tt0137523")
_EPISODE = EpisodeRef(tmdb_id="1399", season=1, episode=2)


def _resolver(
    *,
    subtitles: AsyncMock | None = None,
    extractor: AsyncMock | None = None,
    **config: object,
) -> VidFastLinkResolver:
    return VidFastLinkResolver(
        httpx.AsyncClient(),
        config=VidFastConfig(main_url=_MAIN, **config),
        subtitles=subtitles,
        extractor=extractor,
    )


def _subtitles(*subs: SubtitleDescriptor) -> AsyncMock:
    mock = AsyncMock()
    mock.search.return_value = StepResult.success(list(subs))
    return mock


# ---------------------------------------------------------------------------
# URL builders
# ---------------------------------------------------------------------------


class TestUrls:
    def test_movie_page_url(self) -> None:
        assert page_url(_MAIN, _MOVIE) == "https://vidfast.pro/movie/550"

    def test_episode_page_url(self) -> None:
        assert page_url(_MAIN, _EPISODE) == "https://vidfast.pro/tv/1399/1/2"

    def test_movie_embed_url(self) -> None:
        assert (
            embed_url(_MAIN, _MOVIE)
            == "https://vidfast.pro/embed/movie/550?autoPlay=true"
        )

    def test_episode_embed_url(self) -> None:
        assert (
            embed_url(_MAIN, _EPISODE)
            == "https://vidfast.pro/embed/tv/1399/1/2?autoPlay=true"
        )


# ---------------------------------------------------------------------------
# Scrape strategy
# ---------------------------------------------------------------------------


class TestScrape:
    def test_name(self) -> None:
        assert _resolver().name == "vidfast"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_single_server_end_to_end(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[{"name": "Server 1", "data": "xyz"}])
        respx.get(f"{_STREAM_PREFIX}xyz").respond(json={"url": _PLAYLIST})

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == [
            StreamDescriptor(
                source_label="VidFast - Server 1",
                url=_PLAYLIST,
                is_m3u8=True,
                quality=StreamQuality.UNKNOWN,
                referer=_MAIN,
            )
        ]
        assert resolution.failures == []

    @respx.mock
    @pytest.mark.asyncio()
    async def test_episode_uses_tv_page(self) -> None:
        page = respx.get(f"{_MAIN}/tv/1399/1/2").respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[{"name": "Alpha", "data": "t1"}])
        respx.get(f"{_STREAM_PREFIX}t1").respond(json={"url": _PLAYLIST})

        resolution = await _resolver().resolve(_EPISODE)

        assert page.called
        assert [s.source_label for s in resolution.streams] == ["VidFast - Alpha"]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_requests_carry_referer(self) -> None:
        page = respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        servers = respx.get(_SERVER_LIST).respond(
            json=[{"name": "Alpha", "data": "t1"}]
        )
        stream = respx.get(f"{_STREAM_PREFIX}t1").respond(json={"url": _PLAYLIST})

        await _resolver().resolve(_MOVIE)

        assert page.calls.last.request.headers["Referer"] == _MAIN
        assert servers.calls.last.request.headers["Referer"] == _MOVIE_PAGE
        assert stream.calls.last.request.headers["Referer"] == _MOVIE_PAGE

    @respx.mock
    @pytest.mark.asyncio()
    async def test_missing_token_stops_after_page(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text="<html>no token</html>")

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == []
        assert len(respx.calls) == 1
        assert resolution.failures[0].step == "token"
        assert resolution.failures[0].kind is ErrorKind.MISSING_PATTERN

    @respx.mock
    @pytest.mark.asyncio()
    async def test_missing_api_path(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text='{"en":"abc123"}')

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.failures[0].step == "api_path"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_pinned_api_path_wins(self) -> None:
        html = '{"en":"abc123"} fetch("/hezushon/cu/stale/krI/")'
        respx.get(_MOVIE_PAGE).respond(200, text=html)
        pinned = respx.get(f"{_MAIN}/hezushon/cu/pinned/krI/abc123").respond(
            json=[{"name": "Alpha", "data": "t1"}]
        )
        stream = respx.get(f"{_MAIN}/hezushon/cu/pinned/L5aN/t1").respond(
            json={"url": _PLAYLIST}
        )

        resolution = await _resolver(api_path="hezushon/cu/pinned/krI").resolve(
            _MOVIE
        )

        assert pinned.called
        assert stream.called
        assert len(resolution.streams) == 1

    @respx.mock
    @pytest.mark.asyncio()
    async def test_page_error_yields_nothing(self) -> None:
        respx.get(_MOVIE_PAGE).respond(503)

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.failures[0].kind is ErrorKind.HTTP_STATUS
        assert resolution.failures[0].url == _MOVIE_PAGE

    @respx.mock
    @pytest.mark.asyncio()
    async def test_page_network_error(self) -> None:
        respx.get(_MOVIE_PAGE).mock(side_effect=httpx.ConnectError("refused"))

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.failures[0].kind is ErrorKind.NETWORK

    @respx.mock
    @pytest.mark.asyncio()
    async def test_server_list_not_a_list(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json={"error": "bad token"})

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.failures[0].kind is ErrorKind.MISSING_FIELD

    @respx.mock
    @pytest.mark.asyncio()
    async def test_server_list_invalid_json(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(200, text="<html>blocked</html>")

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.failures[0].kind is ErrorKind.DECODE

    @respx.mock
    @pytest.mark.asyncio()
    async def test_empty_server_list(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[])

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.is_empty
        assert resolution.failures == []

    @respx.mock
    @pytest.mark.asyncio()
    async def test_malformed_servers_get_no_request(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(
            json=[
                {"name": "Alpha", "data": "t1"},
                {"name": "Broken"},
                {"name": "Bravo", "data": "t2"},
                "junk",
                {"name": "Charlie", "data": "t3"},
            ]
        )
        streams = respx.get(url__startswith=_STREAM_PREFIX).respond(
            json={"url": _PLAYLIST}
        )

        resolution = await _resolver().resolve(_MOVIE)

        assert streams.call_count == 3
        assert len(resolution.streams) == 3
        assert resolution.failures[0].step == "server_list"
        assert "2 malformed" in resolution.failures[0].detail

    @respx.mock
    @pytest.mark.asyncio()
    async def test_failing_servers_are_skipped_in_order(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(
            json=[
                {"name": "Alpha", "data": "t1"},
                {"name": "Bravo", "data": "t2"},
                {"name": "Charlie", "data": "t3"},
                {"name": "Delta", "data": "t4"},
            ]
        )
        respx.get(f"{_STREAM_PREFIX}t1").respond(json={"url": "https://a/1.m3u8"})
        respx.get(f"{_STREAM_PREFIX}t2").respond(500)
        respx.get(f"{_STREAM_PREFIX}t3").respond(json={"message": "no url"})
        respx.get(f"{_STREAM_PREFIX}t4").respond(json={"url": "https://d/4.m3u8"})

        resolution = await _resolver().resolve(_MOVIE)

        assert [s.source_label for s in resolution.streams] == [
            "VidFast - Alpha",
            "VidFast - Delta",
        ]
        assert [f.step for f in resolution.failures] == ["stream", "stream"]
        assert resolution.failures[0].kind is ErrorKind.HTTP_STATUS
        assert resolution.failures[1].kind is ErrorKind.MISSING_FIELD

    @respx.mock
    @pytest.mark.asyncio()
    async def test_unrequestable_token_does_not_drop_later_servers(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(
            json=[
                {"name": "Alpha", "data": "bad\ntoken"},
                {"name": "Bravo", "data": "ok"},
            ]
        )
        respx.get(f"{_STREAM_PREFIX}ok").respond(json={"url": _PLAYLIST})

        resolution = await _resolver().resolve(_MOVIE)

        assert [s.source_label for s in resolution.streams] == ["VidFast - Bravo"]
        assert [f.step for f in resolution.failures] == ["stream"]
        assert resolution.failures[0].kind is ErrorKind.NETWORK

    @respx.mock
    @pytest.mark.asyncio()
    async def test_mp4_and_quality_labels(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[{"name": "Vega 1080p", "data": "t1"}])
        respx.get(f"{_STREAM_PREFIX}t1").respond(
            json={"url": "https://cdn.example/movie.mp4?sig=1"}
        )

        resolution = await _resolver().resolve(_MOVIE)

        stream = resolution.streams[0]
        assert stream.is_m3u8 is False
        assert stream.quality is StreamQuality.HD_1080P

    @respx.mock
    @pytest.mark.asyncio()
    async def test_inline_tracks_become_subtitles(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(
            json=[{"name": "Alpha", "data": "t1"}, {"name": "Bravo", "data": "t2"}]
        )
        tracks = [{"file": "https://s/en.vtt", "label": "English"}]
        respx.get(f"{_STREAM_PREFIX}t1").respond(
            json={"url": _PLAYLIST, "tracks": tracks}
        )
        respx.get(f"{_STREAM_PREFIX}t2").respond(
            json={"url": _PLAYLIST, "tracks": tracks}
        )

        resolution = await _resolver().resolve(_MOVIE)

        assert resolution.subtitles == [
            SubtitleDescriptor("English", "https://s/en.vtt")
        ]

    @respx.mock
    @pytest.mark.asyncio()
    async def test_repeat_calls_are_independent(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[{"name": "Alpha", "data": "t1"}])
        respx.get(f"{_STREAM_PREFIX}t1").respond(json={"url": _PLAYLIST})
        resolver = _resolver(
            subtitles=_subtitles(SubtitleDescriptor("English", "https://s/en.vtt"))
        )

        first = await resolver.resolve(_MOVIE)
        second = await resolver.resolve(_MOVIE)

        assert first == second
        assert len(second.streams) == 1
        assert len(second.subtitles) == 1


# ---------------------------------------------------------------------------
# Subtitles alongside streams
# ---------------------------------------------------------------------------


class TestSubtitleIndependence:
    @respx.mock
    @pytest.mark.asyncio()
    async def test_subtitles_survive_stream_failure(self) -> None:
        respx.get(_MOVIE_PAGE).respond(500)
        subtitles = _subtitles(SubtitleDescriptor("English", "https://s/en.srt"))

        resolution = await _resolver(subtitles=subtitles).resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.subtitles == [
            SubtitleDescriptor("English", "https://s/en.srt")
        ]
        subtitles.search.assert_awaited_once_with(_MOVIE)

    @respx.mock
    @pytest.mark.asyncio()
    async def test_streams_survive_subtitle_failure(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[{"name": "Alpha", "data": "t1"}])
        respx.get(f"{_STREAM_PREFIX}t1").respond(json={"url": _PLAYLIST})
        subtitles = AsyncMock()
        subtitles.search.return_value = StepResult.fail(
            "subtitle_search", ErrorKind.NETWORK, "timeout"
        )

        resolution = await _resolver(subtitles=subtitles).resolve(_MOVIE)

        assert len(resolution.streams) == 1
        assert resolution.subtitles == []
        assert resolution.failures[0].step == "subtitle_search"

    @respx.mock
    @pytest.mark.asyncio()
    async def test_subtitle_exception_is_contained(self) -> None:
        respx.get(_MOVIE_PAGE).respond(200, text=_PAGE_HTML)
        respx.get(_SERVER_LIST).respond(json=[{"name": "Alpha", "data": "t1"}])
        respx.get(f"{_STREAM_PREFIX}t1").respond(json={"url": _PLAYLIST})
        subtitles = AsyncMock()
        subtitles.search.side_effect = RuntimeError("boom")

        resolution = await _resolver(subtitles=subtitles).resolve(_MOVIE)

        assert len(resolution.streams) == 1
        assert resolution.failures[-1].kind is ErrorKind.UNEXPECTED
        assert resolution.failures[-1].step == "subtitles"


# ---------------------------------------------------------------------------
# Extractor strategy
# ---------------------------------------------------------------------------


class TestExtractorStrategy:
    @pytest.mark.asyncio()
    async def test_delegates_embed_url(self) -> None:
        extractor = MagicMock()
        extractor.name = "embed"
        extractor.extract = AsyncMock(
            return_value=StepResult.success(
                [
                    ResolvedStream(
                        video_url="https://cdn.streamhost.net/hls/master.m3u8",
                        headers={"Referer": _MAIN},
                        is_hls=True,
                        quality=StreamQuality.HD_720P,
                    )
                ]
            )
        )

        resolution = await _resolver(
            extractor=extractor, strategy="extractor"
        ).resolve(_EPISODE)

        extractor.extract.assert_awaited_once_with(
            "https://vidfast.pro/embed/tv/1399/1/2?autoPlay=true", referer=_MAIN
        )
        assert resolution.streams == [
            StreamDescriptor(
                source_label="VidFast - streamhost",
                url="https://cdn.streamhost.net/hls/master.m3u8",
                is_m3u8=True,
                quality=StreamQuality.HD_720P,
                referer=_MAIN,
            )
        ]

    @pytest.mark.asyncio()
    async def test_extractor_failure_is_recorded(self) -> None:
        extractor = MagicMock()
        extractor.name = "embed"
        extractor.extract = AsyncMock(
            return_value=StepResult.fail("embed_extract", ErrorKind.MISSING_PATTERN)
        )
        subtitles = _subtitles(SubtitleDescriptor("English", "https://s/en.srt"))

        resolution = await _resolver(
            extractor=extractor, subtitles=subtitles, strategy="extractor"
        ).resolve(_MOVIE)

        assert resolution.streams == []
        assert len(resolution.subtitles) == 1
        assert resolution.failures[0].kind is ErrorKind.MISSING_PATTERN

    @pytest.mark.asyncio()
    async def test_missing_extractor(self) -> None:
        resolution = await _resolver(strategy="extractor").resolve(_MOVIE)
        assert resolution.streams == []
        assert resolution.failures[0].step == "extractor"

    @pytest.mark.asyncio()
    async def test_extractor_exception_is_contained(self) -> None:
        extractor = MagicMock()
        extractor.name = "embed"
        extractor.extract = AsyncMock(side_effect=ValueError("kaboom"))

        resolution = await _resolver(
            extractor=extractor, strategy="extractor"
        ).resolve(_MOVIE)

        assert resolution.streams == []
        assert resolution.failures[0].kind is ErrorKind.UNEXPECTED
