"""Generic embed extractor.

Stands in for the host's "load extractor" capability: given an embed page
URL it returns whatever playable streams the page exposes, without any
site-specific API knowledge.

1. A URL that already serves video (``video/*`` or an HLS content type) is
   returned as is.
2. Otherwise the HTML is searched for player configs, packed scripts and
   bare ``.m3u8``/``.mp4`` URLs (see ``_video_extract``).
"""

from __future__ import annotations

from urllib.parse import urlparse

from vidfast.domain.entities.media import ResolvedStream, StreamQuality
from vidfast.domain.results import ErrorKind, StepResult
from vidfast.infrastructure.http.base import HttpxStepClient

from ._video_extract import extract_video_urls

_STEP = "embed_extract"

_HLS_CONTENT_TYPES = ("application/vnd.apple.mpegurl", "application/x-mpegurl")


def extract_domain(url: str) -> str:
    """Second-level domain of *url* (``"vidfast"`` for ``https://vidfast.pro/x``).

    Returns ``""`` when the URL has fewer than two hostname segments.
    """
    hostname = urlparse(url).hostname or ""
    parts = hostname.split(".")
    return parts[-2] if len(parts) >= 2 else ""


def _is_hls(url: str) -> bool:
    return ".m3u8" in urlparse(url).path.lower()


class EmbedExtractor(HttpxStepClient):
    """Implements ``ExtractorPort`` for JWPlayer-style embed pages."""

    name = "embed"

    async def extract(
        self, url: str, referer: str | None = None
    ) -> StepResult[list[ResolvedStream]]:
        headers = {"Referer": referer} if referer else {}
        fetched = await self._safe_fetch(url, step=_STEP, headers=headers)
        if not fetched.ok:
            return StepResult(failure=fetched.failure)
        resp = fetched.value

        content_type = resp.headers.get("content-type", "").lower()
        if content_type.startswith("video/"):
            self._log.info("embed_direct_video", url=url, content_type=content_type)
            return StepResult.success([ResolvedStream(video_url=str(resp.url))])
        if any(ct in content_type for ct in _HLS_CONTENT_TYPES):
            self._log.info("embed_direct_hls", url=url)
            return StepResult.success(
                [ResolvedStream(video_url=str(resp.url), is_hls=True)]
            )

        urls = extract_video_urls(resp.text)
        if not urls:
            self._log.info("embed_no_video_found", url=url)
            return StepResult.fail(
                _STEP, ErrorKind.MISSING_PATTERN, "no video URL in page", url=url
            )

        stream_headers = {"Referer": referer or url}
        streams = [
            ResolvedStream(
                video_url=video_url,
                headers=stream_headers,
                is_hls=_is_hls(video_url),
                quality=StreamQuality.from_label(video_url),
            )
            for video_url in urls
        ]
        self._log.debug("embed_streams_found", url=url, count=len(streams))
        return StepResult.success(streams)
