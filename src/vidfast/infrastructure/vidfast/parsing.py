"""Parsers for vidfast.pro pages and internal API payloads.

The embed page is a Next.js app.  Its inline script data carries a page
token (``"en":"..."``) and the client bundle carries the obfuscated API
base path (``/hezushon/cu/<...>/krI/``).  Both shapes change whenever the
site redeploys, so the patterns are configurable.

    server list:  GET {main}{base_path}{token}
                  -> [{"name": "Server 1", "data": "<opaque>"}, ...]
    stream:       GET {main}{base_path with /krI/ -> /L5aN/}{data}
                  -> {"url": "https://.../playlist.m3u8", "tracks": [...]}
"""

from __future__ import annotations

import re
from typing import Any

from vidfast.domain.entities.media import ServerEntry, SubtitleDescriptor


def extract_token(html: str, pattern: str) -> str | None:
    """Return the first capture group of *pattern* in *html*."""
    match = re.search(pattern, html)
    if not match:
        return None
    return match.group(1) or None


def extract_api_path(html: str, pattern: str) -> str | None:
    """Return the obfuscated API base path embedded in *html*."""
    match = re.search(pattern, html)
    if not match:
        return None
    # Next.js escapes slashes inside JSON script blobs.
    return match.group(1).replace("\\/", "/") or None


def stream_base_path(base_path: str, server_segment: str, stream_segment: str) -> str:
    """Swap the server-list segment of *base_path* for the stream segment."""
    return base_path.replace(f"/{server_segment}/", f"/{stream_segment}/")


def parse_servers(payload: Any) -> tuple[list[ServerEntry], int]:
    """Split a server-list payload into well-formed entries and a reject count.

    An entry is well-formed when it is an object with a non-empty string
    ``data`` token.  A missing ``name`` falls back to ``"Server N"``.
    """
    if not isinstance(payload, list):
        return [], 0

    servers: list[ServerEntry] = []
    malformed = 0
    for index, entry in enumerate(payload, start=1):
        if not isinstance(entry, dict):
            malformed += 1
            continue
        token = entry.get("data")
        if not isinstance(token, str) or not token:
            malformed += 1
            continue
        name = entry.get("name")
        display_name = name if isinstance(name, str) and name else f"Server {index}"
        servers.append(ServerEntry(display_name=display_name, token=token))
    return servers, malformed


def parse_inline_tracks(payload: dict[str, Any]) -> list[SubtitleDescriptor]:
    """Subtitle tracks shipped inside a stream response, if any."""
    tracks = payload.get("tracks") or payload.get("subtitles") or []
    if not isinstance(tracks, list):
        return []

    subtitles: list[SubtitleDescriptor] = []
    for track in tracks:
        if not isinstance(track, dict):
            continue
        kind = track.get("kind", "captions")
        if kind not in ("captions", "subtitles", "", None):
            continue
        url = track.get("file") or track.get("url")
        if not isinstance(url, str) or not url:
            continue
        label = track.get("label") or track.get("lang") or "Unknown"
        subtitles.append(SubtitleDescriptor(language_label=str(label), url=url))
    return subtitles


def parse_stream(payload: Any) -> tuple[str | None, list[SubtitleDescriptor]]:
    """Manifest URL and inline subtitle tracks of a stream response."""
    if not isinstance(payload, dict):
        return None, []
    url = payload.get("url")
    if not isinstance(url, str) or not url:
        url = None
    return url, parse_inline_tracks(payload)
