"""Video URL extraction from embed page HTML.

Embed players usually expose their sources in one of three shapes:
a JWPlayer-style ``sources:[{file:"..."}]`` config, a Dean Edwards packed
``eval(function(p,a,c,k,e,d)...)`` block hiding that config, or a bare
quoted ``.m3u8``/``.mp4`` URL in an inline script.
"""

from __future__ import annotations

import re

_PACKED_START_RE = re.compile(
    r"eval\s*\(\s*function\s*\(\s*p\s*,\s*a\s*,\s*c\s*,\s*k\s*,\s*e\s*,\s*d\s*\)"
)
_PACKED_ARGS_RE = re.compile(
    r"}\('(.*?)',\s*(\d+),\s*(\d+),\s*'([^']*)'\s*\.split\('\|'\)",
    re.DOTALL,
)
_PACKED_CHUNK = 65_536

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

_PLAYER_URL_RES = (
    re.compile(r"""\bfile\s*:\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)"""),
    re.compile(
        r"""\b(?:source|src)\s*:\s*["'](https?://[^"']+\.(?:m3u8|mp4)[^"']*)"""
    ),
)
_QUOTED_URL_RE = re.compile(
    r"""["'](https?://[^"'\s]+\.(?:m3u8|mp4)(?:\?[^"'\s]*)?)["']"""
)

# Artifacts that look like media URLs but never are.
_SKIP_MARKERS = ("thumbnail", "track", "preview", "sprite")


def _to_base(num: int, radix: int) -> str:
    if num < radix:
        return _DIGITS[num]
    return _to_base(num // radix, radix) + _DIGITS[num % radix]


def unpack_packed_js(packed: str) -> str | None:
    """Unpack one Dean Edwards packed script.

    Format: eval(function(p,a,c,k,e,d){...}('payload',base,count,'dict'.split('|')))
    Every base-N word in the payload is replaced by its dictionary entry.
    """
    match = _PACKED_ARGS_RE.search(packed)
    if not match:
        return None

    payload, radix, count, words = match.groups()
    base = int(radix)
    if not 2 <= base <= len(_DIGITS):
        return None
    keywords = words.split("|")
    keywords += [""] * (int(count) - len(keywords))

    lookup = {_to_base(i, base): word for i, word in enumerate(keywords) if word}

    return re.sub(r"\b\w+\b", lambda m: lookup.get(m.group(0), m.group(0)), payload)


def _is_media_url(url: str) -> bool:
    lowered = url.lower()
    return not any(marker in lowered for marker in _SKIP_MARKERS)


def _urls_in(text: str) -> list[str]:
    normalized = text.replace("\\/", "/").replace("\\'", "'").replace('\\"', '"')
    found: list[str] = []
    for pattern in (*_PLAYER_URL_RES, _QUOTED_URL_RE):
        found.extend(m.group(1) for m in pattern.finditer(normalized))
    return found


def extract_video_urls(html: str) -> list[str]:
    """Return every playable URL found in *html*, first occurrence first."""
    candidates: list[str] = []

    for start in _PACKED_START_RE.finditer(html):
        chunk = html[start.start() : start.start() + _PACKED_CHUNK]
        unpacked = unpack_packed_js(chunk)
        if unpacked:
            candidates.extend(_urls_in(unpacked))

    candidates.extend(_urls_in(html))

    seen: set[str] = set()
    urls: list[str] = []
    for url in candidates:
        if url in seen or not _is_media_url(url):
            continue
        seen.add(url)
        urls.append(url)
    return urls
