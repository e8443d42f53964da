"""The capability contract the host application expects from a provider."""

from __future__ import annotations

from typing import Callable, Protocol

from vidfast.domain.entities.catalog import (
    HomePage,
    MainPageSection,
    MetaPreview,
    MovieDetail,
    SeriesDetail,
)
from vidfast.domain.entities.media import StreamDescriptor, SubtitleDescriptor

SubtitleCallback = Callable[[SubtitleDescriptor], None]
StreamCallback = Callable[[StreamDescriptor], None]


class ProviderPort(Protocol):
    """
    Protocol for host providers.

    A provider must:
    - list catalog rows (``main_page_sections`` + ``get_main_page``)
    - search by text
    - load full metadata for one title
    - push playable links for one title/episode into the host's sinks
    """

    name: str

    @property
    def main_page_sections(self) -> list[MainPageSection]: ...

    async def get_main_page(
        self, section: MainPageSection, page: int = 1
    ) -> HomePage: ...

    async def search(self, query: str) -> list[MetaPreview]: ...

    async def load(self, url: str) -> MovieDetail | SeriesDetail | None: ...

    async def load_links(
        self,
        data: str,
        subtitle_callback: SubtitleCallback,
        callback: StreamCallback,
    ) -> bool: ...
