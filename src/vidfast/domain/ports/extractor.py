"""Port for the host's generic embed extractor."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vidfast.domain.entities.media import ResolvedStream
from vidfast.domain.results import StepResult


@runtime_checkable
class ExtractorPort(Protocol):
    """Scrapes a known embed-page pattern for playable video URLs."""

    @property
    def name(self) -> str: ...

    async def extract(
        self, url: str, referer: str | None = None
    ) -> StepResult[list[ResolvedStream]]:
        """Return every playable stream found behind *url*.

        A failed result means the page could not be fetched or held no
        recognisable video URL.
        """
        ...
