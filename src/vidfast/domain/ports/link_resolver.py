"""Port for turning a MediaRef into streams and subtitles."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vidfast.domain.entities.media import LinkResolution, MediaRef


@runtime_checkable
class LinkResolverPort(Protocol):
    async def resolve(self, ref: MediaRef) -> LinkResolution:
        """Gather streams and subtitles for *ref*.

        Never raises; failed steps end up in ``LinkResolution.failures``.
        """
        ...
