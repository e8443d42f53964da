"""Port for subtitle search services."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from vidfast.domain.entities.media import MediaRef, SubtitleDescriptor
from vidfast.domain.results import StepResult


@runtime_checkable
class SubtitleSearchPort(Protocol):
    async def search(self, ref: MediaRef) -> StepResult[list[SubtitleDescriptor]]:
        """Find subtitle tracks for a movie or episode."""
        ...
