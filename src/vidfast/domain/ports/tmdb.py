"""Port for TMDB API operations."""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TmdbClientPort(Protocol):
    """Async interface for TMDB API lookups.

    All methods return raw TMDB JSON (or ``None``/empty on failure).
    """

    async def list_page(
        self, path: str, page: int = 1
    ) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of a list endpoint. Returns (results, total_pages)."""
        ...

    async def search_movies(self, query: str, page: int = 1) -> list[dict[str, Any]]:
        ...

    async def search_tv(self, query: str, page: int = 1) -> list[dict[str, Any]]:
        ...

    async def movie_detail(self, tmdb_id: str) -> dict[str, Any] | None:
        """Movie detail with credits, recommendations and external ids."""
        ...

    async def tv_detail(self, tmdb_id: str) -> dict[str, Any] | None:
        """TV detail with credits, recommendations and external ids."""
        ...

    async def tv_season(self, tmdb_id: str, season: int) -> dict[str, Any] | None:
        ...
