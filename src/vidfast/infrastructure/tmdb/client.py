"""TMDB API client (async httpx implementation)."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from vidfast.infrastructure.config.schema import TmdbConfig

log = structlog.get_logger(__name__)

_DETAIL_APPEND = "credits,recommendations,external_ids"


class HttpxTmdbClient:
    """Async TMDB client using httpx.

    Implements ``TmdbClientPort`` from domain.ports.tmdb.  Every method
    returns raw TMDB JSON; failures are logged and surface as ``None`` or an
    empty list.
    """

    def __init__(self, *, config: TmdbConfig, http_client: httpx.AsyncClient) -> None:
        self._config = config
        self._http = http_client

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _params(self, **extra: Any) -> dict[str, Any]:
        """Build query params with api_key and the configured locale."""
        return {
            "api_key": self._config.api_key,
            "language": self._config.language,
            **extra,
        }

    async def _get(self, path: str, **extra: Any) -> dict[str, Any] | None:
        """GET request with error handling. Returns parsed JSON or None."""
        if not self._config.api_key:
            log.error("tmdb_api_key_missing", path=path)
            return None

        url = f"{self._config.api_url}{path}"
        try:
            resp = await self._http.get(url, params=self._params(**extra))
            if resp.status_code == 401:
                log.error("tmdb_api_key_invalid", status=401)
                return None
            if resp.status_code == 404:
                log.debug("tmdb_resource_not_found", path=path)
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPStatusError:
            log.warning("tmdb_http_error", path=path, exc_info=True)
            return None
        except httpx.HTTPError:
            log.warning("tmdb_network_error", path=path, exc_info=True)
            return None
        except ValueError:
            log.warning("tmdb_invalid_json", path=path)
            return None

        if not isinstance(data, dict):
            log.warning("tmdb_unexpected_payload", path=path)
            return None
        return data

    @staticmethod
    def _results(data: dict[str, Any] | None) -> list[dict[str, Any]]:
        if data is None:
            return []
        results = data.get("results")
        if not isinstance(results, list):
            return []
        return [r for r in results if isinstance(r, dict)]

    # ------------------------------------------------------------------
    # Public API (TmdbClientPort)
    # ------------------------------------------------------------------

    async def list_page(
        self, path: str, page: int = 1
    ) -> tuple[list[dict[str, Any]], int]:
        """Fetch one page of a list endpoint (``/movie/popular`` etc.)."""
        data = await self._get(path, page=page)
        if data is None:
            return [], 0
        total_pages = data.get("total_pages")
        if not isinstance(total_pages, int):
            total_pages = 1
        return self._results(data), total_pages

    async def search_movies(self, query: str, page: int = 1) -> list[dict[str, Any]]:
        """Search movies by query."""
        data = await self._get("/search/movie", query=query, page=page)
        return self._results(data)

    async def search_tv(self, query: str, page: int = 1) -> list[dict[str, Any]]:
        """Search TV shows by query."""
        data = await self._get("/search/tv", query=query, page=page)
        return self._results(data)

    async def movie_detail(self, tmdb_id: str) -> dict[str, Any] | None:
        return await self._get(f"/movie/{tmdb_id}", append_to_response=_DETAIL_APPEND)

    async def tv_detail(self, tmdb_id: str) -> dict[str, Any] | None:
        return await self._get(f"/tv/{tmdb_id}", append_to_response=_DETAIL_APPEND)

    async def tv_season(self, tmdb_id: str, season: int) -> dict[str, Any] | None:
        """Season detail with its episode list."""
        return await self._get(f"/tv/{tmdb_id}/season/{season}")
