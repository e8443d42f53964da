"""Shared base class for httpx-backed adapters.

Every outbound call in the provider is a single best-effort attempt: no
retries, no backoff.  ``_safe_fetch`` and ``_safe_parse_json`` catch the
expected failures at the narrowest scope and turn them into
``StepResult`` failures with structured log lines, so callers can skip the
unit of work and carry on.
"""

from __future__ import annotations

import json
from typing import Any

import httpx
import structlog

from vidfast.domain.results import ErrorKind, StepResult
from vidfast.infrastructure.config.schema import AppConfig


def build_http_client(config: AppConfig) -> httpx.AsyncClient:
    """Create the one AsyncClient shared by all adapters."""
    return httpx.AsyncClient(
        timeout=httpx.Timeout(config.http_timeout_seconds),
        headers={"User-Agent": config.http_user_agent},
        follow_redirects=config.http_follow_redirects,
    )


class HttpxStepClient:
    """Base for adapters that talk to one upstream service.

    Subclasses **must** set ``name``; it prefixes every log event.
    """

    name: str = ""

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client
        self._log = structlog.get_logger(self.name or __name__)

    async def _safe_fetch(
        self,
        url: str,
        *,
        step: str,
        **kwargs: Any,
    ) -> StepResult[httpx.Response]:
        """GET *url*; non-2xx and transport errors become failures."""
        try:
            resp = await self._http.get(url, **kwargs)
            resp.raise_for_status()
            return StepResult.success(resp)
        except httpx.TimeoutException:
            self._log.warning(f"{self.name}_timeout", url=url, step=step)
            return StepResult.fail(step, ErrorKind.NETWORK, "timeout", url=url)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            self._log.warning(
                f"{self.name}_http_error", url=url, status=status, step=step
            )
            return StepResult.fail(
                step, ErrorKind.HTTP_STATUS, f"HTTP {status}", url=url
            )
        except httpx.HTTPError as exc:
            self._log.warning(
                f"{self.name}_fetch_error", url=url, error=str(exc), step=step
            )
            return StepResult.fail(step, ErrorKind.NETWORK, str(exc), url=url)
        except httpx.InvalidURL as exc:
            # Raised while building the request; not an HTTPError subclass.
            self._log.warning(
                f"{self.name}_invalid_url", url=repr(url), error=str(exc), step=step
            )
            return StepResult.fail(step, ErrorKind.NETWORK, str(exc), url=url)

    def _safe_parse_json(
        self,
        response: httpx.Response,
        *,
        step: str,
    ) -> StepResult[Any]:
        """Parse a JSON body with structured error logging."""
        try:
            return StepResult.success(response.json())
        except (json.JSONDecodeError, ValueError):
            self._log.warning(
                f"{self.name}_invalid_json", url=str(response.url), step=step
            )
            return StepResult.fail(
                step, ErrorKind.DECODE, "invalid JSON", url=str(response.url)
            )

    async def _fetch_json(
        self, url: str, *, step: str, **kwargs: Any
    ) -> StepResult[Any]:
        """``_safe_fetch`` followed by ``_safe_parse_json``."""
        fetched = await self._safe_fetch(url, step=step, **kwargs)
        if not fetched.ok:
            return StepResult(failure=fetched.failure)
        return self._safe_parse_json(fetched.value, step=step)
