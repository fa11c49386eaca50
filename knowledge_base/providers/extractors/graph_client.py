"""Thin async Microsoft Graph REST client over ``httpx``.

Token acquisition is not handled here: a ``token_provider`` coroutine
function returning a bearer token is injected and called once per request,
so callers can plug in any credential flow (or a static token).
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx
import structlog

from knowledge_base.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)

TokenProvider = Callable[[], Awaitable[str]]

_NEXT_LINK = "@odata.nextLink"


def static_token(token: str) -> TokenProvider:
    """Wrap a fixed bearer token as a :data:`TokenProvider`."""

    async def _provide() -> str:
        return token

    return _provide


class GraphClient:
    """Minimal Graph client: JSON GET, text GET and ``@odata.nextLink`` paging.

    Parameters
    ----------
    http_client:
        Shared ``httpx.AsyncClient``; injected for testability.
    token_provider:
        Coroutine function returning a bearer token.
    base_url:
        Graph API root, e.g. ``https://graph.microsoft.com/v1.0``.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider: TokenProvider,
        base_url: str = "https://graph.microsoft.com/v1.0",
    ) -> None:
        self._http = http_client
        self._token_provider = token_provider
        self._base_url = base_url.rstrip("/")

    async def _request(
        self,
        path_or_url: str,
        params: dict[str, str] | None = None,
        accept: str = "application/json",
    ) -> httpx.Response:
        url = path_or_url if path_or_url.startswith("http") else f"{self._base_url}{path_or_url}"
        headers = {
            "Authorization": f"Bearer {await self._token_provider()}",
            "Accept": accept,
        }
        try:
            response = await self._http.get(url, params=params, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise ExtractionError(
                message=f"Graph request failed for {url}: {exc}",
                provider_name="graph",
            ) from exc
        return response

    async def get_json(
        self, path_or_url: str, params: dict[str, str] | None = None
    ) -> dict[str, Any]:
        response = await self._request(path_or_url, params=params)
        return response.json()

    async def get_text(self, path_or_url: str, accept: str = "text/plain") -> str:
        response = await self._request(path_or_url, accept=accept)
        return response.text

    async def iter_pages(
        self, path: str, params: dict[str, str] | None = None
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield the ``value`` list of each page, following ``@odata.nextLink``."""
        page = await self.get_json(path, params=params)
        while True:
            yield page.get("value") or []
            next_link = page.get(_NEXT_LINK)
            if not next_link:
                return
            # nextLink already carries the original query string.
            page = await self.get_json(next_link)
