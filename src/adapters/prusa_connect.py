"""Prusa Connect HTTP adapter.

Implements the core PrinterSourcePort on top of an aiohttp session. The
printer list is paginated; a cycle either gets the whole fleet or fails.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import aiohttp

from adapters.prusa_mapper import map_printer
from core.errors import AuthenticationError, FetchError
from core.models import PrinterSnapshot

LOGGER = logging.getLogger(__name__)

BASE_URL = "https://connect.prusa3d.com"


class PrusaConnectClient:
    """Thin Prusa Connect client authenticated with a session cookie."""

    def __init__(
        self,
        session: aiohttp.ClientSession,
        session_cookie: Optional[str],
        base_url: str = BASE_URL,
    ) -> None:
        # Fail fast: polling without a session cookie only yields 401s.
        if not session_cookie:
            raise AuthenticationError("Missing PRUSA_CONNECT_COOKIE")
        self._session = session
        self._cookie = session_cookie
        self._base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {"Cookie": f"SESSID={self._cookie}"}

    async def _get_json(self, path: str, params: Optional[dict[str, Any]] = None) -> Any:
        url = f"{self._base_url}{path}"
        try:
            async with self._session.get(url, params=params, headers=self._headers()) as response:
                if response.status >= 400:
                    body = await response.text()
                    raise FetchError(f"Prusa Connect error {response.status}: {body[:200]}")
                return await response.json(content_type=None)
        except aiohttp.ClientError as exc:
            raise FetchError(f"Request to {path} failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise FetchError(f"Request to {path} timed out") from exc
        except ValueError as exc:
            raise FetchError(f"Invalid JSON from {path}") from exc

    async def fetch_page(self, offset: int) -> tuple[list[dict[str, Any]], dict[str, Any]]:
        """Return (printers, pager) for one page of the printer list."""

        payload = await self._get_json("/app/printers", params={"offset": offset})
        if not isinstance(payload, dict):
            raise FetchError("Unexpected printer list payload")
        printers = payload.get("printers") or []
        pager = payload.get("pager") or {}
        if not isinstance(printers, list) or not isinstance(pager, dict):
            raise FetchError("Unexpected printer list payload")
        return printers, pager

    async def fetch_all(self) -> list[PrinterSnapshot]:
        """Fetch every page of the printer list.

        Paging stops on an empty page, or once the server reports a page
        limit covering the whole total.
        """

        offset = 0
        printers: list[PrinterSnapshot] = []
        while True:
            page, pager = await self.fetch_page(offset)
            if not page:
                break
            printers.extend(map_printer(raw) for raw in page)

            try:
                limit = int(pager.get("limit", 0))
                total = int(pager.get("total", 0))
            except (TypeError, ValueError) as exc:
                raise FetchError("Malformed pager in printer list") from exc
            if limit >= total:
                break
            offset += limit or len(page)

        LOGGER.debug("Fetched %s printers", len(printers))
        return printers

    async def fetch_preview(self, preview_url: Optional[str]) -> Optional[bytes]:
        """Download a job preview image, or None when the job has none."""

        if not preview_url:
            return None
        url = f"{self._base_url}{preview_url}"
        try:
            async with self._session.get(url, headers=self._headers()) as response:
                if response.status >= 400:
                    raise FetchError(f"Preview request failed with {response.status}")
                data = await response.read()
        except aiohttp.ClientError as exc:
            raise FetchError(f"Preview request failed: {exc}") from exc
        except asyncio.TimeoutError as exc:
            raise FetchError("Preview request timed out") from exc
        return data or None
