"""Client for the remote paginated catalog API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from ..endpoints import EndpointConfig
from ..utils import extract_items

logger = logging.getLogger(__name__)

SEASONS_PATH = "/api/seasons/{real_id}"


@dataclass(slots=True)
class PageFetch:
    """Raw records of one listing page and whether the request succeeded."""

    items: list[Any] = field(default_factory=list)
    fetched: bool = True


class RemoteSourceClient:
    """Read-only access to listing pages and per-series season payloads.

    Requests are never retried: a failure is reported as an empty result and
    the caller decides how to treat it. Timeouts come from the shared
    ``httpx.AsyncClient``.
    """

    def __init__(self, http_client: httpx.AsyncClient):
        self._client = http_client

    async def fetch_page(self, endpoint: EndpointConfig, page: int) -> PageFetch:
        """Fetch one page of ``endpoint``."""

        try:
            response = await self._client.get(endpoint.path, params={"page": page})
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning(
                "Failed to fetch %s page %s: %s", endpoint.path, page, exc
            )
            return PageFetch(items=[], fetched=False)

        try:
            payload = response.json()
        except ValueError:
            logger.warning("Unexpected non-JSON response for %s page %s", endpoint.path, page)
            return PageFetch(items=[], fetched=False)

        return PageFetch(items=extract_items(payload), fetched=True)

    async def fetch_seasons(self, real_id: Any) -> Any | None:
        """Return the seasons payload for a series, or ``None`` when unavailable."""

        url = SEASONS_PATH.format(real_id=real_id)
        try:
            response = await self._client.get(url)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.debug("Seasons lookup failed for %s: %s", real_id, exc)
            return None

        try:
            payload = response.json()
        except ValueError:
            logger.debug("Seasons payload for %s is not JSON", real_id)
            return None
        if payload is None or payload == "":
            return None
        return payload
