"""Bounded-concurrency season lookups for series items."""

from __future__ import annotations

import asyncio
import logging

from ..models import CatalogItem
from .source import RemoteSourceClient

logger = logging.getLogger(__name__)


class EnrichmentBatcher:
    """Attach season payloads to series items, ``concurrency_limit`` at a time.

    Series are processed in fixed-size batches. Lookups inside a batch run
    concurrently and the whole batch completes before the next one starts,
    so at most ``concurrency_limit`` requests are in flight.
    """

    def __init__(self, source: RemoteSourceClient, concurrency_limit: int):
        if concurrency_limit < 1:
            raise ValueError("concurrency_limit must be at least 1")
        self._source = source
        self._concurrency_limit = concurrency_limit

    @property
    def concurrency_limit(self) -> int:
        return self._concurrency_limit

    async def enrich(self, items: list[CatalogItem]) -> list[CatalogItem]:
        series = [item for item in items if item.is_series]
        for start in range(0, len(series), self._concurrency_limit):
            batch = series[start : start + self._concurrency_limit]
            results = await asyncio.gather(
                *(self._source.fetch_seasons(item.real_id) for item in batch),
                return_exceptions=True,
            )
            for item, result in zip(batch, results):
                if isinstance(result, BaseException):
                    logger.warning("Seasons lookup for %s failed: %s", item.id, result)
                    continue
                if result is None:
                    continue
                item.seasons = result
        return items
