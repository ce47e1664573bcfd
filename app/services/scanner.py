"""Pagination driver for a single remote category."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from ..endpoints import EndpointConfig
from ..models import CatalogItem
from .enrichment import EnrichmentBatcher
from .normalizer import ItemNormalizer
from .source import RemoteSourceClient

logger = logging.getLogger(__name__)


class StopReason(str, Enum):
    """Why a category scan ended."""

    EXHAUSTED = "exhausted"
    EARLY_STOP = "early_stop"
    FETCH_FAILED = "fetch_failed"
    BUDGET = "budget"


@dataclass(slots=True)
class ScanResult:
    """Items collected from one endpoint and how the scan ended."""

    endpoint: EndpointConfig
    items: list[CatalogItem] = field(default_factory=list)
    pages_fetched: int = 0
    stop_reason: StopReason = StopReason.BUDGET


class CategoryScanner:
    """Walk an endpoint's pages, keeping only new or force-refreshed items.

    In incremental mode only the first ``incremental_page_budget`` pages are
    considered and a page without any new item ends the scan, on the
    assumption that deeper pages were ingested by an earlier run. Endpoints
    configured with ``force_refresh`` always run to the page budget. A full
    scan uses the endpoint's own ``max_pages`` and never stops early.
    """

    def __init__(
        self,
        source: RemoteSourceClient,
        normalizer: ItemNormalizer,
        batcher: EnrichmentBatcher,
        *,
        incremental_page_budget: int = 5,
    ):
        self._source = source
        self._normalizer = normalizer
        self._batcher = batcher
        self._incremental_page_budget = incremental_page_budget

    def page_budget(self, endpoint: EndpointConfig, *, full_scan: bool) -> int:
        if full_scan:
            return endpoint.max_pages
        return self._incremental_page_budget

    async def scan(
        self,
        endpoint: EndpointConfig,
        known_ids: set[str],
        *,
        full_scan: bool = False,
    ) -> ScanResult:
        result = ScanResult(endpoint=endpoint)
        budget = self.page_budget(endpoint, full_scan=full_scan)
        logger.info("Checking %s (%s)", endpoint.display_name, endpoint.path)

        for page in range(budget):
            fetch = await self._source.fetch_page(endpoint, page)
            if not fetch.fetched:
                logger.warning(
                    "Stopping %s at page %s after a failed request",
                    endpoint.display_name,
                    page + 1,
                )
                result.stop_reason = StopReason.FETCH_FAILED
                return result
            result.pages_fetched += 1
            if not fetch.items:
                result.stop_reason = StopReason.EXHAUSTED
                return result

            page_items = self._normalizer.normalize_page(fetch.items, endpoint, known_ids)
            await self._batcher.enrich(page_items)

            if not page_items:
                if not endpoint.force_refresh and not full_scan:
                    logger.info(
                        "No new items on page %s of %s; skipping the rest",
                        page + 1,
                        endpoint.display_name,
                    )
                    result.stop_reason = StopReason.EARLY_STOP
                    return result
                logger.debug("Page %s of %s: all skipped", page + 1, endpoint.display_name)
                continue

            result.items.extend(page_items)
            logger.info(
                "Page %s of %s: processed %s items",
                page + 1,
                endpoint.display_name,
                len(page_items),
            )

        result.stop_reason = StopReason.BUDGET
        return result
