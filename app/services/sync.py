"""One synchronization pass over every configured endpoint."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Sequence

from ..config import Settings
from ..endpoints import EndpointConfig
from ..store import SnapshotStore
from .enrichment import EnrichmentBatcher
from .normalizer import ItemNormalizer
from .scanner import CategoryScanner, ScanResult
from .source import RemoteSourceClient

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SyncReport:
    """Summary of a completed synchronization pass."""

    processed: int = 0
    full_scan: bool = False
    compacted: bool = False
    saved: bool = False
    scans: list[ScanResult] = field(default_factory=list)


class SyncEngine:
    """Load the snapshot, scan every endpoint, merge and persist once."""

    def __init__(
        self,
        settings: Settings,
        source: RemoteSourceClient,
        store: SnapshotStore,
        *,
        endpoints: Sequence[EndpointConfig] | None = None,
    ):
        self._settings = settings
        self._store = store
        self._endpoints = tuple(endpoints) if endpoints is not None else settings.endpoints
        self._scanner = CategoryScanner(
            source,
            ItemNormalizer(settings.source_namespace),
            EnrichmentBatcher(source, settings.concurrency_limit),
            incremental_page_budget=settings.incremental_page_budget,
        )

    async def run(self, *, full_scan: bool | None = None) -> SyncReport:
        snapshot = self._store.load()
        known_ids = snapshot.known_ids()

        if full_scan is None:
            full_scan = self._settings.full_scan or (
                self._settings.auto_bootstrap and snapshot.is_empty()
            )
        if full_scan:
            logger.info("Running a full scan of every endpoint")

        report = SyncReport(full_scan=full_scan)
        for endpoint in self._endpoints:
            scan = await self._scanner.scan(endpoint, known_ids, full_scan=full_scan)
            report.scans.append(scan)
            if scan.items:
                report.processed += snapshot.merge(scan.items)

        logger.info("Processed %s items.", report.processed)

        threshold = self._settings.compaction_threshold
        if snapshot.compact(threshold):
            report.compacted = True
            logger.info("Updates exceeded %s items; merged into the archive", threshold)

        if report.processed > 0:
            self._store.save(snapshot)
            report.saved = True
        else:
            logger.info("No changes.")
        return report
