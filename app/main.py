"""Command-line entry point running one synchronization pass."""

from __future__ import annotations

import argparse
import asyncio
import logging
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Sequence

import httpx
from pydantic import ValidationError

from .codec import SnapshotCodec
from .config import Settings
from .errors import CatalogSyncError, ConfigurationError
from .services.source import RemoteSourceClient
from .services.sync import SyncEngine, SyncReport
from .store import SnapshotStore

logger = logging.getLogger(__name__)


def build_http_client(settings: Settings) -> httpx.AsyncClient:
    """Return the shared client used for every remote request."""

    return httpx.AsyncClient(
        base_url=str(settings.api_base_url),
        timeout=httpx.Timeout(settings.request_timeout_seconds),
        headers={"User-Agent": settings.user_agent},
        follow_redirects=True,
    )


async def run_sync(
    settings: Settings,
    *,
    full_scan: bool | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> SyncReport:
    """Run one pass against the remote API and persist the result."""

    if not settings.db_secret:
        raise ConfigurationError("DB_SECRET is missing!")

    store = SnapshotStore(
        settings.archive_path,
        settings.updates_path,
        SnapshotCodec(settings.db_secret),
    )
    async with AsyncExitStack() as exit_stack:
        if http_client is None:
            http_client = await exit_stack.enter_async_context(
                build_http_client(settings)
            )
        engine = SyncEngine(settings, RemoteSourceClient(http_client), store)
        return await engine.run(full_scan=full_scan)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="catalogsync",
        description="Incrementally synchronize the encrypted catalog snapshot.",
    )
    parser.add_argument(
        "--full-scan",
        action="store_true",
        default=None,
        help="Walk every endpoint up to its full page budget (bootstrap mode).",
    )
    parser.add_argument("--archive", type=Path, help="Path of the encrypted archive file.")
    parser.add_argument("--updates", type=Path, help="Path of the plain JSON updates file.")
    return parser


def main(argv: Sequence[str] | None = None, *, settings: Settings | None = None) -> int:
    """Run the synchronizer and return the process exit status."""

    args = build_parser().parse_args(argv)

    if settings is None:
        try:
            settings = Settings()  # type: ignore[call-arg]
        except ValidationError as exc:
            logging.basicConfig(level=logging.INFO)
            logger.error("Invalid configuration: %s", exc)
            return 1

    overrides: dict[str, object] = {}
    if args.archive is not None:
        overrides["archive_path"] = args.archive
    if args.updates is not None:
        overrides["updates_path"] = args.updates
    if overrides:
        settings = settings.model_copy(update=overrides)

    logging.basicConfig(level=settings.log_level)
    logger.info("%s started", settings.app_name)

    try:
        asyncio.run(run_sync(settings, full_scan=args.full_scan))
    except CatalogSyncError as exc:
        logger.error("Error: %s", exc)
        return 1
    return 0
