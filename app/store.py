"""Loading and saving the archive/updates file pair."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .codec import SnapshotCodec
from .errors import SnapshotLoadError
from .models import CatalogItem, PendingTier, Snapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Persist the cold archive encrypted and the hot updates list as plain JSON."""

    def __init__(self, archive_path: Path, updates_path: Path, codec: SnapshotCodec):
        self._archive_path = Path(archive_path)
        self._updates_path = Path(updates_path)
        self._codec = codec

    @property
    def archive_path(self) -> Path:
        return self._archive_path

    @property
    def updates_path(self) -> Path:
        return self._updates_path

    def load(self) -> Snapshot:
        """Read both tiers, starting empty when the files do not exist yet."""

        archive = self._load_archive()
        pending = self._load_updates()
        logger.info(
            "Loaded snapshot: %s archived, %s pending", len(archive), len(pending)
        )
        return Snapshot(archive=archive, pending=PendingTier(pending))

    def save(self, snapshot: Snapshot) -> None:
        """Rewrite both files from the in-memory snapshot."""

        archive_blob = self._codec.encode(
            [item.to_record() for item in snapshot.archive]
        )
        updates_text = json.dumps(
            [item.to_record() for item in snapshot.pending],
            ensure_ascii=False,
        )
        # Archive first: a failed updates write leaves ids duplicated across
        # tiers, which the next compaction resolves, rather than losing them.
        _write_atomic(self._archive_path, archive_blob)
        _write_atomic(self._updates_path, updates_text)
        logger.info(
            "Saved snapshot: %s archived, %s pending",
            len(snapshot.archive),
            len(snapshot.pending),
        )

    def _load_archive(self) -> list[CatalogItem]:
        if not self._archive_path.exists():
            return []
        try:
            blob = self._archive_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Error reading archive %s: %s", self._archive_path, exc)
            return []

        result = self._codec.decode_result(blob)
        if not result.ok:
            logger.warning(
                "Error reading archive %s: %s; starting from an empty archive",
                self._archive_path,
                result.error,
            )
            return []
        payload = result.value
        if not isinstance(payload, list):
            logger.warning(
                "Archive %s is not a JSON array; starting from an empty archive",
                self._archive_path,
            )
            return []

        items: list[CatalogItem] = []
        for position, entry in enumerate(payload):
            try:
                items.append(CatalogItem.model_validate(entry))
            except ValidationError as exc:
                logger.warning(
                    "Skipping archive record %s in %s: %s",
                    position,
                    self._archive_path,
                    exc,
                )
        return items

    def _load_updates(self) -> list[CatalogItem]:
        if not self._updates_path.exists():
            return []
        try:
            payload = json.loads(self._updates_path.read_text(encoding="utf-8"))
            return _parse_items(payload)
        except (OSError, ValueError, TypeError) as exc:
            raise SnapshotLoadError(
                f"Updates file {self._updates_path} could not be loaded: {exc}"
            ) from exc


def _parse_items(payload: Any) -> list[CatalogItem]:
    if not isinstance(payload, list):
        raise TypeError(f"expected a JSON array, got {type(payload).__name__}")
    return [CatalogItem.model_validate(entry) for entry in payload]


def _write_atomic(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(path.suffix + ".tmp")
    try:
        temp_path.write_text(text, encoding="utf-8")
        os.replace(temp_path, path)
    finally:
        temp_path.unlink(missing_ok=True)
