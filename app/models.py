"""Catalog records and the two-tier snapshot they are stored in."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from typing import Any, Iterable, Iterator

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .endpoints import ItemType


class CatalogItem(BaseModel):
    """Canonical stored shape of a remote movie or series."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    real_id: int | str
    title: Any = None
    image: Any = None
    year: Any = None
    imdb: Any = None
    description: Any = None
    item_type: ItemType = Field(alias="itemType")
    sources: Any = Field(default_factory=list)
    seasons: Any = None

    @field_validator("sources", mode="before")
    @classmethod
    def _default_sources(cls, value: object) -> object:
        if value is None:
            return []
        return value

    @property
    def is_series(self) -> bool:
        return self.item_type == "series"

    def to_record(self) -> dict[str, Any]:
        """Return the JSON-ready record written to the snapshot files."""

        return self.model_dump(mode="json", by_alias=True)


class PendingTier:
    """Hot tier of recently added or updated items, newest first.

    Items are indexed by id so that re-merging a known id replaces the stored
    copy without moving it, while unseen ids are prepended.
    """

    def __init__(self, items: Iterable[CatalogItem] = ()) -> None:
        self._items: dict[str, CatalogItem] = {}
        self._order: deque[str] = deque()
        for item in items:
            if item.id in self._items:
                self._items[item.id] = item
                continue
            self._items[item.id] = item
            self._order.append(item.id)

    def upsert(self, item: CatalogItem) -> bool:
        """Store ``item`` and return ``True`` when its id was not present yet."""

        if item.id in self._items:
            self._items[item.id] = item
            return False
        self._items[item.id] = item
        self._order.appendleft(item.id)
        return True

    def get(self, item_id: str) -> CatalogItem | None:
        return self._items.get(item_id)

    def ids(self) -> set[str]:
        return set(self._items)

    def clear(self) -> None:
        self._items.clear()
        self._order.clear()

    def to_list(self) -> list[CatalogItem]:
        return list(self)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._items

    def __iter__(self) -> Iterator[CatalogItem]:
        for item_id in self._order:
            yield self._items[item_id]

    def __len__(self) -> int:
        return len(self._order)

    def __repr__(self) -> str:
        return f"PendingTier(size={len(self)})"


@dataclass
class Snapshot:
    """In-memory view of the persisted archive and pending tiers."""

    archive: list[CatalogItem] = field(default_factory=list)
    pending: PendingTier = field(default_factory=PendingTier)

    def known_ids(self) -> set[str]:
        """Return every id stored in either tier."""

        known = {item.id for item in self.archive}
        known.update(self.pending.ids())
        return known

    def is_empty(self) -> bool:
        return not self.archive and not len(self.pending)

    def merge(self, items: Iterable[CatalogItem]) -> int:
        """Fold freshly scanned items into the pending tier.

        Returns the number of items merged. The archive is left untouched;
        stale archive copies are only dropped by :meth:`compact`.
        """

        merged = 0
        for item in items:
            self.pending.upsert(item)
            merged += 1
        return merged

    def needs_compaction(self, threshold: int) -> bool:
        return len(self.pending) > threshold

    def compact(self, threshold: int) -> bool:
        """Move the pending tier into the archive once it outgrows ``threshold``."""

        if not self.needs_compaction(threshold):
            return False
        superseded = self.pending.ids()
        remaining = [item for item in self.archive if item.id not in superseded]
        self.archive = self.pending.to_list() + remaining
        self.pending.clear()
        return True
