"""Mapping of raw listing records into catalog items."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterable, Literal

from pydantic import ValidationError

from ..endpoints import EndpointConfig
from ..models import CatalogItem
from ..utils import build_item_id

logger = logging.getLogger(__name__)

NormalizeStatus = Literal["new", "refresh"]


@dataclass(slots=True)
class NormalizedItem:
    """An accepted record and whether it was unseen or a forced refresh."""

    item: CatalogItem
    status: NormalizeStatus


class ItemNormalizer:
    """Decides which raw records become catalog items.

    Unknown ids are accepted and registered in ``known_ids``. Known ids are
    skipped unless the endpoint is configured with ``force_refresh``, in which
    case they are accepted again without touching ``known_ids``.
    """

    def __init__(self, namespace: str):
        self._namespace = namespace

    def normalize(
        self,
        raw: Any,
        endpoint: EndpointConfig,
        known_ids: set[str],
    ) -> NormalizedItem | None:
        if not isinstance(raw, dict):
            logger.warning("Skipping non-object record from %s: %r", endpoint.path, raw)
            return None
        real_id = raw.get("id")
        if real_id is None or real_id == "":
            logger.warning("Skipping record without id from %s", endpoint.path)
            return None

        item_id = build_item_id(self._namespace, real_id)
        is_known = item_id in known_ids
        if is_known and not endpoint.force_refresh:
            return None

        try:
            item = CatalogItem(
                id=item_id,
                real_id=real_id,
                title=raw.get("title"),
                image=raw.get("image"),
                year=raw.get("year"),
                imdb=raw.get("imdb"),
                description=raw.get("description"),
                item_type=endpoint.item_type,
                sources=raw.get("sources") or [],
                seasons=None,
            )
        except ValidationError as exc:
            logger.warning("Skipping invalid record %s from %s: %s", item_id, endpoint.path, exc)
            return None

        if is_known:
            return NormalizedItem(item=item, status="refresh")
        known_ids.add(item_id)
        return NormalizedItem(item=item, status="new")

    def normalize_page(
        self,
        raws: Iterable[Any],
        endpoint: EndpointConfig,
        known_ids: set[str],
    ) -> list[CatalogItem]:
        """Normalize a page of raw records, dropping skipped ones."""

        accepted: list[CatalogItem] = []
        for raw in raws:
            result = self.normalize(raw, endpoint, known_ids)
            if result is not None:
                accepted.append(result.item)
        return accepted
