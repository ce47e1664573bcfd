"""Utility helpers for the catalog synchronizer."""

from __future__ import annotations

from typing import Any, Callable


def build_item_id(namespace: str, real_id: Any) -> str:
    """Return the stable catalog identifier for a remote record."""

    return f"{namespace}_{real_id}"


def _field(name: str) -> Callable[[Any], Any]:
    def accessor(payload: Any) -> Any:
        if isinstance(payload, dict):
            return payload.get(name)
        return None

    accessor.__name__ = f"field_{name}"
    return accessor


def _whole_body(payload: Any) -> Any:
    return payload


# Tried in order; the first accessor yielding a non-empty list wins.
ITEM_ACCESSORS: tuple[Callable[[Any], Any], ...] = (
    _field("posters"),
    _field("search_results"),
    _whole_body,
)


def extract_items(payload: Any) -> list[Any]:
    """Extract the item list from a paginated listing response."""

    for accessor in ITEM_ACCESSORS:
        candidate = accessor(payload)
        if isinstance(candidate, list) and candidate:
            return candidate
    return []
