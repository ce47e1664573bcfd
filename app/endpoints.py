"""Remote category endpoints scanned on every synchronization run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


ItemType = Literal["movie", "series"]

DEFAULT_MAX_PAGES = 1000


@dataclass(frozen=True)
class EndpointConfig:
    """Describes one paginated remote category."""

    key: str
    path: str
    item_type: ItemType
    display_name: str
    max_pages: int = DEFAULT_MAX_PAGES
    # Re-pull items that are already known, e.g. series gaining new episodes.
    force_refresh: bool = False


TARGET_ENDPOINTS: tuple[EndpointConfig, ...] = (
    EndpointConfig(
        key="movies-new",
        path="/api/movies/new",
        item_type="movie",
        display_name="New Movies",
    ),
    EndpointConfig(
        key="movies-top-rated",
        path="/api/movies/top-rated",
        item_type="movie",
        display_name="Top Rated Movies",
    ),
    EndpointConfig(
        key="series-new",
        path="/api/series/new",
        item_type="series",
        display_name="New Series",
    ),
    EndpointConfig(
        key="series-updated",
        path="/api/series/updated",
        item_type="series",
        display_name="Updated Series",
        force_refresh=True,
    ),
    EndpointConfig(
        key="series-top-rated",
        path="/api/series/top-rated",
        item_type="series",
        display_name="Top Rated Series",
    ),
)

ENDPOINT_COUNT = len(TARGET_ENDPOINTS)
