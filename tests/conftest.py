"""Pytest configuration and test helpers."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, Iterable

import httpx
import pytest


# Ensure the application package is importable when running tests without an
# editable install. This mirrors the expected runtime layout where ``app`` sits
# at the project root.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from app.config import Settings  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO tests to run on asyncio without requiring trio."""

    return "asyncio"


def raw_record(real_id: int | str, **overrides: Any) -> dict[str, Any]:
    """Return a listing record shaped like the remote API's output."""

    record: dict[str, Any] = {
        "id": real_id,
        "title": f"Title {real_id}",
        "image": f"https://img.example.com/{real_id}.jpg",
        "year": 2020,
        "imdb": "7.1",
        "description": f"Description {real_id}",
        "sources": [{"quality": "1080p", "url": f"https://cdn.example.com/{real_id}"}],
    }
    record.update(overrides)
    return record


class FakeCatalogAPI:
    """In-memory stand-in for the remote catalog API served via MockTransport.

    ``pages`` maps an endpoint path to its list of pages; requests past the
    last page return an empty listing. ``seasons`` maps a real id (as a
    string) to its seasons payload.
    """

    def __init__(self) -> None:
        self.pages: dict[str, list[list[dict[str, Any]]]] = {}
        self.seasons: dict[str, Any] = {}
        self.failing_pages: set[tuple[str, int]] = set()
        self.failing_seasons: set[str] = set()
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith("/api/seasons/"):
            real_id = path.rsplit("/", 1)[-1]
            if real_id in self.failing_seasons:
                return httpx.Response(500, json={"error": "boom"})
            if real_id in self.seasons:
                return httpx.Response(200, json=self.seasons[real_id])
            return httpx.Response(404, json={"error": "not found"})

        page = int(request.url.params.get("page", "0"))
        if (path, page) in self.failing_pages:
            return httpx.Response(503, json={"error": "unavailable"})
        listing = self.pages.get(path, [])
        items = listing[page] if page < len(listing) else []
        return httpx.Response(200, json={"posters": items})

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=httpx.MockTransport(self.handler),
            base_url="https://api.example.com",
        )

    def page_requests(self, path: str) -> list[int]:
        return [
            int(request.url.params["page"])
            for request in self.requests
            if request.url.path == path
        ]

    def season_requests(self) -> list[str]:
        return [
            request.url.path.rsplit("/", 1)[-1]
            for request in self.requests
            if request.url.path.startswith("/api/seasons/")
        ]


@pytest.fixture
def fake_api() -> FakeCatalogAPI:
    return FakeCatalogAPI()


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Return a factory building isolated settings backed by ``tmp_path``."""

    def factory(**overrides: Any) -> Settings:
        base: dict[str, Any] = {
            "DB_SECRET": "test-secret",
            "ARCHIVE_FILE": tmp_path / "archive.enc",
            "UPDATES_FILE": tmp_path / "updates.json",
        }
        base.update(overrides)
        return Settings(_env_file=None, **base)  # type: ignore[arg-type]

    return factory


def records(ids: Iterable[int | str], **overrides: Any) -> list[dict[str, Any]]:
    return [raw_record(real_id, **overrides) for real_id in ids]


@pytest.fixture
def make_records() -> Callable[..., list[dict[str, Any]]]:
    return records
