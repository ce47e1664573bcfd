"""Command-line behaviour tests."""

from __future__ import annotations

import logging

import pytest

from app import main as main_module
from app.errors import ConfigurationError

from conftest import FakeCatalogAPI, records


def test_missing_secret_exits_with_error(make_settings, caplog) -> None:
    settings = make_settings(DB_SECRET=None)

    with caplog.at_level(logging.ERROR):
        status = main_module.main([], settings=settings)

    assert status == 1
    assert "DB_SECRET is missing" in caplog.text
    assert not settings.archive_path.exists()
    assert not settings.updates_path.exists()


def test_missing_secret_from_environment(monkeypatch, tmp_path, caplog) -> None:
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("DB_SECRET", raising=False)

    with caplog.at_level(logging.ERROR):
        status = main_module.main([])

    assert status == 1
    assert "DB_SECRET is missing" in caplog.text


@pytest.mark.anyio
async def test_run_sync_rejects_missing_secret(make_settings) -> None:
    with pytest.raises(ConfigurationError):
        await main_module.run_sync(make_settings(DB_SECRET=""))


def test_successful_run_exits_zero_and_honours_path_flags(
    monkeypatch, make_settings, tmp_path, caplog
) -> None:
    fake_api = FakeCatalogAPI()
    fake_api.pages["/api/movies/new"] = [records([1, 2])]
    monkeypatch.setattr(main_module, "build_http_client", lambda _settings: fake_api.client())
    archive = tmp_path / "out" / "catalog.enc"
    updates = tmp_path / "out" / "catalog-updates.json"

    with caplog.at_level(logging.INFO):
        status = main_module.main(
            ["--archive", str(archive), "--updates", str(updates)],
            settings=make_settings(ENDPOINT_KEYS="movies-new"),
        )

    assert status == 0
    assert "Processed 2 items." in caplog.text
    assert archive.exists()
    assert updates.exists()


def test_zero_changes_still_exit_zero(monkeypatch, make_settings, caplog) -> None:
    fake_api = FakeCatalogAPI()
    monkeypatch.setattr(main_module, "build_http_client", lambda _settings: fake_api.client())
    settings = make_settings(ENDPOINT_KEYS="movies-new")

    with caplog.at_level(logging.INFO):
        status = main_module.main(["--full-scan"], settings=settings)

    assert status == 0
    assert "Processed 0 items." in caplog.text
    assert not settings.archive_path.exists()


def test_corrupt_updates_file_exits_with_error(make_settings, caplog) -> None:
    settings = make_settings(ENDPOINT_KEYS="movies-new")
    settings.updates_path.write_text("not json", encoding="utf-8")

    with caplog.at_level(logging.ERROR):
        status = main_module.main([], settings=settings)

    assert status == 1
    assert "could not be loaded" in caplog.text


def test_build_http_client_uses_configured_timeout(make_settings) -> None:
    settings = make_settings(REQUEST_TIMEOUT=12.5, USER_AGENT="catalogsync-test")

    client = main_module.build_http_client(settings)

    assert client.timeout.read == 12.5
    assert client.headers["User-Agent"] == "catalogsync-test"
    assert str(client.base_url).startswith("https://cinemaplus-app.vercel.app")
