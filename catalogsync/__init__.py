"""Shim exposing the synchronizer entry points under the project name."""

from __future__ import annotations

from app.main import main, run_sync

__all__ = ["main", "run_sync"]
