"""Exceptions raised by the catalog synchronizer."""

from __future__ import annotations


class CatalogSyncError(RuntimeError):
    """Base class for fatal synchronization errors."""


class ConfigurationError(CatalogSyncError):
    """Raised when required configuration such as the secret is missing."""


class SnapshotLoadError(CatalogSyncError):
    """Raised when the plain-JSON updates file cannot be parsed."""
