"""Stores for the last generated manifest."""

from .manifest_store import EnvironmentManifestStore, ManifestStore, MemoryManifestStore

__all__ = ["EnvironmentManifestStore", "ManifestStore", "MemoryManifestStore"]
