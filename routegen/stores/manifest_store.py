"""Snapshot stores for the last generated manifest."""

from __future__ import annotations

import os
from typing import MutableMapping, Optional, Protocol

from ..config import DEFAULT_SNAPSHOT_ENV_KEY
from ..errors import SnapshotError
from ..logging import get_logger
from ..models import Manifest


class ManifestStore(Protocol):
    """Remembers what the previous cycle generated."""

    def load(self) -> Optional[Manifest]:  # pragma: no cover - protocol
        ...

    def save(self, manifest: Manifest) -> None:  # pragma: no cover - protocol
        ...


class MemoryManifestStore:
    """Keeps the snapshot in memory for the lifetime of the owner."""

    def __init__(self, manifest: Manifest | None = None) -> None:
        self._manifest = manifest
        self.saves = 0

    def load(self) -> Optional[Manifest]:
        if self._manifest is None:
            return None
        return Manifest.from_dict(self._manifest.to_dict())

    def save(self, manifest: Manifest) -> None:
        self._manifest = Manifest.from_dict(manifest.to_dict())
        self.saves += 1


class EnvironmentManifestStore:
    """Stores the snapshot as JSON in a process environment slot.

    The slot outlives restarts that stay in the same process: re-running
    ``dev()`` after a module reload, or replacing the process image with
    ``os.execv`` (exec keeps the environment). A reloader that spawns a fresh
    child per restart never sees the child's writes, so every restart there
    regenerates; run the cycle in the supervising process in that setup, or
    pass a store that persists elsewhere.
    """

    def __init__(
        self,
        environ: MutableMapping[str, str] | None = None,
        *,
        key: str = DEFAULT_SNAPSHOT_ENV_KEY,
    ) -> None:
        self._environ = environ if environ is not None else os.environ
        self.key = key
        self.logger = get_logger("stores.manifest")

    def load(self) -> Optional[Manifest]:
        raw = self._environ.get(self.key)
        if not raw:
            return None
        try:
            return Manifest.from_json(raw)
        except SnapshotError as exc:
            self.logger.warning("Ignoring unreadable manifest snapshot in %s: %s", self.key, exc)
            return None

    def save(self, manifest: Manifest) -> None:
        self._environ[self.key] = manifest.to_json()


__all__ = ["EnvironmentManifestStore", "ManifestStore", "MemoryManifestStore"]
