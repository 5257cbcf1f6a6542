"""Helper utilities for constructing temporary projects in tests."""

from __future__ import annotations

import textwrap
from pathlib import Path
from typing import Iterable, List, Mapping

from routegen.collector import ManifestCollector
from routegen.models import Manifest


class ProjectBuilder:
    """Utility for writing route/island files into a throwaway project."""

    def __init__(self, tmp_path: Path) -> None:
        self.root = tmp_path / "project"
        self.root.mkdir()
        self._collector = ManifestCollector()

    def write(self, files: Mapping[str, str]) -> None:
        """Write `path -> contents` entries into the project."""
        for relative, content in files.items():
            path = self.root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            normalised = textwrap.dedent(content).lstrip("\n")
            path.write_text(normalised, encoding="utf-8")

    def touch(self, paths: Iterable[str]) -> None:
        """Create empty source files."""
        self.write({path: "export default {};\n" for path in paths})

    def collect(self) -> Manifest:
        """Return a fresh manifest of the project contents."""
        return self._collector.collect(self.root)

    def path(self) -> Path:
        """Return the project root path."""
        return self.root


class RecordingFormatter:
    """Canonicalizer that returns its input and records every call."""

    def __init__(self) -> None:
        self.calls: List[str] = []

    def format(self, text: str) -> str:
        self.calls.append(text)
        return text


__all__ = ["ProjectBuilder", "RecordingFormatter"]
