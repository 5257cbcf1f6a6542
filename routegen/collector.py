"""Builds the route/island manifest for a project."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Iterable

from .logging import get_logger
from .models import Manifest, ScanRoot
from .scanner import DEFAULT_EXTENSIONS, DirectoryScanner


class ManifestCollector:
    """Scans the routes and islands directories of a project."""

    def __init__(
        self,
        scanner: DirectoryScanner | None = None,
        *,
        routes_dir: str = "routes",
        islands_dir: str = "islands",
        extensions: Iterable[str] | None = None,
    ) -> None:
        if extensions is not None:
            exts = frozenset(ext.lstrip(".") for ext in extensions if ext.strip("."))
        elif scanner is not None:
            exts = scanner.extensions
        else:
            exts = DEFAULT_EXTENSIONS
        self.scanner = scanner or DirectoryScanner(exts)
        self.routes_dir = routes_dir
        self.islands_dir = islands_dir
        self.extensions = exts
        self.logger = get_logger("collector")

    def collect(self, project_root: Path | str) -> Manifest:
        """Return the sorted manifest; raises ``LogicalNameConflictError`` on a clash."""
        root = Path(project_root)
        roots = (
            ScanRoot(path=root / self.routes_dir, extensions=self.extensions),
            ScanRoot(path=root / self.islands_dir, extensions=self.extensions),
        )
        # The two namespaces are independent; a clash across them is allowed.
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="routegen-scan") as pool:
            routes_result, islands_result = pool.map(self.scanner.scan_root, roots)

        manifest = Manifest(
            routables=routes_result.unwrap(),
            hydratables=islands_result.unwrap(),
        )
        self.logger.debug(
            "Collected %d routes and %d islands under %s",
            len(manifest.routables),
            len(manifest.hydratables),
            root,
        )
        return manifest


__all__ = ["ManifestCollector"]
