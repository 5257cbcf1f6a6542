"""Directory scanning for route and island source files."""

from __future__ import annotations

import os
import stat
from pathlib import Path
from typing import Dict, Iterable, Iterator, List

from .logging import get_logger
from .models import DiscoveredFile, LogicalNameConflict, ScanResult, ScanRoot

DEFAULT_EXTENSIONS = frozenset({"ts", "tsx", "js", "jsx"})

_logger = get_logger("scanner")


def _raise_walk_error(error: OSError) -> None:
    raise error


def _iter_files(root: Path, extensions: frozenset[str]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        current_dir = Path(dirpath)
        dirnames.sort()
        for filename in sorted(filenames):
            path = current_dir / filename
            if path.is_symlink():
                continue
            suffix = path.suffix
            if not suffix or suffix[1:] not in extensions:
                continue
            yield path


def _normalize_extensions(extensions: Iterable[str]) -> frozenset[str]:
    return frozenset(ext.lstrip(".") for ext in extensions if ext.strip("."))


class DirectoryScanner:
    """Lists source files under a root in a deterministic order."""

    def __init__(self, extensions: Iterable[str] = DEFAULT_EXTENSIONS) -> None:
        self.extensions = _normalize_extensions(extensions)

    def scan(self, root: Path | str, extensions: Iterable[str] | None = None) -> ScanResult:
        """Return the sorted relative paths under ``root`` or the first name conflict.

        A missing root, or one that is not a directory, yields an empty result.
        Any other filesystem error propagates.
        """
        exts = _normalize_extensions(extensions) if extensions is not None else self.extensions
        return self.scan_root(ScanRoot(path=Path(root), extensions=exts))

    def scan_root(self, scan_root: ScanRoot) -> ScanResult:
        root = scan_root.path
        try:
            stat_result = root.stat()
        except FileNotFoundError:
            _logger.debug("Scan root %s does not exist; skipping", root)
            return ScanResult()
        if not stat.S_ISDIR(stat_result.st_mode):
            _logger.debug("Scan root %s is not a directory; skipping", root)
            return ScanResult()

        seen: Dict[str, str] = {}
        paths: List[str] = []
        for path in _iter_files(root, scan_root.extensions):
            discovered = DiscoveredFile.from_relative(path.relative_to(root).as_posix())
            previous = seen.get(discovered.logical_name)
            if previous is not None:
                conflict = LogicalNameConflict(
                    root=root,
                    logical_name=discovered.logical_name,
                    paths=(previous, discovered.path),
                )
                _logger.debug("Logical name conflict under %s: %s", root, discovered.logical_name)
                return ScanResult(paths=[], conflict=conflict)
            seen[discovered.logical_name] = discovered.path
            paths.append(discovered.path)

        paths.sort()
        _logger.debug("Scanned %s: %d files", root, len(paths))
        return ScanResult(paths=paths)


__all__ = ["DEFAULT_EXTENSIONS", "DirectoryScanner"]
