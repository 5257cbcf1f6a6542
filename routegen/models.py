"""Core data models shared across routegen components."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .errors import LogicalNameConflictError, SnapshotError


@dataclass(frozen=True)
class ScanRoot:
    """A directory to scan plus the file extensions it accepts (without dots)."""

    path: Path
    extensions: FrozenSet[str]


@dataclass(frozen=True)
class DiscoveredFile:
    """A source file relative to its scan root."""

    path: str
    logical_name: str

    @classmethod
    def from_relative(cls, relative: str) -> "DiscoveredFile":
        return cls(path=relative, logical_name=logical_name_of(relative))


def logical_name_of(relative: str) -> str:
    """Strip exactly the final ``.`` segment from a relative path."""
    return ".".join(relative.split(".")[:-1])


@dataclass(frozen=True)
class LogicalNameConflict:
    """Two files under one root collapse onto the same logical name."""

    root: Path
    logical_name: str
    paths: Tuple[str, str]

    @property
    def directory(self) -> str:
        head, _, _ = self.logical_name.rpartition("/")
        return head

    @property
    def name(self) -> str:
        return self.logical_name.rpartition("/")[2]

    def describe(self) -> str:
        location = f"{self.root.as_posix().rstrip('/')}/{self.logical_name}"
        return (
            "Route conflict detected. Multiple files have the same name: "
            f"{location} ({self.paths[0]}, {self.paths[1]})"
        )


@dataclass
class ScanResult:
    """Outcome of scanning one root: sorted paths or a conflict."""

    paths: List[str] = field(default_factory=list)
    conflict: Optional[LogicalNameConflict] = None

    @property
    def ok(self) -> bool:
        return self.conflict is None

    def unwrap(self) -> List[str]:
        if self.conflict is not None:
            raise LogicalNameConflictError(self.conflict)
        return list(self.paths)


@dataclass
class Manifest:
    """Sorted inventory of routable and hydratable source files."""

    routables: List[str] = field(default_factory=list)
    hydratables: List[str] = field(default_factory=list)

    @classmethod
    def empty(cls) -> "Manifest":
        return cls(routables=[], hydratables=[])

    def to_dict(self) -> Dict[str, List[str]]:
        return {"routables": list(self.routables), "hydratables": list(self.hydratables)}

    @classmethod
    def from_dict(cls, payload: Any) -> "Manifest":
        if not isinstance(payload, dict):
            raise SnapshotError("Manifest snapshot must be a JSON object")
        routables = payload.get("routables", [])
        hydratables = payload.get("hydratables", [])
        for key, value in (("routables", routables), ("hydratables", hydratables)):
            if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
                raise SnapshotError(f"Manifest snapshot field '{key}' must be a list of strings")
        return cls(routables=list(routables), hydratables=list(hydratables))

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json(cls, text: str) -> "Manifest":
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise SnapshotError(f"Manifest snapshot is not valid JSON: {exc}") from exc
        return cls.from_dict(payload)

    def same_shape(self, other: "Manifest") -> bool:
        """Element-by-element comparison of both sequences, order included."""
        return self.routables == other.routables and self.hydratables == other.hydratables


@dataclass
class CycleOutcome:
    """Result of one regeneration cycle."""

    manifest: Manifest
    previous: Manifest
    changed: bool
    manifest_path: Path
