"""Exception types raised by routegen."""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .models import LogicalNameConflict


class RouteGenError(RuntimeError):
    """Base class for fatal routegen failures."""


class LogicalNameConflictError(RouteGenError):
    """Raised when two files under one scan root share a logical name."""

    def __init__(self, conflict: "LogicalNameConflict") -> None:
        super().__init__(conflict.describe())
        self.conflict = conflict


class FormatterError(RouteGenError):
    """Raised when the external formatter is missing, fails, or prints nothing."""

    def __init__(
        self,
        message: str,
        *,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ) -> None:
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class SnapshotError(RouteGenError):
    """Raised when a serialized manifest snapshot cannot be decoded."""


class BuildError(RouteGenError):
    """Raised when the production build step cannot run or fails."""


class RuntimeVersionError(RouteGenError):
    """Raised when the JavaScript runtime is older than the supported minimum."""

    def __init__(self, message: str, *, hint: str) -> None:
        super().__init__(f"{message}\n\n{hint}")
        self.hint = hint


__all__ = [
    "BuildError",
    "FormatterError",
    "LogicalNameConflictError",
    "RouteGenError",
    "RuntimeVersionError",
    "SnapshotError",
]
