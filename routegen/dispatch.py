"""Hand-off targets run after the manifest is settled."""

from __future__ import annotations

import importlib.util
import json
import subprocess
import sys
from pathlib import Path
from types import ModuleType
from typing import Any, Callable, Mapping, Protocol, Sequence
from urllib.parse import unquote, urlparse

from .errors import BuildError
from .logging import get_logger

# Options the caller may not forward to the build step.
EXCLUDED_BUILD_OPTIONS = frozenset({"load_snapshot"})


class BuildStep(Protocol):
    """One-shot production build fed with the generated manifest path."""

    def __call__(self, manifest_path: Path, options: Mapping[str, Any]) -> None:  # pragma: no cover
        ...


def build_options(options: Mapping[str, Any] | None) -> dict[str, Any]:
    """Copy ``options`` without the keys the build step must not receive."""
    return {
        key: value
        for key, value in (options or {}).items()
        if key not in EXCLUDED_BUILD_OPTIONS
    }


def resolve_location(entrypoint: str, base: str | Path) -> Path:
    """Resolve ``entrypoint`` relative to ``base`` (a file path or ``file://`` URL)."""
    base_path = _as_path(str(base))
    target = _as_path(entrypoint)
    if not target.is_absolute():
        target = base_path.parent / target
    return target.resolve()


def _as_path(location: str) -> Path:
    parsed = urlparse(location)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))
    if parsed.scheme and len(parsed.scheme) > 1:
        raise ValueError(f"Unsupported location scheme: {location}")
    return Path(location)


class ModuleLauncher:
    """Loads an entrypoint module from its file location; importing it starts serving."""

    def __init__(self, location: Path, *, module_name: str | None = None) -> None:
        self.location = Path(location)
        self.module_name = module_name or f"routegen_entrypoint_{self.location.stem}"
        self.logger = get_logger("dispatch")

    def __call__(self) -> ModuleType:
        if not self.location.is_file():
            raise FileNotFoundError(f"Entrypoint not found: {self.location}")
        spec = importlib.util.spec_from_file_location(self.module_name, self.location)
        if spec is None or spec.loader is None:
            raise ImportError(f"Cannot load entrypoint module from {self.location}")
        module = importlib.util.module_from_spec(spec)
        sys.modules[self.module_name] = module
        self.logger.info("Starting entrypoint %s", self.location)
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(self.module_name, None)
            raise
        return module


class CommandBuildStep:
    """Runs an external build command with the manifest path appended.

    The options mapping is passed as JSON on the command's standard input.
    """

    def __init__(
        self,
        command: Sequence[str],
        *,
        cwd: Path | None = None,
        runner: Callable[..., subprocess.CompletedProcess[str]] | None = None,
    ) -> None:
        self.command = list(command)
        self.cwd = cwd
        self._runner = runner or subprocess.run
        self.logger = get_logger("dispatch")

    def __call__(self, manifest_path: Path, options: Mapping[str, Any]) -> None:
        if not self.command:
            raise BuildError("No build command configured. Set build.command in .routegen.yml.")
        args = [*self.command, str(manifest_path)]
        self.logger.info("Running build: %s", " ".join(args))
        try:
            completed = self._runner(
                args,
                cwd=str(self.cwd or manifest_path.parent),
                input=json.dumps(build_options(options), sort_keys=True, default=str),
                text=True,
                check=False,
            )
        except OSError as exc:
            raise BuildError(f"Failed to run build command {self.command[0]}: {exc}") from exc
        if completed.returncode != 0:
            raise BuildError(f"Build command exited with status {completed.returncode}")


__all__ = [
    "BuildStep",
    "CommandBuildStep",
    "EXCLUDED_BUILD_OPTIONS",
    "ModuleLauncher",
    "build_options",
    "resolve_location",
]
