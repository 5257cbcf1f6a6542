"""JavaScript runtime version gate."""

from __future__ import annotations

import re
import shutil
import subprocess
from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from .config import DEFAULT_MIN_RUNTIME_VERSION
from .errors import RuntimeVersionError
from .logging import get_logger

_VERSION_RE = re.compile(
    r"(\d+)\.(\d+)\.(\d+)(?:-([0-9A-Za-z-]+(?:\.[0-9A-Za-z-]+)*))?(?:\+[0-9A-Za-z.-]+)?"
)

_logger = get_logger("runtime")


@dataclass(frozen=True)
class RuntimeInfo:
    """Detected runtime executable and version."""

    executable: str
    exec_path: str
    version: str


def _match_version(value: str) -> re.Match[str]:
    match = _VERSION_RE.search(value)
    if match is None:
        raise ValueError(f"Not a semantic version: {value!r}")
    return match


def parse_version(value: str) -> Tuple[int, int, int]:
    """Parse the first ``major.minor.patch`` triple in ``value``."""
    match = _match_version(value)
    return int(match.group(1)), int(match.group(2)), int(match.group(3))


def _precedence_key(value: str) -> tuple:
    """Semver precedence: a pre-release sorts below its release.

    Pre-release identifiers compare left to right, numeric ones as integers
    and below alphanumeric ones; a shorter run of equal identifiers sorts first.
    Build metadata is ignored.
    """
    match = _match_version(value)
    core = (int(match.group(1)), int(match.group(2)), int(match.group(3)))
    prerelease = match.group(4)
    if prerelease is None:
        return core + ((1,),)
    identifiers = tuple(
        (0, int(part), "") if part.isdigit() else (1, 0, part)
        for part in prerelease.split(".")
    )
    return core + ((0, identifiers),)


def version_gte(version: str, minimum: str) -> bool:
    return _precedence_key(version) >= _precedence_key(minimum)


def remediation_hint(exec_path: str, executable: str = "deno") -> str:
    if "homebrew" in exec_path.lower() or "/cellar/" in exec_path.lower():
        return (
            f"You seem to have installed {executable} via homebrew. "
            f"To update, run: `brew upgrade {executable}`"
        )
    return f"To update, run: `{executable} upgrade`"


def ensure_min_runtime_version(
    version: str,
    exec_path: str,
    *,
    minimum: str = DEFAULT_MIN_RUNTIME_VERSION,
    executable: str = "deno",
) -> None:
    """Raise ``RuntimeVersionError`` when ``version`` is older than ``minimum``."""
    if version_gte(version, minimum):
        return
    raise RuntimeVersionError(
        f"{executable} version {minimum} or higher is required "
        f"(found {version}). Please update {executable}.",
        hint=remediation_hint(exec_path, executable),
    )


def detect_runtime(
    executable: str = "deno",
    *,
    runner: Callable[..., subprocess.CompletedProcess[str]] | None = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> RuntimeInfo:
    """Run ``<executable> --version`` and return what it reports."""
    exec_path = which(executable)
    if exec_path is None:
        raise RuntimeVersionError(
            f"Could not find the {executable} executable on PATH.",
            hint=f"Install {executable} and make sure it is on your PATH.",
        )
    run = runner or subprocess.run
    completed = run(
        [exec_path, "--version"],
        capture_output=True,
        text=True,
        check=False,
    )
    if completed.returncode != 0:
        raise RuntimeVersionError(
            f"`{executable} --version` exited with status {completed.returncode}.",
            hint=f"Check that your {executable} installation works.",
        )
    first_line = (completed.stdout or "").strip().splitlines()[:1]
    try:
        match = _match_version(first_line[0] if first_line else "")
        version = match.group(0).split("+", 1)[0]
    except ValueError as exc:
        raise RuntimeVersionError(
            f"Could not read a version from `{executable} --version`.",
            hint=f"Check that your {executable} installation works.",
        ) from exc
    _logger.debug("Detected %s %s at %s", executable, version, exec_path)
    return RuntimeInfo(executable=executable, exec_path=exec_path, version=version)


def check_runtime(
    executable: str = "deno",
    minimum: str = DEFAULT_MIN_RUNTIME_VERSION,
    *,
    runner: Callable[..., subprocess.CompletedProcess[str]] | None = None,
    which: Callable[[str], Optional[str]] = shutil.which,
) -> RuntimeInfo:
    info = detect_runtime(executable, runner=runner, which=which)
    ensure_min_runtime_version(
        info.version, info.exec_path, minimum=minimum, executable=executable
    )
    return info


__all__ = [
    "RuntimeInfo",
    "check_runtime",
    "detect_runtime",
    "ensure_min_runtime_version",
    "parse_version",
    "remediation_hint",
    "version_gte",
]
