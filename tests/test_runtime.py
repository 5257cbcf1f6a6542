"""Tests for the runtime version gate."""

from __future__ import annotations

import pytest

from routegen.errors import RuntimeVersionError
from routegen.runtime import (
    check_runtime,
    detect_runtime,
    ensure_min_runtime_version,
    parse_version,
    version_gte,
)


class _Completed:
    def __init__(self, stdout: str, returncode: int = 0) -> None:
        self.stdout = stdout
        self.stderr = ""
        self.returncode = returncode


def test_parse_version_reads_first_triple() -> None:
    assert parse_version("1.31.0") == (1, 31, 0)
    assert parse_version("deno 1.36.4 (release, x86_64-unknown-linux-gnu)") == (1, 36, 4)
    with pytest.raises(ValueError):
        parse_version("unknown")


@pytest.mark.parametrize(
    ("version", "minimum", "expected"),
    [
        ("1.31.0", "1.31.0", True),
        ("1.31.1", "1.31.0", True),
        ("1.100.0", "1.31.0", True),
        ("2.0.0", "1.31.0", True),
        ("1.9.9", "1.31.0", False),
        ("1.30.12", "1.31.0", False),
        ("0.99.0", "1.31.0", False),
    ],
)
def test_version_gte_compares_numerically(version: str, minimum: str, expected: bool) -> None:
    assert version_gte(version, minimum) is expected


def test_old_version_suggests_self_upgrade() -> None:
    with pytest.raises(RuntimeVersionError) as excinfo:
        ensure_min_runtime_version("1.30.0", "/home/dev/.deno/bin/deno")

    assert "1.31.0 or higher is required" in str(excinfo.value)
    assert excinfo.value.hint == "To update, run: `deno upgrade`"


def test_old_homebrew_version_suggests_brew() -> None:
    with pytest.raises(RuntimeVersionError) as excinfo:
        ensure_min_runtime_version("1.20.0", "/opt/homebrew/bin/deno")

    assert "brew upgrade deno" in excinfo.value.hint


def test_recent_version_passes() -> None:
    ensure_min_runtime_version("1.40.2", "/usr/local/bin/deno")


def test_detect_runtime_parses_version_output() -> None:
    calls = []

    def _runner(args, **kwargs):
        calls.append(args)
        return _Completed("deno 1.37.1 (release, aarch64-apple-darwin)\nv8 11.8\ntypescript 5.2.2\n")

    info = detect_runtime(runner=_runner, which=lambda name: f"/usr/bin/{name}")

    assert info.version == "1.37.1"
    assert info.exec_path == "/usr/bin/deno"
    assert calls == [["/usr/bin/deno", "--version"]]


def test_detect_runtime_requires_executable() -> None:
    with pytest.raises(RuntimeVersionError, match="Could not find"):
        detect_runtime(which=lambda name: None)


def test_check_runtime_rejects_old_version() -> None:
    with pytest.raises(RuntimeVersionError):
        check_runtime(
            runner=lambda args, **kwargs: _Completed("deno 1.29.0\n"),
            which=lambda name: "/usr/bin/deno",
        )


@pytest.mark.parametrize(
    ("version", "minimum", "expected"),
    [
        ("1.31.0-rc.1", "1.31.0", False),
        ("1.31.0", "1.31.0-rc.1", True),
        ("1.31.1-rc.1", "1.31.0", True),
        ("1.31.0-rc.10", "1.31.0-rc.2", True),
        ("1.31.0-alpha", "1.31.0-alpha.1", False),
        ("1.31.0-alpha.1", "1.31.0-alpha.beta", False),
        ("1.31.0-beta", "1.31.0-alpha.1", True),
        ("1.31.0+build.7", "1.31.0", True),
    ],
)
def test_version_gte_orders_prereleases_below_release(
    version: str, minimum: str, expected: bool
) -> None:
    assert version_gte(version, minimum) is expected


def test_release_candidate_of_minimum_is_rejected() -> None:
    with pytest.raises(RuntimeVersionError, match=r"found 1\.31\.0-rc\.1"):
        ensure_min_runtime_version("1.31.0-rc.1", "/usr/bin/deno")


def test_detect_runtime_keeps_prerelease_tag() -> None:
    info = detect_runtime(
        runner=lambda args, **kwargs: _Completed("deno 1.31.0-rc.1+abc123 (canary)\n"),
        which=lambda name: "/usr/bin/deno",
    )

    assert info.version == "1.31.0-rc.1"
    with pytest.raises(RuntimeVersionError):
        ensure_min_runtime_version(info.version, info.exec_path)
