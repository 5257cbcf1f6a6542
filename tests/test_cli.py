"""CLI parser and command behaviour tests."""

from __future__ import annotations

import sys

import pytest

from routegen.cli import _build_parser, main
from tests._fixtures.project_builder import ProjectBuilder

_NO_FORMAT_CONFIG = "formatter:\n  enabled: false\nruntime:\n  check: false\n"


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "manifest"])
    assert args.verbose is True
    assert args.command == "manifest"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["dev", "--verbose"])
    assert args.verbose is True
    assert args.command == "dev"
    assert args.entrypoint == "main.py"


def test_cli_accepts_check_flag() -> None:
    parser = _build_parser()
    args = parser.parse_args(["manifest", "some/project", "--check", "--no-format"])
    assert args.path == "some/project"
    assert args.check is True
    assert args.no_format is True


def test_manifest_command_writes_file(project: ProjectBuilder, capsys) -> None:
    project.touch(["routes/index.tsx", "islands/Counter.tsx"])

    main(["manifest", str(project.path()), "--no-format"])

    generated = (project.path() / "routes.gen.ts").read_text(encoding="utf-8")
    assert '"./routes/index.tsx": $0,' in generated
    assert "Manifest written to" in capsys.readouterr().out


def test_manifest_check_detects_stale_file(project: ProjectBuilder) -> None:
    project.write({".routegen.yml": _NO_FORMAT_CONFIG})
    project.touch(["routes/index.tsx"])
    main(["manifest", str(project.path())])

    main(["manifest", str(project.path()), "--check"])

    project.touch(["routes/about.tsx"])
    with pytest.raises(SystemExit) as excinfo:
        main(["manifest", str(project.path()), "--check"])
    assert excinfo.value.code == 1


def test_conflict_exits_with_message(project: ProjectBuilder, capsys) -> None:
    project.write({".routegen.yml": _NO_FORMAT_CONFIG})
    project.touch(["routes/a/foo.ts", "routes/a/foo.tsx"])

    with pytest.raises(SystemExit) as excinfo:
        main(["manifest", str(project.path())])

    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "Route conflict detected" in err
    assert "a/foo" in err


def test_dev_command_starts_entrypoint(project: ProjectBuilder, monkeypatch) -> None:
    project.write({".routegen.yml": _NO_FORMAT_CONFIG, "server.py": "STARTED = True\n"})
    project.touch(["routes/index.tsx"])
    monkeypatch.setenv("ROUTEGEN_PREVIOUS_MANIFEST", "")

    try:
        main(["dev", str(project.path()), "--entrypoint", "server.py"])
        assert sys.modules["routegen_entrypoint_server"].STARTED is True
    finally:
        sys.modules.pop("routegen_entrypoint_server", None)

    assert (project.path() / "routes.gen.ts").exists()
