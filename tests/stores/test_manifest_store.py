"""Tests for the manifest snapshot stores."""

from __future__ import annotations

import json
import logging
import os
import subprocess
import sys
from pathlib import Path

import pytest

from routegen.models import Manifest
from routegen.stores import EnvironmentManifestStore, MemoryManifestStore


def test_environment_store_round_trip() -> None:
    environ: dict[str, str] = {}
    store = EnvironmentManifestStore(environ, key="SNAPSHOT")
    manifest = Manifest(routables=["index.tsx"], hydratables=["Counter.tsx"])

    assert store.load() is None
    store.save(manifest)

    assert json.loads(environ["SNAPSHOT"]) == {
        "routables": ["index.tsx"],
        "hydratables": ["Counter.tsx"],
    }
    assert EnvironmentManifestStore(environ, key="SNAPSHOT").load() == manifest


def test_environment_store_defaults_to_process_environment(monkeypatch) -> None:
    monkeypatch.setenv("ROUTEGEN_PREVIOUS_MANIFEST", "")
    store = EnvironmentManifestStore()

    store.save(Manifest(routables=["a.ts"], hydratables=[]))

    assert "ROUTEGEN_PREVIOUS_MANIFEST" in os.environ
    assert store.load() == Manifest(routables=["a.ts"], hydratables=[])


def test_corrupt_snapshot_is_ignored(caplog, monkeypatch) -> None:
    monkeypatch.setattr(logging.getLogger("routegen"), "propagate", True)
    store = EnvironmentManifestStore({"SNAPSHOT": "{not json"}, key="SNAPSHOT")

    with caplog.at_level(logging.WARNING, logger="routegen"):
        assert store.load() is None

    assert "Ignoring unreadable manifest snapshot" in caplog.text


def test_memory_store_copies_snapshots() -> None:
    store = MemoryManifestStore()
    manifest = Manifest(routables=["index.tsx"], hydratables=[])

    store.save(manifest)
    manifest.routables.append("about.tsx")

    loaded = store.load()
    assert loaded == Manifest(routables=["index.tsx"], hydratables=[])
    assert store.saves == 1


_PROJECT_ROOT = Path(__file__).resolve().parents[2]

_RESTART_SCRIPT = """\
import os
import subprocess
import sys

from routegen.models import Manifest
from routegen.stores import EnvironmentManifestStore

store = EnvironmentManifestStore(key="ROUTEGEN_TEST_SNAPSHOT")
stage = sys.argv[1]
if stage == "exec":
    store.save(Manifest(routables=["index.tsx"], hydratables=["Counter.tsx"]))
    os.execv(sys.executable, [sys.executable, __file__, "after-exec"])
elif stage == "spawn":
    subprocess.run(
        [sys.executable, "-c",
         "from routegen.models import Manifest\\n"
         "from routegen.stores import EnvironmentManifestStore\\n"
         "EnvironmentManifestStore(key='ROUTEGEN_TEST_SNAPSHOT')"
         ".save(Manifest(routables=['index.tsx'], hydratables=[]))"],
        check=True,
    )
    print("after-spawn", store.load())
else:
    print(stage, store.load().to_json())
"""


def _run_restart_script(tmp_path: Path, stage: str) -> str:
    script = tmp_path / "restart.py"
    script.write_text(_RESTART_SCRIPT, encoding="utf-8")
    env = dict(os.environ)
    env.pop("ROUTEGEN_TEST_SNAPSHOT", None)
    env["PYTHONPATH"] = os.pathsep.join(
        filter(None, [str(_PROJECT_ROOT), env.get("PYTHONPATH")])
    )
    completed = subprocess.run(
        [sys.executable, str(script), stage],
        capture_output=True,
        text=True,
        env=env,
        check=True,
    )
    return completed.stdout.strip()


@pytest.mark.skipif(sys.platform == "win32", reason="os.execv spawns a new process on Windows")
def test_environment_snapshot_survives_exec_restart(tmp_path: Path) -> None:
    output = _run_restart_script(tmp_path, "exec")

    stage, _, payload = output.partition(" ")
    assert stage == "after-exec"
    assert json.loads(payload) == {"routables": ["index.tsx"], "hydratables": ["Counter.tsx"]}


def test_environment_snapshot_is_lost_across_spawned_children(tmp_path: Path) -> None:
    assert _run_restart_script(tmp_path, "spawn") == "after-spawn None"
