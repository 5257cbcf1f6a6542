"""Change detection and hand-off for the dev/build loop."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any, Callable, Mapping, Optional

from .codegen import ManifestCodeGenerator
from .collector import ManifestCollector
from .dispatch import BuildStep, build_options
from .logging import get_logger
from .models import CycleOutcome, Manifest
from .stores import ManifestStore, MemoryManifestStore


class Mode(str, Enum):
    SERVE = "serve"
    BUILD = "build"


class ChangeCoordinator:
    """Regenerates the registry module only when the manifest changed.

    The previous manifest comes from ``store`` and the fresh one is saved back
    on every cycle, whether or not anything changed.
    """

    def __init__(
        self,
        collector: ManifestCollector | None = None,
        generator: ManifestCodeGenerator | None = None,
        store: ManifestStore | None = None,
        build_step: BuildStep | None = None,
    ) -> None:
        self.collector = collector or ManifestCollector()
        self.generator = generator or ManifestCodeGenerator()
        self.store: ManifestStore = store if store is not None else MemoryManifestStore()
        self.build_step = build_step
        self.logger = get_logger("coordinator")

    def regenerate(self, project_root: Path | str, *, force: bool = False) -> CycleOutcome:
        root = Path(project_root).resolve()
        previous = self.store.load() or Manifest.empty()

        manifest = self.collector.collect(root)
        self.store.save(manifest)

        changed = force or not manifest.same_shape(previous)
        manifest_path = self.generator.manifest_path(root)
        if changed:
            self.logger.debug("Manifest changed; regenerating %s", manifest_path)
            text = self.generator.render(manifest)
            manifest_path = self.generator.persist(root, text, manifest)
        else:
            self.logger.debug("Manifest unchanged; keeping %s", manifest_path)

        return CycleOutcome(
            manifest=manifest,
            previous=previous,
            changed=changed,
            manifest_path=manifest_path,
        )

    def run(
        self,
        project_root: Path | str,
        mode: Mode | str,
        start: Optional[Callable[[], Any]] = None,
        options: Mapping[str, Any] | None = None,
    ) -> CycleOutcome:
        """Settle the manifest, then build once or start the entrypoint.

        In serve mode ``start`` normally never returns.
        """
        mode = Mode(mode)
        outcome = self.regenerate(project_root)

        if mode is Mode.BUILD:
            if self.build_step is None:
                raise ValueError("build mode requires a build step")
            self.logger.info("Building with manifest %s", outcome.manifest_path)
            self.build_step(outcome.manifest_path, build_options(options))
        else:
            if start is None:
                raise ValueError("serve mode requires an entrypoint to start")
            start()
        return outcome


__all__ = ["ChangeCoordinator", "Mode"]
