"""Entry point for project dev scripts (``dev.py``)."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Mapping, MutableMapping, Sequence, TextIO

from .codegen import IdentityFormatter, ManifestCodeGenerator, SubprocessFormatter, TextCanonicalizer
from .collector import ManifestCollector
from .config import RouteGenConfig, load_config
from .coordinator import ChangeCoordinator, Mode
from .dispatch import CommandBuildStep, ModuleLauncher, resolve_location
from .logging import configure_logging, get_logger
from .models import CycleOutcome
from .runtime import check_runtime
from .scanner import DirectoryScanner
from .stores import EnvironmentManifestStore, ManifestStore

_logger = get_logger("dev")


def coordinator_from_config(
    config: RouteGenConfig,
    *,
    store: ManifestStore | None = None,
    formatter: TextCanonicalizer | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> ChangeCoordinator:
    """Wire a coordinator from ``.routegen.yml`` settings."""
    if formatter is None:
        formatter = (
            SubprocessFormatter(config.formatter.command)
            if config.formatter.enabled
            else IdentityFormatter()
        )
    collector = ManifestCollector(
        DirectoryScanner(config.extensions),
        routes_dir=config.routes_dir,
        islands_dir=config.islands_dir,
        extensions=config.extensions,
    )
    generator = ManifestCodeGenerator(
        formatter,
        routes_dir=config.routes_dir,
        islands_dir=config.islands_dir,
        output=config.output,
    )
    if store is None:
        store = EnvironmentManifestStore(environ, key=config.snapshot_env_key)
    build_step = CommandBuildStep(config.build.command, cwd=config.root)
    return ChangeCoordinator(collector, generator, store, build_step)


def dev(
    base: str | Path,
    entrypoint: str,
    options: Mapping[str, Any] | None = None,
    *,
    argv: Sequence[str] | None = None,
    environ: MutableMapping[str, str] | None = None,
    verbose: bool = False,
    log_stream: TextIO | None = None,
) -> CycleOutcome:
    """Regenerate the manifest if needed, then build or start ``entrypoint``.

    ``base`` is the calling script's location (``__file__``); the project root
    is its directory and ``entrypoint`` is resolved against it. Passing
    ``build`` among the command line arguments runs the build step instead of
    starting the entrypoint. Progress is logged to stderr (or
    ``log_stream``); ``verbose`` adds the debug lines.
    """
    configure_logging(verbose=verbose, stream=log_stream)
    location = resolve_location(entrypoint, base)
    project_root = resolve_location(".", base)
    config = load_config(project_root)

    if config.runtime.check:
        check_runtime(config.runtime.executable, config.runtime.min_version)

    args = list(sys.argv[1:] if argv is None else argv)
    mode = Mode.BUILD if "build" in args else Mode.SERVE
    _logger.debug("Running %s cycle for %s", mode.value, project_root)

    coordinator = coordinator_from_config(config, environ=environ)
    return coordinator.run(project_root, mode, start=ModuleLauncher(location), options=options)


__all__ = ["coordinator_from_config", "dev"]
