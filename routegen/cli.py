"""CLI entrypoints for routegen commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .codegen import IdentityFormatter
from .config import ConfigError, RouteGenConfig, load_config
from .coordinator import Mode
from .devloop import coordinator_from_config
from .dispatch import ModuleLauncher
from .errors import RouteGenError
from .logging import configure_logging
from .runtime import check_runtime
from .stores import MemoryManifestStore


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_path_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _add_skip_runtime_check_option(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--skip-runtime-check",
        action="store_true",
        help="Do not verify the JavaScript runtime version before running.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="routegen",
        description="Generate the route and island manifest for a file-system routed project.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    manifest_parser = subparsers.add_parser(
        "manifest",
        help="Regenerate the manifest module unconditionally.",
    )
    _add_verbose_option(manifest_parser, suppress_default=True)
    _add_path_argument(manifest_parser)
    manifest_parser.add_argument(
        "--check",
        action="store_true",
        help="Exit with status 1 if the manifest on disk is stale instead of writing it.",
    )
    manifest_parser.add_argument(
        "--no-format",
        action="store_true",
        help="Write the rendered module without running the external formatter.",
    )

    dev_parser = subparsers.add_parser(
        "dev",
        help="Regenerate the manifest if it changed, then start the entrypoint.",
    )
    _add_verbose_option(dev_parser, suppress_default=True)
    _add_skip_runtime_check_option(dev_parser)
    _add_path_argument(dev_parser)
    dev_parser.add_argument(
        "--entrypoint",
        default="main.py",
        help="Module that starts the server, relative to the project root.",
    )
    dev_parser.add_argument(
        "--build",
        action="store_true",
        help="Run the production build step instead of starting the entrypoint.",
    )

    build_parser = subparsers.add_parser(
        "build",
        help="Regenerate the manifest if it changed, then run the build step.",
    )
    _add_verbose_option(build_parser, suppress_default=True)
    _add_skip_runtime_check_option(build_parser)
    _add_path_argument(build_parser)

    serve_parser = subparsers.add_parser(
        "serve",
        help="Start the HTTP manifest inspection service.",
    )
    _add_verbose_option(serve_parser, suppress_default=True)
    serve_parser.add_argument("--host", default="127.0.0.1", help="Interface to bind.")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for routegen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose))

    if args.command == "serve":
        from .service import run_service

        run_service(host=args.host, port=args.port)
        return

    try:
        config = load_config(Path(args.path))
        if args.command == "manifest":
            status = _run_manifest(config, check=args.check, no_format=args.no_format)
            if status:
                parser.exit(status, "Manifest is out of date. Run `routegen manifest` to update it.\n")
        elif args.command in {"dev", "build"}:
            _run_cycle(args, config)
        else:  # pragma: no cover - argparse enforces choices
            parser.exit(1, "Unknown command\n")
    except (ConfigError, RouteGenError) as exc:
        parser.exit(1, f"routegen {args.command} failed: {exc}\n")
    except OSError as exc:
        parser.exit(1, f"routegen {args.command} failed: {exc}\nRun with --verbose for more details.\n")


def _run_manifest(config: RouteGenConfig, *, check: bool, no_format: bool) -> int:
    formatter = IdentityFormatter() if no_format else None
    coordinator = coordinator_from_config(
        config, store=MemoryManifestStore(), formatter=formatter
    )
    if check:
        manifest = coordinator.collector.collect(config.root)
        expected = coordinator.generator.render(manifest)
        target = config.output_path
        current = target.read_text(encoding="utf-8") if target.exists() else None
        return 0 if current == expected else 1

    outcome = coordinator.regenerate(config.root, force=True)
    print(f"Manifest written to {_relativize(outcome.manifest_path)}")
    return 0


def _run_cycle(args: argparse.Namespace, config: RouteGenConfig) -> None:
    if config.runtime.check and not args.skip_runtime_check:
        check_runtime(config.runtime.executable, config.runtime.min_version)

    coordinator = coordinator_from_config(config)
    if args.command == "build" or getattr(args, "build", False):
        coordinator.run(config.root, Mode.BUILD)
        return

    entrypoint = Path(args.entrypoint)
    if not entrypoint.is_absolute():
        entrypoint = config.root / entrypoint
    coordinator.run(config.root, Mode.SERVE, start=ModuleLauncher(entrypoint.resolve()))


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
