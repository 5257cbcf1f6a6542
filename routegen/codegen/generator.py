"""Renders the manifest into the generated registry module."""

from __future__ import annotations

import json
import posixpath
from dataclasses import dataclass
from pathlib import Path
from typing import List, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..config import DEFAULT_OUTPUT
from ..logging import get_logger
from ..models import Manifest
from .formatter import SubprocessFormatter, TextCanonicalizer

_TEMPLATE_NAME = "registry.ts.j2"


@dataclass(frozen=True)
class RegistryEntry:
    """One import binding in the generated module."""

    binding: str
    specifier: str


def to_import_specifier(path: str) -> str:
    """Import specifiers use forward slashes and start with a relative marker."""
    specifier = posixpath.normpath(path.replace("\\", "/"))
    if not specifier.startswith("."):
        specifier = "./" + specifier
    return specifier


def _js_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


class ManifestCodeGenerator:
    """Turns a :class:`Manifest` into canonical registry source and writes it."""

    def __init__(
        self,
        formatter: TextCanonicalizer | None = None,
        *,
        routes_dir: str = "routes",
        islands_dir: str = "islands",
        output: str = DEFAULT_OUTPUT,
        dev_command: str = "routegen dev",
        templates_dir: Path | None = None,
    ) -> None:
        self.formatter = formatter if formatter is not None else SubprocessFormatter()
        self.routes_dir = routes_dir
        self.islands_dir = islands_dir
        self.output = output
        self.dev_command = dev_command
        self.templates_dir = templates_dir or Path(__file__).with_name("templates")
        self._env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        self._env.filters["js_string"] = _js_string
        self.logger = get_logger("codegen")

    def entries(self, manifest: Manifest) -> tuple[List[RegistryEntry], List[RegistryEntry]]:
        routables = self._entries(manifest.routables, self.routes_dir, "$")
        hydratables = self._entries(manifest.hydratables, self.islands_dir, "$$")
        return routables, hydratables

    def render_raw(self, manifest: Manifest) -> str:
        """Render the module without running the formatter."""
        routables, hydratables = self.entries(manifest)
        template = self._env.get_template(_TEMPLATE_NAME)
        return template.render(
            routables=routables,
            hydratables=hydratables,
            dev_command=self.dev_command,
        )

    def render(self, manifest: Manifest) -> str:
        """Render the module and return the formatter's canonical text."""
        return self.formatter.format(self.render_raw(manifest))

    def manifest_path(self, project_root: Path | str) -> Path:
        return Path(project_root).resolve() / self.output

    def persist(self, project_root: Path | str, text: str, manifest: Manifest | None = None) -> Path:
        """Overwrite the generated module inside ``project_root``."""
        path = self.manifest_path(project_root)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
        if manifest is not None:
            self.logger.info(
                "The manifest has been generated for %d routes and %d islands.",
                len(manifest.routables),
                len(manifest.hydratables),
            )
        else:
            self.logger.info("The manifest has been written to %s", path)
        return path

    @staticmethod
    def _entries(files: Sequence[str], directory: str, prefix: str) -> List[RegistryEntry]:
        return [
            RegistryEntry(
                binding=f"{prefix}{index}",
                specifier=to_import_specifier(posixpath.join(directory, file)),
            )
            for index, file in enumerate(files)
        ]


__all__ = ["ManifestCodeGenerator", "RegistryEntry", "to_import_specifier"]
