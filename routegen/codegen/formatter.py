"""Canonical formatting of generated registry modules."""

from __future__ import annotations

import subprocess
from typing import Callable, Protocol, Sequence

from ..config import DEFAULT_FORMATTER_COMMAND
from ..errors import FormatterError
from ..logging import get_logger


class TextCanonicalizer(Protocol):
    """Turns rendered source text into its canonical, formatted form."""

    def format(self, text: str) -> str:  # pragma: no cover - protocol
        ...


class IdentityFormatter:
    """Returns text unchanged; used when no formatter should run."""

    def format(self, text: str) -> str:
        return text


class SubprocessFormatter:
    """Pipes text through an external ``stdin -> stdout`` formatter."""

    def __init__(
        self,
        command: Sequence[str] = DEFAULT_FORMATTER_COMMAND,
        *,
        runner: Callable[..., subprocess.CompletedProcess[str]] | None = None,
    ) -> None:
        if not command:
            raise ValueError("formatter command must not be empty")
        self.command = list(command)
        self._runner = runner or subprocess.run
        self.logger = get_logger("formatter")

    def format(self, text: str) -> str:
        self.logger.debug("Formatting %d characters with %s", len(text), " ".join(self.command))
        try:
            completed = self._runner(
                self.command,
                input=text,
                capture_output=True,
                text=True,
                encoding="utf-8",
                check=False,
            )
        except FileNotFoundError as exc:
            raise FormatterError(
                f"Formatter executable not found: {self.command[0]}",
                command=self.command,
            ) from exc
        except OSError as exc:
            raise FormatterError(
                f"Failed to run formatter {self.command[0]}: {exc}",
                command=self.command,
            ) from exc

        stderr = (completed.stderr or "").strip()
        if completed.returncode != 0:
            detail = f": {stderr}" if stderr else ""
            raise FormatterError(
                f"Formatter {' '.join(self.command)} exited with status {completed.returncode}{detail}",
                command=self.command,
                returncode=completed.returncode,
                stderr=stderr,
            )
        output = completed.stdout or ""
        if not output.strip():
            raise FormatterError(
                f"Formatter {' '.join(self.command)} produced no output",
                command=self.command,
                returncode=completed.returncode,
                stderr=stderr,
            )
        return output


__all__ = ["IdentityFormatter", "SubprocessFormatter", "TextCanonicalizer"]
