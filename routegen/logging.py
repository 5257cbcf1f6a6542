"""Console and file logging for the manifest dev loop."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import TextIO

_ROOT = "routegen"


class _ConsoleFormatter(logging.Formatter):
    """Prints progress lines bare and tags everything else with its level."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        if record.levelno == logging.INFO:
            return message
        return f"[{_ROOT}] {record.levelname} {message}"


def get_logger(name: str | None = None) -> logging.Logger:
    """Return ``routegen.<name>``, or the package logger itself."""
    return logging.getLogger(f"{_ROOT}.{name}" if name else _ROOT)


def configure_logging(
    *,
    verbose: bool = False,
    stream: TextIO | None = None,
    log_file: Path | None = None,
) -> logging.Logger:
    """Route ``routegen`` records to ``stream`` (stderr) and optionally ``log_file``.

    Safe to call once per dev cycle: handlers from an earlier call are
    replaced rather than added to.
    """
    level = logging.DEBUG if verbose else logging.INFO
    logger = logging.getLogger(_ROOT)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(stream if stream is not None else sys.stderr)
    console.setLevel(level)
    console.setFormatter(_ConsoleFormatter("%(message)s"))
    logger.addHandler(console)

    if log_file is not None:
        sink = logging.FileHandler(log_file, encoding="utf-8")
        sink.setLevel(level)
        sink.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))
        logger.addHandler(sink)

    return logger


__all__ = ["configure_logging", "get_logger"]
