from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.project_builder import ProjectBuilder, RecordingFormatter


@pytest.fixture
def project(tmp_path: Path) -> ProjectBuilder:
    """Provide a reusable project builder rooted at the pytest tmp_path."""
    return ProjectBuilder(tmp_path)


@pytest.fixture
def recording_formatter() -> RecordingFormatter:
    return RecordingFormatter()


@pytest.fixture(autouse=True)
def reset_routegen_logger():
    """Drop handlers bound to a previous test's captured streams."""
    yield
    logger = logging.getLogger("routegen")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
