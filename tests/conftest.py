"""Shared pytest fixtures for the mimecraft test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["FORCE_COLOR"] = "0"
os.environ["COLUMNS"] = "200"  # Prevent text wrapping in CLI output

import logging
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from mimecraft.logging import ROOT_LOGGER

# pylint: disable=redefined-outer-name


@pytest.fixture(autouse=True)
def _reset_package_logger() -> Iterator[None]:
    """Drop handlers installed by ``setup_logging`` during a test."""
    logger = logging.getLogger(ROOT_LOGGER)
    level = logger.level
    yield
    for handler in logger.handlers[:]:
        if isinstance(handler, RichHandler):
            logger.removeHandler(handler)
    logger.setLevel(level)


@pytest.fixture
def write_config(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a YAML config file into the temporary directory."""

    def _write(content: str, name: str = "mimecraft.conf.yml") -> Path:
        """Write ``content`` and return the file path."""

        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return path

    return _write
