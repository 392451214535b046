"""Logging helpers for mimecraft.

Modules log through ``logging.getLogger(__name__)``. This module adds a
``TRACE`` level below ``DEBUG`` for per-part and protocol detail, and a
:func:`setup_logging` helper that routes the ``mimecraft`` logger to a Rich
console handler.

Examples:
    >>> from mimecraft.logging import TRACE_LEVEL, setup_logging
    >>> logger = setup_logging("DEBUG")  # doctest: +SKIP
    >>> logger.log(TRACE_LEVEL, "not shown at DEBUG")  # doctest: +SKIP
"""

from __future__ import annotations

import logging
from types import SimpleNamespace

from rich.console import Console
from rich.logging import RichHandler

#: Custom level for very verbose output (rendered parts, SMTP dialogue).
TRACE_LEVEL = 5

#: Name of the package root logger.
ROOT_LOGGER = "mimecraft"

LOGGING_LEVEL = SimpleNamespace(
    TRACE=TRACE_LEVEL,
    DEBUG=logging.DEBUG,
    INFO=logging.INFO,
    WARNING=logging.WARNING,
    ERROR=logging.ERROR,
    CRITICAL=logging.CRITICAL,
)

logging.addLevelName(TRACE_LEVEL, "TRACE")


def resolve_level(level: int | str) -> int:
    """Translate a level name or number into a logging level number.

    Args:
        level: Level number, or a name such as ``"TRACE"`` or ``"debug"``.

    Returns:
        The numeric logging level.

    Raises:
        ValueError: If the name is not a known level.
    """
    if isinstance(level, int):
        return level
    value = getattr(LOGGING_LEVEL, level.strip().upper(), None)
    if value is None:
        raise ValueError(f"Unknown log level: {level!r}")
    return int(value)


def setup_logging(level: int | str = logging.INFO, *, console: Console | None = None) -> logging.Logger:
    """Attach a Rich handler to the package logger.

    Calling it again only updates the level; no duplicate handler is added.

    Args:
        level: Minimum level to emit.
        console: Console to write to (defaults to stderr).

    Returns:
        The configured ``mimecraft`` logger.
    """
    numeric = resolve_level(level)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.setLevel(numeric)

    handler = next((h for h in logger.handlers if isinstance(h, RichHandler)), None)
    if handler is None:
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=False,
            rich_tracebacks=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)
    handler.setLevel(numeric)
    return logger


__all__ = [
    "LOGGING_LEVEL",
    "ROOT_LOGGER",
    "TRACE_LEVEL",
    "resolve_level",
    "setup_logging",
]
