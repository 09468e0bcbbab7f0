"""Logging setup for CLI runs — stdlib logging through a Rich handler."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

from blobwright.core.errors import ConfigurationError


def configure_logging(level: str, console: Console | None = None) -> None:
    """Route all ``blobwright`` loggers to stderr at ``level``."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        raise ConfigurationError(f"unknown log level {level!r}")

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger("blobwright")
    root.handlers[:] = [handler]
    root.setLevel(numeric)
