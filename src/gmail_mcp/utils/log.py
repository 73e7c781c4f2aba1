"""Logging setup — all diagnostics go to stderr, never to the protocol stream."""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

stderr_console = Console(stderr=True)


def configure_logging(level: str | int = "INFO") -> None:
    """Route the root logger through a stderr :class:`RichHandler`."""
    handler = RichHandler(
        console=stderr_console,
        show_path=False,
        rich_tracebacks=True,
    )
    logging.basicConfig(
        level=level.upper() if isinstance(level, str) else level,
        format="%(name)s: %(message)s",
        datefmt="[%X]",
        handlers=[handler],
        force=True,
    )
