"""Logging configuration.

The library modules only create `logging.getLogger(__name__)` loggers; the CLI
calls `configure_logging` once so records render through Rich on stderr.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

_CONFIGURED = False


def configure_logging(level: str | int = "WARNING", *, console: Console | None = None) -> None:
    global _CONFIGURED

    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    root = logging.getLogger()
    root.setLevel(level)
    # httpx loguea cada request en INFO; lo dejamos para DEBUG explícito.
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
    if _CONFIGURED:
        return

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
    _CONFIGURED = True
