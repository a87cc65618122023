"""
wdrift/_logging.py — konfiguracja loggera głównego dla CLI.

configure_logging() wywoływane raz w main(); ponowne wywołanie
(gdy root ma już handlery) zmienia tylko poziom.
"""

from __future__ import annotations

import logging
import os

from rich.console import Console
from rich.logging import RichHandler

LOG_LEVEL_ENV = "WDRIFT_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


def resolve_level(name: str | None) -> int:
    raw = (name or os.getenv(LOG_LEVEL_ENV) or DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(raw)
    return level if isinstance(level, int) else logging.WARNING


def configure_logging(level: str | None = None) -> None:
    root = logging.getLogger()
    root.setLevel(resolve_level(level))
    if root.handlers:
        return

    handler = RichHandler(
        console=Console(stderr=True),
        show_path=False,
        rich_tracebacks=True,
    )
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    root.addHandler(handler)
