"""wdrift/commands/_shared.py — konsola i wybór tematów wspólne dla komend."""

from __future__ import annotations

import argparse
from pathlib import Path

from rich.console import Console

from data_model.errors import TopicError
from data_model.topics import Topic, load_topics, select_topics

from .._paths import topics_path, workspace_root

console = Console()


def resolve_root(args: argparse.Namespace) -> Path:
    home = getattr(args, "home", None)
    return Path(home).expanduser() if home else workspace_root()


def selected_topics(args: argparse.Namespace, root: Path) -> list[Topic]:
    """Tematy z katalogu wg --topic; błąd katalogu → komunikat i exit 1."""
    try:
        topics = load_topics(topics_path(root))
        return select_topics(topics, getattr(args, "topic", None))
    except TopicError as e:
        console.print(f"[red]Błąd katalogu tematów:[/red] {e}")
        raise SystemExit(1)
