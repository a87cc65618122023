"""Komenda: wdrift topics — lista tematów albo podmiana katalogu topics.json."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from rich import box
from rich.table import Table

from data_model.errors import TopicError
from data_model.topics import Topic, parse_topic_payload, write_topics
from fetcher.errors import FetchError
from fetcher.http import get_json

from .._paths import topics_path
from ._shared import console, resolve_root, selected_topics


def _load_source(source: str) -> list[Topic]:
    if source.startswith(("http://", "https://")):
        payload = get_json(source)
    else:
        path = Path(source)
        if not path.exists():
            raise TopicError(f"Plik źródłowy nie istnieje: {path}")
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise TopicError(f"Niepoprawny JSON w {path}: {e}") from e
    return parse_topic_payload(payload)


def _show_table(topics: list[Topic]) -> None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
    )
    table.add_column("ID", style="bold cyan", no_wrap=True)
    table.add_column("TYTUŁ", max_width=40)
    table.add_column("WIKIPEDIA", no_wrap=True)
    table.add_column("GROKIPEDIA", no_wrap=True)
    table.add_column("KATEGORIA", style="dim")
    for t in topics:
        table.add_row(t.id, t.title, t.wikipedia_slug, t.grokipedia_slug, t.category or "-")
    console.print()
    console.print(table)
    console.print(f"  [dim]{len(topics)} tematów[/dim]\n")


def run(args: argparse.Namespace) -> None:
    root = resolve_root(args)

    if args.source:
        try:
            topics = _load_source(args.source)
        except (TopicError, FetchError) as e:
            console.print(f"[red]Nie udało się wczytać tematów:[/red] {e}")
            raise SystemExit(1)
        path = topics_path(root)
        path.parent.mkdir(parents=True, exist_ok=True)
        write_topics(path, topics)
        console.print(f"[green]Zapisano:[/green] {path}  ({len(topics)} tematów)")
        _show_table(topics)
        return

    _show_table(selected_topics(args, root))


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "topics",
        help="Listuje tematy albo podmienia katalog topics.json.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wyświetla katalog tematów (id, tytuł, slugi Wikipedii i Grokipedii).
Z --source podmienia topics.json rekordami z pliku lub URL-a
(lista albo {"topics": [...]}).

Przykłady:
  wdrift topics
  wdrift topics --topic moon
  wdrift topics --source nowe_tematy.json
  wdrift topics --source https://example.org/topics.json
        """,
    )
    p.add_argument(
        "--topic",
        metavar="ID",
        default=None,
        help="Pokaż tylko jeden temat.",
    )
    p.add_argument(
        "--source",
        metavar="PLIK|URL",
        default=None,
        help="Źródło nowego katalogu tematów (zastępuje topics.json).",
    )
    p.set_defaults(func=run)
