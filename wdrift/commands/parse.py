"""Komenda: wdrift parse — ponowne parsowanie zapisanego surowego tekstu (bez sieci)."""

from __future__ import annotations

import argparse
from pathlib import Path

from analyzer.cache import utc_now_iso
from data_model.article import is_empty_article
from data_model.common import SourceKind
from data_model.errors import SnapshotError

from .._ingest import ingest, offline_metadata, previous_snapshot, snapshot_citations
from .._paths import raw_path
from .._store import read_raw
from ._shared import console, resolve_root, selected_topics

_SOURCES = {
    "wiki": SourceKind.WIKIPEDIA,
    "grok": SourceKind.GROKIPEDIA,
}


def run(args: argparse.Namespace) -> None:
    root = resolve_root(args)
    source = _SOURCES[args.source]
    topics = selected_topics(args, root)
    if args.file and len(topics) != 1:
        console.print("[red]--file wymaga wskazania jednego tematu (--topic).[/red]")
        raise SystemExit(1)

    now = utc_now_iso()
    for topic in topics:
        path = Path(args.file) if args.file else raw_path(root, source, topic.id)
        try:
            raw = read_raw(path)
        except SnapshotError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)

        previous = previous_snapshot(root, source, topic)
        metadata = offline_metadata(topic, source, now, previous)
        citations = snapshot_citations(previous) if source is SourceKind.GROKIPEDIA else None
        article, out = ingest(root, topic, source, raw, metadata, citations)

        console.print(
            f"[green]{topic.id}:[/green] {path} → {out}  "
            f"[dim]({len(article.sections)} sekcji, {len(article.claims)} twierdzeń)[/dim]"
        )
        if is_empty_article(article):
            console.print(f"[yellow]Uwaga: brak treści w artykule dla '{topic.id}'.[/yellow]")


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "parse",
        help="Parsuje lokalny surowy tekst artykułu do snapshotu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Ponownie parsuje zapisany wikitekst / Markdown bez dostępu do sieci.
Metadane i przypisy Grokipedii brane są z poprzedniego snapshotu,
jeśli istnieje.

Przykłady:
  wdrift parse wiki
  wdrift parse grok --topic moon
  wdrift parse wiki --topic moon --file moon.wikitext
        """,
    )
    p.add_argument(
        "source",
        choices=sorted(_SOURCES),
        help="Rodzaj tekstu: wiki (wikitekst) lub grok (Markdown).",
    )
    p.add_argument(
        "--topic",
        metavar="ID",
        default=None,
        help="Tylko jeden temat (domyślnie: wszystkie z topics.json).",
    )
    p.add_argument(
        "--file",
        metavar="PLIK",
        default=None,
        help="Inny plik źródłowy niż data/<źródło>/<id>.* (wymaga --topic).",
    )
    p.set_defaults(func=run)
