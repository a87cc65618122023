"""Komenda: wdrift fetch — pobranie artykułów z Wikipedii / Grokipedii i parsowanie."""

from __future__ import annotations

import argparse
from pathlib import Path

from analyzer.cache import utc_now_iso
from data_model.article import StructuredArticle, is_empty_article
from data_model.common import SourceKind
from data_model.topics import Topic
from fetcher.errors import FetchError
from fetcher.grokipedia import fetch_grok_citations, fetch_grok_markdown, grok_metadata
from fetcher.wikipedia import fetch_wiki_metadata, fetch_wikitext

from .._ingest import ingest, previous_snapshot, snapshot_citations
from .._paths import raw_path
from .._store import write_raw
from ._shared import console, resolve_root, selected_topics

_SOURCES = {
    "wiki": (SourceKind.WIKIPEDIA,),
    "grok": (SourceKind.GROKIPEDIA,),
    "both": (SourceKind.WIKIPEDIA, SourceKind.GROKIPEDIA),
}


def _fetch_wiki(root: Path, topic: Topic, now: str) -> tuple[StructuredArticle, Path]:
    wikitext = fetch_wikitext(topic)
    metadata = fetch_wiki_metadata(topic, now)
    write_raw(raw_path(root, SourceKind.WIKIPEDIA, topic.id), wikitext)
    return ingest(root, topic, SourceKind.WIKIPEDIA, wikitext, metadata)


def _fetch_grok(root: Path, topic: Topic, now: str) -> tuple[StructuredArticle, Path]:
    url, markdown = fetch_grok_markdown(topic)
    fallback = snapshot_citations(previous_snapshot(root, SourceKind.GROKIPEDIA, topic))
    citations = fetch_grok_citations(topic, fallback=fallback)
    write_raw(raw_path(root, SourceKind.GROKIPEDIA, topic.id), markdown)
    return ingest(root, topic, SourceKind.GROKIPEDIA, markdown, grok_metadata(topic, url, now), citations)


def _report(topic: Topic, source: SourceKind, article: StructuredArticle, path: Path) -> None:
    n_sentences = sum(1 for _ in article.iter_sentences())
    console.print(
        f"  [green]{source}:[/green] {path}  "
        f"[dim]({len(article.sections)} sekcji, {n_sentences} zdań, "
        f"{len(article.references)} przypisów)[/dim]"
    )
    if is_empty_article(article):
        console.print(f"  [yellow]Uwaga: brak treści w artykule {source} dla '{topic.id}'.[/yellow]")


def run(args: argparse.Namespace) -> None:
    root = resolve_root(args)
    topics = selected_topics(args, root)
    now = utc_now_iso()
    failures = 0

    for i, topic in enumerate(topics, 1):
        console.print(f"[{i}/{len(topics)}] [bold cyan]{topic.id}[/bold cyan]  {topic.title}")
        for source in _SOURCES[args.target]:
            fetch = _fetch_wiki if source is SourceKind.WIKIPEDIA else _fetch_grok
            try:
                article, path = fetch(root, topic, now)
            except FetchError as e:
                failures += 1
                console.print(f"  [red]Błąd pobierania ({source}):[/red] {e}")
                continue
            _report(topic, source, article, path)

    if failures:
        console.print(f"[red]Nieudane pobrania: {failures}[/red]")
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "fetch",
        help="Pobiera artykuły (Wikipedia / Grokipedia) i zapisuje snapshoty.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Pobiera surowy tekst artykułów, parsuje go do StructuredArticle
i zapisuje data/<wiki|grok>/<id>.{wikitext|md,parsed.json}.

Przykłady:
  wdrift fetch both
  wdrift fetch wiki --topic moon
  wdrift fetch grok --topic moon
        """,
    )
    p.add_argument(
        "target",
        choices=sorted(_SOURCES),
        help="Źródło: wiki, grok lub both.",
    )
    p.add_argument(
        "--topic",
        metavar="ID",
        default=None,
        help="Tylko jeden temat (domyślnie: wszystkie z topics.json).",
    )
    p.set_defaults(func=run)
