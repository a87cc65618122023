"""Komenda: wdrift analyse — porównanie snapshotów Wikipedii i Grokipedii."""

from __future__ import annotations

import argparse
import asyncio
from pathlib import Path
from typing import Any

from analyzer import (
    CacheStatus,
    analyze,
    analyze_async,
    compute_content_hash,
    prepare_analyzer_source,
    probe_cached_analysis,
)
from analyzer.config import cache_ttl_hours
from data_model.analysis import AnalysisPayload
from data_model.common import SourceKind
from data_model.errors import SnapshotError
from data_model.topics import Topic

from .._paths import analysis_path, parsed_path
from .._store import load_snapshot, save_analysis
from ._shared import console, resolve_root, selected_topics
from .show import print_summary


def _build_classifier(model: str | None) -> Any:
    try:
        from llm_query import DEFAULT_MODEL, GeminiZeroShotClassifier
    except ImportError as e:
        console.print(f"[red]Błąd importu (brak google-genai?):[/red] {e}")
        raise SystemExit(1)
    return GeminiZeroShotClassifier(model=model or DEFAULT_MODEL)


def _analyse_topic(
    root: Path,
    topic: Topic,
    force: bool,
    classifier: Any | None,
) -> dict[str, Any]:
    reference_article = load_snapshot(parsed_path(root, SourceKind.WIKIPEDIA, topic.id))
    candidate_article = load_snapshot(parsed_path(root, SourceKind.GROKIPEDIA, topic.id))
    reference = prepare_analyzer_source(reference_article)
    candidate = prepare_analyzer_source(candidate_article)
    digest = compute_content_hash(reference.text, candidate.text)

    out = analysis_path(root, topic.id)
    probe = probe_cached_analysis(out, digest, ttl_hours=cache_ttl_hours())
    if probe.status is CacheStatus.FRESH and not force and probe.analysis is not None:
        console.print(f"  [dim]cache aktualny:[/dim] {out}")
        return probe.analysis
    if probe.status is not CacheStatus.MISSING:
        console.print(f"  [dim]cache {probe.status}{f' ({probe.reason})' if probe.reason else ''} → przeliczam[/dim]")

    payload: AnalysisPayload
    if classifier is None:
        payload = analyze(topic, reference, candidate, content_hash=digest)
    else:
        payload = asyncio.run(analyze_async(topic, reference, candidate, classifier, content_hash=digest))
    data = save_analysis(out, payload)
    console.print(f"  [green]Zapisano:[/green] {out}")
    return data


def run(args: argparse.Namespace) -> None:
    root = resolve_root(args)
    topics = selected_topics(args, root)
    classifier = _build_classifier(args.model) if args.semantic else None
    failures = 0

    for i, topic in enumerate(topics, 1):
        console.print(f"[{i}/{len(topics)}] [bold cyan]{topic.id}[/bold cyan]  {topic.title}")
        try:
            data = _analyse_topic(root, topic, args.force, classifier)
        except SnapshotError as e:
            failures += 1
            console.print(f"  [red]Błąd snapshotu:[/red] {e}")
            continue
        print_summary(data)

    if failures:
        console.print(f"[red]Tematy bez analizy: {failures}[/red]")
        raise SystemExit(1)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "analyse",
        aliases=["analyze"],
        help="Porównuje snapshoty i zapisuje analysis/<id>.json.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Porównuje artykuł Wikipedii (referencja) z artykułem Grokipedii
(kandydat) i zapisuje AnalysisPayload do analysis/<id>.json.
Aktualny wynik z cache (ten sam hash treści, wiek < TTL) jest
używany ponownie, chyba że podano --force.

Z --semantic zdania dodane przez kandydata przechodzą dodatkowo
przez klasyfikator zero-shot (Gemini, GEMINI_API_KEY); błąd
klasyfikatora → analiza tylko na słownikach.

Przykłady:
  wdrift analyse
  wdrift analyse --topic moon --force
  wdrift analyse --topic moon --semantic --model gemini-2.5-flash
        """,
    )
    p.add_argument(
        "--topic",
        metavar="ID",
        default=None,
        help="Tylko jeden temat (domyślnie: wszystkie z topics.json).",
    )
    p.add_argument(
        "--force",
        action="store_true",
        help="Przelicz nawet przy aktualnym cache.",
    )
    p.add_argument(
        "--semantic",
        action="store_true",
        help="Włącz hybrydową detekcję biasu z klasyfikatorem Gemini.",
    )
    p.add_argument(
        "--model",
        metavar="MODEL",
        default=None,
        help="Model Gemini dla --semantic (domyślnie: $WDRIFT_GEMINI_MODEL).",
    )
    p.set_defaults(func=run)
