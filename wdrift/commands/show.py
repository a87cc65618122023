"""Komenda: wdrift show — podgląd analysis/<id>.json w terminalu."""

from __future__ import annotations

import argparse
import json
from typing import Any

from rich import box
from rich.table import Table
from rich.text import Text

from .._paths import analysis_path
from ._shared import console, resolve_root, selected_topics

SNIPPET_LIMIT = 160

_LABEL_STYLE = {
    "aligned": "green",
    "possible_divergence": "yellow",
    "suspected_divergence": "red",
}
_EVENT_GROUPS = (
    ("discrepancies", "Rozbieżności"),
    ("bias_events", "Bias"),
    ("hallucination_events", "Halucynacje"),
    ("factual_errors", "Błędy faktograficzne"),
)


def truncate(text: str, limit: int = SNIPPET_LIMIT) -> str:
    text = " ".join(text.split())
    return text if len(text) <= limit else text[: limit - 1].rstrip() + "…"


def diff_style(line: str) -> str:
    if line.startswith(("+++", "---")):
        return "bold"
    if line.startswith("@@"):
        return "cyan"
    if line.startswith("+"):
        return "green"
    if line.startswith("-"):
        return "red"
    return "dim"


# ---------------------------------------------------------------------------
# Nagłówek
# ---------------------------------------------------------------------------

def print_summary(data: dict[str, Any]) -> None:
    stats = data.get("stats") or {}
    ratio = stats.get("similarity_ratio") or {}
    confidence = data.get("confidence") or {}
    label = str(confidence.get("label", "?"))
    style = _LABEL_STYLE.get(label, "white")
    console.print(
        f"  zdania [bold]{ratio.get('sentence', 0):.3f}[/bold]  "
        f"słowa [bold]{ratio.get('word', 0):.3f}[/bold]  "
        f"n-gramy [bold]{data.get('ngram_overlap', 0):.3f}[/bold]  "
        f"→ [{style}]{label}[/{style}] ({confidence.get('score', 0)})"
    )
    console.print(
        f"  [dim]brakujące {stats.get('missing_sentence_total', 0)}, "
        f"dodane {stats.get('extra_sentence_total', 0)}, "
        f"przeredagowane {stats.get('reworded_sentence_count', 0)}, "
        f"zgodne {stats.get('agreement_count', 0)}; "
        f"bias {len(data.get('bias_events') or [])}, "
        f"halucynacje {len(data.get('hallucination_events') or [])}, "
        f"błędy {len(data.get('factual_errors') or [])}[/dim]"
    )


# ---------------------------------------------------------------------------
# Szczegóły
# ---------------------------------------------------------------------------

def _print_snippets(title: str, sentences: list[str], limit: int) -> None:
    if not sentences:
        return
    console.print(f"\n[bold]{title}[/bold] [dim]({len(sentences)})[/dim]")
    for sentence in sentences[:limit]:
        console.print(f"  • {truncate(sentence)}")
    if len(sentences) > limit:
        console.print(f"  [dim]… i {len(sentences) - limit} więcej[/dim]")


def _events_table(data: dict[str, Any]) -> Table | None:
    table = Table(
        box=box.SIMPLE_HEAD,
        show_header=True,
        header_style="bold white",
        row_styles=["", "dim"],
    )
    table.add_column("GRUPA", no_wrap=True, style="bold cyan")
    table.add_column("TYP", no_wrap=True)
    table.add_column("SEV", justify="right", no_wrap=True)
    table.add_column("OPIS", max_width=50)
    table.add_column("DOWÓD", max_width=60)

    rows = 0
    for key, group in _EVENT_GROUPS:
        for record in data.get(key) or []:
            evidence = record.get("evidence") or {}
            proof = evidence.get("candidate") or evidence.get("reference") or ""
            severity = record.get("severity")
            table.add_row(
                group,
                str(record.get("category") or record.get("type", "")),
                "-" if severity is None else str(severity),
                record.get("description", ""),
                truncate(proof),
            )
            rows += 1
    return table if rows else None


def _print_diff(lines: list[str]) -> None:
    if not lines:
        return
    console.print("\n[bold]Próbka diffu[/bold]")
    for line in lines:
        console.print(Text(line, style=diff_style(line)))


def show_analysis(data: dict[str, Any], limit: int, with_diff: bool) -> None:
    console.print(f"\n[bold cyan]{data.get('topic_id', '?')}[/bold cyan]  [bold]{data.get('title', '')}[/bold]")
    print_summary(data)

    confidence = data.get("confidence") or {}
    for reason in confidence.get("rationale") or []:
        console.print(f"  [dim]- {reason}[/dim]")

    _print_snippets("Brakujące w kandydacie", data.get("truly_missing_sentences") or [], limit)
    _print_snippets("Dodane przez kandydata", data.get("extra_sentences") or [], limit)

    sections_missing = data.get("sections_missing") or []
    sections_extra = data.get("sections_extra") or []
    if sections_missing or sections_extra:
        console.print("\n[bold]Sekcje[/bold]")
        if sections_missing:
            console.print(f"  [red]brak:[/red] {', '.join(sections_missing)}")
        if sections_extra:
            console.print(f"  [green]nadmiar:[/green] {', '.join(sections_extra)}")

    table = _events_table(data)
    if table is not None:
        console.print()
        console.print(table)

    if with_diff:
        _print_diff(data.get("diff_sample") or [])
    console.print()


def run(args: argparse.Namespace) -> None:
    root = resolve_root(args)
    for topic in selected_topics(args, root):
        path = analysis_path(root, topic.id)
        if not path.exists():
            console.print(f"[yellow]Brak analizy dla '{topic.id}', uruchom: wdrift analyse --topic {topic.id}[/yellow]")
            continue
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            console.print(f"[red]Niepoprawny plik analizy {path}:[/red] {e}")
            raise SystemExit(1)
        if args.json:
            console.print_json(data=data)
            continue
        show_analysis(data, args.limit, not args.no_diff)


def add_parser(subparsers: argparse._SubParsersAction) -> None:  # type: ignore[type-arg]
    p = subparsers.add_parser(
        "show",
        help="Wyświetla zapisaną analizę tematu.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description="""
Wyświetla analysis/<id>.json: podobieństwa, etykietę zaufania,
brakujące / dodane zdania, tabelę rozbieżności i próbkę diffu.

Przykłady:
  wdrift show --topic moon
  wdrift show --topic moon --limit 20 --no-diff
  wdrift show --topic moon --json
        """,
    )
    p.add_argument(
        "--topic",
        metavar="ID",
        default=None,
        help="Tylko jeden temat (domyślnie: wszystkie z topics.json).",
    )
    p.add_argument(
        "--limit",
        type=int,
        default=10,
        metavar="N",
        help="Maks. liczba zdań na listę (domyślnie: 10).",
    )
    p.add_argument(
        "--no-diff",
        action="store_true",
        help="Nie pokazuj próbki diffu.",
    )
    p.add_argument(
        "--json",
        action="store_true",
        help="Wypisz surowy JSON analizy.",
    )
    p.set_defaults(func=run)
