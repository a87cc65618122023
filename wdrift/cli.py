"""
wdrift — narzędzie CLI dla wikidrift.

Użycie:
  wdrift [--home KATALOG] [--log-level POZIOM] <komenda> [opcje]

Komendy:
  topics    Listuje tematy albo podmienia katalog topics.json.
  fetch     Pobiera artykuły (Wikipedia / Grokipedia) i zapisuje snapshoty.
  parse     Parsuje lokalny surowy tekst artykułu do snapshotu.
  analyse   Porównuje snapshoty i zapisuje analysis/<id>.json.
  show      Wyświetla zapisaną analizę tematu.
"""

from __future__ import annotations

import argparse
import sys

from dotenv import find_dotenv, load_dotenv

# Windows: terminal może używać cp1252, wymuszamy UTF-8, żeby polskie znaki
# w tekstach pomocy argparse były wypisywane poprawnie.
if hasattr(sys.stdout, "reconfigure"):
    sys.stdout.reconfigure(encoding="utf-8", errors="replace")
if hasattr(sys.stderr, "reconfigure"):
    sys.stderr.reconfigure(encoding="utf-8", errors="replace")

from wdrift import __version__
from wdrift._logging import configure_logging
from wdrift.commands import topics as cmd_topics
from wdrift.commands import fetch as cmd_fetch
from wdrift.commands import parse as cmd_parse
from wdrift.commands import analyse as cmd_analyse
from wdrift.commands import show as cmd_show


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="wdrift",
        description="wikidrift — porównanie artykułów Wikipedii i Grokipedii.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version", action="version", version=f"wdrift {__version__}"
    )
    parser.add_argument(
        "--home",
        metavar="KATALOG",
        default=None,
        help="Katalog roboczy (domyślnie: $WDRIFT_HOME albo najbliższy z topics.json).",
    )
    parser.add_argument(
        "--log-level",
        metavar="POZIOM",
        default=None,
        help="Poziom logowania: DEBUG, INFO, WARNING... (domyślnie: $WDRIFT_LOG_LEVEL).",
    )

    subparsers = parser.add_subparsers(
        title="komendy",
        metavar="<komenda>",
        dest="command",
    )
    subparsers.required = True

    cmd_topics.add_parser(subparsers)
    cmd_fetch.add_parser(subparsers)
    cmd_parse.add_parser(subparsers)
    cmd_analyse.add_parser(subparsers)
    cmd_show.add_parser(subparsers)

    return parser


def main(argv: list[str] | None = None) -> None:
    # .env z katalogu bieżącego lub nadrzędnych; zmienne środowiska mają pierwszeństwo
    load_dotenv(find_dotenv(usecwd=True))
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
