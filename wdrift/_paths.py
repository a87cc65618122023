"""
wdrift/_paths.py — układ katalogu roboczego.

  <home>/topics.json
  <home>/data/wiki/<id>.wikitext, <id>.parsed.json
  <home>/data/grok/<id>.md,       <id>.parsed.json
  <home>/analysis/<id>.json

<home> = $WDRIFT_HOME, a gdy brak: najbliższy przodek cwd z topics.json,
a w ostateczności samo cwd.
"""

from __future__ import annotations

import os
from pathlib import Path

from data_model.common import SourceKind

HOME_ENV = "WDRIFT_HOME"
TOPICS_FILE = "topics.json"

_RAW_SUFFIX = {
    SourceKind.WIKIPEDIA: ".wikitext",
    SourceKind.GROKIPEDIA: ".md",
}
_SOURCE_DIR = {
    SourceKind.WIKIPEDIA: "wiki",
    SourceKind.GROKIPEDIA: "grok",
}


def workspace_root(cwd: Path | None = None) -> Path:
    env = os.getenv(HOME_ENV, "").strip()
    if env:
        return Path(env).expanduser()
    start = (cwd or Path.cwd()).resolve()
    for candidate in (start, *start.parents):
        if (candidate / TOPICS_FILE).exists():
            return candidate
    return start


def topics_path(root: Path) -> Path:
    return root / TOPICS_FILE


def source_dir(root: Path, source: SourceKind) -> Path:
    return root / "data" / _SOURCE_DIR[source]


def raw_path(root: Path, source: SourceKind, topic_id: str) -> Path:
    return source_dir(root, source) / f"{topic_id}{_RAW_SUFFIX[source]}"


def parsed_path(root: Path, source: SourceKind, topic_id: str) -> Path:
    return source_dir(root, source) / f"{topic_id}.parsed.json"


def analysis_path(root: Path, topic_id: str) -> Path:
    return root / "analysis" / f"{topic_id}.json"


def ensure_dir(path: Path) -> Path:
    """Tworzy katalog nadrzędny pliku `path`; zwraca `path`."""
    path.parent.mkdir(parents=True, exist_ok=True)
    return path
