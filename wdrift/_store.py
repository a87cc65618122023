"""
wdrift/_store.py — odczyt i zapis snapshotów na dysku.

load_snapshot(path)            -> StructuredArticle   (SnapshotError przy braku / błędzie)
load_snapshot_dict(path)       -> dict                (surowy JSON, już zwalidowany)
save_snapshot(path, article)   -> None
save_analysis(path, payload)   -> dict                (zapisany słownik)
read_raw(path)                 -> str
write_raw(path, text)          -> None
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from data_model.analysis import AnalysisPayload, payload_to_dict
from data_model.article import StructuredArticle, article_from_dict, article_to_dict
from data_model.errors import SnapshotError
from data_model.schema import validate_article_dict

from ._paths import ensure_dir


def _dump(path: Path, data: Any) -> None:
    ensure_dir(path).write_text(
        json.dumps(data, ensure_ascii=False, indent=2) + "\n",
        encoding="utf-8",
    )


def load_snapshot_dict(path: Path) -> dict[str, Any]:
    if not path.exists():
        raise SnapshotError(str(path), "plik snapshotu nie istnieje")
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SnapshotError(str(path), f"niepoprawny JSON: {e}") from e
    validate_article_dict(data, str(path))
    return data


def load_snapshot(path: Path) -> StructuredArticle:
    return article_from_dict(load_snapshot_dict(path))


def save_snapshot(path: Path, article: StructuredArticle) -> None:
    _dump(path, article_to_dict(article))


def save_analysis(path: Path, payload: AnalysisPayload) -> dict[str, Any]:
    data = payload_to_dict(payload)
    _dump(path, data)
    return data


def read_raw(path: Path) -> str:
    if not path.exists():
        raise SnapshotError(str(path), "plik źródłowy nie istnieje")
    return path.read_text(encoding="utf-8")


def write_raw(path: Path, text: str) -> None:
    ensure_dir(path).write_text(text, encoding="utf-8")
