"""
data_model/topics.py — katalog tematów (topics.json).

Topic łączy jeden artykuł referencyjny (Wikipedia) z kandydatem
(Grokipedia). Katalog to lista tematów albo obiekt {"topics": [...]}.

Rekordy z zewnętrznych źródeł mogą podawać slugi wprost
(wikipedia_slug / grokipedia_slug) albo jako pełne URL-e
(wikipedia_url / grokipedia_url / links.wikipedia / links.grokipedia).
"""

from __future__ import annotations

import json
import re
from dataclasses import asdict, dataclass
from pathlib import Path
from typing import Any

from .errors import TopicError

_WIKI_URL_PREFIX = re.compile(r"^https?://en\.wikipedia\.org/wiki/", re.IGNORECASE)
_GROK_URL_PREFIX = re.compile(r"^https?://grokipedia\.com/(?:page/)?", re.IGNORECASE)


@dataclass(slots=True)
class Topic:
    id: str
    title: str
    wikipedia_slug: str
    grokipedia_slug: str
    category: str | None = None


# ---------------------------------------------------------------------------
# Normalizacja rekordów
# ---------------------------------------------------------------------------

def _normalize_slug(value: str | None, prefix: re.Pattern[str]) -> str | None:
    if not value:
        return None
    slug = prefix.sub("", value.strip()).lstrip("/")
    return slug or None


def _slug_for(record: dict[str, Any], field: str) -> str | None:
    prefix = _WIKI_URL_PREFIX if field == "wikipedia" else _GROK_URL_PREFIX
    direct = record.get(f"{field}_slug")
    if direct:
        return _normalize_slug(direct, prefix)
    links = record.get("links") or {}
    link = links.get(field) or record.get(f"{field}_url")
    return _normalize_slug(link, prefix)


def topic_from_record(record: dict[str, Any], index: int) -> Topic | None:
    """Zwraca Topic albo None, gdy rekordowi brakuje tytułu lub slugów."""
    wiki_slug = _slug_for(record, "wikipedia")
    grok_slug = _slug_for(record, "grokipedia")
    title = record.get("title") or (record.get("metadata") or {}).get("title")
    if not isinstance(title, str) or not title or not wiki_slug or not grok_slug:
        return None
    topic_id = record.get("id")
    if not isinstance(topic_id, str) or not topic_id:
        topic_id = wiki_slug.lower() or f"topic-{index}"
    category = record.get("category") or (record.get("metadata") or {}).get("category")
    return Topic(
        id=topic_id,
        title=title,
        wikipedia_slug=wiki_slug,
        grokipedia_slug=grok_slug,
        category=category if isinstance(category, str) else None,
    )


def parse_topic_payload(payload: Any) -> list[Topic]:
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict) and isinstance(payload.get("topics"), list):
        records = payload["topics"]
    else:
        records = []

    topics = [
        t for i, r in enumerate(records)
        if isinstance(r, dict) and (t := topic_from_record(r, i)) is not None
    ]
    if not topics:
        raise TopicError("Brak poprawnych tematów w podanym źródle.")
    return topics


# ---------------------------------------------------------------------------
# Odczyt / zapis / wybór
# ---------------------------------------------------------------------------

def load_topics(path: Path) -> list[Topic]:
    if not path.exists():
        raise TopicError(f"Katalog tematów nie istnieje: {path}")
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise TopicError(f"Niepoprawny JSON w {path}: {e}") from e
    return parse_topic_payload(payload)


def write_topics(path: Path, topics: list[Topic]) -> None:
    data = [asdict(t) for t in topics]
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2) + "\n", encoding="utf-8")


def select_topics(topics: list[Topic], topic_id: str | None = None) -> list[Topic]:
    """Wszystkie tematy albo jeden wskazany; nieznany id → TopicError."""
    if topic_id is None:
        return list(topics)
    for topic in topics:
        if topic.id == topic_id:
            return [topic]
    raise TopicError(f"Nieznany temat '{topic_id}'.")
