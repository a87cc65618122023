"""
fetcher/grokipedia.py — strona Grokipedii (HTML → Markdown) i jej przypisy.

Publiczne API:
  page_url(slug)                          -> str
  fetch_grok_markdown(topic)              -> tuple[str, str]    (url, markdown)
  grok_metadata(topic, url, now)          -> ArticleMetadata
  citations_from_api(payload)             -> list[ExternalCitation]
  citations_from_snapshot(snapshot)       -> list[ExternalCitation]
  fetch_grok_citations(topic, fallback)   -> list[ExternalCitation]
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from data_model.article import ArticleMetadata, ExternalCitation
from data_model.common import SourceKind
from data_model.topics import Topic

from .errors import FetchError
from .html_markdown import extract_grok_content
from .http import get_json, get_text

logger = logging.getLogger(__name__)

GROK_BASE_URL = "https://grokipedia.com"
GROK_API = f"{GROK_BASE_URL}/api/page"
_URL_SAFE = "!*'()"
# id przypisów z API w snapshotach: {source}_citation_{slug}
_EXTERNAL_ID_PREFIX = f"{SourceKind.GROKIPEDIA}_citation_"


def _clean_slug(slug: str) -> str:
    slug = slug.strip().lstrip("/")
    if slug.lower().startswith("page/"):
        slug = slug[5:]
    return slug


def page_url(slug: str) -> str:
    return f"{GROK_BASE_URL}/page/{quote(_clean_slug(slug), safe=_URL_SAFE)}"


def fetch_grok_markdown(topic: Topic) -> tuple[str, str]:
    url = page_url(topic.grokipedia_slug)
    logger.info("Pobieram stronę Grokipedii: %s", url)
    raw = get_text(url)
    return url, extract_grok_content(raw, GROK_BASE_URL, topic.title)


def grok_metadata(topic: Topic, url: str, now: str) -> ArticleMetadata:
    """Grokipedia nie publikuje rewizji — id rewizji to znacznik czasu pobrania."""
    return ArticleMetadata(
        source=SourceKind.GROKIPEDIA,
        page_id=f"grok:{topic.id}",
        title=topic.title,
        lang="en",
        canonical_url=url,
        revision_id=f"grok-{now}",
        revision_timestamp=now,
    )


# ---------------------------------------------------------------------------
# Przypisy
# ---------------------------------------------------------------------------

def _opt_str(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def citations_from_api(payload: Any) -> list[ExternalCitation]:
    if not isinstance(payload, dict) or not isinstance(payload.get("page"), dict):
        return []
    page = payload["page"]
    entries = page.get("citations") or []
    citations: list[ExternalCitation] = []
    for entry in entries:
        if not isinstance(entry, dict) or not _opt_str(entry.get("url")):
            continue
        citations.append(ExternalCitation(
            url=entry["url"],
            id=_opt_str(entry.get("id")),
            title=_opt_str(entry.get("title")),
            description=_opt_str(entry.get("description")),
            favicon=_opt_str(entry.get("favicon")),
        ))
    return citations


def citations_from_snapshot(snapshot: dict[str, Any]) -> list[ExternalCitation]:
    """
    Przypisy API odtworzone z wcześniejszego data/grok/<id>.parsed.json.

    Linki z treści (r_link_N) parser odtwarza sam, więc są pomijane.
    """
    restored: list[ExternalCitation] = []
    for ref in snapshot.get("references") or []:
        citation_id = _opt_str(ref.get("citation_id")) or ""
        if not citation_id.startswith(_EXTERNAL_ID_PREFIX):
            continue
        normalized = ref.get("normalized") or {}
        url = _opt_str(normalized.get("url"))
        if not url:
            continue
        restored.append(ExternalCitation(
            url=url,
            id=citation_id[len(_EXTERNAL_ID_PREFIX):] or None,
            title=_opt_str(ref.get("name")) or _opt_str(normalized.get("title")),
            description=_opt_str(ref.get("raw")) if ref.get("raw") != url else None,
        ))
    return restored


def fetch_grok_citations(
    topic: Topic,
    fallback: list[ExternalCitation] | None = None,
) -> list[ExternalCitation]:
    """Przypisy z API; błąd → ostrzeżenie i `fallback` (albo pusta lista)."""
    slug = _clean_slug(topic.grokipedia_slug)
    if not slug:
        return []
    params = {"slug": slug, "includeContent": "false", "validateLinks": "true"}
    try:
        return citations_from_api(get_json(GROK_API, params=params))
    except FetchError as exc:
        logger.warning("Nie udało się pobrać przypisów dla %s: %s", topic.id, exc)
        return list(fallback or [])
