"""
wdrift/_ingest.py — surowy tekst → StructuredArticle → data/<źródło>/<id>.parsed.json.

Wspólne dla `wdrift fetch` (tekst z sieci) i `wdrift parse` (tekst z dysku).
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from article_parser import parse_article
from data_model.article import (
    ArticleMetadata,
    ExternalCitation,
    StructuredArticle,
    article_from_dict,
    is_empty_article,
)
from data_model.common import ParseMode, SourceKind
from data_model.errors import SnapshotError
from data_model.topics import Topic
from fetcher.grokipedia import citations_from_snapshot, grok_metadata, page_url
from fetcher.wikipedia import WIKI_BASE_URL

from ._paths import parsed_path
from ._store import load_snapshot_dict, save_snapshot

logger = logging.getLogger(__name__)

MODE_FOR_SOURCE = {
    SourceKind.WIKIPEDIA: ParseMode.WIKI,
    SourceKind.GROKIPEDIA: ParseMode.MARKDOWN,
}


def previous_snapshot(root: Path, source: SourceKind, topic: Topic) -> dict[str, Any] | None:
    """Poprzedni snapshot tematu albo None (brak / uszkodzony)."""
    path = parsed_path(root, source, topic.id)
    if not path.exists():
        return None
    try:
        return load_snapshot_dict(path)
    except SnapshotError as e:
        logger.warning("Pomijam poprzedni snapshot: %s", e)
        return None


def metadata_from_article(article: StructuredArticle) -> ArticleMetadata:
    return ArticleMetadata(
        source=article.source,
        page_id=article.page_id,
        title=article.title,
        lang=article.lang,
        canonical_url=article.canonical_url,
        revision_id=article.revision.id,
        revision_timestamp=article.revision.timestamp,
    )


def offline_metadata(
    topic: Topic,
    source: SourceKind,
    now: str,
    previous: dict[str, Any] | None = None,
) -> ArticleMetadata:
    """Metadane bez sieci: z poprzedniego snapshotu albo zastępcze."""
    if previous is not None:
        return metadata_from_article(article_from_dict(previous))
    if source is SourceKind.GROKIPEDIA:
        return grok_metadata(topic, page_url(topic.grokipedia_slug), now)
    slug = "_".join(topic.wikipedia_slug.split())
    return ArticleMetadata(
        source=SourceKind.WIKIPEDIA,
        page_id=f"en:{topic.wikipedia_slug}",
        title=topic.title,
        canonical_url=f"{WIKI_BASE_URL}/wiki/{slug}",
        revision_id=f"{topic.wikipedia_slug}-unknown",
        revision_timestamp=now,
    )


def snapshot_citations(previous: dict[str, Any] | None) -> list[ExternalCitation] | None:
    if previous is None:
        return None
    return citations_from_snapshot(previous) or None


def ingest(
    root: Path,
    topic: Topic,
    source: SourceKind,
    raw_text: str,
    metadata: ArticleMetadata,
    citations: list[ExternalCitation] | None = None,
) -> tuple[StructuredArticle, Path]:
    article = parse_article(topic, raw_text, metadata, MODE_FOR_SOURCE[source], citations)
    if is_empty_article(article):
        logger.warning("Parser nie znalazł treści dla %s (%s).", topic.id, source)
    path = parsed_path(root, source, topic.id)
    save_snapshot(path, article)
    return article, path
