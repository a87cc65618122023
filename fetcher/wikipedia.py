"""
fetcher/wikipedia.py — surowy wikitekst i metadane rewizji z Wikipedii.

Publiczne API:
  wikitext_url(slug)                     -> str
  fetch_wikitext(topic)                  -> str
  metadata_from_api(payload, topic, now) -> ArticleMetadata
  fetch_wiki_metadata(topic, now)        -> ArticleMetadata
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from data_model.article import ArticleMetadata
from data_model.common import SourceKind
from data_model.topics import Topic

from .errors import FetchError
from .http import get_json, get_text

logger = logging.getLogger(__name__)

WIKI_BASE_URL = "https://en.wikipedia.org"
WIKI_API = f"{WIKI_BASE_URL}/w/api.php"

# znaki zostawiane w ścieżce bez kodowania (poza [A-Za-z0-9_.~-])
_URL_SAFE = "!*'()"


def _underscored(slug: str) -> str:
    return "_".join(slug.split())


def wikitext_url(slug: str) -> str:
    return f"{WIKI_BASE_URL}/wiki/{quote(_underscored(slug), safe=_URL_SAFE)}?action=raw"


def fetch_wikitext(topic: Topic) -> str:
    url = wikitext_url(topic.wikipedia_slug)
    logger.info("Pobieram wikitekst: %s", url)
    return get_text(url)


def metadata_from_api(payload: Any, topic: Topic, now: str) -> ArticleMetadata:
    """
    Odpowiedź action=query (formatversion=2) → ArticleMetadata.

    Braki w odpowiedzi uzupełniane są wartościami zastępczymi
    (URL z samego sluga, rewizja '<slug>-unknown', znacznik czasu `now`).
    """
    query = payload.get("query") if isinstance(payload, dict) else None
    pages = (query.get("pages") if isinstance(query, dict) else None) or []
    if not pages or not isinstance(pages[0], dict):
        raise FetchError(f"Brak metadanych strony Wikipedii '{topic.wikipedia_slug}'.")
    page = pages[0]
    if page.get("missing"):
        raise FetchError(f"Strona Wikipedii '{topic.wikipedia_slug}' nie istnieje.")

    revision = (page.get("revisions") or [{}])[0]
    lang = page.get("pagelanguage") or "en"
    return ArticleMetadata(
        source=SourceKind.WIKIPEDIA,
        page_id=f"{lang}:{topic.wikipedia_slug}",
        title=page.get("title") or topic.title,
        lang=lang,
        canonical_url=(
            page.get("canonicalurl")
            or page.get("fullurl")
            or f"{WIKI_BASE_URL}/wiki/{_underscored(topic.wikipedia_slug)}"
        ),
        revision_id=str(revision["revid"]) if revision.get("revid") else f"{topic.wikipedia_slug}-unknown",
        revision_timestamp=revision.get("timestamp") or now,
    )


def fetch_wiki_metadata(topic: Topic, now: str) -> ArticleMetadata:
    params = {
        "action": "query",
        "prop": "info|revisions",
        "inprop": "url",
        "rvprop": "ids|timestamp",
        "rvlimit": "1",
        "titles": topic.wikipedia_slug,
        "format": "json",
        "formatversion": "2",
    }
    return metadata_from_api(get_json(WIKI_API, params=params), topic, now)
