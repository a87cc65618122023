"""
fetcher — pobieranie artykułów przez HTTP (requests).

Publiczne API:
  fetch_wikitext(topic)                 -> str
  fetch_wiki_metadata(topic, now)       -> ArticleMetadata
  fetch_grok_markdown(topic)            -> tuple[str, str]
  grok_metadata(topic, url, now)        -> ArticleMetadata
  fetch_grok_citations(topic, fallback) -> list[ExternalCitation]
  html_to_markdown(html, base_url, title) -> str
  strip_grok_banner(markdown)           -> str
"""

from .errors import FetchError
from .grokipedia import (
    citations_from_api,
    citations_from_snapshot,
    fetch_grok_citations,
    fetch_grok_markdown,
    grok_metadata,
    page_url,
)
from .html_markdown import extract_grok_content, html_to_markdown, strip_grok_banner
from .wikipedia import fetch_wiki_metadata, fetch_wikitext, metadata_from_api, wikitext_url

__all__ = [
    "FetchError",
    "citations_from_api",
    "citations_from_snapshot",
    "fetch_grok_citations",
    "fetch_grok_markdown",
    "grok_metadata",
    "page_url",
    "extract_grok_content",
    "html_to_markdown",
    "strip_grok_banner",
    "fetch_wiki_metadata",
    "fetch_wikitext",
    "metadata_from_api",
    "wikitext_url",
]
