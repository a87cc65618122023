"""
article_parser — parser artykułów (wikitekst Wikipedii, Markdown Grokipedii).

Publiczne API:
  parse_article(topic, raw_text, metadata, mode, citations=None) -> StructuredArticle
  parse_wiki_article(topic, wikitext, metadata)                  -> StructuredArticle
  parse_markdown_article(topic, markdown, metadata, citations)    -> StructuredArticle
  split_sentences(text)                                          -> list[SentenceSpan]
"""

from .parser import parse_article, parse_markdown_article, parse_wiki_article
from .sentence_splitter import SentenceSpan, is_rejected, split_sentences
from .registries import MediaRegistry, ReferenceStore

__all__ = [
    "parse_article",
    "parse_wiki_article",
    "parse_markdown_article",
    "split_sentences",
    "is_rejected",
    "SentenceSpan",
    "ReferenceStore",
    "MediaRegistry",
]
