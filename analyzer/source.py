"""
analyzer/source.py — widok artykułu na potrzeby analizatora.

prepare_analyzer_source(article) -> AnalyzerSource

Tekst płaski powstaje ze zdań leadu i sekcji nie-meta (References,
External links, ...). Sekcje meta nie trafiają też do listy nagłówków
porównywanej strukturalnie.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from article_parser.sentence_splitter import split_sentences
from data_model.article import Claim, Paragraph, Section, StructuredArticle

from .config import META_SECTION_HEADINGS
from .similarity import normalize_whitespace, unique_list


@dataclass(slots=True)
class ArticleContent:
    sentences: list[str] = field(default_factory=list)
    sections: list[str] = field(default_factory=list)       # nagłówki sekcji nie-meta
    citations: list[str] = field(default_factory=list)      # url / nazwa / id przypisu
    claims: list[Claim] = field(default_factory=list)


@dataclass(slots=True)
class AnalyzerSource:
    text: str
    content: ArticleContent
    article: StructuredArticle


def is_meta_section(section: Section) -> bool:
    return section.heading.strip().lower() in META_SECTION_HEADINGS


def _paragraph_sentences(paragraphs: list[Paragraph]) -> list[str]:
    return [
        s.text.strip()
        for p in paragraphs
        for s in p.sentences
        if s.text.strip()
    ]


def _content_paragraphs(article: StructuredArticle) -> list[Paragraph]:
    paragraphs = list(article.lead.paragraphs)
    for section in article.sections:
        if not is_meta_section(section):
            paragraphs.extend(section.paragraphs)
    return paragraphs


def _citation_labels(article: StructuredArticle) -> list[str]:
    labels: list[str] = []
    for ref in article.references:
        value = ref.normalized.url or ref.name or ref.citation_id or ref.raw
        if value and value.strip():
            labels.append(value.strip())
    return unique_list(labels)


def prepare_analyzer_source(article: StructuredArticle) -> AnalyzerSource:
    paragraphs = _content_paragraphs(article)
    text = normalize_whitespace("\n".join(
        " ".join(s.text for s in p.sentences) for p in paragraphs
    ))

    sentences = _paragraph_sentences(paragraphs)
    if not sentences and text:
        # snapshot bez zdań: podział tekstu płaskiego
        sentences = [span.text for span in split_sentences(text)]

    content = ArticleContent(
        sentences=sentences,
        sections=[
            s.heading.strip()
            for s in article.sections
            if not is_meta_section(s) and s.heading.strip()
        ],
        citations=_citation_labels(article),
        claims=list(article.claims),
    )
    return AnalyzerSource(text=text, content=content, article=article)
