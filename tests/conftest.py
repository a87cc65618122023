"""Wspólne fixtures: próbki wikitekstu / Markdown, metadane, fałszywy klasyfikator."""

from __future__ import annotations

from collections.abc import Sequence

import pytest

from article_parser import parse_markdown_article, parse_wiki_article
from data_model.article import ArticleMetadata, StructuredArticle
from data_model.common import SourceKind
from data_model.topics import Topic

# Bogatsza próbka do testów parsera (linki, przypisy, infobox, media, hierarchia).
WIKITEXT = """\
{{Short description|Natural satellite of Earth}}
<!-- komentarz redakcyjny -->
{{Infobox planet
| name = Moon
| image = FullMoon2010.jpg
| caption = Full moon seen from [[Earth]]
}}
The '''Moon''' is [[Earth]]'s only [[natural satellite]].<ref name="nasa">{{cite web |title=Moon Facts |url=https://moon.nasa.gov/ |publisher=NASA |year=2020}}</ref> It has a mean radius of 1737 km.<ref>Plain note about radius.</ref>

== Formation ==
[[File:Moon formation.jpg|thumb|upright=1.2|Artist impression of the giant impact]]
The Moon formed about 4.51 billion years ago after a giant impact.<ref name="nasa"/>

=== Giant impact ===
The impactor is often called [[Theia (planet)|Theia]] by planetary scientists.

== References ==
{{Reflist}}
"""

# Para do testów analizatora: ta sama treść po obu stronach + jedno zdanie kandydata.
REFERENCE_WIKITEXT = """\
The '''Moon''' is Earth's only natural satellite.<ref name="nasa">{{cite web |title=Moon Facts |url=https://moon.nasa.gov/ |publisher=NASA}}</ref> It has a mean radius of 1737 km.

== Formation ==
The Moon formed about 4.51 billion years ago after a giant impact.

== Giant impact ==
The impactor is often called Theia by planetary scientists.

== References ==
{{Reflist}}
"""

EXTRA_SENTENCE = "Some conspiracy theorists reportedly claim that the Moon is hollow inside."

CANDIDATE_MARKDOWN = f"""\
# Moon

The Moon is Earth's only natural satellite. It has a mean radius of 1737 km.

## Formation

The Moon formed about 4.51 billion years ago after a giant impact.

Fact-checked by Grok 2 weeks ago

## Giant impact

The impactor is often called Theia by planetary scientists. {EXTRA_SENTENCE}

## References

1. [NASA Moon Facts](https://moon.nasa.gov/)
"""

REFERENCE_SENTENCES = [
    "The Moon is Earth's only natural satellite.",
    "It has a mean radius of 1737 km.",
    "The Moon formed about 4.51 billion years ago after a giant impact.",
    "The impactor is often called Theia by planetary scientists.",
]


@pytest.fixture
def topic() -> Topic:
    return Topic(id="moon", title="Moon", wikipedia_slug="Moon", grokipedia_slug="Moon", category="science")


@pytest.fixture
def wiki_meta() -> ArticleMetadata:
    return ArticleMetadata(
        source=SourceKind.WIKIPEDIA,
        page_id="en:Moon",
        title="Moon",
        canonical_url="https://en.wikipedia.org/wiki/Moon",
        revision_id="1234567",
        revision_timestamp="2025-01-01T00:00:00Z",
    )


@pytest.fixture
def grok_meta() -> ArticleMetadata:
    return ArticleMetadata(
        source=SourceKind.GROKIPEDIA,
        page_id="grok:moon",
        title="Moon",
        canonical_url="https://grokipedia.com/page/Moon",
        revision_id="grok-2025-01-02T00:00:00.000Z",
        revision_timestamp="2025-01-02T00:00:00.000Z",
    )


@pytest.fixture
def wiki_article(topic, wiki_meta):
    """Fabryka: wikitekst → StructuredArticle."""
    def build(text: str) -> StructuredArticle:
        return parse_wiki_article(topic, text, wiki_meta)
    return build


@pytest.fixture
def md_article(topic, grok_meta):
    """Fabryka: Markdown → StructuredArticle."""
    def build(text: str, citations=None) -> StructuredArticle:
        return parse_markdown_article(topic, text, grok_meta, citations)
    return build


@pytest.fixture
def reference_article(wiki_article) -> StructuredArticle:
    return wiki_article(REFERENCE_WIKITEXT)


@pytest.fixture
def candidate_article(md_article) -> StructuredArticle:
    return md_article(CANDIDATE_MARKDOWN)


# ---------------------------------------------------------------------------
# Fałszywy klasyfikator zero-shot
# ---------------------------------------------------------------------------

class FakeClassifier:
    """Zwraca wyniki z `scores_by_sentence` (albo `default`) i zapamiętuje wywołania."""

    def __init__(
        self,
        scores_by_sentence: dict[str, dict[str, float]] | None = None,
        default: dict[str, float] | None = None,
    ) -> None:
        self.scores_by_sentence = scores_by_sentence or {}
        self.default = default or {"neutral encyclopedic tone": 1.0}
        self.calls: list[str] = []

    def classify(self, sentence: str, labels: Sequence[str]) -> dict[str, float]:
        self.calls.append(sentence)
        return dict(self.scores_by_sentence.get(sentence, self.default))


class FailingClassifier:
    def classify(self, sentence: str, labels: Sequence[str]) -> dict[str, float]:
        raise RuntimeError("model unavailable")


@pytest.fixture
def fake_classifier_cls():
    return FakeClassifier


@pytest.fixture
def failing_classifier():
    return FailingClassifier()


# ---------------------------------------------------------------------------
# Spójność identyfikatorów snapshotu
# ---------------------------------------------------------------------------

def assert_ids_resolve(article: StructuredArticle) -> None:
    """
    Każdy citation_id / media_id zdania istnieje dokładnie raz w artykule,
    a każde zdanie ma dokładnie jeden claim o tym samym tekście.
    """
    citation_ids = [r.citation_id for r in article.references]
    media_ids = [m.media_id for m in article.media]
    claims = {c.claim_id: c for c in article.claims}
    assert len(claims) == len(article.claims)

    paragraphs = [*article.lead.paragraphs]
    for section in article.sections:
        paragraphs.extend(section.paragraphs)
    sentences = [s for p in paragraphs for s in p.sentences]

    for sentence in sentences:
        for citation_id in sentence.citation_ids:
            assert citation_ids.count(citation_id) == 1, citation_id
        for media_id in sentence.media_ids:
            assert media_ids.count(media_id) == 1, media_id
        (claim_id,) = sentence.claim_ids
        assert claims[claim_id].text == sentence.text
    assert len(sentences) == len(article.claims)
