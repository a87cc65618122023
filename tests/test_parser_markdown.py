"""Parser w trybie Markdown (Grokipedia)."""

import pytest

from data_model.article import ExternalCitation
from data_model.common import MediaType, SourceKind

from conftest import assert_ids_resolve

MARKDOWN = """\
# Moon

The Moon is Earth's only natural satellite. It is [tidally locked](https://science.nasa.gov/moon/tidal) to Earth.

Search ⌘K

## Formation

The Moon formed after a giant impact. ![Giant impact illustration](https://example.org/impact.png)

Fact-checked by Grok 2 weeks ago

### Theia

The impactor is often called Theia by planetary scientists.
"""


@pytest.fixture
def article(md_article):
    return md_article(MARKDOWN)


class TestStructure:
    def test_title_heading_not_a_section(self, article):
        assert article.source is SourceKind.GROKIPEDIA
        assert [s.heading for s in article.sections] == ["Formation", "Theia"]

    def test_lead_sentences(self, article):
        texts = [s.text for s in article.lead.paragraphs[0].sentences]
        assert texts == [
            "The Moon is Earth's only natural satellite.",
            "It is tidally locked to Earth.",
        ]

    def test_nested_heading_parent(self, article):
        theia = article.sections[1]
        assert theia.level == 3
        assert theia.parent_section_id == "sec-formation"

    def test_banner_lines_dropped(self, article):
        texts = " ".join(s.text for s in article.iter_sentences())
        assert "Fact-checked" not in texts
        assert "Search" not in texts
        assert len(article.lead.paragraphs) == 1


class TestLinksAndMedia:
    def test_link_becomes_citation(self, article):
        sentence = article.lead.paragraphs[0].sentences[1]
        assert sentence.citation_ids == ["r_link_1"]
        (ref,) = article.references
        assert ref.normalized.url == "https://science.nasa.gov/moon/tidal"
        assert ref.normalized.title == "tidally locked"

    def test_image_registered_with_alt(self, article):
        (media,) = article.media
        assert media.type is MediaType.IMAGE
        assert media.alt_text == "Giant impact illustration"
        assert media.usage[0].section_id == "sec-formation"
        assert media.usage[0].sentence_id == "sec-formation-1-2"

    def test_external_citations_registered(self, md_article):
        art = md_article(MARKDOWN, [ExternalCitation(url="https://moon.nasa.gov/", id="a1", title="NASA")])
        ids = [r.citation_id for r in art.references]
        assert ids == ["r_link_1", "grokipedia_citation_a1"]


class TestLeadFallbacks:
    def test_lead_synthesized_from_long_paragraph(self, md_article):
        long_sentence = (
            "The Moon is Earth's only natural satellite and it is the fifth largest "
            "satellite in the Solar System overall."
        )
        art = md_article(
            f"## Overview\n\nShort line here now.\n\n{long_sentence}\n\n## Orbit\n\nIt orbits Earth every month."
        )
        (sentence,) = art.lead.paragraphs[0].sentences
        assert sentence.sentence_id == "lead-1-1"
        assert sentence.text == long_sentence
        assert sentence.claim_ids == ["c1"]

    def test_text_without_headings_is_lead(self, md_article):
        art = md_article("Just one paragraph of text. Another sentence follows.")
        assert art.sections == []
        assert len(art.lead.paragraphs[0].sentences) == 2

    def test_empty_markdown(self, md_article):
        art = md_article("")
        assert art.lead.paragraphs == []
        assert art.claims == []


class TestIdIntegrity:
    def test_sample_with_external_citations(self, md_article):
        art = md_article(MARKDOWN, [ExternalCitation(url="https://moon.nasa.gov/", id="a1", title="NASA")])
        assert_ids_resolve(art)

    def test_synthesized_lead_shares_citations_and_media(self, md_article):
        long_sentence = (
            "The Moon is Earth's only [natural satellite](https://example.org/sat) and it is "
            "the fifth largest satellite in the Solar System overall."
        )
        art = md_article(
            f"## Overview\n\n{long_sentence} ![Full moon](https://example.org/full.png)\n\n"
            "## Orbit\n\nIt orbits [Earth](https://example.org/earth) every month."
        )
        assert_ids_resolve(art)
        lead_sentence = art.lead.paragraphs[0].sentences[0]
        assert lead_sentence.citation_ids == ["r_link_1"]
        assert art.claims[0].claim_id == "c1"
        assert lead_sentence.claim_ids == ["c1"]
