"""Parser w trybie wiki: lead, sekcje, przypisy, media, claimy."""

import json

import pytest

from data_model.article import article_from_dict, article_to_dict, is_empty_article
from data_model.common import MediaOrigin, MediaType, ReferenceKind, SourceKind
from data_model.schema import validate_article_dict

from conftest import WIKITEXT, assert_ids_resolve

NON_ASCII_MEDIA = """\
[[File:Луна.jpg|thumb|Moon one]]
The Moon orbits at a distance of {{convert|384400|km}} from Earth.<ref>Orbit note.</ref>

== Surface ==
[[File:Земля.jpg|thumb|Earth two]]
The Earth rises over the lunar horizon.{{efn|Seen from the near side.}}<ref name="apollo">Apollo 8 photo.</ref>
"""


@pytest.fixture
def article(wiki_article):
    return wiki_article(WIKITEXT)


class TestMetadata:
    def test_metadata_copied(self, article):
        assert article.source is SourceKind.WIKIPEDIA
        assert article.page_id == "en:Moon"
        assert article.title == "Moon"
        assert article.revision.id == "1234567"


class TestLead:
    def test_sentences_cleaned(self, article):
        texts = [s.text for p in article.lead.paragraphs for s in p.sentences]
        assert texts == [
            "The Moon is Earth's only natural satellite.",
            "It has a mean radius of 1737 km.",
        ]

    def test_sentence_ids_and_citations(self, article):
        first, second = article.lead.paragraphs[0].sentences
        assert first.sentence_id == "lead-1-1"
        assert first.citation_ids == ["r_nasa"]
        assert second.citation_ids == ["r_auto_1"]

    def test_meta_template_and_comment_removed(self, article):
        all_text = " ".join(s.text for s in article.iter_sentences())
        assert "Short description" not in all_text
        assert "komentarz" not in all_text


class TestSections:
    def test_hierarchy(self, article):
        by_heading = {s.heading: s for s in article.sections}
        assert list(by_heading) == ["Formation", "Giant impact", "References"]
        assert by_heading["Formation"].section_id == "sec-formation"
        assert by_heading["Giant impact"].level == 3
        assert by_heading["Giant impact"].parent_section_id == "sec-formation"
        assert by_heading["References"].parent_section_id is None
        assert by_heading["Giant impact"].anchor == "Giant_impact"

    def test_reflist_section_has_no_paragraphs(self, article):
        assert article.sections[-1].paragraphs == []

    def test_duplicate_headings_get_suffix(self, wiki_article):
        art = wiki_article("== Notes ==\nA first note sentence.\n\n== Notes ==\nA second note sentence.")
        assert [s.section_id for s in art.sections] == ["sec-notes", "sec-notes-2"]


class TestReferences:
    def test_named_reference_normalized_once(self, article):
        refs = {r.citation_id: r for r in article.references}
        assert list(refs) == ["r_nasa", "r_auto_1"]
        nasa = refs["r_nasa"].normalized
        assert nasa.type is ReferenceKind.WEB
        assert nasa.title == "Moon Facts"
        assert nasa.url == "https://moon.nasa.gov/"
        assert nasa.publisher == "NASA"
        assert nasa.year == 2020

    def test_self_closing_reuse_attached_to_sentence(self, article):
        formation = article.sections[0].paragraphs[0].sentences[0]
        assert formation.citation_ids == ["r_nasa"]


class TestMedia:
    def test_infobox_image(self, article):
        infobox = article.media[0]
        assert infobox.media_id == "m_fullmoon2010-jpg"
        assert infobox.origin is MediaOrigin.INFOBOX
        assert infobox.type is MediaType.IMAGE
        assert infobox.caption == "Full moon seen from Earth"
        assert infobox.usage[0].context == "infobox"

    def test_file_link_linked_to_following_sentence(self, article):
        media = {m.media_id: m for m in article.media}["m_moon-formation-jpg"]
        assert media.caption == "Artist impression of the giant impact"
        assert media.usage[0].context == "thumb"
        assert media.usage[0].section_id == "sec-formation"
        assert media.usage[0].sentence_id == "sec-formation-1-1"
        assert article.sections[0].media_ids == ["m_moon-formation-jpg"]

    def test_file_markup_not_in_text(self, article):
        text = article.sections[0].paragraphs[0].sentences[0].text
        assert text == "The Moon formed about 4.51 billion years ago after a giant impact."


class TestClaims:
    def test_one_claim_per_sentence_in_document_order(self, article):
        assert [c.claim_id for c in article.claims] == ["c1", "c2", "c3", "c4"]
        assert article.lead.paragraphs[0].sentences[1].claim_ids == ["c2"]

    def test_entities_from_links(self, article):
        assert [e.label for e in article.claims[0].entities] == ["Earth", "natural satellite"]
        assert [e.label for e in article.claims[3].entities] == ["Theia"]

    def test_numbers(self, article):
        (radius,) = article.claims[1].numbers
        assert (radius.value, radius.unit) == (1737, "km")


class TestRobustness:
    def test_malformed_markup_does_not_raise(self, wiki_article):
        art = wiki_article("Text with {{unclosed template and [[broken link. More text follows here.")
        assert art.source is SourceKind.WIKIPEDIA

    def test_empty_input_is_empty_article(self, wiki_article):
        assert is_empty_article(wiki_article(""))

    def test_deterministic(self, wiki_article):
        assert article_to_dict(wiki_article(WIKITEXT)) == article_to_dict(wiki_article(WIKITEXT))

    def test_snapshot_round_trip(self, article):
        data = json.loads(json.dumps(article_to_dict(article)))
        validate_article_dict(data, "moon.parsed.json")
        assert article_from_dict(data) == article


class TestValueTemplates:
    def test_convert_value_reaches_claim(self, wiki_article):
        art = wiki_article("The Moon orbits at a distance of {{convert|384400|km}} from Earth.")
        (sentence,) = art.lead.paragraphs[0].sentences
        assert sentence.text == "The Moon orbits at a distance of 384400 km from Earth."
        (number,) = art.claims[0].numbers
        assert (number.value, number.unit) == (384400, "km")

    def test_footnote_template_dropped(self, wiki_article):
        art = wiki_article(NON_ASCII_MEDIA)
        (sentence,) = art.sections[0].paragraphs[0].sentences
        assert sentence.text == "The Earth rises over the lunar horizon."


class TestIdIntegrity:
    def test_sample_article(self, article):
        assert_ids_resolve(article)

    def test_files_with_same_slug_stay_separate(self, wiki_article):
        art = wiki_article(NON_ASCII_MEDIA)
        assert_ids_resolve(art)
        assert [(m.media_id, m.caption) for m in art.media] == [
            ("m_jpg", "Moon one"),
            ("m_jpg_2", "Earth two"),
        ]
        assert art.lead.paragraphs[0].sentences[0].media_ids == ["m_jpg"]
        assert art.sections[0].paragraphs[0].sentences[0].media_ids == ["m_jpg_2"]
