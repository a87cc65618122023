"""Zachłanne parowanie sekcji i claimów."""

from analyzer.alignment import align_claims, align_sections
from conftest import EXTRA_SENTENCE


class TestSectionAlignment:
    def test_pairs_and_leftovers(self, wiki_article, md_article):
        reference = wiki_article("== History ==\nText one here.\n\n== Orbit ==\nText two here.\n")
        candidate = md_article("## Orbit\n\nText two here.\n\n## Culture\n\nText three here.\n")
        result = align_sections(reference, candidate)

        assert [(r.reference and r.reference.heading, r.candidate and r.candidate.heading) for r in result] == [
            ("History", None),
            ("Orbit", "Orbit"),
            (None, "Culture"),
        ]
        assert [r.similarity for r in result] == [0.0, 1.0, 0.0]

    def test_candidate_used_once(self, wiki_article, md_article):
        reference = wiki_article("== Orbit ==\nText one here.\n\n== Orbit ==\nText two here.\n")
        candidate = md_article("## Orbit\n\nText two here.\n")
        first, second = align_sections(reference, candidate)
        assert first.candidate.section_id == "sec-orbit"
        assert second.reference.section_id == "sec-orbit-2"
        assert second.candidate is None

    def test_case_insensitive_headings(self, wiki_article, md_article):
        reference = wiki_article("== Early History ==\nText one here.\n")
        candidate = md_article("## early history\n\nText one here.\n")
        (record,) = align_sections(reference, candidate)
        assert record.similarity == 1.0


class TestClaimAlignment:
    def test_identical_claims_pair(self, reference_article, candidate_article):
        result = align_claims(reference_article, candidate_article)
        paired = [r for r in result if r.reference and r.candidate]
        assert len(paired) == 4
        assert all(r.similarity == 1.0 for r in paired)

    def test_unmatched_candidate_claims_appended(self, reference_article, candidate_article):
        result = align_claims(reference_article, candidate_article)
        tail = [r.candidate.text for r in result if r.reference is None]
        assert tail == [EXTRA_SENTENCE, "NASA Moon Facts"]
        assert all(r.similarity == 0.0 for r in result if r.reference is None)

    def test_empty_candidate(self, reference_article, md_article):
        result = align_claims(reference_article, md_article(""))
        assert len(result) == len(reference_article.claims)
        assert all(r.candidate is None for r in result)
