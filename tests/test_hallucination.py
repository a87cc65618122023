"""Spekulatywny język w zdaniach kandydata."""

from analyzer.hallucination import detect_hallucinations, has_speculative_language
from data_model.article import Claim
from conftest import EXTRA_SENTENCE


def _claims(*texts):
    return [Claim(claim_id=f"c{i}", text=t, normalized_text=t.lower()) for i, t in enumerate(texts, 1)]


class TestMarkers:
    def test_detects_marker_any_case(self):
        assert has_speculative_language("It Reportedly happened.")
        assert has_speculative_language("The crater may have formed later.")

    def test_plain_sentence(self):
        assert not has_speculative_language("The crater formed 3.9 billion years ago.")


class TestDetection:
    def test_no_reference_claims_flags_speculation(self):
        (event,) = detect_hallucinations(["It reportedly rained on the Moon."], [])
        assert event.severity == 4
        assert event.tags == ["speculative_language"]
        assert event.evidence.candidate == "It reportedly rained on the Moon."

    def test_short_reference_claims_are_ignored(self):
        events = detect_hallucinations(["It reportedly rained on the Moon."], _claims("Too short."))
        assert len(events) == 1

    def test_related_fact_in_ambiguous_band(self, reference_article):
        (event,) = detect_hallucinations([EXTRA_SENTENCE], reference_article.claims)
        assert event.evidence.candidate == EXTRA_SENTENCE

    def test_unrelated_facts_not_flagged(self):
        events = detect_hallucinations(["It reportedly rained."], _claims("zzzzzzzzzzzzzzzzzzzzzzzzz qqqq"))
        assert events == []

    def test_near_copy_not_flagged(self):
        events = detect_hallucinations(
            ["The Moon reportedly has water ice."],
            _claims("The Moon reportedly has water ice."),
        )
        assert events == []

    def test_without_markers(self, reference_article):
        assert detect_hallucinations(["The Moon is bright tonight."], reference_article.claims) == []
